"""
Flow Models - JSON structures for dialog-flow definitions.

A flow is a chain of calendar nodes: each node names the node that runs
after it.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FlowNode(BaseModel):
    """
    A node in a flow.

    Example: {"name": "Book", "type": "googleCalendar.createEvent",
              "parameters": {"summary": "${title}"}, "next": "Confirm"}
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = Field(..., description="Node name (unique within flow)")
    type: str = Field(..., description="Registered node type")
    parameters: Dict[str, Any] = Field(default_factory=dict)
    next: Optional[str] = Field(None, description="Name of the following node")
    disabled: bool = Field(False, description="If true, node is skipped")
    notes: Optional[str] = Field(None, description="Node notes")


class FlowDefinition(BaseModel):
    """
    Complete flow definition.

    `start` defaults to the first node. `variables` seeds the flow's
    variable store.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Optional[str] = Field(None, description="Flow ID")
    name: str = Field("Unnamed Flow", description="Flow name")
    start: Optional[str] = Field(None, description="Name of the entry node")
    nodes: List[FlowNode] = Field(default_factory=list)
    variables: Dict[str, Optional[str]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_structure(self) -> "FlowDefinition":
        """Node names are unique and every reference points at a node."""
        names = [node.name for node in self.nodes]
        duplicates = {name for name in names if names.count(name) > 1}
        if duplicates:
            raise ValueError(f"Duplicate node names: {sorted(duplicates)}")

        known = set(names)
        if self.start is not None and self.start not in known:
            raise ValueError(f"Start node '{self.start}' does not exist")
        for node in self.nodes:
            if node.next is not None and node.next not in known:
                raise ValueError(f"Node '{node.name}' points to unknown node '{node.next}'")
        return self

    @property
    def entry_node(self) -> Optional[str]:
        if self.start is not None:
            return self.start
        return self.nodes[0].name if self.nodes else None

    def get_node(self, name: str) -> Optional[FlowNode]:
        """Get node by name."""
        for node in self.nodes:
            if node.name == name:
                return node
        return None


def parse_flow(data: Dict[str, Any]) -> FlowDefinition:
    """Parse flow JSON into FlowDefinition."""
    return FlowDefinition.model_validate(data)


__all__ = ["FlowNode", "FlowDefinition", "parse_flow"]
