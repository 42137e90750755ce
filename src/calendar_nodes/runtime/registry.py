"""
Node Registry - maps node types to their config model and handler.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Type

from calendar_nodes.nodes import (
    CreateEventConfig,
    DeleteEventConfig,
    ListEventsConfig,
    NodeConfig,
    NodeExecutionContext,
    UpdateEventConfig,
    create_event,
    delete_event,
    list_events,
    update_event,
)


logger = logging.getLogger(__name__)


NodeHandler = Callable[[NodeConfig, NodeExecutionContext], str]

CREATE_EVENT = "googleCalendar.createEvent"
UPDATE_EVENT = "googleCalendar.updateEvent"
LIST_EVENTS = "googleCalendar.listEvents"
DELETE_EVENT = "googleCalendar.deleteEvent"


@dataclass(frozen=True)
class NodeSpec:
    """Registered node type."""
    node_type: str
    config_model: Type[NodeConfig]
    handler: NodeHandler
    display_name: str = ""


class NodeRegistry:
    """
    Registry of node types.

    Usage:
        registry = NodeRegistry()
        registry.register(CREATE_EVENT, CreateEventConfig, create_event)
        spec = registry.get(CREATE_EVENT)
    """

    def __init__(self) -> None:
        self._nodes: Dict[str, NodeSpec] = {}

    def register(
        self,
        node_type: str,
        config_model: Type[NodeConfig],
        handler: NodeHandler,
        display_name: str = "",
    ) -> None:
        """Register a node type, replacing an existing registration."""
        if node_type in self._nodes:
            logger.warning(f"Node type '{node_type}' re-registered")
        self._nodes[node_type] = NodeSpec(
            node_type=node_type,
            config_model=config_model,
            handler=handler,
            display_name=display_name or node_type,
        )

    def get(self, node_type: str) -> Optional[NodeSpec]:
        return self._nodes.get(node_type)

    def list_types(self) -> List[str]:
        return sorted(self._nodes)

    def __contains__(self, node_type: object) -> bool:
        return node_type in self._nodes


def default_registry() -> NodeRegistry:
    """Registry with the four calendar nodes."""
    registry = NodeRegistry()
    registry.register(CREATE_EVENT, CreateEventConfig, create_event, "Create Event")
    registry.register(UPDATE_EVENT, UpdateEventConfig, update_event, "Update Event")
    registry.register(LIST_EVENTS, ListEventsConfig, list_events, "List Events")
    registry.register(DELETE_EVENT, DeleteEventConfig, delete_event, "Delete Event")
    return registry


__all__ = [
    "CREATE_EVENT",
    "UPDATE_EVENT",
    "LIST_EVENTS",
    "DELETE_EVENT",
    "NodeHandler",
    "NodeSpec",
    "NodeRegistry",
    "default_registry",
]
