"""
Flow Runtime - sync execution of calendar-node flows.

This package provides:
- FlowDefinition: JSON structure describing a flow
- NodeRegistry: node type -> config model + handler
- FlowExecutor: sync execution engine
"""

from .models import FlowDefinition, FlowNode, parse_flow
from .registry import (
    CREATE_EVENT,
    DELETE_EVENT,
    LIST_EVENTS,
    UPDATE_EVENT,
    NodeRegistry,
    NodeSpec,
    default_registry,
)
from .executor import FlowExecutor, FlowResult, FlowStatus, NodeRunResult, NodeStatus

__all__ = [
    # Models
    "FlowDefinition",
    "FlowNode",
    "parse_flow",
    # Registry
    "NodeRegistry",
    "NodeSpec",
    "default_registry",
    "CREATE_EVENT",
    "UPDATE_EVENT",
    "LIST_EVENTS",
    "DELETE_EVENT",
    # Executor
    "FlowExecutor",
    "FlowResult",
    "FlowStatus",
    "NodeRunResult",
    "NodeStatus",
]
