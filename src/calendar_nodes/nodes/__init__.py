"""
Calendar nodes - create, update, list and delete Google Calendar events.

Each node is a handler function taking its config model and a
NodeExecutionContext. Handlers run synchronously and make at most one
calendar call.
"""

from .base import NodeApiError, NodeExecutionContext, NodeOperationError
from .configs import (
    CreateEventConfig,
    DeleteEventConfig,
    ListEventsConfig,
    ListMode,
    NodeConfig,
    UpdateEventConfig,
)
from .create import build_event_record, build_event_request, create_event
from .update import update_event
from .list_events import list_events
from .delete import delete_event

__all__ = [
    # Context and errors
    "NodeExecutionContext",
    "NodeOperationError",
    "NodeApiError",
    # Configs
    "NodeConfig",
    "CreateEventConfig",
    "UpdateEventConfig",
    "ListEventsConfig",
    "DeleteEventConfig",
    "ListMode",
    # Handlers
    "build_event_request",
    "build_event_record",
    "create_event",
    "update_event",
    "list_events",
    "delete_event",
]
