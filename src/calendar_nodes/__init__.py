"""
Calendar nodes - dialog-flow nodes for Google Calendar.

Create, update, list and delete calendar events from a flow, reading inputs
from ${var} placeholders and writing results back to flow variables.
"""

__version__ = "0.1.0"

from calendar_nodes.core import (
    CalendarEventRecord,
    EventRequest,
    InMemoryVariableStore,
    Reminder,
    ReminderMethod,
    VariableResolver,
    from_record,
    resolve_variables,
    to_record,
)
from calendar_nodes.client import CalendarClient, GoogleCalendarClient, build_calendar_client
from calendar_nodes.nodes import NodeApiError, NodeExecutionContext, NodeOperationError
from calendar_nodes.runtime import FlowDefinition, FlowExecutor, FlowResult

__all__ = [
    "__version__",
    "EventRequest",
    "Reminder",
    "ReminderMethod",
    "CalendarEventRecord",
    "InMemoryVariableStore",
    "VariableResolver",
    "resolve_variables",
    "to_record",
    "from_record",
    "CalendarClient",
    "GoogleCalendarClient",
    "build_calendar_client",
    "NodeExecutionContext",
    "NodeOperationError",
    "NodeApiError",
    "FlowDefinition",
    "FlowExecutor",
    "FlowResult",
]
