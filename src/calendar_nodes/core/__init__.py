"""
Core - variable interpolation and event shape translation.

Pure functions and value objects; no I/O.
"""

from .variables import (
    InMemoryVariableStore,
    VariableResolver,
    VariableStore,
    resolve_variables,
)
from .events import (
    DateTimeFormatError,
    EventRequest,
    Reminder,
    ReminderFormatError,
    ReminderMethod,
    parse_integer,
    parse_local_datetime,
    parse_reminders,
    strip_quotes,
)
from .records import CalendarEventRecord, EventDateTime, EventReminders, ReminderOverride
from .converter import (
    NonexistentLocalTimeError,
    decode_datetime,
    describe_record,
    encode_datetime,
    from_record,
    to_record,
)
from .formatting import format_event_list

__all__ = [
    # Variables
    "VariableStore",
    "InMemoryVariableStore",
    "VariableResolver",
    "resolve_variables",
    # Events
    "EventRequest",
    "Reminder",
    "ReminderMethod",
    "DateTimeFormatError",
    "ReminderFormatError",
    "parse_local_datetime",
    "parse_integer",
    "parse_reminders",
    "strip_quotes",
    # Records
    "CalendarEventRecord",
    "EventDateTime",
    "EventReminders",
    "ReminderOverride",
    # Conversion
    "to_record",
    "from_record",
    "encode_datetime",
    "decode_datetime",
    "NonexistentLocalTimeError",
    "describe_record",
    # Output
    "format_event_list",
]
