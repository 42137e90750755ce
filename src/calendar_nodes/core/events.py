"""
Event requests - provider-neutral description of an event to create or update.

Also holds the parsers for the user-facing string inputs that feed an
EventRequest: local date-times and the reminder mini-format.
"""

from __future__ import annotations

import re
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ReminderMethod(str, Enum):
    """Notification channel for a reminder override."""
    EMAIL = "email"
    POPUP = "popup"
    SMS = "sms"


class Reminder(BaseModel):
    """A reminder override: notify via method, minutes_before the start."""
    model_config = ConfigDict(frozen=True)

    method: ReminderMethod
    minutes_before: int = Field(..., ge=0)


class EventRequest(BaseModel):
    """
    Event to create or update.

    summary, start_time and end_time are required; construction raises
    pydantic.ValidationError when any of them is missing or summary is empty.
    Times are naive local date-times.
    """
    model_config = ConfigDict(frozen=True)

    summary: str = Field(..., min_length=1)
    description: Optional[str] = None
    location: Optional[str] = None
    start_time: datetime
    end_time: datetime
    reminders: Tuple[Reminder, ...] = ()

    @field_validator("start_time", "end_time")
    @classmethod
    def to_local_naive(cls, v: datetime) -> datetime:
        """Aware values are converted to local wall-clock time."""
        if v.tzinfo is not None:
            return v.astimezone().replace(tzinfo=None)
        return v


# ==============================================================================
# Input parsing
# ==============================================================================

class DateTimeFormatError(ValueError):
    """A date-time input is not in YYYY-MM-DDTHH:MM[:SS[.ffffff]] form."""

    def __init__(self, field_name: str, value: str) -> None:
        self.field_name = field_name
        self.value = value
        super().__init__(
            f"{field_name} has an invalid format. Use ISO 8601: 2025-01-15T10:00:00\n"
            f"Input was: {value}"
        )


class ReminderFormatError(ValueError):
    """The reminder string could not be parsed."""


_QUOTES = re.compile(r"^[\"']+|[\"']+$")
_LOCAL_DATETIME = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2}(\.\d{1,6})?)?$", re.ASCII)
# Optional minus sign, ASCII digits
_SIGNED_INTEGER = re.compile(r"-?\d+", re.ASCII)


def strip_quotes(value: str) -> str:
    """Remove leading and trailing single/double quotes."""
    return _QUOTES.sub("", value)


def parse_local_datetime(value: str, field_name: str = "Date-time") -> datetime:
    """
    Parse a local ISO 8601 date-time such as 2025-01-15T10:00:00.

    Surrounding quotes are ignored. Offsets and date-only values are rejected.

    Raises:
        ValueError: value is empty
        DateTimeFormatError: value is not a local date-time
    """
    if not value:
        raise ValueError(f"{field_name} is required")
    candidate = strip_quotes(value.strip())
    if not _LOCAL_DATETIME.match(candidate):
        raise DateTimeFormatError(field_name, candidate)
    try:
        return datetime.fromisoformat(candidate)
    except ValueError:
        # Well-formed but out of range, e.g. month 13
        raise DateTimeFormatError(field_name, candidate) from None


def parse_integer(value: str) -> int:
    """
    Parse a whole number written with ASCII digits and an optional minus.

    Raises:
        ValueError: anything else, including "+5", "1_5" and non-ASCII digits
    """
    if _SIGNED_INTEGER.fullmatch(value) is None:
        raise ValueError(f"Not a whole number: '{value}'")
    return int(value)


def parse_reminders(value: str) -> List[Reminder]:
    """
    Parse "method:minutes(,method:minutes)*", e.g. "email:15,popup:30".

    The whole string is rejected on the first bad pair; no partial list is
    returned.

    Raises:
        ReminderFormatError: wrong pair arity, non-numeric or negative
            minutes, or a method outside email/popup/sms
    """
    reminders: List[Reminder] = []
    for pair in value.split(","):
        parts = pair.strip().split(":")
        if len(parts) != 2:
            raise ReminderFormatError(
                f"Invalid reminder format: '{pair.strip()}'. "
                "Use 'method:minutes' (e.g. 'email:15')"
            )

        method, minutes_text = parts[0].strip(), parts[1].strip()
        try:
            minutes = parse_integer(minutes_text)
        except ValueError:
            raise ReminderFormatError(
                f"Reminder minutes must be numbers: '{minutes_text}'"
            ) from None
        if minutes < 0:
            raise ReminderFormatError(
                f"Reminder minutes must not be negative: '{minutes_text}'"
            )

        try:
            reminder_method = ReminderMethod(method)
        except ValueError:
            raise ReminderFormatError(
                f"Reminder method '{method}' is invalid. Use: email, popup or sms"
            ) from None

        reminders.append(Reminder(method=reminder_method, minutes_before=minutes))
    return reminders


__all__ = [
    "ReminderMethod",
    "Reminder",
    "EventRequest",
    "DateTimeFormatError",
    "ReminderFormatError",
    "strip_quotes",
    "parse_local_datetime",
    "parse_integer",
    "parse_reminders",
]
