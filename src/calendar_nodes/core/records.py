"""
Calendar event records - Google Calendar v3 event JSON.

Only the fields the nodes read or write are modelled; anything else the
API returns is ignored on parse.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class EventDateTime(BaseModel):
    """
    Start or end of an event.

    Exactly one of date_time (RFC 3339 with offset) or date (YYYY-MM-DD,
    all-day events) is set.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    date_time: Optional[str] = Field(None, alias="dateTime")
    date: Optional[str] = Field(None)
    time_zone: Optional[str] = Field(None, alias="timeZone")


class ReminderOverride(BaseModel):
    """Wire form of a reminder override."""
    model_config = ConfigDict(extra="ignore")

    method: str
    minutes: int


class EventReminders(BaseModel):
    """Reminder block of an event."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    use_default: bool = Field(True, alias="useDefault")
    overrides: List[ReminderOverride] = Field(default_factory=list)


class CalendarEventRecord(BaseModel):
    """
    Event as exchanged with the Calendar API.

    Optional fields left as None are omitted from the request body so that
    they are not sent as empty strings.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    start: Optional[EventDateTime] = None
    end: Optional[EventDateTime] = None
    reminders: Optional[EventReminders] = None

    # Read-only, populated by the provider
    status: Optional[str] = None
    html_link: Optional[str] = Field(None, alias="htmlLink")

    @property
    def reminder_overrides(self) -> List[ReminderOverride]:
        if self.reminders is None:
            return []
        return list(self.reminders.overrides)

    @classmethod
    def from_wire(cls, data: Dict[str, Any]) -> "CalendarEventRecord":
        """Create a record from API JSON."""
        return cls.model_validate(data)

    def to_wire(self) -> Dict[str, Any]:
        """Request body for insert/update."""
        return self.model_dump(
            by_alias=True,
            exclude_none=True,
            exclude={"status", "html_link"},
        )


__all__ = [
    "EventDateTime",
    "ReminderOverride",
    "EventReminders",
    "CalendarEventRecord",
]
