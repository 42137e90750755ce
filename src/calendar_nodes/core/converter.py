"""
Event model conversion between EventRequest and CalendarEventRecord.

Used by every node that sends or reads events. Date-times travel as RFC 3339
strings carrying the local UTC offset at conversion time; on the way back
they are turned into naive local date-times again.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone, tzinfo
from typing import List, Optional

from pydantic import ValidationError

from .events import EventRequest, Reminder, ReminderMethod
from .records import CalendarEventRecord, EventDateTime, EventReminders, ReminderOverride


logger = logging.getLogger(__name__)


def _localize(local_dt: datetime, tz: Optional[tzinfo]) -> datetime:
    if tz is None:
        # System time zone
        return local_dt.astimezone()
    return local_dt.replace(tzinfo=tz)


class NonexistentLocalTimeError(ValueError):
    """A wall-clock time skipped by a daylight saving change."""

    def __init__(self, local_dt: datetime) -> None:
        self.local_dt = local_dt
        super().__init__(
            f"{local_dt.isoformat()} does not exist in the local time zone "
            "(skipped by a daylight saving change)"
        )


def encode_datetime(local_dt: datetime, tz: Optional[tzinfo] = None) -> EventDateTime:
    """
    Encode a naive local date-time as an EventDateTime with offset.

    Times inside a daylight saving gap are rejected, so every encoded value
    decodes back to the same wall-clock time.

    Args:
        local_dt: Naive local date-time
        tz: Zone to interpret local_dt in (defaults to the system zone)

    Raises:
        NonexistentLocalTimeError: local_dt falls in a daylight saving gap
    """
    aware = _localize(local_dt, tz)
    wall_clock = aware.astimezone(timezone.utc).astimezone(tz)
    if wall_clock.replace(tzinfo=None) != local_dt:
        raise NonexistentLocalTimeError(local_dt)
    return EventDateTime(date_time=aware.isoformat(timespec="milliseconds"))


def parse_rfc3339(value: str) -> datetime:
    """Parse an RFC 3339 timestamp, accepting a trailing Z."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def decode_datetime(
    event_dt: Optional[EventDateTime],
    tz: Optional[tzinfo] = None,
) -> Optional[datetime]:
    """
    Decode an EventDateTime into a naive local date-time.

    A date-only value becomes midnight of that day. Returns None when the
    value is missing or unparseable.
    """
    if event_dt is None:
        return None

    try:
        if event_dt.date_time:
            aware = parse_rfc3339(event_dt.date_time)
            if aware.tzinfo is None:
                return aware
            local = aware.astimezone(tz) if tz is not None else aware.astimezone()
            return local.replace(tzinfo=None)
        if event_dt.date:
            return datetime.combine(date.fromisoformat(event_dt.date), time.min)
    except ValueError:
        logger.warning(f"Unparseable event date-time: {event_dt!r}")
    return None


def to_record(request: EventRequest, tz: Optional[tzinfo] = None) -> CalendarEventRecord:
    """
    Convert an EventRequest to a CalendarEventRecord ready for insert/update.

    Empty description/location are left unset. Reminder overrides are only
    written when the request has reminders; then provider defaults are
    switched off.

    Raises:
        NonexistentLocalTimeError: start or end falls in a daylight saving gap
    """
    record = CalendarEventRecord(
        summary=request.summary,
        start=encode_datetime(request.start_time, tz),
        end=encode_datetime(request.end_time, tz),
    )
    if request.description:
        record.description = request.description
    if request.location:
        record.location = request.location
    if request.reminders:
        record.reminders = EventReminders(
            use_default=False,
            overrides=[
                ReminderOverride(method=r.method.value, minutes=r.minutes_before)
                for r in request.reminders
            ],
        )
    return record


def _reminders_from_record(record: CalendarEventRecord) -> List[Reminder]:
    reminders = []
    for override in record.reminder_overrides:
        try:
            method = ReminderMethod(override.method)
        except ValueError:
            logger.debug(f"Skipping reminder with unsupported method '{override.method}'")
            continue
        if override.minutes < 0:
            continue
        reminders.append(Reminder(method=method, minutes_before=override.minutes))
    return reminders


def from_record(
    record: CalendarEventRecord,
    tz: Optional[tzinfo] = None,
) -> Optional[EventRequest]:
    """
    Convert a CalendarEventRecord back to an EventRequest.

    Returns None when summary, start or end cannot be resolved.
    """
    start_time = decode_datetime(record.start, tz)
    end_time = decode_datetime(record.end, tz)
    if not record.summary or start_time is None or end_time is None:
        logger.debug(f"Record {record.id} lacks summary, start or end")
        return None

    try:
        return EventRequest(
            summary=record.summary,
            description=record.description,
            location=record.location,
            start_time=start_time,
            end_time=end_time,
            reminders=_reminders_from_record(record),
        )
    except ValidationError as e:
        logger.debug(f"Record {record.id} is not a valid event request: {e}")
        return None


def _describe_datetime(event_dt: Optional[EventDateTime]) -> Optional[str]:
    if event_dt is None:
        return None
    return event_dt.date_time or event_dt.date


def describe_record(record: CalendarEventRecord) -> str:
    """Short human-readable summary of a record for logs."""
    parts = []
    if record.summary is not None:
        parts.append(f"title='{record.summary}'")
    if record.start is not None:
        parts.append(f"start={_describe_datetime(record.start)}")
    if record.end is not None:
        parts.append(f"end={_describe_datetime(record.end)}")
    if record.location is not None:
        parts.append(f"location='{record.location}'")
    return "Event{" + ", ".join(parts) + "}"


__all__ = [
    "encode_datetime",
    "decode_datetime",
    "parse_rfc3339",
    "to_record",
    "from_record",
    "NonexistentLocalTimeError",
    "describe_record",
]
