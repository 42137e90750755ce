"""List-node output: events serialized as one JSON string."""

from __future__ import annotations

import json
from datetime import datetime, tzinfo
from typing import Any, Dict, List, Optional, Sequence

from .converter import decode_datetime
from .records import CalendarEventRecord


NO_TITLE = "(No title)"


def duration_minutes(start: Optional[datetime], end: Optional[datetime]) -> int:
    """Whole minutes between start and end, 0 if either is unknown."""
    if start is None or end is None:
        return 0
    return int((end - start).total_seconds() / 60)


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def event_entry(index: int, record: CalendarEventRecord, tz: Optional[tzinfo] = None) -> Dict[str, Any]:
    start = decode_datetime(record.start, tz)
    end = decode_datetime(record.end, tz)
    return {
        "index": index,
        "id": record.id,
        "summary": record.summary if record.summary is not None else NO_TITLE,
        "start": _isoformat(start),
        "end": _isoformat(end),
        "duration_minutes": duration_minutes(start, end),
        "location": record.location,
        "description": record.description,
    }


def format_event_list(
    records: Sequence[CalendarEventRecord],
    display_count: int,
    tz: Optional[tzinfo] = None,
) -> str:
    """
    Build the list payload stored in the result variable.

    Shape: {"metadata": {total_count, displayed_count, start_index, has_more},
    "events": [{index, id, summary, start, end, duration_minutes, location,
    description}, ...]}. An empty sequence yields all-zero counts.
    """
    start_index = 0
    total = len(records)

    if total == 0:
        metadata = {
            "total_count": 0,
            "displayed_count": 0,
            "start_index": 0,
            "has_more": False,
        }
        return json.dumps({"metadata": metadata, "events": []}, ensure_ascii=False)

    stop = min(start_index + display_count, total)
    events: List[Dict[str, Any]] = [
        event_entry(i + 1, records[i], tz) for i in range(start_index, stop)
    ]
    metadata = {
        "total_count": total,
        "displayed_count": min(display_count, total),
        "start_index": start_index,
        "has_more": (start_index + display_count) < total,
    }
    return json.dumps({"metadata": metadata, "events": events}, ensure_ascii=False)


__all__ = ["NO_TITLE", "duration_minutes", "event_entry", "format_event_list"]
