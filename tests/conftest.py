"""Pytest configuration and fixtures."""
import os
from typing import Dict, List, Optional

import pytest

# Set test environment variables
os.environ["CALENDAR_NODES_ENV"] = "test"
os.environ["CALENDAR_NODES_ACCESS_TOKEN"] = "test-token"
os.environ["CALENDAR_NODES_CALENDAR_ID"] = "primary"

from calendar_nodes.client import HttpApiError, ListFilters, SendUpdates  # noqa: E402
from calendar_nodes.config import reset_settings  # noqa: E402
from calendar_nodes.core import CalendarEventRecord, InMemoryVariableStore  # noqa: E402
from calendar_nodes.nodes import NodeExecutionContext  # noqa: E402


class FakeCalendarClient:
    """In-memory CalendarClient recording every call."""

    def __init__(self) -> None:
        self.events: Dict[str, CalendarEventRecord] = {}
        self.calls: List[tuple] = []
        self.error: Optional[Exception] = None
        self._next_id = 1

    def _check(self) -> None:
        if self.error is not None:
            raise self.error

    def _not_found(self, event_id: str) -> HttpApiError:
        return HttpApiError(
            "Google API Error (404): Not Found",
            status_code=404,
            response_body='{"error": {"code": 404, "message": "Not Found"}}',
        )

    def add(self, record: CalendarEventRecord) -> CalendarEventRecord:
        """Seed an existing event."""
        if record.id is None:
            record = record.model_copy(update={"id": f"evt-{self._next_id}"})
            self._next_id += 1
        self.events[record.id] = record
        return record

    def insert(self, calendar_id: str, record: CalendarEventRecord) -> CalendarEventRecord:
        self.calls.append(("insert", calendar_id, record))
        self._check()
        return self.add(record.model_copy(update={"id": None, "status": "confirmed"}))

    def update(
        self,
        calendar_id: str,
        event_id: str,
        record: CalendarEventRecord,
        send_updates: SendUpdates = SendUpdates.ALL,
    ) -> CalendarEventRecord:
        self.calls.append(("update", calendar_id, event_id, record, send_updates))
        self._check()
        if event_id not in self.events:
            raise self._not_found(event_id)
        # PATCH semantics: fields missing from the record keep their values
        merged = {
            **self.events[event_id].model_dump(exclude_none=True),
            **record.model_dump(exclude_none=True),
            "id": event_id,
            "status": "confirmed",
        }
        updated = CalendarEventRecord.model_validate(merged)
        self.events[event_id] = updated
        return updated

    def delete(
        self,
        calendar_id: str,
        event_id: str,
        send_updates: SendUpdates = SendUpdates.ALL,
    ) -> None:
        self.calls.append(("delete", calendar_id, event_id, send_updates))
        self._check()
        if event_id not in self.events:
            raise self._not_found(event_id)
        del self.events[event_id]

    def list_events(self, calendar_id: str, filters: ListFilters) -> List[CalendarEventRecord]:
        self.calls.append(("list", calendar_id, filters))
        self._check()
        return list(self.events.values())[: filters.max_results]


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are re-read from the environment for every test."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def store():
    """Variable store seeded with typical flow inputs."""
    return InMemoryVariableStore({
        "title": "Team Sync",
        "start": "2025-01-15T10:00:00",
        "end": "2025-01-15T11:00:00",
        "room": "Room 4",
    })


@pytest.fixture
def fake_client():
    """Fake calendar client."""
    return FakeCalendarClient()


@pytest.fixture
def node_context(fake_client, store):
    """Create a test node execution context."""
    return NodeExecutionContext(
        client=fake_client,
        variables=store,
        calendar_id="primary",
        flow_id="test-flow",
        node_name="Test Node",
        node_type="test",
    )


@pytest.fixture
def sample_event_json():
    """Sample Google Calendar event resource."""
    return {
        "kind": "calendar#event",
        "id": "abc123",
        "status": "confirmed",
        "htmlLink": "https://www.google.com/calendar/event?eid=abc123",
        "summary": "Dentist",
        "description": "Bring insurance card",
        "location": "Main St 1",
        "start": {"dateTime": "2025-01-15T10:00:00+01:00", "timeZone": "Europe/Berlin"},
        "end": {"dateTime": "2025-01-15T10:45:00+01:00", "timeZone": "Europe/Berlin"},
        "reminders": {
            "useDefault": False,
            "overrides": [
                {"method": "email", "minutes": 1440},
                {"method": "popup", "minutes": 10},
            ],
        },
    }
