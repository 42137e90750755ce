"""Tests for the calendar node handlers."""
import json
import re
import time
from datetime import datetime
from unittest.mock import MagicMock

import pytest
from google.auth.exceptions import RefreshError

from calendar_nodes.client import GoogleCalendarClient, HttpApiError, HttpClient, HttpTimeoutError, SendUpdates
from calendar_nodes.core import CalendarEventRecord, EventDateTime
from calendar_nodes.nodes import (
    CreateEventConfig,
    DeleteEventConfig,
    ListEventsConfig,
    NodeApiError,
    NodeExecutionContext,
    NodeOperationError,
    UpdateEventConfig,
    create_event,
    delete_event,
    list_events,
    update_event,
)
from calendar_nodes.nodes.list_events import parse_max_results


def create_config(**overrides):
    params = {
        "summary": "${title}",
        "startTime": "${start}",
        "endTime": "${end}",
    }
    params.update(overrides)
    return CreateEventConfig.model_validate(params)


def seed_event(fake_client, event_id="evt-7"):
    return fake_client.add(CalendarEventRecord(
        id=event_id,
        summary="Old title",
        start=EventDateTime(date_time="2025-01-10T09:00:00Z"),
        end=EventDateTime(date_time="2025-01-10T10:00:00Z"),
    ))


class TestCreateEvent:
    """Test create_event."""

    def test_creates_event_and_stores_id(self, node_context, fake_client, store):
        config = create_config(eventlocation="${room}", description="Weekly", reminders="popup:10,email:60")

        event_id = create_event(config, node_context)

        assert event_id == "evt-1"
        assert store.get("eventId") == "evt-1"

        _, calendar_id, record = fake_client.calls[0]
        assert calendar_id == "primary"
        assert record.summary == "Team Sync"
        assert record.location == "Room 4"
        assert record.description == "Weekly"
        assert record.start.date_time == datetime(2025, 1, 15, 10, 0).astimezone().isoformat(timespec="milliseconds")
        assert record.reminders.use_default is False
        assert [(o.method, o.minutes) for o in record.reminders.overrides] == [("popup", 10), ("email", 60)]

    def test_optional_fields_not_sent_when_empty(self, node_context, fake_client):
        create_event(create_config(description="${missing}"), node_context)

        wire = fake_client.calls[0][2].to_wire()
        assert "description" not in wire
        assert "location" not in wire
        assert "reminders" not in wire

    def test_result_variable_is_resolved(self, node_context, store):
        store.set("target", "bookingId")

        create_event(create_config(resultVariable="${target}"), node_context)

        assert store.get("bookingId") == "evt-1"
        assert store.get("eventId") is None

    def test_quoted_datetimes(self, node_context, fake_client):
        create_event(
            create_config(startTime='"2025-01-15T10:00"', endTime="'2025-01-15T11:00:00'"),
            node_context,
        )

        assert len(fake_client.calls) == 1

    @pytest.mark.parametrize("overrides, message", [
        ({"summary": ""}, "Event Title (Summary) is required"),
        ({"summary": "${nobody}"}, "Event Title (Summary) is required"),
        ({"startTime": ""}, "Start Time is required"),
        ({"endTime": "${unset}"}, "End Time is required"),
    ])
    def test_required_fields(self, node_context, fake_client, store, overrides, message):
        with pytest.raises(NodeOperationError, match=re.escape(message)) as exc_info:
            create_event(create_config(**overrides), node_context)

        assert exc_info.value.node_name == "Test Node"
        assert fake_client.calls == []
        assert store.get("eventId") is None

    def test_malformed_datetime_echoes_input(self, node_context, fake_client):
        with pytest.raises(NodeOperationError) as exc_info:
            create_event(create_config(startTime="next tuesday"), node_context)

        assert "Start Time has an invalid format" in str(exc_info.value)
        assert "Input was: next tuesday" in str(exc_info.value)
        assert fake_client.calls == []

    def test_malformed_reminders(self, node_context, fake_client):
        with pytest.raises(NodeOperationError, match="Reminder method 'fax' is invalid"):
            create_event(create_config(reminders="fax:10"), node_context)

        assert fake_client.calls == []

    def test_api_error(self, node_context, fake_client, store):
        fake_client.error = HttpApiError(
            "Google API Error (403): Forbidden",
            status_code=403,
            response_body='{"error": {"message": "Forbidden"}}',
        )

        with pytest.raises(NodeApiError) as exc_info:
            create_event(create_config(), node_context)

        assert str(exc_info.value) == "Error creating event: Google API Error (403): Forbidden"
        assert exc_info.value.status_code == 403
        assert store.get("eventId") is None

    def test_timeout(self, node_context, fake_client, store):
        fake_client.error = HttpTimeoutError("Request timed out after 30s", timeout=30, url="https://x")

        with pytest.raises(NodeApiError, match="Error creating event: Request timed out"):
            create_event(create_config(), node_context)

        assert store.get("eventId") is None


class TestUpdateEvent:
    """Test update_event."""

    def test_updates_event(self, node_context, fake_client, store):
        seed_event(fake_client)
        config = UpdateEventConfig.model_validate({
            "eventId": "'evt-7'",
            "summary": "${title}",
            "startTime": "${start}",
            "endTime": "${end}",
            "sendUpdates": "none",
        })

        assert update_event(config, node_context) == "evt-7"

        _, _, event_id, record, send_updates = fake_client.calls[0]
        assert event_id == "evt-7"
        assert record.summary == "Team Sync"
        assert send_updates == SendUpdates.NONE
        assert store.get("eventId") == "evt-7"
        assert fake_client.events["evt-7"].summary == "Team Sync"

    def test_default_notifies_all(self, node_context, fake_client):
        seed_event(fake_client)
        config = UpdateEventConfig.model_validate({
            "eventId": "evt-7",
            "summary": "x",
            "startTime": "2025-01-15T10:00:00",
            "endTime": "2025-01-15T11:00:00",
        })

        update_event(config, node_context)

        assert fake_client.calls[0][4] == SendUpdates.ALL

    def test_event_id_required(self, node_context, fake_client):
        config = UpdateEventConfig.model_validate({"eventId": "${nothing}", "summary": "x"})

        with pytest.raises(NodeOperationError, match="Event ID is required"):
            update_event(config, node_context)

        assert fake_client.calls == []

    def test_summary_required(self, node_context, fake_client):
        seed_event(fake_client)
        config = UpdateEventConfig.model_validate({
            "eventId": "evt-7",
            "startTime": "${start}",
            "endTime": "${end}",
        })

        with pytest.raises(NodeOperationError, match="Event Title"):
            update_event(config, node_context)

        assert fake_client.calls == []

    def test_missing_event(self, node_context, store):
        config = UpdateEventConfig.model_validate({
            "eventId": "gone",
            "summary": "${title}",
            "startTime": "${start}",
            "endTime": "${end}",
        })

        with pytest.raises(NodeApiError) as exc_info:
            update_event(config, node_context)

        assert str(exc_info.value) == "Error updating event: Google API Error (404): Not Found"
        assert exc_info.value.status_code == 404
        assert store.get("eventId") is None


class TestListEvents:
    """Test list_events."""

    def test_upcoming(self, node_context, fake_client, store):
        seed_event(fake_client, "a")
        seed_event(fake_client, "b")

        payload = list_events(ListEventsConfig(), node_context)

        _, _, filters = fake_client.calls[0]
        assert filters.time_min is not None
        assert filters.time_min.tzinfo is not None
        assert filters.time_max is None
        assert filters.order_by_start_time is True
        assert filters.max_results == 10

        assert store.get("eventList") == payload
        data = json.loads(payload)
        assert data["metadata"]["total_count"] == 2
        assert [e["id"] for e in data["events"]] == ["a", "b"]

    def test_time_range(self, node_context, fake_client):
        config = ListEventsConfig.model_validate({
            "listMode": "TIME_RANGE",
            "startTime": "${start}",
            "endTime": "${end}",
        })

        list_events(config, node_context)

        filters = fake_client.calls[0][2]
        assert filters.time_min == datetime(2025, 1, 15, 10, 0).astimezone()
        assert filters.time_max == datetime(2025, 1, 15, 11, 0).astimezone()
        assert filters.order_by_start_time is True

    @pytest.mark.parametrize("missing, message", [
        ("startTime", "Start Time for TIME_RANGE mode is required"),
        ("endTime", "End Time for TIME_RANGE mode is required"),
    ])
    def test_time_range_requires_bounds(self, node_context, fake_client, missing, message):
        params = {"listMode": "TIME_RANGE", "startTime": "${start}", "endTime": "${end}"}
        params[missing] = ""

        with pytest.raises(NodeOperationError, match=message):
            list_events(ListEventsConfig.model_validate(params), node_context)

        assert fake_client.calls == []

    def test_search(self, node_context, fake_client, store):
        store.set("query", "dentist")
        config = ListEventsConfig.model_validate({"listMode": "SEARCH", "searchQuery": "${query}"})

        list_events(config, node_context)

        filters = fake_client.calls[0][2]
        assert filters.query == "dentist"
        assert filters.order_by_start_time is False
        assert filters.time_min is None

    def test_search_requires_query(self, node_context, fake_client):
        config = ListEventsConfig.model_validate({"listMode": "SEARCH"})

        with pytest.raises(NodeOperationError, match="Search Query for SEARCH mode is required"):
            list_events(config, node_context)

    def test_all(self, node_context, fake_client):
        list_events(ListEventsConfig.model_validate({"listMode": "ALL"}), node_context)

        filters = fake_client.calls[0][2]
        assert filters.time_min is None
        assert filters.query is None
        assert filters.order_by_start_time is True

    def test_empty_result(self, node_context, store):
        list_events(ListEventsConfig(resultVariable="found"), node_context)

        data = json.loads(store.get("found"))
        assert data["metadata"]["total_count"] == 0
        assert data["events"] == []

    def test_max_results_from_variable(self, node_context, fake_client, store):
        for event_id in ("a", "b", "c", "d"):
            seed_event(fake_client, event_id)
        store.set("n", "2")

        payload = list_events(ListEventsConfig(maxResults="${n}"), node_context)

        assert fake_client.calls[0][2].max_results == 2
        assert json.loads(payload)["metadata"]["displayed_count"] == 2

    def test_api_error(self, node_context, fake_client, store):
        fake_client.error = HttpApiError("Google API Error (500): Backend Error", status_code=500)

        with pytest.raises(NodeApiError, match="Error listing events: Google API Error"):
            list_events(ListEventsConfig(), node_context)

        assert store.get("eventList") is None


class TestParseMaxResults:
    """Test parse_max_results fallbacks."""

    @pytest.mark.parametrize("value, expected", [
        ("5", 5),
        (" 25 ", 25),
        ("abc", 10),
        ("", 10),
        ("0", 10),
        ("-3", 10),
        ("2.5", 10),
        ("1_0", 10),
        ("+5", 10),
        ("\u0663", 10),
    ])
    def test_values(self, node_context, value, expected):
        assert parse_max_results(value, node_context) == expected

    def test_uses_context_default(self, node_context):
        node_context.default_max_results = 50

        assert parse_max_results("nope", node_context) == 50


class TestDeleteEvent:
    """Test delete_event."""

    @pytest.mark.parametrize("send_updates, suffix", [
        ("all", " (participants notified)"),
        ("none", " (no notifications sent)"),
        ("externalOnly", " (external participants notified)"),
    ])
    def test_deletes_event(self, node_context, fake_client, store, send_updates, suffix):
        seed_event(fake_client)
        store.set("toDelete", "evt-7")
        config = DeleteEventConfig.model_validate({"eventId": "${toDelete}", "sendUpdates": send_updates})

        message = delete_event(config, node_context)

        assert message == f"Event deleted successfully: evt-7{suffix}"
        assert store.get("deletionResult") == message
        assert "evt-7" not in fake_client.events
        assert fake_client.calls[0][3] == SendUpdates(send_updates)

    def test_event_id_required(self, node_context, fake_client):
        with pytest.raises(NodeOperationError, match="Event ID is required"):
            delete_event(DeleteEventConfig(), node_context)

        assert fake_client.calls == []

    def test_missing_event(self, node_context, store):
        with pytest.raises(NodeApiError) as exc_info:
            delete_event(DeleteEventConfig(eventId="gone"), node_context)

        assert str(exc_info.value).startswith("Error deleting event:")
        assert exc_info.value.status_code == 404
        assert store.get("deletionResult") is None


class TestProviderFailures:
    """Failures below the calendar client surface as node errors."""

    def test_token_refresh_failure(self, store):
        provider = MagicMock()
        provider.get_token.side_effect = RefreshError("invalid_grant: account disabled")
        client = GoogleCalendarClient(HttpClient(base_url="https://calendar.test", token_provider=provider))
        context = NodeExecutionContext(client=client, variables=store, node_name="Book")

        with pytest.raises(NodeOperationError) as exc_info:
            create_event(create_config(), context)

        assert str(exc_info.value) == "Error creating event: Authentication failed: invalid_grant: account disabled"
        assert isinstance(exc_info.value, NodeApiError)
        assert store.get("eventId") is None

    def test_malformed_provider_response(self, store):
        http = MagicMock(spec=HttpClient)
        http.request.return_value.json.return_value = {"id": "evt-1", "reminders": "soon"}
        context = NodeExecutionContext(client=GoogleCalendarClient(http), variables=store)

        with pytest.raises(NodeApiError, match="Error creating event: Unexpected event resource"):
            create_event(create_config(), context)

        assert store.get("eventId") is None


@pytest.fixture
def berlin_local_time(monkeypatch):
    """Run with Europe/Berlin as the system time zone."""
    monkeypatch.setenv("TZ", "Europe/Berlin")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


def test_time_skipped_by_dst_fails_node(berlin_local_time, node_context, fake_client, store):
    store.set("start", "2025-03-30T02:30:00")
    store.set("end", "2025-03-30T03:30:00")

    with pytest.raises(NodeOperationError, match="2025-03-30T02:30:00 does not exist"):
        create_event(create_config(), node_context)

    assert fake_client.calls == []
    assert store.get("eventId") is None
