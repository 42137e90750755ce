"""
Calendar client - the provider capability the nodes call.

CalendarClient is the interface; GoogleCalendarClient implements it over the
Google Calendar v3 REST API. One client is built per process and passed to
every node execution.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol
from urllib.parse import quote

from pydantic import ValidationError

from calendar_nodes.config import Settings
from calendar_nodes.core.records import CalendarEventRecord

from .auth import ServiceAccountTokenProvider, StaticTokenProvider, TokenProvider
from .http import HttpApiError, HttpClient


logger = logging.getLogger(__name__)


class SendUpdates(str, Enum):
    """Who the provider notifies about a change."""
    ALL = "all"
    EXTERNAL_ONLY = "externalOnly"
    NONE = "none"


@dataclass(frozen=True)
class ListFilters:
    """
    Filters for listing events.

    time_min/time_max should be timezone-aware; naive values are taken as
    local time. order_by_start_time expands recurring events into single
    instances, which the API requires for that ordering.
    """
    max_results: int = 10
    time_min: Optional[datetime] = None
    time_max: Optional[datetime] = None
    query: Optional[str] = None
    order_by_start_time: bool = True


class CalendarClient(Protocol):
    """Calendar operations used by the nodes."""

    def insert(self, calendar_id: str, record: CalendarEventRecord) -> CalendarEventRecord:
        ...

    def update(
        self,
        calendar_id: str,
        event_id: str,
        record: CalendarEventRecord,
        send_updates: SendUpdates = SendUpdates.ALL,
    ) -> CalendarEventRecord:
        ...

    def delete(
        self,
        calendar_id: str,
        event_id: str,
        send_updates: SendUpdates = SendUpdates.ALL,
    ) -> None:
        ...

    def list_events(self, calendar_id: str, filters: ListFilters) -> List[CalendarEventRecord]:
        ...


def _rfc3339(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.astimezone()
    return value.isoformat()


def _events_path(calendar_id: str, event_id: Optional[str] = None) -> str:
    path = f"/calendars/{quote(calendar_id, safe='')}/events"
    if event_id is not None:
        path += f"/{quote(event_id, safe='')}"
    return path


def _parse_event(data: Any) -> CalendarEventRecord:
    """Event resource from a response body; malformed bodies raise HttpApiError."""
    try:
        return CalendarEventRecord.from_wire(data)
    except ValidationError as e:
        raise HttpApiError(f"Unexpected event resource in response: {e}") from e


class GoogleCalendarClient:
    """
    Google Calendar v3 implementation of CalendarClient.

    Failures raise HttpApiError / HttpTimeoutError from the transport; there
    is no retry. Updates are sent as PATCH so fields left out of the record
    keep their current values.
    """

    def __init__(self, http: HttpClient) -> None:
        self._http = http

    def insert(self, calendar_id: str, record: CalendarEventRecord) -> CalendarEventRecord:
        response = self._http.request(
            "POST",
            _events_path(calendar_id),
            json=record.to_wire(),
        )
        return _parse_event(response.json())

    def update(
        self,
        calendar_id: str,
        event_id: str,
        record: CalendarEventRecord,
        send_updates: SendUpdates = SendUpdates.ALL,
    ) -> CalendarEventRecord:
        response = self._http.request(
            "PATCH",
            _events_path(calendar_id, event_id),
            params={"sendUpdates": SendUpdates(send_updates).value},
            json=record.to_wire(),
        )
        return _parse_event(response.json())

    def delete(
        self,
        calendar_id: str,
        event_id: str,
        send_updates: SendUpdates = SendUpdates.ALL,
    ) -> None:
        self._http.request(
            "DELETE",
            _events_path(calendar_id, event_id),
            params={"sendUpdates": SendUpdates(send_updates).value},
        )

    def list_events(self, calendar_id: str, filters: ListFilters) -> List[CalendarEventRecord]:
        params: Dict[str, Any] = {"maxResults": filters.max_results}
        if filters.time_min is not None:
            params["timeMin"] = _rfc3339(filters.time_min)
        if filters.time_max is not None:
            params["timeMax"] = _rfc3339(filters.time_max)
        if filters.query:
            params["q"] = filters.query
        if filters.order_by_start_time:
            params["orderBy"] = "startTime"
            params["singleEvents"] = "true"

        # Single page only; nextPageToken is not followed
        data = self._http.request("GET", _events_path(calendar_id), params=params).json()
        if not isinstance(data, dict):
            raise HttpApiError("Unexpected events list in response")
        items = data.get("items") or []
        return [_parse_event(item) for item in items]


def build_token_provider(settings: Settings) -> TokenProvider:
    """
    Pick the token source configured in settings.

    Raises:
        ValueError: neither an access token nor a service account file is set,
            or the service account file cannot be loaded
    """
    if settings.access_token is not None and settings.access_token.get_secret_value():
        return StaticTokenProvider(settings.access_token.get_secret_value())
    if not settings.service_account_file:
        raise ValueError("Service Account File path is not set")
    try:
        return ServiceAccountTokenProvider(
            settings.service_account_file,
            subject=settings.delegated_subject,
        )
    except OSError as e:
        raise ValueError(f"Service Account File cannot be read: {e}") from e
    except ValueError as e:
        raise ValueError(f"Service Account File is not a valid key file: {e}") from e


def build_calendar_client(settings: Settings) -> GoogleCalendarClient:
    """
    Build a GoogleCalendarClient from settings.

    The caller owns the returned client and passes it to node executions.

    Raises:
        ValueError: configuration is incomplete
    """
    if not settings.calendar_id:
        raise ValueError("Calendar ID is not set")
    if not settings.application_name:
        raise ValueError("Application Name is not set")

    http = HttpClient(
        base_url=settings.api_base_url,
        token_provider=build_token_provider(settings),
        timeout=settings.http_timeout_s,
        user_agent=settings.application_name,
    )
    logger.info(f"Google Calendar client initialized for calendar '{settings.calendar_id}'")
    return GoogleCalendarClient(http)


__all__ = [
    "SendUpdates",
    "ListFilters",
    "CalendarClient",
    "GoogleCalendarClient",
    "build_token_provider",
    "build_calendar_client",
]
