"""
Client - Calendar API access.

- CalendarClient: capability the nodes depend on
- GoogleCalendarClient: Calendar v3 REST implementation
- HttpClient: timeout-bounded JSON transport
- Token providers: static token or service account
"""

from .auth import CALENDAR_SCOPE, ServiceAccountTokenProvider, StaticTokenProvider, TokenProvider
from .http import HttpApiError, HttpClient, HttpResponse, HttpTimeoutError
from .calendar import (
    CalendarClient,
    GoogleCalendarClient,
    ListFilters,
    SendUpdates,
    build_calendar_client,
    build_token_provider,
)

__all__ = [
    # Auth
    "CALENDAR_SCOPE",
    "TokenProvider",
    "StaticTokenProvider",
    "ServiceAccountTokenProvider",
    # HTTP
    "HttpClient",
    "HttpResponse",
    "HttpApiError",
    "HttpTimeoutError",
    # Calendar
    "CalendarClient",
    "GoogleCalendarClient",
    "ListFilters",
    "SendUpdates",
    "build_calendar_client",
    "build_token_provider",
]
