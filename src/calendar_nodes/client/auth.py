"""
Token providers for Calendar API requests.

A provider hands out a currently valid OAuth access token; the HTTP client
asks for one on every request.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence

from google.auth.transport.requests import Request
from google.oauth2 import service_account


logger = logging.getLogger(__name__)

CALENDAR_SCOPE = "https://www.googleapis.com/auth/calendar"


class TokenProvider(Protocol):
    """Source of bearer tokens."""

    def get_token(self) -> str:
        ...


class StaticTokenProvider:
    """Always returns the same pre-issued access token."""

    def __init__(self, token: str) -> None:
        if not token:
            raise ValueError("Access token is empty")
        self._token = token

    def get_token(self) -> str:
        return self._token


class ServiceAccountTokenProvider:
    """
    Access tokens from a Google service account key file.

    The token is refreshed through google-auth whenever it is missing or
    expired.
    """

    def __init__(
        self,
        service_account_file: str,
        scopes: Sequence[str] = (CALENDAR_SCOPE,),
        subject: Optional[str] = None,
    ) -> None:
        credentials = service_account.Credentials.from_service_account_file(
            service_account_file,
            scopes=list(scopes),
        )
        if subject:
            credentials = credentials.with_subject(subject)
        self._credentials = credentials

    @property
    def service_account_email(self) -> str:
        return self._credentials.service_account_email

    def get_token(self) -> str:
        if not self._credentials.valid:
            logger.debug(f"Refreshing access token for {self.service_account_email}")
            self._credentials.refresh(Request())
        return self._credentials.token


__all__ = [
    "CALENDAR_SCOPE",
    "TokenProvider",
    "StaticTokenProvider",
    "ServiceAccountTokenProvider",
]
