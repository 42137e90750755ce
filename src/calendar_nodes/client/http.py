"""
HTTP transport - timeout-bounded JSON requests for the Calendar API.

Every call carries an explicit timeout. Authorization is attached per
request from a token provider so refreshed tokens are picked up.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from google.auth.exceptions import GoogleAuthError
from requests.exceptions import RequestException, Timeout

from .auth import TokenProvider


logger = logging.getLogger(__name__)

# Default timeout in seconds
DEFAULT_TIMEOUT = 30


class HttpTimeoutError(Exception):
    """A Calendar API request exceeded its timeout."""

    def __init__(self, message: str, timeout: float, url: str):
        self.timeout = timeout
        self.url = url
        super().__init__(message)


class HttpApiError(Exception):
    """Error from HTTP request or a non-2xx response."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        url: Optional[str] = None,
        method: Optional[str] = None,
    ):
        self.status_code = status_code
        self.response_body = response_body
        self.url = url
        self.method = method
        super().__init__(message)


def _api_error_message(response: requests.Response) -> str:
    """Pull error.message out of a Google API error body."""
    try:
        body = response.json()
    except ValueError:
        return response.reason or "Unknown error"
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    if isinstance(error, str):
        return error
    return response.reason or "Unknown error"


class HttpResponse:
    """
    Calendar API response; JSON bodies, Google error extraction.
    """

    def __init__(self, response: requests.Response):
        self._response = response

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def text(self) -> str:
        return self._response.text

    @property
    def ok(self) -> bool:
        """2xx status."""
        return self._response.ok

    def json(self) -> Any:
        """Parse response as JSON; empty bodies (204) yield {}."""
        if self.status_code == 204 or not self._response.content:
            return {}
        try:
            return self._response.json()
        except ValueError as e:
            raise HttpApiError(
                message=f"Invalid JSON in response ({self.status_code}): {e}",
                status_code=self.status_code,
                response_body=self.text[:1000] if self.text else None,
                url=str(self._response.url),
            ) from e

    def raise_for_status(self) -> None:
        """Raise HttpApiError carrying the provider message on error status."""
        if self.ok:
            return
        message = _api_error_message(self._response)
        raise HttpApiError(
            message=f"Google API Error ({self.status_code}): {message}",
            status_code=self.status_code,
            response_body=self.text[:1000] if self.text else None,
            url=str(self._response.url),
            method=self._response.request.method if self._response.request else None,
        )


class HttpClient:
    """
    JSON HTTP client with timeout enforcement and bearer-token injection.

    Usage:
        client = HttpClient(
            base_url="https://www.googleapis.com/calendar/v3",
            token_provider=StaticTokenProvider("ya29..."),
        )
        data = client.request("GET", "/calendars/primary/events").json()
    """

    def __init__(
        self,
        base_url: str = "",
        token_provider: Optional[TokenProvider] = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize HTTP client.

        Args:
            base_url: API root, e.g. the Calendar v3 URL
            token_provider: Source of bearer tokens (None sends no auth)
            timeout: Default timeout in seconds
            user_agent: User-Agent header value
            session: requests session to reuse connections (optional)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token_provider = token_provider
        self.headers: Dict[str, str] = {"Accept": "application/json"}
        if user_agent:
            self.headers["User-Agent"] = user_agent
        self._session = session

    def _auth_headers(self) -> Dict[str, str]:
        if self.token_provider is None:
            return {}
        return {"Authorization": f"Bearer {self.token_provider.get_token()}"}

    def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        """
        Make HTTP request and check the status.

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE)
            endpoint: URL path appended to base_url
            params: Query parameters
            json: JSON body
            timeout: Per-call timeout in seconds (default: client timeout)

        Returns:
            HttpResponse for a 2xx status

        Raises:
            HttpTimeoutError: If request times out
            HttpApiError: If the token cannot be obtained, the request fails or
                returns an error status
        """
        url = f"{self.base_url}{endpoint}" if self.base_url else endpoint
        try:
            headers = {**self.headers, **self._auth_headers()}
        except GoogleAuthError as e:
            raise HttpApiError(
                message=f"Authentication failed: {e}",
                url=url,
                method=method,
            ) from e
        request_timeout = timeout or self.timeout
        sender = self._session.request if self._session is not None else requests.request

        logger.debug(f"{method} {url} params={params}")
        try:
            response = sender(
                method=method,
                url=url,
                params=params,
                json=json,
                headers=headers,
                timeout=request_timeout,
            )
        except Timeout as e:
            raise HttpTimeoutError(
                message=f"Request timed out after {request_timeout}s",
                timeout=request_timeout,
                url=url,
            ) from e
        except RequestException as e:
            raise HttpApiError(
                message=f"Request failed: {e}",
                url=url,
                method=method,
            ) from e

        wrapped = HttpResponse(response)
        wrapped.raise_for_status()
        return wrapped


__all__ = [
    "DEFAULT_TIMEOUT",
    "HttpClient",
    "HttpResponse",
    "HttpApiError",
    "HttpTimeoutError",
]
