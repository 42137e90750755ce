"""
Node execution context and errors shared by the calendar nodes.

Handlers receive a NodeExecutionContext carrying the injected CalendarClient
and the flow's variable store. Every failure leaves a handler as a
NodeOperationError (or NodeApiError for provider failures).
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from calendar_nodes.client.calendar import CalendarClient
from calendar_nodes.client.http import HttpApiError, HttpTimeoutError
from calendar_nodes.core.events import parse_local_datetime, strip_quotes
from calendar_nodes.core.variables import VariableStore, resolve_variables
from calendar_nodes.observability import get_logger


# ==============================================================================
# Errors
# ==============================================================================

class NodeOperationError(Exception):
    """Error during node operation."""

    def __init__(
        self,
        message: str,
        node_name: Optional[str] = None,
    ) -> None:
        self.message = message
        self.node_name = node_name
        super().__init__(message)


class NodeApiError(NodeOperationError):
    """Error from the calendar provider."""

    def __init__(
        self,
        message: str,
        node_name: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        super().__init__(message, node_name)
        self.status_code = status_code
        self.response_body = response_body


# ==============================================================================
# NodeExecutionContext
# ==============================================================================

class NodeExecutionContext:
    """
    Runtime context provided to a node handler.

    Provides access to:
    - The calendar client and target calendar id
    - Flow variables (read through the resolver, written after success)
    - A logger stamped with flow/node context
    """

    def __init__(
        self,
        client: CalendarClient,
        variables: VariableStore,
        calendar_id: str = "primary",
        flow_id: Optional[str] = None,
        node_name: Optional[str] = None,
        node_type: Optional[str] = None,
        default_max_results: int = 10,
    ) -> None:
        self.client = client
        self.variables = variables
        self.calendar_id = calendar_id
        self.flow_id = flow_id
        self.node_name = node_name
        self.node_type = node_type
        self.default_max_results = default_max_results
        self.logger: logging.LoggerAdapter = get_logger(
            "calendar_nodes.nodes",
            flow_id=flow_id,
            node_name=node_name,
            node_type=node_type,
        )

    def resolve(self, text: Optional[str]) -> str:
        """Interpolate ${name} placeholders; None becomes ''."""
        return resolve_variables(text, self.variables) or ""

    def set_variable(self, name: str, value: str) -> None:
        self.variables.set(name, value)

    # ==== Error helpers ====

    def error(self, message: str) -> NodeOperationError:
        return NodeOperationError(message, node_name=self.node_name)

    def api_error(self, prefix: str, exc: Exception) -> NodeApiError:
        """Wrap a transport failure, keeping the provider message."""
        if isinstance(exc, HttpApiError):
            return NodeApiError(
                f"{prefix}: {exc}",
                node_name=self.node_name,
                status_code=exc.status_code,
                response_body=exc.response_body,
            )
        return NodeApiError(f"{prefix}: {exc}", node_name=self.node_name)

    # ==== Input helpers ====

    def require(self, value: str, label: str) -> str:
        """Raise when a resolved required field is empty."""
        if not value:
            raise self.error(f"{label} is required")
        return value

    def parse_datetime(self, value: str, label: str) -> datetime:
        """Parse a resolved local date-time, echoing bad input in the error."""
        try:
            return parse_local_datetime(value, label)
        except ValueError as e:
            raise self.error(str(e)) from e

    def resolve_event_id(self, raw: str) -> str:
        """Resolve and unquote an event id; it is always required."""
        return self.require(strip_quotes(self.resolve(raw).strip()), "Event ID")

    def resolve_result_variable(self, raw: str) -> str:
        return self.require(self.resolve(raw).strip(), "Result variable")


TRANSPORT_ERRORS = (HttpApiError, HttpTimeoutError)


__all__ = [
    "NodeOperationError",
    "NodeApiError",
    "NodeExecutionContext",
    "TRANSPORT_ERRORS",
]
