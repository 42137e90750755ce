"""Observability package."""
from calendar_nodes.observability.logging import (
    CustomJsonFormatter,
    FlowContextFilter,
    get_logger,
    setup_logging,
)

__all__ = ["CustomJsonFormatter", "FlowContextFilter", "get_logger", "setup_logging"]
