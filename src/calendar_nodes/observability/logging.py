"""Structured JSON logging with flow context."""
import logging
import sys
from typing import Any

from pythonjsonlogger import jsonlogger

from calendar_nodes.config import get_settings

CONTEXT_FIELDS = ("flow_id", "node_name", "node_type")


class FlowContextFilter(logging.Filter):
    """Add flow context to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add default flow context fields if not present."""
        for name in CONTEXT_FIELDS:
            if not hasattr(record, name):
                setattr(record, name, None)
        return True


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with standardized field names."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        """Add custom fields to the log record."""
        super().add_fields(log_record, record, message_dict)

        if not log_record.get("timestamp"):
            log_record["timestamp"] = self.formatTime(record, self.datefmt)

        log_record["level"] = record.levelname
        log_record["logger"] = record.name

        # Context fields are only emitted when set
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value:
                log_record[name] = value
            else:
                log_record.pop(name, None)


def setup_logging(level: str | None = None) -> None:
    """Configure structured JSON logging for the application."""
    settings = get_settings()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    handler.setFormatter(formatter)
    handler.addFilter(FlowContextFilter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level or settings.log_level)

    # Reduce noise from third-party libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("google.auth").setLevel(logging.WARNING)


def get_logger(
    name: str,
    flow_id: str | None = None,
    node_name: str | None = None,
    node_type: str | None = None,
) -> logging.LoggerAdapter:
    """
    Get a logger carrying flow context.

    Args:
        name: Logger name (typically __name__)
        flow_id: Flow the node runs in
        node_name: Name of the node within the flow
        node_type: Registered node type

    Returns:
        LoggerAdapter that stamps the context on every record
    """
    extra = {
        key: value
        for key, value in (
            ("flow_id", flow_id),
            ("node_name", node_name),
            ("node_type", node_type),
        )
        if value
    }
    return logging.LoggerAdapter(logging.getLogger(name), extra=extra)
