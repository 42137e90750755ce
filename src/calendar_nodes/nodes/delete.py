"""Delete-event node."""

from __future__ import annotations

from calendar_nodes.client.calendar import SendUpdates

from .base import TRANSPORT_ERRORS, NodeExecutionContext
from .configs import DeleteEventConfig


_NOTIFY_SUFFIX = {
    SendUpdates.ALL: " (participants notified)",
    SendUpdates.NONE: " (no notifications sent)",
    SendUpdates.EXTERNAL_ONLY: " (external participants notified)",
}


def deletion_message(event_id: str, send_updates: SendUpdates) -> str:
    return f"Event deleted successfully: {event_id}{_NOTIFY_SUFFIX.get(send_updates, '')}"


def delete_event(config: DeleteEventConfig, context: NodeExecutionContext) -> str:
    """
    Delete an event and store a confirmation message in the result variable.

    Returns:
        The confirmation message
    """
    context.logger.info("Executing delete event node")

    event_id = context.resolve_event_id(config.event_id)
    result_variable = context.resolve_result_variable(config.result_variable)
    context.logger.info(f"Event ID to delete: {event_id}")

    try:
        context.client.delete(context.calendar_id, event_id, config.send_updates)
    except TRANSPORT_ERRORS as e:
        raise context.api_error("Error deleting event", e) from e

    message = deletion_message(event_id, config.send_updates)
    context.set_variable(result_variable, message)
    context.logger.info(message)
    return message
