"""Update-event node."""

from __future__ import annotations

from calendar_nodes.core.converter import describe_record

from .base import TRANSPORT_ERRORS, NodeExecutionContext
from .configs import UpdateEventConfig
from .create import build_event_record, build_event_request


def update_event(config: UpdateEventConfig, context: NodeExecutionContext) -> str:
    """
    Replace an existing event and store its id in the result variable.

    The event id and the same required fields as create (summary, start,
    end) must resolve to values. Participants are notified according to
    send_updates.

    Returns:
        The updated event id
    """
    context.logger.info("Executing update event node")

    event_id = context.resolve_event_id(config.event_id)
    result_variable = context.resolve_result_variable(config.result_variable)
    request = build_event_request(config, context)
    record = build_event_record(request, context)
    context.logger.info(f"Sending update for {event_id}: {describe_record(record)}")

    try:
        updated = context.client.update(
            context.calendar_id,
            event_id,
            record,
            config.send_updates,
        )
    except TRANSPORT_ERRORS as e:
        raise context.api_error("Error updating event", e) from e

    updated_id = updated.id or event_id
    context.set_variable(result_variable, updated_id)
    context.logger.info(f"Event updated: {updated_id} ({request.summary})")
    return updated_id
