"""Create-event node."""

from __future__ import annotations

from pydantic import ValidationError

from calendar_nodes.core.converter import NonexistentLocalTimeError, describe_record, to_record
from calendar_nodes.core.events import EventRequest, ReminderFormatError, parse_reminders
from calendar_nodes.core.records import CalendarEventRecord

from .base import TRANSPORT_ERRORS, NodeExecutionContext
from .configs import CreateEventConfig


def build_event_request(config: CreateEventConfig, context: NodeExecutionContext) -> EventRequest:
    """
    Resolve a create/update config into an EventRequest.

    Summary, start and end are required; description, location and
    reminders only when non-empty.
    """
    summary = context.require(context.resolve(config.summary), "Event Title (Summary)")
    start_input = context.require(context.resolve(config.start_time), "Start Time")
    end_input = context.require(context.resolve(config.end_time), "End Time")
    description = context.resolve(config.description)
    location = context.resolve(config.location)
    reminders_input = context.resolve(config.reminders)

    start_time = context.parse_datetime(start_input, "Start Time")
    end_time = context.parse_datetime(end_input, "End Time")

    reminders = []
    if reminders_input:
        try:
            reminders = parse_reminders(reminders_input)
        except ReminderFormatError as e:
            raise context.error(str(e)) from e

    try:
        return EventRequest(
            summary=summary,
            description=description or None,
            location=location or None,
            start_time=start_time,
            end_time=end_time,
            reminders=reminders,
        )
    except ValidationError as e:
        raise context.error(f"Invalid event: {e}") from e


def build_event_record(request: EventRequest, context: NodeExecutionContext) -> CalendarEventRecord:
    """Wire record for a request; wall-clock times skipped by DST fail the node."""
    try:
        return to_record(request)
    except NonexistentLocalTimeError as e:
        raise context.error(str(e)) from e


def create_event(config: CreateEventConfig, context: NodeExecutionContext) -> str:
    """
    Create an event and store its id in the result variable.

    Returns:
        The created event id
    """
    context.logger.info("Executing create event node")

    result_variable = context.resolve_result_variable(config.result_variable)
    request = build_event_request(config, context)
    record = build_event_record(request, context)
    context.logger.info(f"Sending event: {describe_record(record)}")

    try:
        created = context.client.insert(context.calendar_id, record)
    except TRANSPORT_ERRORS as e:
        raise context.api_error("Error creating event", e) from e

    if not created.id:
        raise context.error("Error creating event: provider returned no event id")

    context.set_variable(result_variable, created.id)
    context.logger.info(f"Event created: {created.id} ({request.summary})")
    return created.id
