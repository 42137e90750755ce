"""List-events node."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List

from calendar_nodes.client.calendar import ListFilters
from calendar_nodes.core.events import parse_integer
from calendar_nodes.core.formatting import format_event_list
from calendar_nodes.core.records import CalendarEventRecord

from .base import TRANSPORT_ERRORS, NodeExecutionContext
from .configs import ListEventsConfig, ListMode


def parse_max_results(value: str, context: NodeExecutionContext) -> int:
    """Resolved max-results string to a positive int; falls back to the context default."""
    default = context.default_max_results
    try:
        max_results = parse_integer(value.strip())
    except ValueError:
        context.logger.warning(f"Invalid maxResults '{value}', using default: {default}")
        return default
    if max_results <= 0:
        context.logger.warning(f"maxResults must be positive, using default: {default}")
        return default
    return max_results


def build_filters(config: ListEventsConfig, context: NodeExecutionContext, max_results: int) -> ListFilters:
    """Translate the list mode into provider filters."""
    mode = config.list_mode

    if mode == ListMode.UPCOMING:
        return ListFilters(max_results=max_results, time_min=datetime.now(timezone.utc))

    if mode == ListMode.TIME_RANGE:
        start_input = context.require(context.resolve(config.start_time), "Start Time for TIME_RANGE mode")
        end_input = context.require(context.resolve(config.end_time), "End Time for TIME_RANGE mode")
        start_time = context.parse_datetime(start_input, "Start Time")
        end_time = context.parse_datetime(end_input, "End Time")
        return ListFilters(
            max_results=max_results,
            time_min=start_time.astimezone(),
            time_max=end_time.astimezone(),
        )

    if mode == ListMode.SEARCH:
        query = context.require(context.resolve(config.search_query), "Search Query for SEARCH mode")
        return ListFilters(max_results=max_results, query=query, order_by_start_time=False)

    # ALL
    return ListFilters(max_results=max_results)


def list_events(config: ListEventsConfig, context: NodeExecutionContext) -> str:
    """
    List events according to the list mode and store them as JSON.

    Results are capped at max results; further pages are not fetched.

    Returns:
        The JSON payload written to the result variable
    """
    context.logger.info(f"Executing list events node ({config.list_mode.value})")

    max_results = parse_max_results(context.resolve(config.max_results), context)
    result_variable = context.resolve_result_variable(config.result_variable)
    filters = build_filters(config, context, max_results)

    try:
        events: List[CalendarEventRecord] = context.client.list_events(context.calendar_id, filters)
    except TRANSPORT_ERRORS as e:
        raise context.api_error("Error listing events", e) from e

    context.logger.info(f"Listed {len(events)} events")
    payload = format_event_list(events, max_results)
    context.set_variable(result_variable, payload)
    context.logger.info(f"Events stored in variable: {result_variable}")
    return payload
