"""
CLI for running calendar nodes from a terminal.

Provides:
- create / update / list / delete: run a single node
- run-flow: execute a JSON flow definition
"""

import sys
import json
import argparse
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Type

from pydantic import ValidationError

from calendar_nodes.client import CalendarClient, build_calendar_client
from calendar_nodes.config import Settings, get_settings
from calendar_nodes.core.variables import InMemoryVariableStore
from calendar_nodes.nodes import (
    CreateEventConfig,
    DeleteEventConfig,
    ListEventsConfig,
    NodeConfig,
    NodeExecutionContext,
    NodeOperationError,
    UpdateEventConfig,
    create_event,
    delete_event,
    list_events,
    update_event,
)
from calendar_nodes.observability import setup_logging
from calendar_nodes.runtime import FlowExecutor


# option dest -> node parameter key
PARAMETER_KEYS = {
    "summary": "summary",
    "description": "description",
    "location": "eventlocation",
    "start_time": "startTime",
    "end_time": "endTime",
    "reminders": "reminders",
    "event_id": "eventId",
    "send_updates": "sendUpdates",
    "list_mode": "listMode",
    "search_query": "searchQuery",
    "max_results": "maxResults",
    "result_variable": "resultVariable",
}

NODE_COMMANDS: Dict[str, tuple] = {
    "create": (CreateEventConfig, create_event),
    "update": (UpdateEventConfig, update_event),
    "list": (ListEventsConfig, list_events),
    "delete": (DeleteEventConfig, delete_event),
}


def parse_vars(pairs: Optional[List[str]]) -> Dict[str, str]:
    """Parse repeated NAME=VALUE options."""
    variables: Dict[str, str] = {}
    for pair in pairs or []:
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"Invalid variable '{pair}'. Use NAME=VALUE")
        variables[name.strip()] = value
    return variables


def node_parameters(args: argparse.Namespace) -> Dict[str, Any]:
    """Collect the node options that were given on the command line."""
    return {
        key: getattr(args, dest)
        for dest, key in PARAMETER_KEYS.items()
        if getattr(args, dest, None) is not None
    }


def cmd_node(args: argparse.Namespace, settings: Settings, client: CalendarClient) -> int:
    """Run a single node and print its result variable."""
    config_model: Type[NodeConfig]
    handler: Callable[..., str]
    config_model, handler = NODE_COMMANDS[args.command]

    try:
        config = config_model.model_validate(node_parameters(args))
    except ValidationError as e:
        print(f"Error: invalid options: {e}", file=sys.stderr)
        return 1

    store = InMemoryVariableStore(parse_vars(args.var))
    context = NodeExecutionContext(
        client=client,
        variables=store,
        calendar_id=settings.calendar_id,
        flow_id="cli",
        node_name=args.command,
        node_type=args.command,
        default_max_results=settings.default_max_results,
    )

    try:
        handler(config, context)
    except NodeOperationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(store.get(context.resolve_result_variable(config.result_variable)))
    return 0


def cmd_run_flow(args: argparse.Namespace, settings: Settings, client: CalendarClient) -> int:
    """Execute a flow definition and print the final variables."""
    path = Path(args.file)
    if not path.exists():
        print(f"Error: flow file not found: {path}", file=sys.stderr)
        return 1

    try:
        flow = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        print(f"Error: invalid JSON in {path}: {e}", file=sys.stderr)
        return 1

    store = InMemoryVariableStore(parse_vars(args.var))
    executor = FlowExecutor(
        client,
        calendar_id=settings.calendar_id,
        default_max_results=settings.default_max_results,
    )
    result = executor.execute(flow, variables=store)

    print(json.dumps(store.snapshot(), indent=2, ensure_ascii=False))
    if result.is_error:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1
    return 0


def _add_event_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--summary", help="Event title")
    parser.add_argument("--description", help="Event description")
    parser.add_argument("--location", help="Event location")
    parser.add_argument("--start-time", help="Start, e.g. 2025-01-15T10:00:00")
    parser.add_argument("--end-time", help="End, e.g. 2025-01-15T11:00:00")
    parser.add_argument("--reminders", help="Reminders, e.g. 'popup:10,email:60'")


def _add_notify_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--send-updates",
        choices=["all", "externalOnly", "none"],
        help="Who is notified about the change",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="calendar-nodes",
        description="Calendar nodes - create, update, list and delete Google Calendar events",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--log-level", help="Override the configured log level")

    # Shared by every subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--var",
        action="append",
        metavar="NAME=VALUE",
        help="Seed a flow variable (repeatable)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    create_parser = subparsers.add_parser("create", parents=[common], help="Create an event")
    _add_event_options(create_parser)
    create_parser.add_argument("--result-variable", help="Variable receiving the event id")

    update_parser = subparsers.add_parser("update", parents=[common], help="Update an event")
    update_parser.add_argument("--event-id", help="Event to update")
    _add_event_options(update_parser)
    _add_notify_option(update_parser)
    update_parser.add_argument("--result-variable", help="Variable receiving the event id")

    list_parser = subparsers.add_parser("list", parents=[common], help="List events")
    list_parser.add_argument(
        "--list-mode",
        choices=["UPCOMING", "TIME_RANGE", "SEARCH", "ALL"],
        help="Which events to fetch",
    )
    list_parser.add_argument("--search-query", help="Free-text query for SEARCH mode")
    list_parser.add_argument("--start-time", help="Range start for TIME_RANGE mode")
    list_parser.add_argument("--end-time", help="Range end for TIME_RANGE mode")
    list_parser.add_argument("--max-results", help="Maximum number of events")
    list_parser.add_argument("--result-variable", help="Variable receiving the JSON list")

    delete_parser = subparsers.add_parser("delete", parents=[common], help="Delete an event")
    delete_parser.add_argument("--event-id", help="Event to delete")
    _add_notify_option(delete_parser)
    delete_parser.add_argument("--result-variable", help="Variable receiving the message")

    flow_parser = subparsers.add_parser("run-flow", parents=[common], help="Execute a JSON flow file")
    flow_parser.add_argument("file", help="Path to the flow definition")

    return parser


def main(argv: Optional[List[str]] = None, client: Optional[CalendarClient] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    settings = get_settings()
    setup_logging(args.log_level)

    try:
        parse_vars(args.var)
        if client is None:
            client = build_calendar_client(settings)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.command == "run-flow":
        return cmd_run_flow(args, settings, client)
    return cmd_node(args, settings, client)


if __name__ == "__main__":
    sys.exit(main())
