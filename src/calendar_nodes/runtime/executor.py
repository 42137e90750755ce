"""
Flow Executor - sync execution of a chain of calendar nodes.

Walks a flow from its entry node, running one node at a time on the
caller's thread. The executor owns the variable store for the run and
stops at the first failing node.
"""

from __future__ import annotations

import logging
import time
import traceback
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from calendar_nodes.client.calendar import CalendarClient
from calendar_nodes.core.variables import InMemoryVariableStore, VariableStore
from calendar_nodes.nodes import NodeExecutionContext

from .models import FlowDefinition, FlowNode, parse_flow
from .registry import NodeRegistry, default_registry


logger = logging.getLogger(__name__)


class NodeStatus(str, Enum):
    """Status of a node after a run."""
    SUCCESS = "success"
    ERROR = "error"
    SKIPPED = "skipped"


class FlowStatus(str, Enum):
    """Overall flow execution status."""
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class NodeRunResult:
    """
    Result of running a single node.
    """
    node_name: str
    status: NodeStatus
    output: Optional[str] = None
    error: Optional[str] = None
    error_traceback: Optional[str] = None
    duration_ms: float = 0

    @property
    def is_success(self) -> bool:
        return self.status == NodeStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status == NodeStatus.ERROR


@dataclass
class FlowResult:
    """
    Result of flow execution.
    """
    flow_id: str
    flow_name: str
    status: FlowStatus
    node_results: Dict[str, NodeRunResult] = field(default_factory=dict)
    path: List[str] = field(default_factory=list)
    variables: Dict[str, Optional[str]] = field(default_factory=dict)
    error: Optional[str] = None
    duration_ms: float = 0

    @property
    def is_success(self) -> bool:
        return self.status == FlowStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status == FlowStatus.ERROR


class FlowExecutor:
    """
    Sync flow executor.

    Usage:
        client = build_calendar_client(get_settings())
        executor = FlowExecutor(client, calendar_id="primary")
        result = executor.execute(flow_definition)
    """

    def __init__(
        self,
        client: CalendarClient,
        calendar_id: str = "primary",
        registry: Optional[NodeRegistry] = None,
        max_steps: int = 1000,
        default_max_results: int = 10,
    ):
        """
        Initialize executor.

        Args:
            client: Calendar client shared by every node of every run
            calendar_id: Target calendar
            registry: Node types available to flows
            max_steps: Safety limit for nodes run per flow (guards cycles)
            default_max_results: Fallback for list nodes
        """
        self._client = client
        self._calendar_id = calendar_id
        self._registry = registry or default_registry()
        self._max_steps = max_steps
        self._default_max_results = default_max_results

    def execute(
        self,
        flow: Union[FlowDefinition, Dict[str, Any]],
        variables: Optional[VariableStore] = None,
    ) -> FlowResult:
        """
        Execute a flow.

        Args:
            flow: Flow definition or JSON dict
            variables: Store to run against; a fresh in-memory store seeded
                from the flow's variables when omitted

        Returns:
            FlowResult with execution outcome
        """
        start_time = time.perf_counter()

        if isinstance(flow, dict):
            try:
                flow = parse_flow(flow)
            except ValidationError as e:
                return FlowResult(
                    flow_id=str(flow.get("id") or "unknown"),
                    flow_name=str(flow.get("name") or "Unnamed Flow"),
                    status=FlowStatus.ERROR,
                    error=f"Invalid flow definition: {e}",
                    duration_ms=(time.perf_counter() - start_time) * 1000,
                )

        if variables is None:
            store: VariableStore = InMemoryVariableStore(flow.variables)
        else:
            store = variables
            for name, value in flow.variables.items():
                if value is not None and store.get(name) is None:
                    store.set(name, value)

        result = self._run_chain(flow, store)
        result.duration_ms = (time.perf_counter() - start_time) * 1000
        if isinstance(store, InMemoryVariableStore):
            result.variables = store.snapshot()
        return result

    def _run_chain(self, flow: FlowDefinition, store: VariableStore) -> FlowResult:
        flow_id = flow.id or "unnamed"
        result = FlowResult(flow_id=flow_id, flow_name=flow.name, status=FlowStatus.SUCCESS)

        current = flow.entry_node
        steps = 0
        while current is not None:
            steps += 1
            if steps > self._max_steps:
                result.status = FlowStatus.ERROR
                result.error = f"Step limit of {self._max_steps} exceeded at node '{current}'"
                logger.error(result.error, extra={"flow_id": flow_id})
                break

            node = flow.get_node(current)
            result.path.append(node.name)

            if node.disabled:
                result.node_results[node.name] = NodeRunResult(
                    node_name=node.name,
                    status=NodeStatus.SKIPPED,
                )
                current = node.next
                continue

            logger.debug(f"Executing node: {node.name} ({node.type})", extra={"flow_id": flow_id})
            node_result = self._run_node(node, store, flow_id)
            result.node_results[node.name] = node_result

            if node_result.is_error:
                result.status = FlowStatus.ERROR
                result.error = node_result.error
                logger.error(
                    f"Node {node.name} failed: {node_result.error}",
                    extra={"flow_id": flow_id, "node_name": node.name, "node_type": node.type},
                )
                self._mark_rest_skipped(flow, node, result)
                break

            current = node.next

        return result

    def _run_node(self, node: FlowNode, store: VariableStore, flow_id: str) -> NodeRunResult:
        """Execute a single node."""
        start_time = time.perf_counter()

        spec = self._registry.get(node.type)
        if spec is None:
            return NodeRunResult(
                node_name=node.name,
                status=NodeStatus.ERROR,
                error=f"Unknown node type: {node.type}",
            )

        try:
            config = spec.config_model.model_validate(node.parameters)
        except ValidationError as e:
            return NodeRunResult(
                node_name=node.name,
                status=NodeStatus.ERROR,
                error=f"Invalid parameters for node '{node.name}': {e}",
                duration_ms=(time.perf_counter() - start_time) * 1000,
            )

        context = NodeExecutionContext(
            client=self._client,
            variables=store,
            calendar_id=self._calendar_id,
            flow_id=flow_id,
            node_name=node.name,
            node_type=node.type,
            default_max_results=self._default_max_results,
        )

        try:
            output = spec.handler(config, context)
            return NodeRunResult(
                node_name=node.name,
                status=NodeStatus.SUCCESS,
                output=output,
                duration_ms=(time.perf_counter() - start_time) * 1000,
            )
        except Exception as e:
            return NodeRunResult(
                node_name=node.name,
                status=NodeStatus.ERROR,
                error=str(e),
                error_traceback=traceback.format_exc(),
                duration_ms=(time.perf_counter() - start_time) * 1000,
            )

    def _mark_rest_skipped(self, flow: FlowDefinition, failed: FlowNode, result: FlowResult) -> None:
        """Mark the nodes after a failure as skipped."""
        name = failed.next
        while name is not None and name not in result.node_results:
            result.node_results[name] = NodeRunResult(node_name=name, status=NodeStatus.SKIPPED)
            name = flow.get_node(name).next


__all__ = [
    "FlowExecutor",
    "FlowResult",
    "FlowStatus",
    "NodeRunResult",
    "NodeStatus",
]
