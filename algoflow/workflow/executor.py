"""
Live workflow executor.

Nodes run once, in topological order. Context is threaded linearly:
every node receives the previous node's result plus its own ``data``,
and its return value becomes the context for the next node.
"""

import logging
import time
from typing import Any, Callable, Dict, Mapping, Optional

from ..brokers.candles import fetch_candles
from ..brokers.orders import execute_order_with_credentials
from ..brokers.router import BrokerRouter
from ..brokers.types import BrokerName
from ..conditions.evaluator import ConditionResult, evaluate_condition
from ..indicators.calculate import calculate_indicators, latest_prices
from ..indicators.registry import IndicatorRegistry, create_default_registry
from ..models.market_data import CandleRequest, NormalizedCandles
from ..models.orders import OrderRequest
from ..models.workflow import ExecutionLog, NodeType, WorkflowGraph, WorkflowNode, WorkflowResult
from ..utils.time_helpers import iso_now
from .errors import NodeExecutionError
from .graph import topo_sort, validate_graph


logger = logging.getLogger(__name__)

NodeExecutor = Callable[[Any, Dict[str, Any]], Any]


def _plain(value: Any) -> Any:
    """Render node results for execution logs."""
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, Mapping):
        return {key: _plain(item) for key, item in value.items()}
    return value


def _condition_met(context: Any) -> Optional[bool]:
    if isinstance(context, ConditionResult):
        return context.condition_met
    if isinstance(context, Mapping):
        for key in ("condition_met", "conditionMet"):
            if key in context:
                return bool(context[key])
    return None


class WorkflowExecutor:
    """
    Runs a workflow graph against a broker.

    ``credentials`` maps broker names to the credentials used for that
    broker's candle and order nodes.
    """

    def __init__(
        self,
        router: Optional[BrokerRouter] = None,
        registry: Optional[IndicatorRegistry] = None,
        credentials: Optional[Mapping[str, Any]] = None,
    ):
        self.router = router
        self.registry = registry if registry is not None else create_default_registry()
        self.credentials = {BrokerName.parse(k).value: v for k, v in (credentials or {}).items()}

        self._executors: Dict[NodeType, NodeExecutor] = {
            NodeType.CANDLES: self._execute_candles,
            NodeType.INDICATORS: self._execute_indicators,
            NodeType.CONDITION: self._execute_condition,
            NodeType.ORDER: self._execute_order,
            NodeType.NOTIFY: self._execute_notify,
        }

    def register_executor(self, node_type: NodeType, executor: NodeExecutor) -> None:
        self._executors[node_type] = executor

    def _creds_for(self, broker: BrokerName) -> Any:
        return self.credentials.get(broker.value)

    def _execute_candles(self, context: Any, data: Dict[str, Any]) -> NormalizedCandles:
        broker = BrokerName.parse(data.get("broker", BrokerName.DHAN))
        request = CandleRequest.model_validate(data)
        return fetch_candles(request, broker, self._creds_for(broker), router=self.router)

    def _execute_indicators(self, context: Any, data: Dict[str, Any]) -> Dict[str, Any]:
        if isinstance(context, NormalizedCandles):
            candles = context
        elif isinstance(context, Mapping) and "close" in context:
            candles = NormalizedCandles.model_validate(context)
        else:
            raise ValueError("Indicators node requires candle data input")

        values = calculate_indicators(candles, data.get("indicators") or [], self.registry)
        values.update(latest_prices(candles))
        return values

    def _execute_condition(self, context: Any, data: Dict[str, Any]) -> ConditionResult:
        if not isinstance(context, Mapping):
            raise ValueError("Condition node requires indicator values input")

        expression = data.get("expression")
        if not expression:
            raise ValueError("Condition node requires an expression")

        return evaluate_condition(context, expression)

    def _execute_order(self, context: Any, data: Dict[str, Any]) -> Any:
        if _condition_met(context) is False:
            return {"skipped": True, "reason": "Condition not met"}

        broker = BrokerName.parse(data.get("broker", BrokerName.DHAN))
        dry_run = bool(data.get("dryRun", data.get("dry_run", False)))
        request = OrderRequest.model_validate(data)

        return execute_order_with_credentials(
            request,
            broker,
            self._creds_for(broker),
            dry_run=dry_run,
            router=self.router,
        )

    def _execute_notify(self, context: Any, data: Dict[str, Any]) -> Dict[str, Any]:
        # Delivery is handled outside the engine.
        return {
            "notified": True,
            "message": data.get("message") or "Workflow completed",
            "channel": data.get("channel") or "default",
            "timestamp": iso_now(),
        }

    def _run_node(self, node: WorkflowNode, context: Any) -> Any:
        executor = self._executors.get(node.node_type)
        if executor is None:
            raise ValueError(f"No executor registered for node type: {node.type}")
        return executor(context, node.data)

    def execute(self, graph: WorkflowGraph) -> WorkflowResult:
        """
        Validate, sort and run ``graph``.

        Graph validation and cycle errors propagate. A failing node stops
        the run and is reported with ``success=False``.
        """
        started = time.perf_counter()
        validate_graph(graph.nodes, graph.edges)
        ordered = topo_sort(graph.nodes, graph.edges)

        logger.info(f"Executing workflow: {' -> '.join(node.id for node in ordered)}")

        logs = []
        context: Any = None

        for node in ordered:
            node_started = time.perf_counter()
            try:
                output = self._run_node(node, context)
            except Exception as e:
                failure = NodeExecutionError(node.id, node.type, e)
                logger.error(failure.message)
                logs.append(ExecutionLog(
                    node_id=node.id,
                    type=node.type,
                    input=_plain(context),
                    output=None,
                    duration_ms=(time.perf_counter() - node_started) * 1000,
                    error=str(e),
                ))
                return WorkflowResult(
                    logs=logs,
                    final_output=None,
                    success=False,
                    total_duration_ms=(time.perf_counter() - started) * 1000,
                    error=failure.message,
                )

            logs.append(ExecutionLog(
                node_id=node.id,
                type=node.type,
                input=_plain(context),
                output=_plain(output),
                duration_ms=(time.perf_counter() - node_started) * 1000,
            ))
            context = output

        return WorkflowResult(
            logs=logs,
            final_output=_plain(context),
            success=True,
            total_duration_ms=(time.perf_counter() - started) * 1000,
        )


def execute_workflow(
    graph: WorkflowGraph,
    router: Optional[BrokerRouter] = None,
    registry: Optional[IndicatorRegistry] = None,
    credentials: Optional[Mapping[str, Any]] = None,
) -> WorkflowResult:
    """Convenience wrapper around WorkflowExecutor.execute."""
    return WorkflowExecutor(router, registry, credentials).execute(graph)
