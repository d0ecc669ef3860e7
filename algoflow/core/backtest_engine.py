# algoflow/core/backtest_engine.py
"""
Backtest engine: replays a workflow over historical candles.

Per run: load candles, then for every candle past the lookback window
calculate indicators on the visible slice, evaluate the condition and
simulate the order node, and finally compute metrics.
"""

import logging
import time
from typing import Any, Dict, Iterable, List, Mapping, Optional

from tqdm import tqdm

from ..brokers.router import BrokerRouter
from ..conditions.evaluator import evaluate_condition
from ..indicators.calculate import calculate_indicators, latest_prices
from ..indicators.registry import IndicatorRegistry, create_default_registry
from ..models.market_data import NormalizedCandles
from ..models.orders import OrderSide
from ..models.results import (
    BacktestLog,
    BacktestRequest,
    BacktestResult,
    BacktestRunConfig,
    BacktestTrade,
)
from ..models.workflow import NodeType, WorkflowNode
from ..utils.time_helpers import format_duration, now_ms
from .errors import BacktestError, NoCandlesError
from .historical_loader import load_historical_candles, slice_candles
from .metrics import build_equity_curve, compute_metrics
from .order_simulator import create_initial_position, simulate_order


logger = logging.getLogger(__name__)

DEFAULT_LOOKBACK = 50
DEFAULT_INDICATOR_PERIOD = 14


def get_lookback_period(indicators_node: Optional[WorkflowNode], default: int = DEFAULT_LOOKBACK) -> int:
    """
    Number of candles to skip before the first evaluation.

    The largest ``slowPeriod`` (else ``period``, else 14) across the
    configured indicators; ``default`` when there is no indicator list.
    """
    if indicators_node is None or indicators_node.data.get("indicators") is None:
        return default

    longest = 0
    for config in indicators_node.data["indicators"]:
        period = (
            config.get("slowPeriod")
            or config.get("slow_period")
            or config.get("period")
            or DEFAULT_INDICATOR_PERIOD
        )
        longest = max(longest, int(period))
    return max(longest, 1)


def _order_side(order_data: Mapping[str, Any], order_node: Optional[WorkflowNode]) -> OrderSide:
    side = str(order_data.get("side") or OrderSide.BUY.value).strip().upper()
    try:
        return OrderSide(side)
    except ValueError:
        node_id = order_node.id if order_node else "order"
        raise BacktestError(f"Order node {node_id} has invalid side: {order_data.get('side')}", "INVALID_ORDER") from None


class BacktestEngine:
    """
    Deterministic replay of a workflow graph.

    Each run owns its own position and trade log; nothing is shared
    between runs.
    """

    def __init__(
        self,
        router: Optional[BrokerRouter] = None,
        registry: Optional[IndicatorRegistry] = None,
        show_progress: bool = False,
        default_lookback: int = DEFAULT_LOOKBACK,
    ):
        """
        Initialize backtest engine.

        Args:
            router: Broker router for historical candles (default router if None)
            registry: Indicator calculators (default registry if None)
            show_progress: Show a tqdm progress bar while replaying
            default_lookback: Lookback for workflows without an indicator list
        """
        self.router = router
        self.registry = registry if registry is not None else create_default_registry()
        self.show_progress = show_progress
        self.default_lookback = default_lookback

    def run(self, request: BacktestRequest, candles: Optional[NormalizedCandles] = None) -> BacktestResult:
        """
        Run a backtest.

        Args:
            request: Workflow, symbol, broker, range and capital
            candles: Pre-loaded candles; fetched through the router when None

        Returns:
            BacktestResult with config, metrics, equity curve, logs and trades

        Raises:
            NoCandlesError: If no candles are available
            BacktestError: If the candles are misaligned or the order side is invalid
            BrokerError: If loading candles fails
        """
        logger.info(f"Starting backtest for {request.symbol} ({request.interval})")
        started = time.time()

        if candles is None:
            candles = load_historical_candles(
                symbol=request.symbol,
                interval=request.interval,
                start=request.start,
                end=request.end,
                broker=request.broker,
                security_id=request.security_id,
                exchange_segment=request.exchange_segment,
                creds=request.creds,
                router=self.router,
            )

        if candles.is_empty:
            raise NoCandlesError()
        if not candles.is_aligned():
            raise BacktestError("Candle arrays must all have the same length", "MISALIGNED_CANDLES")

        workflow = request.workflow
        indicators_node = workflow.find_node_by_type(NodeType.INDICATORS)
        condition_node = workflow.find_node_by_type(NodeType.CONDITION)
        order_node = workflow.find_node_by_type(NodeType.ORDER)

        indicator_configs: List[Mapping[str, Any]] = (
            indicators_node.data.get("indicators") or [] if indicators_node else []
        )
        expression = condition_node.data.get("expression") if condition_node else None
        order_data: Dict[str, Any] = order_node.data if order_node else {}
        action = _order_side(order_data, order_node)
        quantity = float(order_data.get("quantity") or 1)

        condition_id = condition_node.id if condition_node else "condition"
        order_id = order_node.id if order_node else "order"

        lookback = get_lookback_period(indicators_node, self.default_lookback)
        logger.info(f"Replaying {len(candles)} candles with lookback {lookback}")

        trades: List[BacktestTrade] = []
        logs: List[BacktestLog] = []
        position = create_initial_position()

        steps: Iterable[int] = range(lookback, len(candles))
        for i in tqdm(steps, desc="Backtesting", disable=not self.show_progress):
            timestamp = candles.timestamps[i]
            price = candles.close[i]
            visible = slice_candles(candles, i)

            try:
                values = calculate_indicators(visible, indicator_configs, self.registry)
                values.update(latest_prices(visible))

                condition_met = False
                if expression:
                    condition_met = evaluate_condition(values, expression).condition_met

                logs.append(BacktestLog(
                    node_id=condition_id,
                    status="completed",
                    timestamp=now_ms(),
                    result={"conditionMet": condition_met, "action": action.value},
                ))

                if not condition_met:
                    continue

                can_execute = (
                    (action is OrderSide.BUY and position.is_flat)
                    or (action is OrderSide.SELL and position.quantity > 0)
                )
                if not can_execute:
                    continue

                fill = simulate_order(action, quantity, price, timestamp, position, trades)
                position = fill.position

                logs.append(BacktestLog(
                    node_id=order_id,
                    status="completed",
                    timestamp=now_ms(),
                    result={"trade": fill.trade.to_dict(), "realizedPNL": fill.realized_pnl},
                ))
                logger.debug(f"{action.value} at {price} on candle {i}")

            except Exception as e:
                logger.debug(f"Step {i} failed: {e}")
                logs.append(BacktestLog(
                    node_id="backtest",
                    status="error",
                    timestamp=now_ms(),
                    error=str(e),
                ))

        if position.quantity > 0:
            last_price = candles.close[-1]
            simulate_order(OrderSide.SELL, position.quantity, last_price, candles.timestamps[-1], position, trades)
            logger.info(f"Closing open position at {last_price}")

        metrics = compute_metrics(trades, request.initial_capital)
        equity_curve = build_equity_curve(trades, request.initial_capital)

        logger.info(
            f"Backtest completed in {format_duration(time.time() - started)}: "
            f"{len(trades)} trades, PNL {metrics.total_pnl:.2f}"
        )

        return BacktestResult(
            config=BacktestRunConfig(
                symbol=request.symbol,
                broker=request.broker,
                interval=request.interval,
                start=request.start,
                end=request.end,
                initial_capital=request.initial_capital,
                candle_count=len(candles),
            ),
            metrics=metrics,
            equity_curve=equity_curve,
            logs=logs,
            trades=trades,
        )


def run_backtest(
    request: BacktestRequest,
    router: Optional[BrokerRouter] = None,
    registry: Optional[IndicatorRegistry] = None,
    candles: Optional[NormalizedCandles] = None,
    show_progress: bool = False,
) -> BacktestResult:
    """Convenience wrapper around BacktestEngine.run."""
    engine = BacktestEngine(router=router, registry=registry, show_progress=show_progress)
    return engine.run(request, candles=candles)
