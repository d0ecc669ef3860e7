import math

import httpx
import pytest

from algoflow.brokers import BrokerAPIError, create_default_router
from algoflow.core import BacktestEngine, BacktestError, NoCandlesError, get_lookback_period, run_backtest, slice_candles
from algoflow.models.market_data import NormalizedCandles
from algoflow.models.results import BacktestRequest
from algoflow.models.workflow import WorkflowNode
from conftest import START_MS, fake_router, linear_workflow, make_candles


def _request(graph, **overrides) -> BacktestRequest:
    data = {
        "workflow": graph,
        "symbol": "TEST",
        "start": START_MS,
        "end": START_MS + 40 * 86_400_000,
        "initial_capital": 100_000,
    }
    data.update(overrides)
    return BacktestRequest(**data)


def test_lookback_uses_longest_period():
    node = WorkflowNode(
        id="ind",
        type="indicators",
        data={"indicators": [{"type": "SMA", "period": 20}, {"type": "MACD", "slowPeriod": 26}, {"type": "RSI"}]},
    )

    assert get_lookback_period(node) == 26


def test_lookback_defaults_without_indicator_list():
    assert get_lookback_period(None) == 50
    assert get_lookback_period(WorkflowNode(id="ind", type="indicators"), default=7) == 7


def test_slice_candles_includes_end_index(rising_candles):
    visible = slice_candles(rising_candles, 4)

    assert visible.close == [100.0, 101.0, 102.0, 103.0, 104.0]
    assert len(slice_candles(rising_candles, 500)) == 40


def test_buy_and_hold_round_trip(rising_candles):
    graph = linear_workflow("close > SMA_3", [{"type": "SMA", "period": 3}])

    result = BacktestEngine().run(_request(graph), candles=rising_candles)

    assert [t.type.value for t in result.trades] == ["BUY", "SELL"]
    assert result.trades[0].price == 103.0
    assert result.trades[1].price == 139.0
    assert result.trades[1].pnl == pytest.approx(36.0)
    assert result.metrics.total_trades == 2
    assert result.metrics.win_rate == 1.0
    assert result.metrics.total_pnl == pytest.approx(36.0)
    assert math.isinf(result.metrics.profit_factor)
    assert result.final_equity == pytest.approx(100_036.0)
    assert result.config.candle_count == 40


def test_logs_record_every_evaluation(rising_candles):
    graph = linear_workflow("close > SMA_3", [{"type": "SMA", "period": 3}])

    result = BacktestEngine().run(_request(graph), candles=rising_candles)

    condition_logs = [log for log in result.logs if log.node_id == "cond"]
    order_logs = [log for log in result.logs if log.node_id == "order"]
    assert len(condition_logs) == 37
    assert condition_logs[0].result == {"conditionMet": True, "action": "BUY"}
    assert len(order_logs) == 1
    assert order_logs[0].result["trade"]["type"] == "BUY"
    assert order_logs[0].result["realizedPNL"] == 0.0


def test_condition_never_met_produces_no_trades(rising_candles):
    graph = linear_workflow("close < SMA_3", [{"type": "SMA", "period": 3}])

    result = BacktestEngine().run(_request(graph), candles=rising_candles)

    assert result.trades == []
    assert result.equity_curve == []
    assert result.metrics.total_trades == 0


def test_sell_without_position_is_ignored(rising_candles):
    graph = linear_workflow("close > 0", [{"type": "SMA", "period": 3}], side="SELL")

    result = BacktestEngine().run(_request(graph), candles=rising_candles)

    assert result.trades == []


def test_step_errors_are_logged_and_replay_continues(rising_candles):
    graph = linear_workflow("EMA_9 > 1", [{"type": "SMA", "period": 3}])

    result = BacktestEngine().run(_request(graph), candles=rising_candles)

    errors = [log for log in result.logs if log.status == "error"]
    assert len(errors) == 37
    assert errors[0].node_id == "backtest"
    assert errors[0].error == "Unknown indicator: EMA_9"
    assert result.trades == []


def test_empty_candles_raise():
    graph = linear_workflow("close > 0")

    with pytest.raises(NoCandlesError) as exc_info:
        BacktestEngine().run(_request(graph), candles=make_candles([]))

    assert exc_info.value.code == "NO_CANDLES"


def test_candles_loaded_through_router(rising_candles):
    graph = linear_workflow("close > SMA_3", [{"type": "SMA", "period": 3}])
    router = fake_router(rising_candles)

    result = run_backtest(_request(graph, creds={"accessToken": "tok"}), router=router)

    request, creds = router.get_adapter("dhan").candle_requests[0]
    assert request.security_id == "TEST"
    assert request.exchange_segment == "NSE_EQ"
    assert request.from_timestamp == START_MS
    assert creds.access_token == "tok"
    assert len(result.trades) == 2


def test_runs_are_independent(rising_candles):
    engine = BacktestEngine()
    graph = linear_workflow("close > SMA_3", [{"type": "SMA", "period": 3}])

    first = engine.run(_request(graph), candles=rising_candles)
    second = engine.run(_request(graph), candles=rising_candles)

    assert [t.to_dict() for t in first.trades] == [t.to_dict() for t in second.trades]
    assert first.metrics == second.metrics


def test_result_serializes_with_aliases(rising_candles):
    graph = linear_workflow("close > SMA_3", [{"type": "SMA", "period": 3}])

    result = BacktestEngine().run(_request(graph), candles=rising_candles)
    payload = result.model_dump(by_alias=True, exclude_none=True)

    assert payload["config"]["from"] == START_MS
    assert payload["config"]["initialCapital"] == 100_000
    assert "equityCurve" in payload
    assert payload["metrics"]["totalPNL"] == pytest.approx(36.0)


def test_misaligned_candles_raise_backtest_error():
    graph = linear_workflow("close > 0")
    candles = NormalizedCandles(
        open=[1.0] * 30,
        high=[2.0] * 30,
        low=[0.5] * 30,
        close=[1.5] * 30,
        volume=[100.0] * 30,
        timestamps=[START_MS + i * 86_400_000 for i in range(10)],
    )

    with pytest.raises(BacktestError) as exc_info:
        BacktestEngine().run(_request(graph), candles=candles)

    assert exc_info.value.code == "MISALIGNED_CANDLES"


def test_short_broker_timestamp_column_fails_before_replay():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={
            "open": [1.0] * 30,
            "high": [2.0] * 30,
            "low": [0.5] * 30,
            "close": [1.5] * 30,
            "volume": [100] * 30,
            "timestamp": [1704067200 + i * 86400 for i in range(10)],
        })

    router = create_default_router(transport=httpx.MockTransport(handler))
    graph = linear_workflow("close > 0")

    with pytest.raises(BrokerAPIError, match="mismatched lengths"):
        run_backtest(_request(graph, creds={"accessToken": "tok"}), router=router)


@pytest.mark.parametrize("side, expected", [("buy", "BUY"), (" Sell ", "SELL")])
def test_order_side_is_case_insensitive(rising_candles, side, expected):
    graph = linear_workflow("close > SMA_3", [{"type": "SMA", "period": 3}], side=side)

    result = BacktestEngine().run(_request(graph), candles=rising_candles)

    condition_logs = [log for log in result.logs if log.node_id == "cond"]
    assert condition_logs[0].result["action"] == expected


def test_unknown_order_side_names_the_node(rising_candles):
    graph = linear_workflow("close > 0", side="HOLD")

    with pytest.raises(BacktestError, match="Order node order has invalid side: HOLD") as exc_info:
        BacktestEngine().run(_request(graph), candles=rising_candles)

    assert exc_info.value.code == "INVALID_ORDER"
