import math

import pytest

from algoflow.core import build_equity_curve, calculate_max_drawdown, calculate_sharpe, compute_metrics
from algoflow.models.results import BacktestTrade


def _trade(side: str, pnl=None, timestamp: int = 0) -> BacktestTrade:
    return BacktestTrade(type=side, quantity=1, price=100.0, timestamp=timestamp, pnl=pnl)


ROUND_TRIPS = [
    _trade("BUY", timestamp=1),
    _trade("SELL", 100.0, timestamp=2),
    _trade("BUY", timestamp=3),
    _trade("SELL", -100.0, timestamp=4),
]


def test_metrics_for_one_win_and_one_loss():
    metrics = compute_metrics(ROUND_TRIPS, 100_000)

    assert metrics.total_trades == 4
    assert metrics.win_rate == 0.5
    assert metrics.total_pnl == 0.0
    assert metrics.profit_factor == pytest.approx(1.0)
    assert metrics.avg_trade_pnl == 0.0
    assert metrics.sharpe == 0.0
    assert metrics.max_drawdown == pytest.approx(100 / 100_100)


def test_metrics_for_no_trades():
    metrics = compute_metrics([], 100_000)

    assert metrics.total_trades == 0
    assert metrics.win_rate == 0.0
    assert metrics.total_pnl == 0.0
    assert metrics.max_drawdown == 0.0
    assert metrics.sharpe is None
    assert metrics.profit_factor is None
    assert metrics.to_dict() == {"totalTrades": 0, "winRate": 0.0, "totalPNL": 0.0, "maxDrawdown": 0.0}


def test_profit_factor_without_losses_is_infinite():
    metrics = compute_metrics([_trade("BUY"), _trade("SELL", 50.0)], 10_000)

    assert math.isinf(metrics.profit_factor)
    assert '"profitFactor":"Infinity"' in metrics.model_dump_json(by_alias=True)


def test_profit_factor_for_flat_trades_is_zero():
    assert compute_metrics([_trade("BUY"), _trade("SELL", 0.0)], 10_000).profit_factor == 0.0


def test_open_position_only_has_no_closing_stats():
    metrics = compute_metrics([_trade("BUY")], 10_000)

    assert metrics.total_trades == 1
    assert metrics.win_rate == 0.0
    assert metrics.avg_trade_pnl == 0.0


def test_max_drawdown_measured_from_initial_capital():
    trades = [_trade("BUY"), _trade("SELL", -500.0)]

    assert calculate_max_drawdown(trades, 10_000) == pytest.approx(0.05)


def test_max_drawdown_is_zero_for_monotonic_gains():
    trades = [_trade("SELL", 10.0), _trade("SELL", 20.0)]

    assert calculate_max_drawdown(trades, 1_000) == 0.0


def test_sharpe_uses_population_deviation():
    closing = [_trade("SELL", 100.0), _trade("SELL", 300.0)]

    # returns 0.01 and 0.03: mean 0.02, population std 0.01
    assert calculate_sharpe(closing, 10_000) == pytest.approx(2.0)


def test_sharpe_needs_two_closing_trades():
    assert calculate_sharpe([_trade("SELL", 100.0)], 10_000) == 0.0


def test_equity_curve():
    curve = build_equity_curve(ROUND_TRIPS, 1_000)

    assert [p.equity for p in curve] == [1_000, 1_000, 1_100, 1_100, 1_000]
    assert curve[0].timestamp == 1
    assert build_equity_curve([], 1_000) == []
