# algoflow/core/metrics.py
"""
Performance metrics and equity curve for backtest trades.
"""

import logging
import math
from typing import List, Sequence

import numpy as np

from ..models.results import BacktestMetrics, BacktestTrade, EquityPoint


logger = logging.getLogger(__name__)


def _realized(trades: Sequence[BacktestTrade]) -> np.ndarray:
    """Per-trade equity change; opening trades contribute zero."""
    return np.array([t.pnl if t.pnl is not None else 0.0 for t in trades], dtype=float)


def calculate_max_drawdown(trades: Sequence[BacktestTrade], initial_capital: float) -> float:
    """
    Largest fractional decline from a running equity peak.

    The peak starts at the initial capital. Always non-negative.
    """
    if not trades:
        return 0.0

    equity = initial_capital + np.cumsum(_realized(trades))
    peaks = np.maximum(np.maximum.accumulate(equity), initial_capital)
    with np.errstate(divide='ignore', invalid='ignore'):
        drawdowns = np.where(peaks > 0, (peaks - equity) / peaks, 0.0)
    return max(0.0, float(drawdowns.max()))


def calculate_sharpe(closing_trades: Sequence[BacktestTrade], initial_capital: float) -> float:
    """
    Mean over population standard deviation of per-trade returns.

    Returns are pnl as a fraction of initial capital. No risk-free
    adjustment; 0 for fewer than two closing trades or zero deviation.
    """
    if len(closing_trades) < 2:
        return 0.0

    returns = np.array([t.pnl for t in closing_trades], dtype=float) / initial_capital
    std = float(np.std(returns))
    if std <= 0:
        return 0.0
    return float(np.mean(returns)) / std


def compute_metrics(trades: Sequence[BacktestTrade], initial_capital: float) -> BacktestMetrics:
    """
    Compute backtest metrics.

    Only closing trades (those carrying pnl) count towards win rate,
    total pnl, profit factor and average trade pnl.

    Args:
        trades: All simulated trades in order
        initial_capital: Starting capital

    Returns:
        BacktestMetrics
    """
    if not trades:
        return BacktestMetrics(total_trades=0, win_rate=0.0, total_pnl=0.0, max_drawdown=0.0)

    closing = [t for t in trades if t.is_closing]
    pnls = np.array([t.pnl for t in closing], dtype=float)

    total_pnl = float(pnls.sum()) if closing else 0.0
    win_rate = float((pnls > 0).sum()) / len(closing) if closing else 0.0

    gross_profit = float(pnls[pnls > 0].sum()) if closing else 0.0
    gross_loss = abs(float(pnls[pnls < 0].sum())) if closing else 0.0
    if gross_loss > 0:
        profit_factor = gross_profit / gross_loss
    elif gross_profit > 0:
        profit_factor = math.inf
    else:
        profit_factor = 0.0

    metrics = BacktestMetrics(
        total_trades=len(trades),
        win_rate=win_rate,
        total_pnl=total_pnl,
        max_drawdown=calculate_max_drawdown(trades, initial_capital),
        sharpe=calculate_sharpe(closing, initial_capital),
        profit_factor=profit_factor,
        avg_trade_pnl=total_pnl / len(closing) if closing else 0.0,
    )

    logger.debug(
        f"Metrics: {metrics.total_trades} trades, win rate {metrics.win_rate:.2%}, "
        f"pnl {metrics.total_pnl:.2f}, max drawdown {metrics.max_drawdown:.2%}"
    )
    return metrics


def build_equity_curve(trades: Sequence[BacktestTrade], initial_capital: float) -> List[EquityPoint]:
    """
    Equity after each trade, preceded by an initial point.

    BUY trades leave equity unchanged; closing trades add their pnl.
    No points are produced for an empty trade list.
    """
    if not trades:
        return []

    curve = [EquityPoint(timestamp=trades[0].timestamp, equity=initial_capital)]
    equity = initial_capital
    for trade in trades:
        if trade.pnl is not None:
            equity += trade.pnl
        curve.append(EquityPoint(timestamp=trade.timestamp, equity=equity))
    return curve
