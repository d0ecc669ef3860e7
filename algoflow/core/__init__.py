"""
Backtest engine components.
"""

from .backtest_engine import BacktestEngine, get_lookback_period, run_backtest
from .errors import BacktestError, NoCandlesError
from .historical_loader import load_candles_from_csv, load_historical_candles, slice_candles
from .metrics import build_equity_curve, calculate_max_drawdown, calculate_sharpe, compute_metrics
from .order_simulator import SimulatedOrder, create_initial_position, simulate_order

__all__ = [
    "BacktestEngine",
    "run_backtest",
    "get_lookback_period",
    "BacktestError",
    "NoCandlesError",
    "load_historical_candles",
    "load_candles_from_csv",
    "slice_candles",
    "simulate_order",
    "create_initial_position",
    "SimulatedOrder",
    "compute_metrics",
    "build_equity_curve",
    "calculate_max_drawdown",
    "calculate_sharpe",
]
