from __future__ import annotations


class BacktestError(Exception):
    """Raised when a backtest cannot run at all."""

    def __init__(self, message: str, code: str = "BACKTEST_ERROR"):
        super().__init__(message)
        self.message = message
        self.code = code


class NoCandlesError(BacktestError):
    """Raised when no historical candles are available for the period."""

    def __init__(self, message: str = "No historical candles available for the specified period"):
        super().__init__(message, "NO_CANDLES")
