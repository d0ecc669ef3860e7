from __future__ import annotations


class IndicatorError(Exception):
    """Raised when an indicator cannot be calculated."""

    def __init__(self, message: str, indicator_type: str, code: str = "INDICATOR_ERROR"):
        super().__init__(message)
        self.message = message
        self.indicator_type = indicator_type
        self.code = code


class InsufficientDataError(IndicatorError):
    """Raised when the series is shorter than the indicator's warm-up window."""

    def __init__(self, indicator_type: str, required: int, available: int):
        super().__init__(
            f"Insufficient data for {indicator_type}: requires {required} candles, got {available}",
            indicator_type,
            "INSUFFICIENT_DATA",
        )
        self.required = required
        self.available = available
