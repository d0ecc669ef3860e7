"""
Simple moving average.
"""

from typing import List, Optional, Sequence

from ...models.market_data import NormalizedCandles
from ..types import IndicatorConfig
from .base import IndicatorCalculator


def calculate_sma(prices: Sequence[float], period: int) -> List[Optional[float]]:
    """
    Sliding-window mean of ``prices``.

    Args:
        prices: Price values in time order
        period: Window length

    Returns:
        List aligned with ``prices``; None for the first ``period - 1`` bars
    """
    result: List[Optional[float]] = [None] * len(prices)
    if period < 1 or len(prices) < period:
        return result

    window_sum = sum(prices[:period])
    result[period - 1] = window_sum / period

    for i in range(period, len(prices)):
        window_sum += prices[i] - prices[i - period]
        result[i] = window_sum / period

    return result


class SMACalculator(IndicatorCalculator):
    indicator_type = "SMA"

    def required_length(self, config: IndicatorConfig) -> int:
        return self._period(config)

    def compute(self, candles: NormalizedCandles, config: IndicatorConfig) -> List[Optional[float]]:
        return calculate_sma(self._prices(candles, config), self._period(config))

    def get_key(self, config: IndicatorConfig) -> str:
        key = f"SMA_{self._period(config)}"
        if config.source.value != "close":
            key = f"{key}_{config.source.value}"
        return key
