"""
Exponential moving average.
"""

from typing import List, Optional, Sequence

from ...models.market_data import NormalizedCandles
from ..types import IndicatorConfig
from .base import IndicatorCalculator


def calculate_ema(prices: Sequence[float], period: int) -> List[Optional[float]]:
    """
    EMA seeded with the SMA of the first ``period`` prices.

    ``ema[i] = price[i] * k + ema[i - 1] * (1 - k)`` with ``k = 2 / (period + 1)``.

    Returns:
        List aligned with ``prices``; None for the first ``period - 1`` bars
    """
    result: List[Optional[float]] = [None] * len(prices)
    if period < 1 or len(prices) < period:
        return result

    k = 2 / (period + 1)
    ema = sum(prices[:period]) / period
    result[period - 1] = ema

    for i in range(period, len(prices)):
        ema = prices[i] * k + ema * (1 - k)
        result[i] = ema

    return result


class EMACalculator(IndicatorCalculator):
    indicator_type = "EMA"

    def required_length(self, config: IndicatorConfig) -> int:
        return self._period(config)

    def compute(self, candles: NormalizedCandles, config: IndicatorConfig) -> List[Optional[float]]:
        return calculate_ema(self._prices(candles, config), self._period(config))

    def get_key(self, config: IndicatorConfig) -> str:
        key = f"EMA_{self._period(config)}"
        if config.source.value != "close":
            key = f"{key}_{config.source.value}"
        return key
