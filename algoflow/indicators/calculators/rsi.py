"""
Relative Strength Index with Wilder's smoothing.
"""

from typing import List, Optional, Sequence

from ...models.market_data import NormalizedCandles
from ..types import IndicatorConfig
from .base import IndicatorCalculator


DEFAULT_RSI_PERIOD = 14


def _rsi(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100 - 100 / (1 + rs)


def calculate_rsi(prices: Sequence[float], period: int) -> List[Optional[float]]:
    """
    RSI over ``prices``.

    The first value sits at index ``period`` and is seeded from the plain
    average of the first ``period`` gains and losses; later values use
    ``avg = (avg * (period - 1) + new) / period``.
    """
    result: List[Optional[float]] = [None] * len(prices)
    if period < 1 or len(prices) < period + 1:
        return result

    gains = []
    losses = []
    for i in range(1, len(prices)):
        change = prices[i] - prices[i - 1]
        gains.append(change if change > 0 else 0.0)
        losses.append(-change if change < 0 else 0.0)

    avg_gain = sum(gains[:period]) / period
    avg_loss = sum(losses[:period]) / period
    result[period] = _rsi(avg_gain, avg_loss)

    for i in range(period, len(gains)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period
        result[i + 1] = _rsi(avg_gain, avg_loss)

    return result


class RSICalculator(IndicatorCalculator):
    indicator_type = "RSI"

    def required_length(self, config: IndicatorConfig) -> int:
        return self._period(config, DEFAULT_RSI_PERIOD) + 1

    def compute(self, candles: NormalizedCandles, config: IndicatorConfig) -> List[Optional[float]]:
        return calculate_rsi(candles.close, self._period(config, DEFAULT_RSI_PERIOD))

    def get_key(self, config: IndicatorConfig) -> str:
        return f"RSI_{self._period(config, DEFAULT_RSI_PERIOD)}"
