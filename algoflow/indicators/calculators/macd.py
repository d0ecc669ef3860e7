"""
Moving Average Convergence Divergence.
"""

from typing import List, Optional, Sequence, Tuple

from ...models.market_data import NormalizedCandles
from ..errors import IndicatorError
from ..types import IndicatorConfig, MACDValue
from .base import IndicatorCalculator
from .ema import calculate_ema


DEFAULT_FAST_PERIOD = 12
DEFAULT_SLOW_PERIOD = 26
DEFAULT_SIGNAL_PERIOD = 9


def calculate_macd(
    prices: Sequence[float],
    fast_period: int = DEFAULT_FAST_PERIOD,
    slow_period: int = DEFAULT_SLOW_PERIOD,
    signal_period: int = DEFAULT_SIGNAL_PERIOD,
) -> List[Optional[MACDValue]]:
    """
    MACD line, signal and histogram.

    The signal EMA runs only over the suffix of the line where both EMAs
    exist, so it starts ``signal_period - 1`` bars after the line.

    Returns:
        List aligned with ``prices``; None before the slow EMA exists,
        MACDValue with ``signal=None`` while the signal warms up
    """
    result: List[Optional[MACDValue]] = [None] * len(prices)
    if len(prices) < slow_period + signal_period - 1:
        return result

    fast = calculate_ema(prices, fast_period)
    slow = calculate_ema(prices, slow_period)

    start = slow_period - 1
    line = [fast[i] - slow[i] for i in range(start, len(prices))]
    signal = calculate_ema(line, signal_period)

    for offset, macd in enumerate(line):
        sig = signal[offset]
        histogram = macd - sig if sig is not None else None
        result[start + offset] = MACDValue(line=macd, signal=sig, histogram=histogram)

    return result


class MACDCalculator(IndicatorCalculator):
    indicator_type = "MACD"

    def _periods(self, config: IndicatorConfig) -> Tuple[int, int, int]:
        fast = config.fast_period or DEFAULT_FAST_PERIOD
        slow = config.slow_period or DEFAULT_SLOW_PERIOD
        signal = config.signal_period or DEFAULT_SIGNAL_PERIOD
        if fast >= slow:
            raise IndicatorError(
                f"MACD fast period ({fast}) must be shorter than slow period ({slow})",
                self.indicator_type,
                "INVALID_CONFIG",
            )
        return fast, slow, signal

    def required_length(self, config: IndicatorConfig) -> int:
        _, slow, signal = self._periods(config)
        return slow + signal - 1

    def compute(self, candles: NormalizedCandles, config: IndicatorConfig) -> List[Optional[MACDValue]]:
        fast, slow, signal = self._periods(config)
        return calculate_macd(candles.close, fast, slow, signal)

    def has_value(self, value: Optional[MACDValue]) -> bool:
        return value is not None and value.line is not None

    def get_key(self, config: IndicatorConfig) -> str:
        periods = self._periods(config)
        if periods == (DEFAULT_FAST_PERIOD, DEFAULT_SLOW_PERIOD, DEFAULT_SIGNAL_PERIOD):
            return "MACD"
        return "MACD_{}_{}_{}".format(*periods)
