"""
Base indicator calculator interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ...models.market_data import NormalizedCandles
from ..errors import IndicatorError, InsufficientDataError
from ..types import IndicatorConfig, IndicatorSeries, IndicatorValue


class IndicatorCalculator(ABC):
    """
    Interface every registered indicator implements.

    Subclasses provide the pure series computation; the base class
    enforces the minimum series length and picks the latest value.
    """

    indicator_type: str = ""

    @abstractmethod
    def required_length(self, config: IndicatorConfig) -> int:
        """Minimum number of candles needed for one valid value."""

    @abstractmethod
    def compute(self, candles: NormalizedCandles, config: IndicatorConfig) -> IndicatorSeries:
        """Full aligned series; None before the warm-up window ends."""

    @abstractmethod
    def get_key(self, config: IndicatorConfig) -> str:
        """Result key, e.g. ``SMA_20``."""

    def has_value(self, value: Optional[IndicatorValue]) -> bool:
        return value is not None

    def calculate(self, candles: NormalizedCandles, config: IndicatorConfig) -> IndicatorSeries:
        """
        Calculate the full series.

        Raises:
            InsufficientDataError: If the series is shorter than required
        """
        required = self.required_length(config)
        available = len(candles.close)
        if available < required:
            raise InsufficientDataError(self.indicator_type, required, available)
        return self.compute(candles, config)

    def get_latest(self, candles: NormalizedCandles, config: IndicatorConfig) -> IndicatorValue:
        """Latest computed value of the series."""
        values = self.calculate(candles, config)
        for value in reversed(values):
            if self.has_value(value):
                return value
        required = self.required_length(config)
        raise InsufficientDataError(self.indicator_type, required, len(candles.close))

    def _period(self, config: IndicatorConfig, default: Optional[int] = None) -> int:
        period = config.period if config.period is not None else default
        if period is None:
            raise IndicatorError(
                f"{self.indicator_type} requires a period",
                self.indicator_type,
                "INVALID_CONFIG",
            )
        return period

    def _prices(self, candles: NormalizedCandles, config: IndicatorConfig) -> List[float]:
        return candles.series(config.source.value)
