"""
Technical indicator library.
"""

from .calculate import (
    calculate_indicator_series,
    calculate_indicators,
    indicator_key,
    latest_prices,
)
from .calculators import (
    EMACalculator,
    IndicatorCalculator,
    MACDCalculator,
    RSICalculator,
    SMACalculator,
    calculate_ema,
    calculate_macd,
    calculate_rsi,
    calculate_sma,
)
from .errors import IndicatorError, InsufficientDataError
from .registry import IndicatorRegistry, create_default_registry
from .types import IndicatorConfig, IndicatorResults, IndicatorValue, MACDValue, PriceSource

__all__ = [
    "calculate_indicator_series",
    "calculate_indicators",
    "indicator_key",
    "latest_prices",
    "EMACalculator",
    "IndicatorCalculator",
    "MACDCalculator",
    "RSICalculator",
    "SMACalculator",
    "calculate_ema",
    "calculate_macd",
    "calculate_rsi",
    "calculate_sma",
    "IndicatorError",
    "InsufficientDataError",
    "IndicatorRegistry",
    "create_default_registry",
    "IndicatorConfig",
    "IndicatorResults",
    "IndicatorValue",
    "MACDValue",
    "PriceSource",
]
