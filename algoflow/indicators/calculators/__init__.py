"""
Built-in indicator calculators.
"""

from .base import IndicatorCalculator
from .ema import EMACalculator, calculate_ema
from .macd import MACDCalculator, calculate_macd
from .rsi import RSICalculator, calculate_rsi
from .sma import SMACalculator, calculate_sma

__all__ = [
    "IndicatorCalculator",
    "EMACalculator",
    "MACDCalculator",
    "RSICalculator",
    "SMACalculator",
    "calculate_ema",
    "calculate_macd",
    "calculate_rsi",
    "calculate_sma",
]
