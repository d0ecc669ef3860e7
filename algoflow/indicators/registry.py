"""
Registry of indicator calculators.

A registry is an ordinary value: build one with ``create_default_registry``
at startup and pass it to ``calculate_indicators``. New indicator types are
added with ``register_calculator`` without touching callers.
"""

import logging
from typing import Dict, List, Optional

from .calculators import (
    EMACalculator,
    IndicatorCalculator,
    MACDCalculator,
    RSICalculator,
    SMACalculator,
)


logger = logging.getLogger(__name__)


class IndicatorRegistry:
    """
    Name to calculator mapping.

    Usage:
        registry = create_default_registry()
        registry.register_calculator('VWAP', VWAPCalculator())
        calculator = registry.get_calculator('sma')
    """

    def __init__(self):
        self._calculators: Dict[str, IndicatorCalculator] = {}

    @staticmethod
    def _normalize(indicator_type: str) -> str:
        return indicator_type.strip().upper()

    def register_calculator(self, indicator_type: str, calculator: IndicatorCalculator) -> None:
        """
        Register a calculator for an indicator type.

        Args:
            indicator_type: Type name, matched case-insensitively
            calculator: Calculator instance
        """
        name = self._normalize(indicator_type)
        if name in self._calculators:
            logger.warning(f"Indicator '{name}' already registered. Overwriting.")
        self._calculators[name] = calculator
        logger.debug(f"Indicator '{name}' registered with {calculator.__class__.__name__}")

    def unregister(self, indicator_type: str) -> bool:
        """Remove a calculator; returns False if it was not registered."""
        return self._calculators.pop(self._normalize(indicator_type), None) is not None

    def get_calculator(self, indicator_type: str) -> Optional[IndicatorCalculator]:
        return self._calculators.get(self._normalize(indicator_type))

    def is_registered(self, indicator_type: str) -> bool:
        return self._normalize(indicator_type) in self._calculators

    def get_registered_types(self) -> List[str]:
        return list(self._calculators.keys())

    def __contains__(self, indicator_type: str) -> bool:
        return self.is_registered(indicator_type)

    def __len__(self) -> int:
        return len(self._calculators)


def create_default_registry() -> IndicatorRegistry:
    """Registry preloaded with SMA, EMA, RSI and MACD."""
    registry = IndicatorRegistry()
    registry.register_calculator("SMA", SMACalculator())
    registry.register_calculator("EMA", EMACalculator())
    registry.register_calculator("RSI", RSICalculator())
    registry.register_calculator("MACD", MACDCalculator())
    return registry
