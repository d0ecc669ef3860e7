"""
Indicator calculation entry points.
"""

import logging
from typing import Any, Dict, Iterable, Mapping, Union

from pydantic import ValidationError

from ..models.market_data import NormalizedCandles
from .calculators import IndicatorCalculator
from .errors import IndicatorError
from .registry import IndicatorRegistry
from .types import IndicatorConfig, IndicatorResults, IndicatorSeries


logger = logging.getLogger(__name__)

CandleInput = Union[NormalizedCandles, Mapping[str, Any]]
ConfigInput = Union[IndicatorConfig, Mapping[str, Any]]

PRICE_FIELDS = ("open", "high", "low", "close", "volume")


def _coerce_candles(candles: CandleInput) -> NormalizedCandles:
    if isinstance(candles, NormalizedCandles):
        result = candles
    else:
        try:
            result = NormalizedCandles.model_validate(candles)
        except ValidationError as e:
            raise IndicatorError(
                f"Invalid candle data: all fields must be numeric arrays ({e.error_count()} errors)",
                "validation",
                "INVALID_DATA",
            ) from e

    if not result.is_aligned():
        raise IndicatorError(
            "Invalid candle data: all arrays must have the same length",
            "validation",
            "MISMATCHED_LENGTHS",
        )
    if result.is_empty:
        raise IndicatorError(
            "Invalid candle data: arrays cannot be empty",
            "validation",
            "EMPTY_DATA",
        )
    return result


def _coerce_config(config: ConfigInput) -> IndicatorConfig:
    if isinstance(config, IndicatorConfig):
        return config
    try:
        return IndicatorConfig.model_validate(config)
    except ValidationError as e:
        indicator_type = str(config.get("type", "unknown")) if isinstance(config, Mapping) else "unknown"
        raise IndicatorError(
            f"Invalid indicator config: {e.errors()[0]['msg']}",
            indicator_type,
            "INVALID_CONFIG",
        ) from e


def _resolve(registry: IndicatorRegistry, config: IndicatorConfig) -> IndicatorCalculator:
    calculator = registry.get_calculator(config.type)
    if calculator is None:
        raise IndicatorError(
            f"Unknown indicator type: {config.type}",
            config.type,
            "UNKNOWN_INDICATOR",
        )
    return calculator


def calculate_indicators(
    candles: CandleInput,
    configs: Iterable[ConfigInput],
    registry: IndicatorRegistry,
) -> IndicatorResults:
    """
    Calculate the latest value of several indicators.

    Args:
        candles: OHLCV series
        configs: Indicator configurations
        registry: Calculators to resolve indicator types against

    Returns:
        Mapping such as ``{'SMA_20': 150.5, 'RSI_14': 65.2, 'MACD': MACDValue(...)}``

    Raises:
        IndicatorError: For invalid data, unknown types or failed calculations
        InsufficientDataError: When a series is shorter than an indicator needs
    """
    data = _coerce_candles(candles)
    results: IndicatorResults = {}

    for raw_config in configs:
        config = _coerce_config(raw_config)
        calculator = _resolve(registry, config)

        try:
            key = calculator.get_key(config)
            results[key] = calculator.get_latest(data, config)
        except IndicatorError:
            raise
        except Exception as e:
            raise IndicatorError(
                f"Failed to calculate {config.type}: {e}",
                config.type,
                "CALCULATION_ERROR",
            ) from e

    return results


def calculate_indicator_series(
    candles: CandleInput,
    config: ConfigInput,
    registry: IndicatorRegistry,
) -> IndicatorSeries:
    """Full aligned series for one indicator."""
    data = _coerce_candles(candles)
    parsed = _coerce_config(config)
    calculator = _resolve(registry, parsed)
    return calculator.calculate(data, parsed)


def latest_prices(candles: CandleInput) -> Dict[str, float]:
    """Latest open/high/low/close/volume, for use as condition identifiers."""
    data = _coerce_candles(candles)
    return {field: getattr(data, field)[-1] for field in PRICE_FIELDS}


def indicator_key(config: ConfigInput, registry: IndicatorRegistry) -> str:
    """Result key an indicator config will produce."""
    parsed = _coerce_config(config)
    return _resolve(registry, parsed).get_key(parsed)
