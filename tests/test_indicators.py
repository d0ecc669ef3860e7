import pytest

from algoflow.indicators import (
    IndicatorError,
    InsufficientDataError,
    MACDValue,
    calculate_ema,
    calculate_indicator_series,
    calculate_indicators,
    calculate_macd,
    calculate_rsi,
    calculate_sma,
    create_default_registry,
    indicator_key,
    latest_prices,
)
from conftest import make_candles


@pytest.fixture()
def registry():
    return create_default_registry()


def test_sma_window_mean():
    assert calculate_sma([1, 2, 3, 4, 5], 3) == [None, None, 2.0, 3.0, 4.0]


def test_sma_short_series_is_all_none():
    assert calculate_sma([1, 2], 3) == [None, None]


def test_ema_seeded_with_sma():
    assert calculate_ema([1, 2, 3, 4, 5], 3) == [None, None, 2.0, 3.0, 4.0]


def test_ema_weights_recent_prices():
    values = calculate_ema([10, 10, 10, 20], 3)

    assert values[2] == 10.0
    assert values[3] == pytest.approx(15.0)


def test_rsi_all_gains_is_100():
    values = calculate_rsi([float(i) for i in range(1, 20)], 14)

    assert values[:14] == [None] * 14
    assert values[14] == 100.0
    assert values[-1] == 100.0


def test_rsi_balanced_moves_is_50():
    assert calculate_rsi([1.0, 2.0, 1.0], 2)[2] == pytest.approx(50.0)


def test_macd_flat_prices_are_zero():
    values = calculate_macd([100.0] * 40)

    assert values[24] is None
    assert values[25].signal is None
    last = values[-1]
    assert last.line == pytest.approx(0.0)
    assert last.signal == pytest.approx(0.0)
    assert last.histogram == pytest.approx(0.0)


def test_macd_signal_starts_after_warmup():
    values = calculate_macd([float(i) for i in range(40)])

    assert values[33].signal is not None
    assert values[32].signal is None
    assert values[33].histogram == pytest.approx(values[33].line - values[33].signal)


def test_calculate_indicators_keys(registry, rising_candles):
    results = calculate_indicators(
        rising_candles,
        [
            {"type": "sma", "period": 5},
            {"type": "SMA", "period": 5, "source": "high"},
            {"type": "EMA", "period": 3},
            {"type": "RSI"},
            {"type": "MACD"},
            {"type": "MACD", "fastPeriod": 5, "slowPeriod": 10, "signalPeriod": 3},
        ],
        registry,
    )

    assert set(results) == {"SMA_5", "SMA_5_high", "EMA_3", "RSI_14", "MACD", "MACD_5_10_3"}
    assert results["SMA_5"] == pytest.approx(137.0)
    assert results["SMA_5_high"] == pytest.approx(138.0)
    assert results["RSI_14"] == 100.0
    assert isinstance(results["MACD"], MACDValue)


def test_calculate_indicators_accepts_candle_mapping(registry):
    candles = make_candles([1.0, 2.0, 3.0]).to_dict()

    assert calculate_indicators(candles, [{"type": "SMA", "period": 3}], registry) == {"SMA_3": 2.0}


def test_calculate_indicators_insufficient_data(registry):
    with pytest.raises(InsufficientDataError) as exc_info:
        calculate_indicators(make_candles([1.0] * 33), [{"type": "MACD"}], registry)

    assert exc_info.value.required == 34
    assert exc_info.value.available == 33
    assert exc_info.value.code == "INSUFFICIENT_DATA"


@pytest.mark.parametrize(
    "config, code",
    [
        ({"type": "VWAP", "period": 5}, "UNKNOWN_INDICATOR"),
        ({"type": "SMA"}, "INVALID_CONFIG"),
        ({"type": "SMA", "period": 0}, "INVALID_CONFIG"),
        ({"type": "MACD", "fastPeriod": 26, "slowPeriod": 12}, "INVALID_CONFIG"),
    ],
)
def test_calculate_indicators_config_errors(registry, rising_candles, config, code):
    with pytest.raises(IndicatorError) as exc_info:
        calculate_indicators(rising_candles, [config], registry)

    assert exc_info.value.code == code


def test_calculate_indicators_rejects_misaligned_candles(registry):
    candles = {"open": [1, 2], "high": [1, 2], "low": [1, 2], "close": [1, 2, 3], "volume": [1, 1], "timestamps": [1, 2]}

    with pytest.raises(IndicatorError) as exc_info:
        calculate_indicators(candles, [{"type": "SMA", "period": 2}], registry)

    assert exc_info.value.code == "MISMATCHED_LENGTHS"


def test_calculate_indicators_rejects_empty_candles(registry):
    with pytest.raises(IndicatorError) as exc_info:
        calculate_indicators(make_candles([]), [{"type": "SMA", "period": 2}], registry)

    assert exc_info.value.code == "EMPTY_DATA"


def test_indicator_series_is_aligned(registry, rising_candles):
    series = calculate_indicator_series(rising_candles, {"type": "SMA", "period": 10}, registry)

    assert len(series) == len(rising_candles)
    assert series[8] is None
    assert series[9] == pytest.approx(104.5)


def test_latest_prices(rising_candles):
    assert latest_prices(rising_candles) == {
        "open": 139.0,
        "high": 140.0,
        "low": 138.0,
        "close": 139.0,
        "volume": 1000.0,
    }


@pytest.mark.parametrize("config, expected", [
    ({"type": "sma", "period": 20}, "SMA_20"),
    ({"type": "RSI"}, "RSI_14"),
    ({"type": "MACD"}, "MACD"),
    ({"type": "MACD", "fastPeriod": 5, "slowPeriod": 35, "signalPeriod": 5}, "MACD_5_35_5"),
])
def test_indicator_key(registry, config, expected):
    assert indicator_key(config, registry) == expected
