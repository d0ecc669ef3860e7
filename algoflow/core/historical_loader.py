# algoflow/core/historical_loader.py
"""
Historical candle loading for backtests.
"""

import logging
from pathlib import Path
from typing import Any, Optional, Union

import pandas as pd

from ..brokers.router import BrokerRouter, broker_router
from ..brokers.types import BrokerAction, BrokerName
from ..models.market_data import CandleRequest, ExchangeSegment, NormalizedCandles
from ..utils.time_helpers import ms_to_datetime
from .errors import BacktestError


logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ('timestamp', 'open', 'high', 'low', 'close', 'volume')


def load_historical_candles(
    symbol: str,
    interval: str,
    start: int,
    end: int,
    broker: Union[BrokerName, str] = BrokerName.DHAN,
    security_id: Optional[str] = None,
    exchange_segment: Optional[str] = None,
    creds: Any = None,
    router: Optional[BrokerRouter] = None,
) -> NormalizedCandles:
    """
    Load candles for a backtest through the broker router.

    Args:
        symbol: Trading symbol
        interval: Candle interval
        start: Range start in epoch milliseconds
        end: Range end in epoch milliseconds
        broker: Broker to load from
        security_id: Broker security ID, defaults to the symbol
        exchange_segment: Exchange segment, defaults to NSE_EQ
        creds: Broker credentials
        router: Router to use instead of the default one

    Returns:
        NormalizedCandles for the range
    """
    logger.info(
        f"Loading historical candles: {symbol} ({interval}) from "
        f"{ms_to_datetime(start).isoformat()} to {ms_to_datetime(end).isoformat()}"
    )

    request = CandleRequest(
        symbol=symbol,
        security_id=security_id or symbol,
        exchange_segment=exchange_segment or ExchangeSegment.NSE_EQ.value,
        interval=interval,
        from_timestamp=start,
        to_timestamp=end,
    )

    candles = broker_router(broker, BrokerAction.MARKET_DATA, request, creds, router=router)
    logger.info(f"Loaded {len(candles)} candles")
    return candles


def slice_candles(candles: NormalizedCandles, end_index: int) -> NormalizedCandles:
    """
    Candles up to and including ``end_index``.

    Only past candles are visible at each replay step.
    """
    idx = min(end_index + 1, len(candles))
    return NormalizedCandles(
        open=candles.open[:idx],
        high=candles.high[:idx],
        low=candles.low[:idx],
        close=candles.close[:idx],
        volume=candles.volume[:idx],
        timestamps=candles.timestamps[:idx],
    )


def load_candles_from_csv(file_path: Union[str, Path]) -> NormalizedCandles:
    """
    Load candles from a CSV file.

    The file needs ``timestamp, open, high, low, close, volume`` columns.
    Timestamps may be epoch milliseconds or ISO-8601 strings; naive
    datetimes are taken as exchange time.

    Raises:
        BacktestError: If the file is missing or lacks required columns
    """
    path = Path(file_path)
    if not path.exists():
        raise BacktestError(f"Candle file not found: {path}", "FILE_NOT_FOUND")

    frame = pd.read_csv(path)
    frame.columns = [str(c).strip().lower() for c in frame.columns]

    missing = [c for c in REQUIRED_COLUMNS if c not in frame.columns]
    if missing:
        raise BacktestError(f"Candle file {path} is missing columns: {', '.join(missing)}", "INVALID_CSV")

    if pd.api.types.is_numeric_dtype(frame['timestamp']):
        frame['timestamp'] = pd.to_datetime(frame['timestamp'], unit='ms', utc=True)
    else:
        stamps = pd.to_datetime(frame['timestamp'])
        if stamps.dt.tz is None:
            stamps = stamps.dt.tz_localize('Asia/Kolkata')
        frame['timestamp'] = stamps

    frame = frame.dropna(subset=list(REQUIRED_COLUMNS))
    candles = NormalizedCandles.from_dataframe(frame)
    logger.info(f"Loaded {len(candles)} candles from {path}")
    return candles
