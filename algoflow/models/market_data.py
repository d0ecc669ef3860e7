# algoflow/models/market_data.py
"""
Market data models: candle requests and broker-agnostic OHLCV series.
"""

from enum import Enum
from typing import Dict, List, Optional, Any

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CandleInterval(str, Enum):
    """Candle intervals accepted by every broker adapter."""
    ONE_MINUTE = "1m"
    FIVE_MINUTES = "5m"
    FIFTEEN_MINUTES = "15m"
    THIRTY_MINUTES = "30m"
    ONE_HOUR = "1h"
    ONE_DAY = "1d"


INTERVAL_MINUTES: Dict[str, int] = {
    "1m": 1,
    "5m": 5,
    "15m": 15,
    "30m": 30,
    "1h": 60,
    "1d": 1440,
}


class ExchangeSegment(str, Enum):
    """Exchange segments in Dhan notation; other brokers map from these."""
    NSE_EQ = "NSE_EQ"
    BSE_EQ = "BSE_EQ"
    NSE_FNO = "NSE_FNO"
    BSE_FNO = "BSE_FNO"
    MCX_COMM = "MCX_COMM"
    NSE_CURRENCY = "NSE_CURRENCY"
    BSE_CURRENCY = "BSE_CURRENCY"


class CandleRequest(BaseModel):
    """Request for historical candles from a broker."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    symbol: str = Field(default="", description="Trading symbol")
    security_id: Optional[str] = Field(None, description="Broker security identifier")
    exchange_segment: Optional[str] = Field(None, description="Exchange segment (e.g. NSE_EQ)")
    interval: str = Field(default="1d", description="Candle interval (1m, 5m, 15m, 30m, 1h, 1d)")
    from_timestamp: Optional[int] = Field(None, description="Range start in epoch milliseconds")
    to_timestamp: Optional[int] = Field(None, description="Range end in epoch milliseconds")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return self.model_dump(by_alias=True, exclude_none=True)


class NormalizedCandles(BaseModel):
    """
    Broker-agnostic OHLCV series.

    All six lists are parallel, share one length and are ordered by
    ascending timestamp (epoch milliseconds).
    """
    model_config = ConfigDict(frozen=True)

    open: List[float] = Field(default_factory=list, description="Opening prices")
    high: List[float] = Field(default_factory=list, description="High prices")
    low: List[float] = Field(default_factory=list, description="Low prices")
    close: List[float] = Field(default_factory=list, description="Closing prices")
    volume: List[float] = Field(default_factory=list, description="Traded volume")
    timestamps: List[int] = Field(default_factory=list, description="Epoch milliseconds")

    def __len__(self) -> int:
        return len(self.close)

    @property
    def is_empty(self) -> bool:
        return len(self.close) == 0

    def is_aligned(self) -> bool:
        """True when every field has the same length."""
        length = len(self.close)
        return all(
            len(values) == length
            for values in (self.open, self.high, self.low, self.volume, self.timestamps)
        )

    def series(self, source: str) -> List[float]:
        """Return the price list for a source name (open/high/low/close/volume)."""
        if source not in ("open", "high", "low", "close", "volume"):
            raise ValueError(f"Unknown price source: {source}")
        return getattr(self, source)

    def to_dict(self) -> Dict[str, List[Any]]:
        """Convert to dictionary."""
        return self.model_dump()

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to a DataFrame indexed by UTC timestamp."""
        frame = pd.DataFrame(
            {
                'open': self.open,
                'high': self.high,
                'low': self.low,
                'close': self.close,
                'volume': self.volume,
            },
            index=pd.to_datetime(self.timestamps, unit='ms', utc=True),
        )
        frame.index.name = 'timestamp'
        return frame

    @classmethod
    def from_dataframe(cls, frame: pd.DataFrame) -> 'NormalizedCandles':
        """
        Build candles from a DataFrame.

        The timestamp is taken from a ``timestamp`` column when present,
        otherwise from a datetime index.
        """
        if 'timestamp' in frame.columns:
            stamps = pd.to_datetime(frame['timestamp'], utc=True)
        else:
            stamps = pd.to_datetime(frame.index, utc=True)
        epoch = pd.Timestamp("1970-01-01", tz="UTC")
        millis = (stamps - epoch) // pd.Timedelta(milliseconds=1)
        frame = frame.assign(_ts=pd.Series(millis).to_numpy())
        frame = frame.sort_values('_ts')
        return cls(
            open=frame['open'].astype(float).tolist(),
            high=frame['high'].astype(float).tolist(),
            low=frame['low'].astype(float).tolist(),
            close=frame['close'].astype(float).tolist(),
            volume=frame['volume'].astype(float).tolist(),
            timestamps=[int(ts) for ts in frame['_ts']],
        )
