"""
Indicator configuration and value types.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class PriceSource(str, Enum):
    """Candle field an indicator reads."""
    OPEN = "open"
    HIGH = "high"
    LOW = "low"
    CLOSE = "close"


class IndicatorConfig(BaseModel):
    """
    Parameters for one indicator.

    Accepts camelCase keys (``fastPeriod``) as produced by workflow JSON.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    type: str = Field(..., description="Indicator type (SMA, EMA, RSI, MACD)")
    period: Optional[int] = Field(None, ge=1, description="Window length")
    source: PriceSource = Field(default=PriceSource.CLOSE, description="Price field to read")
    fast_period: Optional[int] = Field(None, ge=1, description="MACD fast EMA period")
    slow_period: Optional[int] = Field(None, ge=1, description="MACD slow EMA period")
    signal_period: Optional[int] = Field(None, ge=1, description="MACD signal EMA period")

    @field_validator('type')
    @classmethod
    def normalize_type(cls, v: str) -> str:
        return v.strip().upper()


@dataclass(frozen=True)
class MACDValue:
    """MACD output at one bar; ``signal`` and ``histogram`` lag ``line``."""
    line: Optional[float]
    signal: Optional[float]
    histogram: Optional[float]

    def to_dict(self) -> Dict[str, Optional[float]]:
        return asdict(self)


# None marks bars inside an indicator's warm-up window
IndicatorValue = Union[float, MACDValue]
IndicatorSeries = List[Optional[IndicatorValue]]
IndicatorResults = Dict[str, IndicatorValue]
