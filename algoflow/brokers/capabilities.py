"""
Static per-broker capability table.
"""

from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..models.market_data import CandleInterval
from .types import BrokerName


class RateLimit(BaseModel):
    model_config = ConfigDict(frozen=True)

    per_second: Optional[int] = None
    per_minute: Optional[int] = None


class BrokerCapabilities(BaseModel):
    """What a broker accepts and which request fields it insists on."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Display name")
    supported_order_types: Tuple[str, ...] = Field(..., description="Accepted order types")
    supported_products: Tuple[str, ...] = Field(..., description="Accepted product types")
    native_intervals: Dict[str, str] = Field(..., description="Standard interval to broker resolution")
    requires_security_id: bool = Field(..., description="Requests must carry a securityId")
    requires_exchange_segment: bool = Field(..., description="Requests must carry an exchangeSegment")
    max_order_size: Optional[float] = Field(None, description="Largest accepted order quantity")
    rate_limit: RateLimit = Field(default_factory=RateLimit)


BROKER_CAPABILITIES: Dict[BrokerName, BrokerCapabilities] = {
    BrokerName.DHAN: BrokerCapabilities(
        name="Dhan",
        supported_order_types=("MARKET", "LIMIT"),
        supported_products=("CNC", "INTRADAY", "MARGIN", "MTF", "BO"),
        native_intervals={"1m": "1", "5m": "5", "15m": "15", "30m": "30", "1h": "60", "1d": "D"},
        requires_security_id=True,
        requires_exchange_segment=True,
        rate_limit=RateLimit(per_second=10, per_minute=200),
    ),
    BrokerName.FYERS: BrokerCapabilities(
        name="Fyers",
        supported_order_types=("MARKET", "LIMIT"),
        supported_products=("INTRADAY", "CNC", "MARGIN"),
        native_intervals={"1m": "1", "5m": "5", "15m": "15", "30m": "30", "1h": "60", "1d": "D"},
        requires_security_id=False,
        requires_exchange_segment=False,
        rate_limit=RateLimit(per_second=10, per_minute=300),
    ),
    BrokerName.ANGEL: BrokerCapabilities(
        name="Angel One",
        supported_order_types=("MARKET", "LIMIT"),
        supported_products=("INTRADAY", "DELIVERY", "MARGIN"),
        native_intervals={
            "1m": "ONE_MINUTE",
            "5m": "FIVE_MINUTE",
            "15m": "FIFTEEN_MINUTE",
            "30m": "THIRTY_MINUTE",
            "1h": "ONE_HOUR",
            "1d": "ONE_DAY",
        },
        requires_security_id=False,
        requires_exchange_segment=False,
        rate_limit=RateLimit(per_second=5, per_minute=100),
    ),
}

STANDARD_INTERVALS = tuple(interval.value for interval in CandleInterval)


def get_capabilities(broker: "BrokerName | str") -> BrokerCapabilities:
    """Capabilities for a broker; raises BrokerValidationError for unknown names."""
    return BROKER_CAPABILITIES[BrokerName.parse(broker)]


def get_broker_interval(interval: str, broker: "BrokerName | str") -> Optional[str]:
    """Broker-native resolution for a standard interval, or None."""
    return get_capabilities(broker).native_intervals.get(interval)


def is_interval_supported(interval: str, broker: "BrokerName | str") -> bool:
    return get_broker_interval(interval, broker) is not None
