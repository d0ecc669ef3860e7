# algoflow/models/orders.py
"""
Broker-agnostic order models.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class OrderSide(str, Enum):
    """Order side."""
    BUY = "BUY"
    SELL = "SELL"


class OrderType(str, Enum):
    """Order type."""
    MARKET = "MARKET"
    LIMIT = "LIMIT"


class ProductType(str, Enum):
    """Product type in Dhan notation; adapters map to their own names."""
    CNC = "CNC"
    INTRADAY = "INTRADAY"
    MARGIN = "MARGIN"
    MTF = "MTF"
    BO = "BO"


class OrderStatus(str, Enum):
    """Order status values produced by this package."""
    PENDING = "PENDING"
    SIMULATED = "SIMULATED"


class OrderRequest(BaseModel):
    """Order to place with a broker."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    symbol: str = Field(default="", description="Trading symbol")
    security_id: Optional[str] = Field(None, description="Broker security identifier")
    exchange_segment: Optional[str] = Field(None, description="Exchange segment (e.g. NSE_EQ)")
    side: OrderSide = Field(..., description="Order side (BUY/SELL)")
    quantity: float = Field(..., description="Order quantity")
    order_type: str = Field(default=OrderType.MARKET.value, description="Order type (MARKET/LIMIT)")
    price: Optional[float] = Field(None, description="Limit price")
    trigger_price: Optional[float] = Field(None, description="Stop trigger price")
    product_type: Optional[str] = Field(None, description="Product type (CNC, INTRADAY, ...)")
    dry_run: bool = Field(default=False, description="Simulate without contacting the broker")

    @property
    def is_limit(self) -> bool:
        return self.order_type == OrderType.LIMIT.value

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return self.model_dump(by_alias=True, exclude_none=True, mode='json')


class OrderResult(BaseModel):
    """Normalized result of an order placement."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    order_id: str = Field(..., description="Broker or simulated order ID")
    status: str = Field(..., description="Order status as reported by the broker")
    filled_price: Optional[float] = Field(None, description="Fill price when known")
    raw: Dict[str, Any] = Field(default_factory=dict, description="Broker-specific payload")

    @property
    def is_simulated(self) -> bool:
        return self.status == OrderStatus.SIMULATED.value

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return self.model_dump(by_alias=True, mode='json')
