"""
Pre-flight request validation.

Validators are pure and run before any network call. Every failure raises
BrokerValidationError with a message the caller can act on.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..models.market_data import CandleRequest
from ..models.orders import OrderRequest, OrderType
from .capabilities import BrokerCapabilities, STANDARD_INTERVALS, get_capabilities
from .errors import BrokerValidationError
from .types import BrokerName


logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Non-fatal findings from a successful validation."""
    warnings: List[str] = field(default_factory=list)


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def validate_candle_request(
    request: CandleRequest,
    broker: "BrokerName | str",
    capabilities: Optional[BrokerCapabilities] = None,
) -> ValidationResult:
    """
    Validate a candle request for a broker.

    Checks, in order: known broker, interval whitelist, securityId and
    exchangeSegment where the broker requires them, non-empty symbol,
    Fyers symbol format (warning only), from <= to.

    Raises:
        BrokerValidationError: On the first failing check
    """
    name = BrokerName.parse(broker)
    caps = capabilities or get_capabilities(name)
    result = ValidationResult()

    if request.interval not in caps.native_intervals:
        raise BrokerValidationError(
            f"Interval '{request.interval}' not supported for {name.value}. "
            f"Use one of: {', '.join(STANDARD_INTERVALS)}"
        )

    if caps.requires_security_id and _blank(request.security_id):
        raise BrokerValidationError(
            f"securityId is required for {name.value} candle data. "
            "Please provide the broker-specific security identifier."
        )

    if caps.requires_exchange_segment and _blank(request.exchange_segment):
        raise BrokerValidationError(
            f"exchangeSegment is required for {name.value} candle data. "
            "Please specify the exchange (e.g., NSE_EQ, BSE_EQ)."
        )

    if _blank(request.symbol):
        raise BrokerValidationError("Symbol is required for candle data.")

    if name is BrokerName.FYERS and ":" not in request.symbol and "-" not in request.symbol:
        warning = (
            f"Fyers symbol '{request.symbol}' may need format conversion. "
            "Expected format: NSE:SYMBOL-EQ"
        )
        logger.warning(warning)
        result.warnings.append(warning)

    if (
        request.from_timestamp is not None
        and request.to_timestamp is not None
        and request.from_timestamp > request.to_timestamp
    ):
        raise BrokerValidationError("fromTimestamp cannot be after toTimestamp.")

    return result


def validate_order(
    request: OrderRequest,
    broker: "BrokerName | str",
    capabilities: Optional[BrokerCapabilities] = None,
) -> ValidationResult:
    """
    Validate an order for a broker.

    Checks, in order: known broker, order type, product type, securityId,
    exchangeSegment, maximum order size, LIMIT price, positive quantity,
    non-empty symbol.

    Raises:
        BrokerValidationError: On the first failing check
    """
    name = BrokerName.parse(broker)
    caps = capabilities or get_capabilities(name)

    if request.order_type not in caps.supported_order_types:
        raise BrokerValidationError(
            f"Order type '{request.order_type}' not supported for {name.value}. "
            f"Supported: {', '.join(caps.supported_order_types)}"
        )

    if request.product_type and request.product_type not in caps.supported_products:
        raise BrokerValidationError(
            f"Product type '{request.product_type}' not supported for {name.value}. "
            f"Supported: {', '.join(caps.supported_products)}"
        )

    if caps.requires_security_id and _blank(request.security_id):
        raise BrokerValidationError(
            f"securityId is required for {name.value}. "
            "Please provide the broker-specific security identifier."
        )

    if caps.requires_exchange_segment and _blank(request.exchange_segment):
        raise BrokerValidationError(
            f"exchangeSegment is required for {name.value}. "
            "Please specify the exchange (e.g., NSE_EQ, BSE_EQ)."
        )

    if caps.max_order_size is not None and request.quantity > caps.max_order_size:
        raise BrokerValidationError(
            f"Order quantity {request.quantity} exceeds maximum {caps.max_order_size} for {name.value}."
        )

    if request.order_type == OrderType.LIMIT.value and (request.price is None or request.price <= 0):
        raise BrokerValidationError("Price is required for LIMIT orders and must be positive.")

    if request.quantity <= 0:
        raise BrokerValidationError("Quantity must be a positive number.")

    if _blank(request.symbol):
        raise BrokerValidationError("Symbol is required.")

    return ValidationResult()
