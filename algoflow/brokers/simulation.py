"""
Simulated order results for dry runs.
"""

import secrets
import string
from typing import Optional, Union

from ..models.orders import OrderRequest, OrderResult, OrderStatus
from ..utils.time_helpers import iso_now
from .types import BrokerName


_ID_ALPHABET = string.ascii_uppercase + string.digits


def generate_simulated_order_id() -> str:
    """``SIM-`` followed by eight uppercase alphanumerics."""
    return "SIM-" + "".join(secrets.choice(_ID_ALPHABET) for _ in range(8))


def create_simulated_order_result(
    request: OrderRequest,
    broker: Optional[Union[BrokerName, str]] = None,
) -> OrderResult:
    raw = {
        "simulated": True,
        "request": {
            "symbol": request.symbol,
            "side": request.side.value,
            "quantity": request.quantity,
            "orderType": request.order_type,
        },
        "timestamp": iso_now(),
    }
    if broker is not None:
        raw["broker"] = BrokerName.parse(broker).value

    return OrderResult(
        order_id=generate_simulated_order_id(),
        status=OrderStatus.SIMULATED.value,
        raw=raw,
    )
