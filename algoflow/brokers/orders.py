"""
Order execution with caller-supplied credentials.
"""

import logging
from typing import Any, Optional, Union

from ..models.orders import OrderRequest, OrderResult
from .router import BrokerRouter, broker_router
from .simulation import create_simulated_order_result
from .types import BrokerAction, BrokerName
from .validators import validate_order


logger = logging.getLogger(__name__)


def execute_order_with_credentials(
    request: OrderRequest,
    broker: Union[BrokerName, str] = BrokerName.DHAN,
    creds: Any = None,
    dry_run: bool = False,
    router: Optional[BrokerRouter] = None,
) -> OrderResult:
    """
    Validate and place an order.

    A dry run (``dry_run`` argument or ``request.dry_run``) returns a
    simulated result and never reaches the router.

    Raises:
        BrokerValidationError: If the order fails validation
        BrokerError: Whatever the adapter reports
    """
    name = BrokerName.parse(broker)
    validate_order(request, name)

    if dry_run or request.dry_run:
        logger.info(f"DRY RUN - simulating {request.side.value} {request.quantity} {request.symbol} on {name.value}")
        return create_simulated_order_result(request, name)

    logger.info(f"Executing {request.side.value} {request.quantity} {request.symbol} via {name.value}")
    return broker_router(name, BrokerAction.PLACE_ORDER, request, creds, router=router)
