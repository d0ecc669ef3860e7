"""
Candle fetching through the broker router.
"""

import logging
from typing import Any, Optional, Union

from ..models.market_data import CandleRequest, NormalizedCandles
from .router import BrokerRouter, broker_router
from .types import BrokerAction, BrokerName
from .validators import validate_candle_request


logger = logging.getLogger(__name__)


def fetch_candles(
    request: CandleRequest,
    broker: Union[BrokerName, str] = BrokerName.DHAN,
    creds: Any = None,
    router: Optional[BrokerRouter] = None,
) -> NormalizedCandles:
    """
    Validate a candle request and fetch it from ``broker``.

    Raises:
        BrokerValidationError: Before any network call if the request is invalid
        BrokerError: Whatever the adapter reports
    """
    name = BrokerName.parse(broker)
    validate_candle_request(request, name)

    logger.info(f"Fetching {request.interval} candles for {request.symbol} via {name.value}")
    return broker_router(name, BrokerAction.MARKET_DATA, request, creds, router=router)
