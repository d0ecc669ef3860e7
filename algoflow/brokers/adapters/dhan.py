"""
Dhan adapter.

Daily candles come from /v2/charts/historical, intraday candles from
/v2/charts/intraday. Dhan reports timestamps in epoch seconds.
"""

import logging
import os
from typing import Any, Dict, List, Optional

from ...models.credentials import BrokerCredentials
from ...models.market_data import CandleRequest, NormalizedCandles
from ...models.orders import OrderRequest, OrderResult, ProductType
from ...utils.time_helpers import format_date, resolve_range
from ..capabilities import get_broker_interval
from ..errors import BrokerAPIError
from ..types import BrokerName
from .base import BrokerAdapter


logger = logging.getLogger(__name__)

DHAN_BASE_URL = "https://api.dhan.co"

DAILY_LOOKBACK_DAYS = 365
INTRADAY_LOOKBACK_DAYS = 7


def _floats(values: Optional[List[Any]]) -> List[float]:
    return [float(v) for v in values or []]


def normalize_candle_response(response: Dict[str, Any]) -> NormalizedCandles:
    """
    Convert Dhan's parallel-array payload to NormalizedCandles.

    Raises:
        BrokerAPIError: When the arrays differ in length
    """
    if not response or not response.get("close"):
        return NormalizedCandles()

    candles = NormalizedCandles(
        open=_floats(response.get("open")),
        high=_floats(response.get("high")),
        low=_floats(response.get("low")),
        close=_floats(response.get("close")),
        volume=_floats(response.get("volume")),
        timestamps=[int(ts) * 1000 for ts in response.get("timestamp") or []],
    )
    if not candles.is_aligned():
        raise BrokerAPIError("Dhan: candle arrays have mismatched lengths")
    return candles


class DhanAdapter(BrokerAdapter):
    broker = BrokerName.DHAN

    def market_data(
        self,
        request: CandleRequest,
        creds: Optional[BrokerCredentials] = None,
    ) -> NormalizedCandles:
        # Market data may fall back to a process-wide token.
        access_token = (creds.access_token if creds else None) or os.environ.get("DHAN_ACCESS_TOKEN")
        if not access_token:
            self._require(None, "access_token")

        daily = request.interval == "1d"
        start, end = resolve_range(
            request.from_timestamp,
            request.to_timestamp,
            DAILY_LOOKBACK_DAYS if daily else INTRADAY_LOOKBACK_DAYS,
        )

        body: Dict[str, Any] = {
            "securityId": request.security_id,
            "exchangeSegment": request.exchange_segment,
            "instrument": "EQUITY",
        }
        if daily:
            endpoint = "/v2/charts/historical"
            body["expiryCode"] = 0
        else:
            endpoint = "/v2/charts/intraday"
            body["interval"] = get_broker_interval(request.interval, self.broker)
        body["fromDate"] = format_date(start)
        body["toDate"] = format_date(end)

        logger.info(f"Dhan: fetching {request.interval} candles for {request.symbol}")
        response = self._http(DHAN_BASE_URL, access_token).post(endpoint, json=body)
        return normalize_candle_response(response)

    def place_order(
        self,
        request: OrderRequest,
        creds: Optional[BrokerCredentials] = None,
    ) -> OrderResult:
        creds = self._require(creds, "access_token", "client_id")

        body: Dict[str, Any] = {
            "dhanClientId": creds.client_id,
            "transactionType": request.side.value,
            "exchangeSegment": request.exchange_segment,
            "productType": request.product_type or ProductType.INTRADAY.value,
            "orderType": request.order_type,
            "validity": "DAY",
            "securityId": request.security_id,
            "quantity": request.quantity,
        }
        if request.price is not None:
            body["price"] = request.price
        if request.trigger_price is not None:
            body["triggerPrice"] = request.trigger_price

        logger.info(f"Dhan: placing {request.side.value} {request.quantity} {request.symbol}")
        response = self._http(DHAN_BASE_URL, creds.access_token).post("/orders", json=body)

        return OrderResult(
            order_id=str(response.get("orderId", "")),
            status=str(response.get("orderStatus", "")),
            raw=response,
        )
