"""
Fyers adapter.

Fyers authenticates with ``appId:accessToken`` and addresses instruments
as ``EXCHANGE:SYMBOL-EQ``.
"""

import logging
from typing import Any, Dict, List, Optional

from ...models.credentials import BrokerCredentials
from ...models.market_data import CandleRequest, NormalizedCandles
from ...models.orders import OrderRequest, OrderResult, OrderSide, OrderStatus
from ...utils.time_helpers import resolve_range
from ..capabilities import get_broker_interval
from ..errors import BrokerAPIError
from ..types import BrokerName
from .base import BrokerAdapter


logger = logging.getLogger(__name__)

FYERS_DATA_URL = "https://api-t1.fyers.in/data"
FYERS_ORDER_URL = "https://api-t1.fyers.in/api/v3"

LOOKBACK_DAYS = 30

PRODUCT_TYPES = {"CNC": "CNC", "INTRADAY": "INTRADAY", "MARGIN": "MARGIN"}


def build_fyers_symbol(symbol: str, exchange_segment: Optional[str] = None) -> str:
    """
    Convert a plain symbol to Fyers notation.

    >>> build_fyers_symbol("RELIANCE", "NSE_EQ")
    'NSE:RELIANCE-EQ'
    """
    if ":" in symbol:
        return symbol
    segment = exchange_segment or ""
    exchange = "NSE" if segment.startswith("NSE") else "BSE"
    suffix = "" if "FNO" in segment else "-EQ"
    return f"{exchange}:{symbol}{suffix}"


def normalize_candles(candles: List[List[Any]]) -> NormalizedCandles:
    """Fyers rows are ``[ts_seconds, open, high, low, close, volume]``."""
    return NormalizedCandles(
        timestamps=[int(row[0]) * 1000 for row in candles],
        open=[float(row[1]) for row in candles],
        high=[float(row[2]) for row in candles],
        low=[float(row[3]) for row in candles],
        close=[float(row[4]) for row in candles],
        volume=[float(row[5]) for row in candles],
    )


class FyersAdapter(BrokerAdapter):
    broker = BrokerName.FYERS

    def _token(self, creds: Optional[BrokerCredentials]) -> str:
        creds = self._require(creds, "access_token", "app_id")
        return f"{creds.app_id}:{creds.access_token}"

    def market_data(
        self,
        request: CandleRequest,
        creds: Optional[BrokerCredentials] = None,
    ) -> NormalizedCandles:
        token = self._token(creds)
        start, end = resolve_range(request.from_timestamp, request.to_timestamp, LOOKBACK_DAYS)

        params = {
            "symbol": build_fyers_symbol(request.symbol, request.exchange_segment),
            "resolution": get_broker_interval(request.interval, self.broker),
            "date_format": 1,
            "range_from": start // 1000,
            "range_to": end // 1000,
            "cont_flag": 1,
        }

        logger.info(f"Fyers: fetching {request.interval} candles for {params['symbol']}")
        response = self._http(FYERS_DATA_URL, token).get(
            "/history",
            params=params,
            headers={"Authorization": token},
        )

        if response.get("s") != "ok":
            raise BrokerAPIError(f"Fyers: Failed to fetch candles - {response.get('s')}")

        return normalize_candles(response.get("candles") or [])

    def place_order(
        self,
        request: OrderRequest,
        creds: Optional[BrokerCredentials] = None,
    ) -> OrderResult:
        token = self._token(creds)

        body: Dict[str, Any] = {
            "symbol": build_fyers_symbol(request.symbol, request.exchange_segment),
            "qty": request.quantity,
            "type": 1 if request.is_limit else 2,
            "side": 1 if request.side is OrderSide.BUY else -1,
            "productType": PRODUCT_TYPES.get(request.product_type or "", "INTRADAY"),
            "validity": "DAY",
            "offlineOrder": False,
        }
        if request.is_limit and request.price:
            body["limitPrice"] = request.price
        if request.trigger_price:
            body["stopPrice"] = request.trigger_price

        logger.info(f"Fyers: placing order for {body['symbol']}")
        response = self._http(FYERS_ORDER_URL, token).post(
            "/orders",
            json=body,
            headers={"Authorization": token},
        )

        if response.get("s") != "ok" or not response.get("id"):
            raise BrokerAPIError(
                f"Fyers: Order failed - {response.get('message')}",
                broker_message=str(response.get("code")) if response.get("code") is not None else None,
            )

        return OrderResult(
            order_id=str(response["id"]),
            status=OrderStatus.PENDING.value,
            raw=response,
        )
