"""
Angel One SmartAPI adapter.
"""

import logging
from typing import Any, Dict, NoReturn, Optional

from ...models.credentials import BrokerCredentials
from ...models.market_data import CandleRequest, NormalizedCandles
from ...models.orders import OrderRequest, OrderResult, OrderStatus
from ...utils.time_helpers import format_date_minutes, parse_iso_to_ms, resolve_range
from ..capabilities import get_broker_interval
from ..errors import BrokerAPIError, BrokerAuthError, BrokerError, BrokerRateLimitError
from ..types import BrokerName
from .base import BrokerAdapter


logger = logging.getLogger(__name__)

ANGEL_BASE_URL = "https://apiconnect.angelbroking.com"

CANDLE_ENDPOINT = "/rest/secure/angelbroking/historical/v1/getCandleData"
ORDER_ENDPOINT = "/rest/secure/angelbroking/order/v1/placeOrder"

LOOKBACK_DAYS = 30

EXCHANGE_MAP = {
    "NSE_EQ": "NSE",
    "BSE_EQ": "BSE",
    "NSE_FNO": "NFO",
    "BSE_FNO": "BFO",
    "MCX_COMM": "MCX",
    "NSE_CURRENCY": "CDS",
    "BSE_CURRENCY": "BCD",
}

PRODUCT_MAP = {"CNC": "DELIVERY", "INTRADAY": "INTRADAY", "MARGIN": "MARGIN"}

AUTH_ERROR_CODES = ("AB1010", "AB1004")


def auth_headers(creds: BrokerCredentials) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {creds.access_token}",
        "X-ClientLocalIP": "127.0.0.1",
        "X-ClientPublicIP": "127.0.0.1",
        "X-MACAddress": "00:00:00:00:00:00",
        "X-PrivateKey": creds.api_key or "",
        "Accept": "application/json",
        "Content-Type": "application/json",
    }


def raise_angel_error(errorcode: Optional[str], message: Optional[str]) -> NoReturn:
    """Map an Angel error payload to a broker error."""
    code = (errorcode or "").upper()

    if "AUTH" in code or code in AUTH_ERROR_CODES:
        raise BrokerAuthError(f"Angel: {message}")

    if "RATE" in code or code == "AB429":
        raise BrokerRateLimitError(f"Angel: {message}")

    raise BrokerAPIError(f"Angel: {message}", None, errorcode)


def normalize_candles(rows: list) -> NormalizedCandles:
    return NormalizedCandles(
        timestamps=[parse_iso_to_ms(row["timestamp"]) for row in rows],
        open=[float(row["open"]) for row in rows],
        high=[float(row["high"]) for row in rows],
        low=[float(row["low"]) for row in rows],
        close=[float(row["close"]) for row in rows],
        volume=[float(row["volume"]) for row in rows],
    )


class AngelAdapter(BrokerAdapter):
    broker = BrokerName.ANGEL

    def _send(self, creds: BrokerCredentials, endpoint: str, body: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return self._http(ANGEL_BASE_URL, creds.access_token).post(
                endpoint,
                json=body,
                headers=auth_headers(creds),
            )
        except BrokerError:
            raise
        except Exception as e:
            raise BrokerAPIError(f"Angel: {e}") from e

    def market_data(
        self,
        request: CandleRequest,
        creds: Optional[BrokerCredentials] = None,
    ) -> NormalizedCandles:
        creds = self._require(creds, "access_token", "api_key")
        start, end = resolve_range(request.from_timestamp, request.to_timestamp, LOOKBACK_DAYS)

        body = {
            "exchange": EXCHANGE_MAP.get(request.exchange_segment or "", "NSE"),
            "symboltoken": request.security_id,
            "interval": get_broker_interval(request.interval, self.broker),
            "fromdate": format_date_minutes(start),
            "todate": format_date_minutes(end),
        }

        logger.info(f"Angel: fetching {request.interval} candles for {request.symbol}")
        response = self._send(creds, CANDLE_ENDPOINT, body)

        if not response.get("status"):
            raise_angel_error(response.get("errorcode"), response.get("message"))

        try:
            return normalize_candles(response.get("data") or [])
        except (KeyError, TypeError, ValueError) as e:
            raise BrokerAPIError(f"Angel: malformed candle data ({e})") from e

    def place_order(
        self,
        request: OrderRequest,
        creds: Optional[BrokerCredentials] = None,
    ) -> OrderResult:
        creds = self._require(creds, "access_token", "api_key")

        body = {
            "variety": "NORMAL",
            "tradingsymbol": request.symbol,
            "symboltoken": request.security_id or "",
            "transactiontype": request.side.value,
            "exchange": EXCHANGE_MAP.get(request.exchange_segment or "NSE_EQ", "NSE"),
            "ordertype": request.order_type,
            "producttype": PRODUCT_MAP.get(request.product_type or "", "INTRADAY"),
            "duration": "DAY",
            "price": request.price or 0,
            "squareoff": 0,
            "stoploss": 0,
            "quantity": request.quantity,
        }

        logger.info(f"Angel: placing order for {request.symbol}")
        response = self._send(creds, ORDER_ENDPOINT, body)

        data = response.get("data") or {}
        if not response.get("status") or not data.get("orderid"):
            raise_angel_error(response.get("errorcode"), response.get("message"))

        return OrderResult(
            order_id=str(data["orderid"]),
            status=OrderStatus.PENDING.value,
            raw=response,
        )
