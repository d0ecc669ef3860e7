"""
Broker adapter interface.
"""

from abc import ABC, abstractmethod
from typing import Optional

import httpx

from ...models.credentials import BrokerCredentials
from ...models.market_data import CandleRequest, NormalizedCandles
from ...models.orders import OrderRequest, OrderResult
from ..errors import BrokerAuthError
from ..http import DEFAULT_TIMEOUT_MS, BrokerHttpClient
from ..types import BrokerName


class BrokerAdapter(ABC):
    """
    One implementation per broker.

    Adapters translate normalized requests into broker API calls and
    broker responses back into NormalizedCandles / OrderResult.
    """

    broker: BrokerName

    def __init__(
        self,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.timeout_ms = timeout_ms
        self.transport = transport

    @property
    def label(self) -> str:
        return self.broker.value.capitalize()

    def _http(self, base_url: str, access_token: str) -> BrokerHttpClient:
        return BrokerHttpClient(
            base_url,
            access_token,
            timeout_ms=self.timeout_ms,
            transport=self.transport,
        )

    def _require(self, creds: Optional[BrokerCredentials], *fields: str) -> BrokerCredentials:
        """
        Ensure credential fields are present.

        Raises:
            BrokerAuthError: Naming the first missing field
        """
        creds = creds or BrokerCredentials()
        for field_name in fields:
            if not getattr(creds, field_name):
                camel = field_name.split("_")[0] + "".join(p.capitalize() for p in field_name.split("_")[1:])
                raise BrokerAuthError(f"{self.label}: {camel} is required")
        return creds

    @abstractmethod
    def market_data(
        self,
        request: CandleRequest,
        creds: Optional[BrokerCredentials] = None,
    ) -> NormalizedCandles:
        """Fetch historical candles."""

    @abstractmethod
    def place_order(
        self,
        request: OrderRequest,
        creds: Optional[BrokerCredentials] = None,
    ) -> OrderResult:
        """Place a live order."""
