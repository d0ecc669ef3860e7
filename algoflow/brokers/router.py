"""
Broker router.

Dispatches a (broker, action) pair to the registered adapter and
normalizes whatever the adapter raises into the BrokerError family.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Union

import httpx
from pydantic import ValidationError

from ..models.credentials import BrokerCredentials
from ..models.market_data import CandleRequest, NormalizedCandles
from ..models.orders import OrderRequest, OrderResult
from .adapters import AngelAdapter, BrokerAdapter, DhanAdapter, FyersAdapter
from .errors import (
    BrokerAPIError,
    BrokerAuthError,
    BrokerError,
    BrokerNetworkError,
    BrokerRateLimitError,
    BrokerValidationError,
)
from .http import DEFAULT_TIMEOUT_MS
from .simulation import create_simulated_order_result
from .types import BrokerAction, BrokerName


logger = logging.getLogger(__name__)

Payload = Union[CandleRequest, OrderRequest, Mapping[str, Any]]


def normalize_error(error: Exception, broker: BrokerName) -> BrokerError:
    """Map an arbitrary adapter exception onto a broker error."""
    if isinstance(error, BrokerError):
        return error

    message = str(error)
    lowered = message.lower()

    if "unauthorized" in lowered or "401" in lowered or "invalid token" in lowered:
        return BrokerAuthError(f"{broker.value}: Authentication failed")

    if "rate limit" in lowered or "429" in lowered or "too many requests" in lowered:
        return BrokerRateLimitError(f"{broker.value}: Rate limit exceeded")

    if "network" in lowered or "econnrefused" in lowered or "timeout" in lowered:
        return BrokerNetworkError(f"{broker.value}: {message}")

    return BrokerAPIError(f"{broker.value}: {message or 'Unknown error occurred'}")


def _coerce_payload(model, payload: Payload):
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise BrokerValidationError(f"Invalid {model.__name__} payload: {e.error_count()} field errors") from e


def _coerce_credentials(creds: Any) -> Optional[BrokerCredentials]:
    if creds is None or isinstance(creds, BrokerCredentials):
        return creds
    return BrokerCredentials.model_validate(creds)


class BrokerRouter:
    """Registration table of broker adapters."""

    def __init__(self):
        self._adapters: Dict[BrokerName, BrokerAdapter] = {}

    def register(self, adapter: BrokerAdapter) -> None:
        if adapter.broker in self._adapters:
            logger.warning(f"Replacing adapter for broker {adapter.broker.value}")
        self._adapters[adapter.broker] = adapter

    def get_adapter(self, broker: Union[BrokerName, str]) -> BrokerAdapter:
        """
        Raises:
            BrokerValidationError: Unknown broker or no adapter registered
        """
        name = BrokerName.parse(broker)
        adapter = self._adapters.get(name)
        if adapter is None:
            raise BrokerValidationError(f"Unsupported broker: {name.value}")
        return adapter

    @property
    def brokers(self):
        return list(self._adapters)

    def route(
        self,
        broker: Union[BrokerName, str],
        action: Union[BrokerAction, str],
        payload: Payload,
        creds: Any = None,
    ) -> Union[NormalizedCandles, OrderResult]:
        """
        Run ``action`` on the adapter for ``broker``.

        Broker and action are checked before anything is dispatched.
        Orders flagged ``dry_run`` are simulated without touching the
        adapter. Credentials are passed through untouched.
        """
        adapter = self.get_adapter(broker)
        action = BrokerAction.parse(action)
        credentials = _coerce_credentials(creds)

        logger.debug(f"Router: {adapter.broker.value}/{action.value}")

        model = CandleRequest if action is BrokerAction.MARKET_DATA else OrderRequest
        request = _coerce_payload(model, payload)

        try:
            if action is BrokerAction.MARKET_DATA:
                return adapter.market_data(request, credentials)

            if request.dry_run:
                logger.info(f"{adapter.label}: DRY RUN - simulating order")
                return create_simulated_order_result(request, adapter.broker)
            return adapter.place_order(request, credentials)
        except BrokerError:
            raise
        except Exception as e:
            raise normalize_error(e, adapter.broker) from e


def create_default_router(
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    transport: Optional[httpx.BaseTransport] = None,
) -> BrokerRouter:
    """Router with the Dhan, Fyers and Angel One adapters registered."""
    router = BrokerRouter()
    for adapter_cls in (DhanAdapter, FyersAdapter, AngelAdapter):
        router.register(adapter_cls(timeout_ms=timeout_ms, transport=transport))
    return router


_default_router: Optional[BrokerRouter] = None


def get_default_router() -> BrokerRouter:
    global _default_router
    if _default_router is None:
        _default_router = create_default_router()
    return _default_router


def broker_router(
    broker: Union[BrokerName, str],
    action: Union[BrokerAction, str],
    payload: Payload,
    creds: Any = None,
    router: Optional[BrokerRouter] = None,
) -> Union[NormalizedCandles, OrderResult]:
    """Route through ``router`` or the process-wide default router."""
    return (router or get_default_router()).route(broker, action, payload, creds)
