import re

import pytest

from algoflow.brokers import (
    BrokerAction,
    BrokerAdapter,
    BrokerAPIError,
    BrokerAuthError,
    BrokerName,
    BrokerNetworkError,
    BrokerRateLimitError,
    BrokerRouter,
    BrokerValidationError,
    create_default_router,
    execute_order_with_credentials,
    fetch_candles,
    generate_simulated_order_id,
    normalize_error,
)
from algoflow.models.market_data import CandleRequest, NormalizedCandles
from algoflow.models.orders import OrderRequest, OrderResult


class SpyAdapter(BrokerAdapter):
    """Adapter that records calls instead of talking to a broker."""

    broker = BrokerName.DHAN

    def __init__(self, error: Exception = None):
        super().__init__()
        self.error = error
        self.calls = []

    def market_data(self, request, creds=None):
        self.calls.append(("market_data", request, creds))
        if self.error:
            raise self.error
        return NormalizedCandles(open=[1.0], high=[1.0], low=[1.0], close=[1.0], volume=[1.0], timestamps=[1])

    def place_order(self, request, creds=None):
        self.calls.append(("place_order", request, creds))
        if self.error:
            raise self.error
        return OrderResult(order_id="REAL-1", status="TRADED")


def _router(adapter: BrokerAdapter) -> BrokerRouter:
    router = BrokerRouter()
    router.register(adapter)
    return router


ORDER = {
    "symbol": "RELIANCE",
    "securityId": "2885",
    "exchangeSegment": "NSE_EQ",
    "side": "BUY",
    "quantity": 1,
}


def test_default_router_registers_all_brokers():
    assert set(create_default_router().brokers) == {BrokerName.DHAN, BrokerName.FYERS, BrokerName.ANGEL}


def test_route_dispatches_market_data_and_passes_credentials():
    spy = SpyAdapter()

    candles = _router(spy).route("DHAN", "marketData", {"symbol": "X"}, {"accessToken": "tok"})

    assert candles.close == [1.0]
    action, request, creds = spy.calls[0]
    assert action == "market_data"
    assert isinstance(request, CandleRequest)
    assert creds.access_token == "tok"


def test_route_rejects_unregistered_broker():
    with pytest.raises(BrokerValidationError, match="Unsupported broker: fyers"):
        _router(SpyAdapter()).route("fyers", BrokerAction.MARKET_DATA, {})


def test_route_rejects_unknown_action_before_dispatch():
    spy = SpyAdapter()

    with pytest.raises(BrokerValidationError, match="Unknown action: cancelOrder"):
        _router(spy).route("dhan", "cancelOrder", {})

    assert spy.calls == []


def test_route_rejects_malformed_payload():
    with pytest.raises(BrokerValidationError, match="Invalid OrderRequest payload"):
        _router(SpyAdapter()).route("dhan", "placeOrder", {"symbol": "X"})


def test_route_dry_run_never_reaches_adapter():
    spy = SpyAdapter()

    result = _router(spy).route("dhan", "placeOrder", {**ORDER, "dryRun": True})

    assert spy.calls == []
    assert result.status == "SIMULATED"
    assert result.raw["broker"] == "dhan"
    assert result.raw["request"] == {"symbol": "RELIANCE", "side": "BUY", "quantity": 1.0, "orderType": "MARKET"}


def test_route_keeps_broker_errors():
    error = BrokerRateLimitError("slow down", 500)

    with pytest.raises(BrokerRateLimitError) as exc_info:
        _router(SpyAdapter(error)).route("dhan", "placeOrder", ORDER)

    assert exc_info.value is error


def test_route_normalizes_foreign_errors():
    with pytest.raises(BrokerNetworkError, match="dhan: network unreachable") as exc_info:
        _router(SpyAdapter(RuntimeError("network unreachable"))).route("dhan", "marketData", {})

    assert isinstance(exc_info.value.__cause__, RuntimeError)


@pytest.mark.parametrize(
    "message, error_type",
    [
        ("401 Unauthorized", BrokerAuthError),
        ("Too Many Requests", BrokerRateLimitError),
        ("request timeout", BrokerNetworkError),
        ("something odd", BrokerAPIError),
    ],
)
def test_normalize_error(message, error_type):
    assert isinstance(normalize_error(Exception(message), BrokerName.ANGEL), error_type)


def test_normalize_error_empty_message():
    assert normalize_error(Exception(), BrokerName.FYERS).message == "fyers: Unknown error occurred"


def test_simulated_order_id_format():
    assert re.fullmatch(r"SIM-[A-Z0-9]{8}", generate_simulated_order_id())


def test_execute_order_dry_run_skips_router():
    spy = SpyAdapter()

    result = execute_order_with_credentials(
        OrderRequest.model_validate(ORDER),
        "dhan",
        dry_run=True,
        router=_router(spy),
    )

    assert result.is_simulated
    assert result.order_id.startswith("SIM-")
    assert spy.calls == []


def test_execute_order_validates_before_routing():
    spy = SpyAdapter()

    with pytest.raises(BrokerValidationError):
        execute_order_with_credentials(
            OrderRequest.model_validate({**ORDER, "quantity": -1}),
            "dhan",
            router=_router(spy),
        )

    assert spy.calls == []


def test_execute_order_live_goes_through_adapter():
    spy = SpyAdapter()

    result = execute_order_with_credentials(
        OrderRequest.model_validate(ORDER),
        "dhan",
        creds={"accessToken": "tok", "clientId": "C1"},
        router=_router(spy),
    )

    assert result.order_id == "REAL-1"
    assert spy.calls[0][2].client_id == "C1"


def test_fetch_candles_validates_first():
    spy = SpyAdapter()

    with pytest.raises(BrokerValidationError, match="securityId is required"):
        fetch_candles(CandleRequest(symbol="X", interval="1d"), "dhan", router=_router(spy))

    assert spy.calls == []


def test_fetch_candles_routes_valid_request():
    spy = SpyAdapter()
    request = CandleRequest(symbol="X", security_id="1", exchange_segment="NSE_EQ", interval="1d")

    candles = fetch_candles(request, "dhan", router=_router(spy))

    assert len(candles) == 1
    assert spy.calls[0][1] is request
