import httpx
import pytest

from algoflow.brokers import (
    BrokerAPIError,
    BrokerAuthError,
    BrokerHttpClient,
    BrokerNetworkError,
    BrokerRateLimitError,
)


def _client(handler) -> BrokerHttpClient:
    return BrokerHttpClient("https://broker.test/", "tok", timeout_ms=1000, transport=httpx.MockTransport(handler))


def test_injects_access_token_and_returns_json():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["token"] = request.headers["access-token"]
        seen["custom"] = request.headers.get("x-extra")
        return httpx.Response(200, json={"ok": True})

    data = _client(handler).post("/orders", json={"a": 1}, headers={"X-Extra": "1"})

    assert data == {"ok": True}
    assert seen == {"url": "https://broker.test/orders", "token": "tok", "custom": "1"}


@pytest.mark.parametrize("status", [401, 403])
def test_auth_status_codes(status):
    client = _client(lambda request: httpx.Response(status, json={}))

    with pytest.raises(BrokerAuthError) as exc_info:
        client.get("/x")

    assert exc_info.value.status_code == 401


def test_rate_limit_reads_retry_after():
    client = _client(lambda request: httpx.Response(429, headers={"Retry-After": "2"}))

    with pytest.raises(BrokerRateLimitError) as exc_info:
        client.get("/x")

    assert exc_info.value.retry_after_ms == 2000


def test_json_error_keeps_broker_message():
    client = _client(lambda request: httpx.Response(400, json={"message": "bad symbol"}))

    with pytest.raises(BrokerAPIError) as exc_info:
        client.get("/x")

    assert exc_info.value.status_code == 400
    assert exc_info.value.broker_message == "bad symbol"


def test_text_error_uses_body():
    client = _client(lambda request: httpx.Response(500, text="upstream down"))

    with pytest.raises(BrokerAPIError, match="upstream down"):
        client.get("/x")


def test_non_json_success_is_empty():
    client = _client(lambda request: httpx.Response(200, text="OK"))

    assert client.get("/x") == {}


def test_timeout_becomes_network_error():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(BrokerNetworkError, match="timed out after 1000ms"):
        _client(handler).get("/x")


def test_connection_failure_becomes_network_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(BrokerNetworkError, match="Failed to connect"):
        _client(handler).get("/x")
