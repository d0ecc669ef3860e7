from typing import List

import pytest

from algoflow.brokers import BrokerAdapter, BrokerName, BrokerRouter
from algoflow.models.market_data import NormalizedCandles
from algoflow.models.orders import OrderResult
from algoflow.models.workflow import WorkflowGraph


DAY_MS = 24 * 60 * 60 * 1000
START_MS = 1_704_067_200_000  # 2024-01-01T00:00:00Z


def make_candles(closes: List[float], start_ms: int = START_MS) -> NormalizedCandles:
    """Flat-bar candles whose open/high/low equal the close."""
    return NormalizedCandles(
        open=list(closes),
        high=[c + 1 for c in closes],
        low=[c - 1 for c in closes],
        close=list(closes),
        volume=[1000.0] * len(closes),
        timestamps=[start_ms + i * DAY_MS for i in range(len(closes))],
    )


@pytest.fixture()
def rising_candles() -> NormalizedCandles:
    return make_candles([100.0 + i for i in range(40)])


def linear_workflow(expression: str, indicators=None, side: str = "BUY") -> WorkflowGraph:
    """candles -> indicators -> condition -> order."""
    return WorkflowGraph.model_validate(
        {
            "nodes": [
                {
                    "id": "candles",
                    "type": "candles",
                    "data": {"symbol": "TEST", "interval": "1d", "securityId": "1", "exchangeSegment": "NSE_EQ"},
                },
                {"id": "ind", "type": "indicators", "data": {"indicators": indicators or []}},
                {"id": "cond", "type": "condition", "data": {"expression": expression}},
                {
                    "id": "order",
                    "type": "order",
                    "data": {
                        "symbol": "TEST",
                        "securityId": "1",
                        "exchangeSegment": "NSE_EQ",
                        "side": side,
                        "quantity": 1,
                        "orderType": "MARKET",
                        "dryRun": True,
                    },
                },
            ],
            "edges": [
                {"id": "e1", "source": "candles", "target": "ind"},
                {"id": "e2", "source": "ind", "target": "cond"},
                {"id": "e3", "source": "cond", "target": "order"},
            ],
        }
    )


class FakeDhanAdapter(BrokerAdapter):
    """Serves fixed candles and records live orders without any network access."""

    broker = BrokerName.DHAN

    def __init__(self, candles: NormalizedCandles):
        super().__init__()
        self.candles = candles
        self.candle_requests = []
        self.orders = []

    def market_data(self, request, creds=None):
        self.candle_requests.append((request, creds))
        return self.candles

    def place_order(self, request, creds=None):
        self.orders.append((request, creds))
        return OrderResult(order_id="LIVE-1", status="TRADED")


def fake_router(candles: NormalizedCandles) -> BrokerRouter:
    router = BrokerRouter()
    router.register(FakeDhanAdapter(candles))
    return router
