import pytest

from algoflow.core import BacktestEngine
from algoflow.models.results import BacktestRequest
from algoflow.models.workflow import NodeType
from algoflow.strategies import (
    StrategyTemplate,
    TemplateCategory,
    TemplateError,
    TemplateRegistry,
    build_workflow,
)
from algoflow.workflow import topo_sort, validate_graph
from conftest import START_MS


def test_default_templates_are_registered():
    registry = TemplateRegistry()

    assert len(registry) == 4
    assert "sma-crossover" in registry
    assert [t.id for t in registry.list_templates()] == ["sma-crossover", "rsi-oversold", "macd-crossover", "breakout"]


def test_template_to_dict_hides_builder():
    data = TemplateRegistry().get("rsi-oversold").to_dict()

    assert "builder" not in data
    assert data["category"] == "momentum"
    assert data["parameters"][0] == {
        "key": "period",
        "label": "RSI Period",
        "type": "number",
        "defaultValue": 14.0,
        "min": 2.0,
        "max": 50.0,
    }


@pytest.mark.parametrize(
    "template_id, params, expression",
    [
        ("sma-crossover", None, "SMA_20 > SMA_50"),
        ("sma-crossover", {"fastPeriod": 10, "slowPeriod": 30}, "SMA_10 > SMA_30"),
        ("rsi-oversold", {"oversold": 25}, "RSI_14 < 25"),
        ("macd-crossover", None, "MACD.line > MACD.signal"),
        ("macd-crossover", {"fastPeriod": 5, "slowPeriod": 10, "signalPeriod": 3}, "MACD_5_10_3.line > MACD_5_10_3.signal"),
        ("breakout", {"lookbackPeriod": 10}, "close > SMA_10_high"),
    ],
)
def test_template_expressions(template_id, params, expression):
    graph = TemplateRegistry().get(template_id).build(params)

    condition = graph.find_node_by_type(NodeType.CONDITION)
    assert condition.data["expression"] == expression


def test_built_graphs_are_valid_dags():
    for template in TemplateRegistry().list_templates():
        graph = template.build()
        validate_graph(graph.nodes, graph.edges)
        assert [n.id for n in topo_sort(graph.nodes, graph.edges)] == ["candles", "indicators", "condition", "order"]


@pytest.mark.parametrize(
    "template_id, params, message",
    [
        ("sma-crossover", {"fastPeriod": 40, "slowPeriod": 30}, "fastPeriod must be less than slowPeriod"),
        ("sma-crossover", {"fastPeriod": 1}, "fastPeriod must be >= 5"),
        ("rsi-oversold", {"oversold": "low"}, "must be a number"),
        ("breakout", {"period": 10}, "Unknown parameters for breakout: period"),
    ],
)
def test_invalid_parameters(template_id, params, message):
    with pytest.raises(TemplateError, match=message) as exc_info:
        TemplateRegistry().get(template_id).build(params)

    assert exc_info.value.code == "INVALID_PARAMETER"


def test_unknown_template():
    with pytest.raises(TemplateError, match="Unknown template: 'grid'") as exc_info:
        build_workflow("grid", "RELIANCE")

    assert exc_info.value.code == "TEMPLATE_NOT_FOUND"


def test_build_workflow_fills_instrument():
    graph = build_workflow("rsi-oversold", "RELIANCE", interval="15m", broker="fyers", quantity=3, security_id="2885")

    candles = next(n for n in graph.nodes if n.type == "candles")
    order = next(n for n in graph.nodes if n.type == "order")
    assert candles.data == {
        "symbol": "RELIANCE",
        "interval": "15m",
        "broker": "fyers",
        "exchangeSegment": "NSE_EQ",
        "securityId": "2885",
    }
    assert order.data["quantity"] == 3
    assert order.data["dryRun"] is True
    assert order.data["side"] == "BUY"


def test_custom_template_registry():
    template = StrategyTemplate(
        id="always",
        name="Always",
        description="Buy on the first bar.",
        category=TemplateCategory.TREND,
        builder=lambda params: TemplateRegistry().get("breakout").build({"lookbackPeriod": 5}),
    )
    registry = TemplateRegistry([template])

    assert len(registry) == 1
    assert build_workflow("always", "X", registry=registry).nodes[0].data["symbol"] == "X"


def test_template_workflow_backtests(rising_candles):
    graph = build_workflow("sma-crossover", "TEST", params={"fastPeriod": 5, "slowPeriod": 20})
    request = BacktestRequest(workflow=graph, symbol="TEST", start=START_MS, end=START_MS)

    result = BacktestEngine().run(request, candles=rising_candles)

    assert [t.type.value for t in result.trades] == ["BUY", "SELL"]
    assert result.trades[0].timestamp == rising_candles.timestamps[20]
