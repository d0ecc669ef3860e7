# algoflow/strategies/templates.py
"""
Preset strategy templates.

Each template turns a handful of numeric parameters into a workflow
graph (candles -> indicators -> condition -> order) that both the
backtest engine and the live executor accept.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..models.market_data import ExchangeSegment
from ..models.orders import OrderSide, OrderType, ProductType
from ..models.workflow import NodeType, WorkflowEdge, WorkflowGraph, WorkflowNode


logger = logging.getLogger(__name__)


class TemplateCategory(str, Enum):
    TREND = "trend"
    MOMENTUM = "momentum"
    VOLATILITY = "volatility"
    BREAKOUT = "breakout"


class TemplateError(ValueError):
    """Raised for unknown templates or out-of-range parameters."""

    def __init__(self, message: str, code: str = "TEMPLATE_ERROR"):
        super().__init__(message)
        self.message = message
        self.code = code


class TemplateParameter(BaseModel):
    """Numeric knob exposed by a template."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    key: str
    label: str
    type: str = "number"
    default_value: float
    min: Optional[float] = None
    max: Optional[float] = None

    def check(self, value: Any) -> float:
        """Coerce and bound-check a supplied value."""
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise TemplateError(f"Parameter {self.key} must be a number, got {value!r}", "INVALID_PARAMETER") from None
        if self.min is not None and number < self.min:
            raise TemplateError(f"Parameter {self.key} must be >= {self.min:g}", "INVALID_PARAMETER")
        if self.max is not None and number > self.max:
            raise TemplateError(f"Parameter {self.key} must be <= {self.max:g}", "INVALID_PARAMETER")
        return number


GraphBuilder = Callable[[Dict[str, float]], WorkflowGraph]


class StrategyTemplate(BaseModel):
    """A named workflow preset."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    description: str
    category: TemplateCategory
    parameters: List[TemplateParameter] = Field(default_factory=list)
    builder: GraphBuilder = Field(..., exclude=True)

    def resolve_params(self, overrides: Optional[Mapping[str, Any]] = None) -> Dict[str, float]:
        overrides = overrides or {}
        unknown = set(overrides) - {p.key for p in self.parameters}
        if unknown:
            raise TemplateError(
                f"Unknown parameters for {self.id}: {', '.join(sorted(unknown))}",
                "INVALID_PARAMETER",
            )
        return {
            p.key: p.check(overrides.get(p.key, p.default_value))
            for p in self.parameters
        }

    def build(self, overrides: Optional[Mapping[str, Any]] = None) -> WorkflowGraph:
        return self.builder(self.resolve_params(overrides))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return self.model_dump(by_alias=True, exclude_none=True, mode='json')


def _linear_graph(indicators: List[Dict[str, Any]], expression: str) -> WorkflowGraph:
    """candles -> indicators -> condition -> order with a market BUY."""
    return WorkflowGraph(
        nodes=[
            WorkflowNode(id="candles", type=NodeType.CANDLES.value, data={"symbol": "", "interval": "1d"}),
            WorkflowNode(id="indicators", type=NodeType.INDICATORS.value, data={"indicators": indicators}),
            WorkflowNode(id="condition", type=NodeType.CONDITION.value, data={"expression": expression}),
            WorkflowNode(
                id="order",
                type=NodeType.ORDER.value,
                data={
                    "side": OrderSide.BUY.value,
                    "quantity": 1,
                    "orderType": OrderType.MARKET.value,
                    "productType": ProductType.CNC.value,
                },
            ),
        ],
        edges=[
            WorkflowEdge(source="candles", target="indicators"),
            WorkflowEdge(source="indicators", target="condition"),
            WorkflowEdge(source="condition", target="order"),
        ],
    )


def _sma_crossover(params: Dict[str, float]) -> WorkflowGraph:
    fast, slow = int(params["fastPeriod"]), int(params["slowPeriod"])
    if fast >= slow:
        raise TemplateError("fastPeriod must be less than slowPeriod", "INVALID_PARAMETER")
    return _linear_graph(
        [{"type": "SMA", "period": fast}, {"type": "SMA", "period": slow}],
        f"SMA_{fast} > SMA_{slow}",
    )


def _rsi_oversold(params: Dict[str, float]) -> WorkflowGraph:
    period = int(params["period"])
    return _linear_graph(
        [{"type": "RSI", "period": period}],
        f"RSI_{period} < {params['oversold']:g}",
    )


def _macd_crossover(params: Dict[str, float]) -> WorkflowGraph:
    fast, slow, signal = int(params["fastPeriod"]), int(params["slowPeriod"]), int(params["signalPeriod"])
    if fast >= slow:
        raise TemplateError("fastPeriod must be less than slowPeriod", "INVALID_PARAMETER")
    key = "MACD" if (fast, slow, signal) == (12, 26, 9) else f"MACD_{fast}_{slow}_{signal}"
    return _linear_graph(
        [{"type": "MACD", "fastPeriod": fast, "slowPeriod": slow, "signalPeriod": signal}],
        f"{key}.line > {key}.signal",
    )


def _breakout(params: Dict[str, float]) -> WorkflowGraph:
    period = int(params["lookbackPeriod"])
    return _linear_graph(
        [{"type": "SMA", "period": period, "source": "high"}],
        f"close > SMA_{period}_high",
    )


def default_templates() -> List[StrategyTemplate]:
    return [
        StrategyTemplate(
            id="sma-crossover",
            name="SMA Crossover",
            description="Buy when the fast SMA is above the slow SMA.",
            category=TemplateCategory.TREND,
            parameters=[
                TemplateParameter(key="fastPeriod", label="Fast Period", default_value=20, min=5, max=50),
                TemplateParameter(key="slowPeriod", label="Slow Period", default_value=50, min=20, max=200),
            ],
            builder=_sma_crossover,
        ),
        StrategyTemplate(
            id="rsi-oversold",
            name="RSI Oversold",
            description="Buy when RSI dips below the oversold level.",
            category=TemplateCategory.MOMENTUM,
            parameters=[
                TemplateParameter(key="period", label="RSI Period", default_value=14, min=2, max=50),
                TemplateParameter(key="oversold", label="Oversold Level", default_value=30, min=5, max=50),
            ],
            builder=_rsi_oversold,
        ),
        StrategyTemplate(
            id="macd-crossover",
            name="MACD Crossover",
            description="Buy when the MACD line is above its signal line.",
            category=TemplateCategory.MOMENTUM,
            parameters=[
                TemplateParameter(key="fastPeriod", label="Fast Period", default_value=12, min=2, max=50),
                TemplateParameter(key="slowPeriod", label="Slow Period", default_value=26, min=5, max=100),
                TemplateParameter(key="signalPeriod", label="Signal Period", default_value=9, min=2, max=50),
            ],
            builder=_macd_crossover,
        ),
        StrategyTemplate(
            id="breakout",
            name="High Breakout",
            description="Buy when the close breaks above the average high of the lookback period.",
            category=TemplateCategory.BREAKOUT,
            parameters=[
                TemplateParameter(key="lookbackPeriod", label="Lookback Period", default_value=20, min=5, max=100),
            ],
            builder=_breakout,
        ),
    ]


class TemplateRegistry:
    """Templates by ID."""

    def __init__(self, templates: Optional[List[StrategyTemplate]] = None):
        self._templates: Dict[str, StrategyTemplate] = {}
        for template in default_templates() if templates is None else templates:
            self.register(template)

    def register(self, template: StrategyTemplate) -> None:
        if template.id in self._templates:
            logger.warning(f"Template '{template.id}' already registered. Overwriting.")
        self._templates[template.id] = template

    def get(self, template_id: str) -> StrategyTemplate:
        """
        Raises:
            TemplateError: If no template has this ID
        """
        template = self._templates.get(template_id)
        if template is None:
            available = ', '.join(self._templates) or 'none'
            raise TemplateError(
                f"Unknown template: '{template_id}'. Available templates: {available}",
                "TEMPLATE_NOT_FOUND",
            )
        return template

    def list_templates(self) -> List[StrategyTemplate]:
        return list(self._templates.values())

    def __contains__(self, template_id: str) -> bool:
        return template_id in self._templates

    def __len__(self) -> int:
        return len(self._templates)


def build_workflow(
    template_id: str,
    symbol: str,
    params: Optional[Mapping[str, Any]] = None,
    interval: str = "1d",
    broker: str = "dhan",
    security_id: Optional[str] = None,
    exchange_segment: Optional[str] = None,
    quantity: float = 1,
    dry_run: bool = True,
    registry: Optional[TemplateRegistry] = None,
) -> WorkflowGraph:
    """
    Build a ready-to-run workflow from a template.

    The symbol, broker and instrument details are written into the
    candles and order nodes. Orders default to dry run.

    Args:
        template_id: Template ID (e.g. 'sma-crossover')
        symbol: Trading symbol
        params: Template parameter overrides
        interval: Candle interval
        broker: Broker for candles and orders
        security_id: Broker security ID
        exchange_segment: Exchange segment, defaults to NSE_EQ
        quantity: Order quantity
        dry_run: Simulate orders instead of placing them
        registry: Template registry (default templates if None)

    Returns:
        WorkflowGraph

    Raises:
        TemplateError: Unknown template or invalid parameters
    """
    template = (registry if registry is not None else TemplateRegistry()).get(template_id)
    graph = template.build(params)

    instrument = {
        "symbol": symbol,
        "broker": broker,
        "exchangeSegment": exchange_segment or ExchangeSegment.NSE_EQ.value,
    }
    if security_id:
        instrument["securityId"] = security_id

    for node in graph.nodes:
        if node.type == NodeType.CANDLES.value:
            node.data.update(instrument, interval=interval)
        elif node.type == NodeType.ORDER.value:
            node.data.update(instrument, quantity=quantity, dryRun=dry_run)

    logger.info(f"Built '{template_id}' workflow for {symbol}")
    return graph
