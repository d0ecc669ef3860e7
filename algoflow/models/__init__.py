"""
Data models shared across the engine.
"""

from .config import AppConfig, BacktestSettings, BrokerSettings, LoggingConfig
from .credentials import BrokerCredentials
from .market_data import CandleInterval, CandleRequest, ExchangeSegment, NormalizedCandles
from .orders import OrderRequest, OrderResult, OrderSide, OrderStatus, OrderType, ProductType
from .results import (
    BacktestLog,
    BacktestMetrics,
    BacktestRequest,
    BacktestResult,
    BacktestRunConfig,
    BacktestTrade,
    EquityPoint,
    Position,
)
from .workflow import ExecutionLog, NodeType, WorkflowEdge, WorkflowGraph, WorkflowNode, WorkflowResult

__all__ = [
    "AppConfig",
    "BacktestSettings",
    "BrokerSettings",
    "LoggingConfig",
    "BrokerCredentials",
    "CandleInterval",
    "CandleRequest",
    "ExchangeSegment",
    "NormalizedCandles",
    "OrderRequest",
    "OrderResult",
    "OrderSide",
    "OrderStatus",
    "OrderType",
    "ProductType",
    "BacktestLog",
    "BacktestMetrics",
    "BacktestRequest",
    "BacktestResult",
    "BacktestRunConfig",
    "BacktestTrade",
    "EquityPoint",
    "Position",
    "ExecutionLog",
    "NodeType",
    "WorkflowEdge",
    "WorkflowGraph",
    "WorkflowNode",
    "WorkflowResult",
]
