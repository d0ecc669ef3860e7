# algoflow/models/results.py
"""
Backtest results and performance metrics models.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .credentials import BrokerCredentials
from .orders import OrderSide
from .workflow import WorkflowGraph


class Position(BaseModel):
    """Long-only position held during a backtest."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    quantity: float = Field(default=0.0, ge=0, description="Units held")
    average_price: float = Field(default=0.0, description="Average entry price")

    @property
    def is_flat(self) -> bool:
        return self.quantity == 0


class BacktestTrade(BaseModel):
    """Simulated fill. ``pnl`` is only set on closing (SELL) trades."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    type: OrderSide = Field(..., description="Trade side (BUY/SELL)")
    quantity: float = Field(..., description="Filled quantity")
    price: float = Field(..., description="Fill price")
    timestamp: int = Field(..., description="Fill time in epoch milliseconds")
    pnl: Optional[float] = Field(None, description="Realized P&L on closing trades")

    @property
    def is_closing(self) -> bool:
        return self.pnl is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return self.model_dump(by_alias=True, exclude_none=True, mode='json')


class EquityPoint(BaseModel):
    """Point on the equity curve."""
    timestamp: int = Field(..., description="Epoch milliseconds")
    equity: float = Field(..., description="Account equity")

    def to_dict(self) -> Dict[str, Any]:
        return {'timestamp': self.timestamp, 'equity': self.equity}


class BacktestMetrics(BaseModel):
    """Performance metrics for a backtest run."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        ser_json_inf_nan='strings',
    )

    total_trades: int = Field(..., description="Number of trades, opening and closing")
    win_rate: float = Field(..., description="Fraction of closing trades with pnl > 0")
    total_pnl: float = Field(..., alias='totalPNL', description="Sum of realized pnl")
    max_drawdown: float = Field(..., ge=0, description="Largest peak-to-trough decline as a fraction")
    sharpe: Optional[float] = Field(None, description="Mean / stddev of per-trade returns")
    profit_factor: Optional[float] = Field(None, description="Gross profit / gross loss")
    avg_trade_pnl: Optional[float] = Field(None, alias='avgTradePNL', description="Average pnl per closing trade")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return self.model_dump(by_alias=True, exclude_none=True, mode='json')


class BacktestLog(BaseModel):
    """Per-step log entry recorded while replaying candles."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    node_id: str = Field(..., description="Node that produced the entry")
    status: str = Field(..., description="completed or error")
    timestamp: int = Field(..., description="Wall-clock epoch milliseconds")
    result: Optional[Dict[str, Any]] = Field(None, description="Step output")
    error: Optional[str] = Field(None, description="Error message when status is error")


class BacktestRequest(BaseModel):
    """Parameters for replaying a workflow over historical candles."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    workflow: WorkflowGraph = Field(..., description="Workflow to replay")
    symbol: str = Field(..., description="Trading symbol")
    broker: str = Field(default="dhan", description="Broker supplying historical candles")
    interval: str = Field(default="1d", description="Candle interval")
    start: int = Field(..., alias='from', description="Range start in epoch milliseconds")
    end: int = Field(..., alias='to', description="Range end in epoch milliseconds")
    initial_capital: float = Field(default=100000.0, gt=0, description="Starting capital")
    security_id: Optional[str] = Field(None, description="Broker security identifier")
    exchange_segment: Optional[str] = Field(None, description="Exchange segment")
    creds: Optional[BrokerCredentials] = Field(None, description="Broker credentials")


class BacktestRunConfig(BaseModel):
    """Echo of the parameters a backtest ran with."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    symbol: str
    broker: str
    interval: str
    start: int = Field(..., alias='from', description="Range start in epoch milliseconds")
    end: int = Field(..., alias='to', description="Range end in epoch milliseconds")
    initial_capital: float
    candle_count: int


class BacktestResult(BaseModel):
    """Complete backtest results."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, ser_json_inf_nan='strings')

    config: BacktestRunConfig
    metrics: BacktestMetrics
    equity_curve: List[EquityPoint] = Field(default_factory=list)
    logs: List[BacktestLog] = Field(default_factory=list)
    trades: List[BacktestTrade] = Field(default_factory=list)

    @property
    def final_equity(self) -> float:
        if self.equity_curve:
            return self.equity_curve[-1].equity
        return self.config.initial_capital

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return self.model_dump(by_alias=True, exclude_none=True, mode='json')

    def save_to_json(self, file_path: str) -> None:
        """Save results to JSON file."""
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2)
