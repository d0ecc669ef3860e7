# algoflow/models/config.py
"""
Configuration models for the engine.
"""

from typing import Dict, Any, Optional

from pydantic import BaseModel, Field, field_validator

from .market_data import INTERVAL_MINUTES


class BrokerSettings(BaseModel):
    """Broker access configuration."""
    default_broker: str = Field(default="dhan", description="Broker used when a request names none")
    timeout_ms: int = Field(default=30000, ge=1, description="HTTP request timeout in milliseconds")
    dry_run: bool = Field(default=True, description="Simulate live orders instead of sending them")

    @field_validator('default_broker')
    @classmethod
    def validate_default_broker(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ('dhan', 'fyers', 'angel'):
            raise ValueError("default_broker must be one of: dhan, fyers, angel")
        return v


class BacktestSettings(BaseModel):
    """Backtest execution configuration."""
    initial_capital: float = Field(default=100000.0, gt=0, description="Starting capital")
    interval: str = Field(default="1d", description="Default candle interval")
    default_lookback: int = Field(default=50, ge=1, description="Lookback when a workflow has no indicators node")
    show_progress: bool = Field(default=False, description="Show a progress bar while replaying candles")
    results_dir: str = Field(default="results", description="Directory for saved backtest results")

    @field_validator('interval')
    @classmethod
    def validate_interval(cls, v: str) -> str:
        if v not in INTERVAL_MINUTES:
            raise ValueError(f"Interval must be one of {list(INTERVAL_MINUTES)}")
        return v


class UIConfig(BaseModel):
    """API server configuration."""
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")
    title: str = Field(default="algoflow", description="API title")


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s", description="Log format")
    file: Optional[str] = Field(default=None, description="Log file path")


class AppConfig(BaseModel):
    """Main application configuration."""
    broker: BrokerSettings = Field(default_factory=BrokerSettings)
    backtest: BacktestSettings = Field(default_factory=BacktestSettings)
    ui: UIConfig = Field(default_factory=UIConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return self.model_dump(mode='python')

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'AppConfig':
        """Create from dictionary."""
        return cls(**config_dict)
