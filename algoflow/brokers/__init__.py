"""
Broker abstraction: validation, HTTP transport, adapters and routing.
"""

from .adapters import AngelAdapter, BrokerAdapter, DhanAdapter, FyersAdapter
from .candles import fetch_candles
from .capabilities import (
    BROKER_CAPABILITIES,
    STANDARD_INTERVALS,
    BrokerCapabilities,
    RateLimit,
    get_broker_interval,
    get_capabilities,
    is_interval_supported,
)
from .errors import (
    BrokerAPIError,
    BrokerAuthError,
    BrokerError,
    BrokerNetworkError,
    BrokerRateLimitError,
    BrokerValidationError,
)
from .http import DEFAULT_TIMEOUT_MS, BrokerHttpClient
from .orders import execute_order_with_credentials
from .router import BrokerRouter, broker_router, create_default_router, normalize_error
from .simulation import create_simulated_order_result, generate_simulated_order_id
from .types import BrokerAction, BrokerName
from .validators import ValidationResult, validate_candle_request, validate_order

__all__ = [
    'BrokerAction',
    'BrokerName',
    'BrokerCapabilities',
    'RateLimit',
    'BROKER_CAPABILITIES',
    'STANDARD_INTERVALS',
    'get_capabilities',
    'get_broker_interval',
    'is_interval_supported',
    'ValidationResult',
    'validate_candle_request',
    'validate_order',
    'BrokerHttpClient',
    'DEFAULT_TIMEOUT_MS',
    'BrokerAdapter',
    'DhanAdapter',
    'FyersAdapter',
    'AngelAdapter',
    'BrokerRouter',
    'broker_router',
    'create_default_router',
    'normalize_error',
    'fetch_candles',
    'execute_order_with_credentials',
    'create_simulated_order_result',
    'generate_simulated_order_id',
    'BrokerError',
    'BrokerAuthError',
    'BrokerAPIError',
    'BrokerNetworkError',
    'BrokerValidationError',
    'BrokerRateLimitError',
]
