"""
Broker adapters.
"""

from .angel import AngelAdapter
from .base import BrokerAdapter
from .dhan import DhanAdapter
from .fyers import FyersAdapter

__all__ = [
    'BrokerAdapter',
    'DhanAdapter',
    'FyersAdapter',
    'AngelAdapter',
]
