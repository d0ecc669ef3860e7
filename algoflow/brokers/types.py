"""
Broker names and router actions.
"""

from enum import Enum

from .errors import BrokerValidationError


class BrokerName(str, Enum):
    """Supported brokers."""
    DHAN = "dhan"
    FYERS = "fyers"
    ANGEL = "angel"

    @classmethod
    def parse(cls, value: "BrokerName | str") -> "BrokerName":
        """
        Coerce a name to the enum.

        Raises:
            BrokerValidationError: For unknown broker names
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(b.value for b in cls)
            raise BrokerValidationError(f"Unknown broker: {value}. Valid brokers: {valid}") from None


class BrokerAction(str, Enum):
    """Operations the router can dispatch."""
    MARKET_DATA = "marketData"
    PLACE_ORDER = "placeOrder"

    @classmethod
    def parse(cls, value: "BrokerAction | str") -> "BrokerAction":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(a.value for a in cls)
            raise BrokerValidationError(f"Unknown action: {value}. Valid actions: {valid}") from None
