from __future__ import annotations


class BrokerError(Exception):
    """Base exception for broker failures."""

    def __init__(self, message: str, code: str = "BROKER_ERROR", status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code

    def to_dict(self) -> dict:
        payload = {"error": self.message, "code": self.code}
        if self.status_code is not None:
            payload["status_code"] = self.status_code
        return payload


class BrokerAuthError(BrokerError):
    """Raised when credentials are missing or rejected."""

    def __init__(self, message: str = "Authentication failed. Check your access token."):
        super().__init__(message, "AUTH_ERROR", 401)


class BrokerAPIError(BrokerError):
    """Raised on a non-2xx broker response or an error payload."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        broker_message: str | None = None,
    ):
        super().__init__(message, "API_ERROR", status_code)
        self.broker_message = broker_message


class BrokerNetworkError(BrokerError):
    """Raised on timeouts and connection failures."""

    def __init__(self, message: str):
        super().__init__(message, "NETWORK_ERROR")


class BrokerValidationError(BrokerError):
    """Raised before any network call when a request is invalid."""

    def __init__(self, message: str):
        super().__init__(message, "VALIDATION_ERROR", 400)


class BrokerRateLimitError(BrokerError):
    """Raised when the broker throttles requests."""

    def __init__(self, message: str = "Rate limit exceeded", retry_after_ms: int | None = None):
        super().__init__(message, "RATE_LIMIT_ERROR", 429)
        self.retry_after_ms = retry_after_ms
