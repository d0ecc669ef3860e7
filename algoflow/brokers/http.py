"""
Shared HTTP wrapper for broker adapters.

Injects the ``access-token`` header, applies a per-request timeout and
translates transport failures and HTTP status codes into broker errors.
No retries happen here; callers decide on retry policy.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import httpx

from .errors import BrokerAPIError, BrokerAuthError, BrokerNetworkError, BrokerRateLimitError


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 30000


def _retry_after_ms(value: Optional[str]) -> Optional[int]:
    """Retry-After seconds header as milliseconds, when numeric."""
    if not value:
        return None
    try:
        return int(float(value) * 1000)
    except ValueError:
        return None


class BrokerHttpClient:
    """
    Thin fetch wrapper bound to one base URL and access token.

    ``transport`` lets tests substitute ``httpx.MockTransport``.
    """

    def __init__(
        self,
        base_url: str,
        access_token: str,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.timeout_ms = timeout_ms
        self.transport = transport

    def _headers(self, extra: Optional[Mapping[str, str]]) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "access-token": self.access_token,
        }
        if extra:
            headers.update(extra)
        return headers

    def request(
        self,
        method: str,
        endpoint: str,
        json: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout_ms: Optional[int] = None,
    ) -> Any:
        """
        Send a request and return the decoded JSON body.

        Raises:
            BrokerAuthError: On HTTP 401/403
            BrokerRateLimitError: On HTTP 429
            BrokerAPIError: On any other non-2xx status or an unreadable body
            BrokerNetworkError: On timeout or connection failure
        """
        effective_timeout = timeout_ms if timeout_ms is not None else self.timeout_ms
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"{method} {url}")

        try:
            with httpx.Client(
                timeout=httpx.Timeout(effective_timeout / 1000),
                transport=self.transport,
            ) as client:
                response = client.request(
                    method,
                    url,
                    json=json,
                    params=params,
                    headers=self._headers(headers),
                )
        except httpx.TimeoutException as e:
            raise BrokerNetworkError(f"Request timed out after {effective_timeout}ms") from e
        except httpx.TransportError as e:
            raise BrokerNetworkError("Failed to connect to broker API") from e

        return self._handle_response(response)

    def get(self, endpoint: str, **kwargs: Any) -> Any:
        return self.request("GET", endpoint, **kwargs)

    def post(self, endpoint: str, **kwargs: Any) -> Any:
        return self.request("POST", endpoint, **kwargs)

    @staticmethod
    def _handle_response(response: httpx.Response) -> Any:
        status = response.status_code

        if status in (401, 403):
            raise BrokerAuthError()

        if status == 429:
            retry_after_ms = _retry_after_ms(response.headers.get("retry-after"))
            raise BrokerRateLimitError("Broker rate limit exceeded", retry_after_ms)

        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            try:
                data = response.json()
            except ValueError:
                raise BrokerAPIError("Failed to parse JSON response", status) from None

            if not response.is_success:
                broker_message = None
                if isinstance(data, dict) and "message" in data:
                    broker_message = str(data["message"])
                raise BrokerAPIError(f"Broker API error: {response.reason_phrase}", status, broker_message)
            return data

        if not response.is_success:
            raise BrokerAPIError(response.text or response.reason_phrase, status)

        return {}
