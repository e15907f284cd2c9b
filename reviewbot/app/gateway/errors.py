from __future__ import annotations

from typing import Optional


class GatewayError(Exception):
    """Base class for failures talking to the remote analysis service."""


class QuotaExceededError(GatewayError):
    """Raised when the service answers 429."""

    def __init__(self, retry_after: Optional[int] = None) -> None:
        super().__init__("quota exceeded")
        self.retry_after = retry_after


class TransportError(GatewayError):
    """Raised when the service cannot be reached (DNS, connect, timeout)."""


class ServerError(GatewayError):
    """Raised for non-quota error statuses and malformed 2xx payloads."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


__all__ = ["GatewayError", "QuotaExceededError", "TransportError", "ServerError"]
