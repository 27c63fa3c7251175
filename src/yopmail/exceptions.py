"""Custom exceptions for the Yopmail client."""

from __future__ import annotations
from typing import Optional


class YopmailError(Exception):
    """Base exception for all Yopmail client errors.

    ``operation`` names the call the error surfaced under (``"inbox"``,
    ``"mail body"``, ...), when known.
    """

    def __init__(self, message: str = "", *, operation: Optional[str] = None) -> None:
        super().__init__(message)
        self.operation = operation

    def __str__(self) -> str:
        message = super().__str__()
        if self.operation:
            return f"[{self.operation}] {message}"
        return message


class InvalidUsernameError(YopmailError, ValueError):
    """Raised when a mailbox name contains characters the service rejects."""


class InvalidProxyError(YopmailError, ValueError):
    """Raised when the proxy URL cannot be used by the transport."""


class InvalidMailIdError(YopmailError, ValueError):
    """Raised when an empty mail id is passed to a read or delete."""


class ClientInitError(YopmailError):
    """Raised when the HTTP transport could not be set up."""


class RateLimitError(YopmailError):
    """Raised on HTTP 429. Back off or switch egress (proxy) before retrying."""

    def __init__(self, message: str = "", *, operation: Optional[str] = None) -> None:
        super().__init__(
            message or "too many requests (429 status code), use a proxy or try again later",
            operation=operation,
        )
        self.status_code = 429


class TokenNotFoundError(YopmailError):
    """Raised when a session token could not be scraped."""

    token = ""

    def __init__(self, message: str = "", *, operation: Optional[str] = None) -> None:
        super().__init__(message or f"couldn't find '{self.token}' parameter", operation=operation)


class VersionNotFoundError(TokenNotFoundError):
    token = "version"

    def __init__(self, message: str = "", *, operation: Optional[str] = None) -> None:
        super().__init__(message or "couldn't find Yopmail version", operation=operation)


class YPNotFoundError(TokenNotFoundError):
    token = "yp"


class YJNotFoundError(TokenNotFoundError):
    token = "yj"


class StatusError(YopmailError):
    """Raised for any non-2xx answer other than 429."""

    def __init__(self, status_code: int, *, operation: Optional[str] = None) -> None:
        super().__init__(f"unexpected status code: {status_code}", operation=operation)
        self.status_code = status_code


class TransportError(YopmailError):
    """Wraps a failure of the underlying HTTP transport."""


class RequestTimeoutError(TransportError):
    """Raised when the caller's time budget ran out before or during a call."""
