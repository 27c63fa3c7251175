"""
Single entry point for outbound GETs.

Applies client-side pacing, hands the remaining deadline to ``requests`` and
turns transport failures and non-2xx answers into ``YopmailError`` kinds.
"""

from __future__ import annotations
from typing import Mapping, Optional

import requests

from yopmail.exceptions import RateLimitError, RequestTimeoutError, StatusError, TransportError
from yopmail.logging import logger
from yopmail.utils.deadline import Deadline


def check_status(resp: requests.Response, operation: str) -> None:
    """
    Raise for anything but 2xx. The response is closed before raising.

    Raises:
        RateLimitError: On 429
        StatusError: On any other non-2xx status
    """
    code = resp.status_code
    if 200 <= code < 300:
        return

    resp.close()
    if code == 429:
        logger.warning(f"Rate limited during {operation} request")
        raise RateLimitError(operation=operation)
    logger.error(f"{operation} request answered with status {code}")
    raise StatusError(code, operation=operation)


def fetch(
    http: requests.Session,
    url: str,
    *,
    deadline: Deadline,
    operation: str,
    params: Optional[Mapping[str, str]] = None,
    rate_limiter=None,
    stream: bool = False,
) -> requests.Response:
    """
    Issue a GET and return the 2xx response.

    Args:
        http: Shared requests session (cookies, proxies, connection pool)
        url: Target URL without query string
        deadline: Budget of the enclosing client operation
        operation: Label used in logs and error messages
        params: Query parameters, encoded in insertion order
        rate_limiter: Optional RateLimiter consulted before sending
        stream: If True the body is not read; caller must close the response

    Raises:
        RequestTimeoutError: If the deadline expired before or during the call
        TransportError: For any other transport failure
        RateLimitError, StatusError: See ``check_status``
    """
    if rate_limiter and not rate_limiter.acquire(timeout=deadline.remaining(operation)):
        raise RequestTimeoutError("no request slot available before the deadline", operation=operation)

    timeout = deadline.remaining(operation)
    try:
        resp = http.get(url, params=params, timeout=timeout, stream=stream)
    except requests.Timeout as e:
        logger.error(f"{operation} request timed out: {e}")
        raise RequestTimeoutError(f"request to {url} timed out: {e}", operation=operation) from e
    except requests.RequestException as e:
        logger.error(f"Couldn't process {operation} request: {e}")
        raise TransportError(f"request to {url} failed: {e}", operation=operation) from e

    check_status(resp, operation)
    return resp
