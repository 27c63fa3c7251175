"""
Per-operation time budget shared by every request an operation issues.
"""

from __future__ import annotations
import time
from typing import Optional

from yopmail.exceptions import RequestTimeoutError


class Deadline:
    """
    Absolute point in time after which an operation must give up.

    A public client call creates one Deadline and hands it down to the
    bootstrap, the extractors and the final request, so a 10s budget covers
    the whole chain rather than each hop.
    """

    def __init__(self, timeout: Optional[float]) -> None:
        self.timeout = timeout
        self._expires_at = None if timeout is None else time.monotonic() + timeout

    def remaining(self, operation: Optional[str] = None) -> Optional[float]:
        """
        Seconds left, or None when unbounded.

        Raises:
            RequestTimeoutError: If the budget is already spent
        """
        if self._expires_at is None:
            return None
        left = self._expires_at - time.monotonic()
        if left <= 0:
            raise RequestTimeoutError(
                f"deadline of {self.timeout}s exceeded",
                operation=operation,
            )
        return left

    @property
    def expired(self) -> bool:
        return self._expires_at is not None and time.monotonic() >= self._expires_at

    def __repr__(self) -> str:
        return f"Deadline(timeout={self.timeout!r})"
