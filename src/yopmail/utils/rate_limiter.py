"""
Client-side pacing for webmail requests.

The service answers with 429 (and eventually a CAPTCHA) when one egress
address sends too many requests. These limiters space outbound calls out;
they never retry anything themselves.
"""

from __future__ import annotations
import time
import threading
import asyncio
from collections import deque
from typing import Optional
from yopmail.logging import logger


class _SlidingWindow:
    """Call timestamps inside the last ``time_window`` seconds."""

    def __init__(self, max_calls: int, time_window_seconds: float = 60):
        if max_calls < 1:
            raise ValueError(f"max_calls must be at least 1, got {max_calls}")
        self.max_calls = max_calls
        self.time_window = time_window_seconds
        self.call_times: deque[float] = deque()

    def _reserve(self, now: float) -> float:
        """
        Record a call at ``now`` if a slot is free.

        Returns 0.0 when the call was recorded, otherwise the number of
        seconds until the oldest call leaves the window. Caller holds the lock.
        """
        while self.call_times and (now - self.call_times[0]) > self.time_window:
            self.call_times.popleft()

        if len(self.call_times) < self.max_calls:
            self.call_times.append(now)
            return 0.0

        return self.time_window - (now - self.call_times[0]) + 0.1

    def _log_refusal(self) -> None:
        logger.warning(
            f"Rate limit exceeded: {len(self.call_times)}/{self.max_calls} calls "
            f"in the last {self.time_window}s"
        )

    def _wait_time_allowed(self, wait_time: float, deadline: Optional[float]) -> bool:
        """Whether sleeping ``wait_time`` still ends before ``deadline`` (monotonic)."""
        if deadline is None:
            return True
        left = deadline - time.monotonic()
        if wait_time > left:
            logger.warning(f"Rate limit wait time ({wait_time:.2f}s) exceeds timeout ({max(left, 0):.2f}s left)")
            return False
        return True


class RateLimiter(_SlidingWindow):
    """
    Thread-safe sliding-window limiter.

    Shared by every thread issuing requests through one client.
    """

    def __init__(self, max_calls: int, time_window_seconds: float = 60):
        """
        Args:
            max_calls: Maximum number of requests allowed in the time window
            time_window_seconds: Time window in seconds (default: 60 = 1 minute)
        """
        super().__init__(max_calls, time_window_seconds)
        self._lock = threading.Lock()

    def acquire(self, blocking: bool = True, timeout: Optional[float] = None) -> bool:
        """
        Acquire permission to send one request.

        Several threads can wake up for the same freed slot; the ones that
        lose it go back to waiting until ``timeout`` is used up.

        Args:
            blocking: If True, wait until a slot is available
            timeout: Maximum time to wait in seconds (None = wait indefinitely)

        Returns:
            True if permission granted, False if refused or the wait would exceed timeout
        """
        deadline = None if timeout is None else time.monotonic() + timeout

        while True:
            with self._lock:
                wait_time = self._reserve(time.time())
                if wait_time and not blocking:
                    self._log_refusal()
                    return False

            if not wait_time:
                return True

            if not self._wait_time_allowed(wait_time, deadline):
                return False

            logger.debug(f"Rate limit reached, waiting {wait_time:.2f}s...")
            time.sleep(wait_time)

    def __enter__(self):
        self.acquire()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        pass


class AsyncRateLimiter(_SlidingWindow):
    """
    Coroutine-safe sliding-window limiter for ``AsyncYopmailClient``.

    Waiting happens with ``asyncio.sleep`` so the event loop keeps running.
    """

    def __init__(self, max_calls: int, time_window_seconds: float = 60):
        super().__init__(max_calls, time_window_seconds)
        self._lock = asyncio.Lock()

    async def acquire(self, blocking: bool = True, timeout: Optional[float] = None) -> bool:
        """Async counterpart of ``RateLimiter.acquire``."""
        deadline = None if timeout is None else time.monotonic() + timeout

        while True:
            async with self._lock:
                wait_time = self._reserve(time.time())
                if wait_time and not blocking:
                    self._log_refusal()
                    return False

            if not wait_time:
                return True

            if not self._wait_time_allowed(wait_time, deadline):
                return False

            logger.debug(f"Rate limit reached, waiting {wait_time:.2f}s...")
            await asyncio.sleep(wait_time)

    async def __aenter__(self):
        await self.acquire()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        pass
