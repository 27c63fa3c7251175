"""
Async Yopmail client running the blocking client in a thread pool.
"""

from __future__ import annotations
import asyncio
import functools
from concurrent.futures import Executor
from typing import Any, Callable, List, Optional

import requests

from yopmail.exceptions import RequestTimeoutError
from yopmail.logging import logger
from yopmail.models import RenderedMessage
from yopmail.session import Session
from yopmail.utils.deadline import Deadline
from yopmail.webmail.client import YopmailClient


def _buffered(func: Callable[..., requests.Response]) -> Callable[..., requests.Response]:
    """Read a streamed response body in the calling (worker) thread."""

    @functools.wraps(func)
    def call(*args: Any, **kwargs: Any) -> requests.Response:
        resp = func(*args, **kwargs)
        with resp:
            _ = resp.content
        return resp

    return call


class AsyncYopmailClient:
    """
    Awaitable wrapper around ``YopmailClient``.

    Each call runs in ``executor`` (the loop default when None) under one
    deadline: time spent waiting for the rate limiter is taken out of the
    budget handed to ``asyncio.wait_for`` and to the blocking client, so the
    worker thread abandons its request when the caller stops waiting.
    Cancelling the awaiting task propagates ``CancelledError`` immediately.

    ``get_inbox`` and ``delete_mail`` return responses whose body was already
    read off the event loop; ``resp.text`` never blocks.
    """

    def __init__(
        self,
        client: YopmailClient,
        *,
        rate_limiter=None,
        executor: Optional[Executor] = None,
    ) -> None:
        """
        Args:
            client: Blocking client to delegate to
            rate_limiter: Optional AsyncRateLimiter awaited before each call
            executor: Thread pool used for the blocking calls
        """
        self.client = client
        self.rate_limiter = rate_limiter
        self._executor = executor

    @classmethod
    async def create(
        cls,
        username: str,
        proxy: Optional[str] = None,
        *,
        rate_limiter=None,
        executor: Optional[Executor] = None,
        **client_kwargs: Any,
    ) -> "AsyncYopmailClient":
        """Build the blocking client (which does network I/O) off the event loop."""
        loop = asyncio.get_running_loop()
        client = await loop.run_in_executor(
            executor,
            functools.partial(YopmailClient, username, proxy, **client_kwargs),
        )
        return cls(client, rate_limiter=rate_limiter, executor=executor)

    @property
    def session(self) -> Session:
        return self.client.session

    @property
    def username(self) -> str:
        return self.client.username

    async def _run(self, func: Callable[..., Any], *args: Any, timeout: Optional[float] = None, operation: str) -> Any:
        deadline = Deadline(self.client.timeout if timeout is None else timeout)

        if self.rate_limiter:
            if not await self.rate_limiter.acquire(timeout=deadline.remaining(operation)):
                raise RequestTimeoutError("no request slot available before the deadline", operation=operation)

        remaining = deadline.remaining(operation)
        loop = asyncio.get_running_loop()
        call = functools.partial(func, *args, timeout=remaining)
        try:
            return await asyncio.wait_for(loop.run_in_executor(self._executor, call), timeout=remaining)
        except asyncio.TimeoutError as e:
            logger.error(f"{operation} did not complete within {deadline.timeout}s")
            raise RequestTimeoutError(f"deadline of {deadline.timeout}s exceeded", operation=operation) from e

    async def find_version(self, *, timeout: Optional[float] = None) -> str:
        return await self._run(self.client.find_version, timeout=timeout, operation="version")

    async def get_inbox(self, page: int = 1, *, timeout: Optional[float] = None) -> requests.Response:
        return await self._run(_buffered(self.client.get_inbox), page, timeout=timeout, operation="inbox")

    async def get_mail_ids(self, page: int = 1, *, timeout: Optional[float] = None) -> List[str]:
        return await self._run(self.client.get_mail_ids, page, timeout=timeout, operation="inbox")

    async def get_mail_body(
        self,
        mail_id: str,
        show_images: bool = False,
        *,
        timeout: Optional[float] = None,
    ) -> RenderedMessage:
        return await self._run(self.client.get_mail_body, mail_id, show_images, timeout=timeout, operation="mail body")

    async def delete_mail(self, mail_id: str, page: int = 1, *, timeout: Optional[float] = None) -> requests.Response:
        return await self._run(_buffered(self.client.delete_mail), mail_id, page, timeout=timeout, operation="delete mail")

    async def get_alternative_domains(self, *, timeout: Optional[float] = None) -> List[str]:
        return await self._run(self.client.get_alternative_domains, timeout=timeout, operation="alternative domains")

    async def close(self) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(self._executor, self.client.close)

    async def __aenter__(self) -> "AsyncYopmailClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
