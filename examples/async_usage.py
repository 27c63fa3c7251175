"""
Async usage example for the Yopmail client.

Reads several mailboxes concurrently; each mailbox has its own client and
session, and every call is bounded by a timeout.
"""

import asyncio

from yopmail.config import _load_env
from yopmail.logging import logger, setup_logging
from yopmail.utils.rate_limiter import AsyncRateLimiter
from yopmail.webmail.client_async import AsyncYopmailClient


async def newest_mail(username: str, limiter: AsyncRateLimiter, proxy: str | None):
    async with await AsyncYopmailClient.create(username, proxy, rate_limiter=limiter) as client:
        mail_ids = await client.get_mail_ids(1, timeout=20)
        if not mail_ids:
            return username, None
        message = await client.get_mail_body(mail_ids[0], timeout=20)
        return username, message


async def main_async():
    cfg = _load_env()
    setup_logging(log_level=cfg["LOG_LEVEL"], log_file=cfg["LOG_FILE"])

    # One limiter for all mailboxes: they share the same egress address
    limiter = AsyncRateLimiter(max_calls=30, time_window_seconds=60)
    usernames = ["test", "demo", "hello"]

    results = await asyncio.gather(
        *(newest_mail(u, limiter, cfg["PROXY"]) for u in usernames),
        return_exceptions=True,
    )

    for result in results:
        if isinstance(result, Exception):
            logger.error(f"Mailbox failed: {result}")
            continue
        username, message = result
        if message is None:
            print(f"{username}: empty inbox")
        else:
            print(f"{username}: {message.mail_id} ({len(message.content)} chars)")


if __name__ == "__main__":
    asyncio.run(main_async())
