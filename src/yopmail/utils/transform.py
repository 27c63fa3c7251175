# src/yopmail/utils/transform.py
"""
Small value transformations shared by the client and the models.
"""

from __future__ import annotations
import random
import secrets
import string
import time

from yopmail.logging import logger

__all__ = ["normalize_username", "strip_domain_marker", "format_ytime", "random_mail_id"]

_ID_CHARSET = string.ascii_lowercase + string.ascii_uppercase + string.digits


def normalize_username(username: str) -> str:
    """
    Reduce "name@domain" to the mailbox name the service expects.

    Everything after the first "@" is dropped; a bare name is returned as-is.
    """
    return username.split("@", 1)[0]


def strip_domain_marker(text: str) -> str:
    """Turn a domain list entry like "@yopmail.fr" into "yopmail.fr"."""
    return text.removeprefix("@")


def format_ytime(hour: int, minute: int) -> str:
    """
    Render the freshness cookie value.

    The webmail script builds it as ``hours + ":" + minutes`` without zero
    padding, so 09:05 becomes "9:5".
    """
    return f"{hour}:{minute}"


def random_mail_id(length: int = 6) -> str:
    """
    Generate a random alphanumeric identifier.

    Uses the OS entropy source. If that source fails, falls back to a
    clock-seeded ``random.Random``: the id is then predictable but still
    available, which is acceptable because it only labels a rendered message
    locally and never authenticates anything.
    """
    try:
        return "".join(secrets.choice(_ID_CHARSET) for _ in range(length))
    except (OSError, NotImplementedError) as e:
        logger.warning(f"Secure random source unavailable ({e}), using reduced-quality fallback")
        rng = random.Random(time.time_ns())
        return "".join(rng.choice(_ID_CHARSET) for _ in range(length))
