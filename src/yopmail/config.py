"""
Configuration management with validation and client construction.
"""

from __future__ import annotations
import os
from typing import TypedDict

from dotenv import load_dotenv

from yopmail.logging import logger
from yopmail.session import DEFAULT_VERSION
from yopmail.utils.rate_limiter import RateLimiter
from yopmail.webmail.client import YopmailClient


class Config(TypedDict):
    """Typed configuration dictionary."""
    BASE_URL: str
    PROXY: str | None
    TIMEOUT: float
    VERSION_TIMEOUT: float
    DEFAULT_VERSION: str
    RATE_LIMIT_PER_MINUTE: int  # 0 disables client-side pacing
    LOG_LEVEL: str
    LOG_FILE: str | None


def _load_env() -> Config:
    """
    Load environment variables (and a .env file, if any) and return validated configuration.

    All vars are optional:
      - YOPMAIL_BASE_URL (default: "https://yopmail.com/en/")
      - YOPMAIL_PROXY (default: none)
      - YOPMAIL_TIMEOUT (default: 30)
      - YOPMAIL_VERSION_TIMEOUT (default: 10)
      - YOPMAIL_DEFAULT_VERSION (default: "9.0")
      - YOPMAIL_RATE_LIMIT_PER_MINUTE (default: 0)
      - LOG_LEVEL (default: "INFO")
      - LOG_FILE (default: None)
    """
    load_dotenv()

    base_url = os.getenv("YOPMAIL_BASE_URL", YopmailClient.BASE_URL).strip()
    proxy = os.getenv("YOPMAIL_PROXY", "").strip() or None
    timeout = float(os.getenv("YOPMAIL_TIMEOUT", "30"))
    version_timeout = float(os.getenv("YOPMAIL_VERSION_TIMEOUT", "10"))
    default_version = os.getenv("YOPMAIL_DEFAULT_VERSION", DEFAULT_VERSION).strip()
    rate_limit = int(os.getenv("YOPMAIL_RATE_LIMIT_PER_MINUTE", "0"))

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    log_file = os.getenv("LOG_FILE", "").strip() or None

    if not base_url.startswith(("http://", "https://")):
        raise ValueError(f"YOPMAIL_BASE_URL must be an http(s) URL, got {base_url!r}")
    if not base_url.endswith("/"):
        raise ValueError(f"YOPMAIL_BASE_URL must end with '/', got {base_url!r}")

    if not (1 <= timeout <= 300):
        raise ValueError(f"YOPMAIL_TIMEOUT must be between 1 and 300 seconds, got {timeout}")

    if not (1 <= version_timeout <= 300):
        raise ValueError(
            f"YOPMAIL_VERSION_TIMEOUT must be between 1 and 300 seconds, got {version_timeout}"
        )

    if not default_version:
        raise ValueError("YOPMAIL_DEFAULT_VERSION must not be empty")

    if not (0 <= rate_limit <= 1000):
        raise ValueError(
            f"YOPMAIL_RATE_LIMIT_PER_MINUTE must be between 0 and 1000, got {rate_limit}"
        )

    cfg: Config = {
        "BASE_URL": base_url,
        "PROXY": proxy,
        "TIMEOUT": timeout,
        "VERSION_TIMEOUT": version_timeout,
        "DEFAULT_VERSION": default_version,
        "RATE_LIMIT_PER_MINUTE": rate_limit,
        "LOG_LEVEL": log_level,
        "LOG_FILE": log_file,
    }

    logger.debug(f"Configuration loaded: BASE_URL={base_url}, PROXY={'set' if proxy else 'unset'}, LOG_LEVEL={log_level}")
    return cfg


def _init_client(cfg: Config, username: str) -> YopmailClient:
    """
    Build a client for ``username`` from configuration.

    Raises:
        InvalidUsernameError, InvalidProxyError, ClientInitError: From YopmailClient
    """
    rate_limiter = None
    if cfg["RATE_LIMIT_PER_MINUTE"] > 0:
        rate_limiter = RateLimiter(max_calls=cfg["RATE_LIMIT_PER_MINUTE"], time_window_seconds=60)

    try:
        return YopmailClient(
            username,
            cfg["PROXY"],
            base_url=cfg["BASE_URL"],
            timeout=cfg["TIMEOUT"],
            version_timeout=cfg["VERSION_TIMEOUT"],
            default_version=cfg["DEFAULT_VERSION"],
            rate_limiter=rate_limiter,
        )
    except Exception as e:
        logger.error(f"Failed to initialize client: {e}")
        raise
