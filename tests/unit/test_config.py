"""
Unit tests for configuration loading.
"""

import pytest
from unittest.mock import patch

from yopmail.config import _init_client, _load_env
from yopmail.utils.rate_limiter import RateLimiter

_VARS = [
    "YOPMAIL_BASE_URL",
    "YOPMAIL_PROXY",
    "YOPMAIL_TIMEOUT",
    "YOPMAIL_VERSION_TIMEOUT",
    "YOPMAIL_DEFAULT_VERSION",
    "YOPMAIL_RATE_LIMIT_PER_MINUTE",
    "LOG_LEVEL",
    "LOG_FILE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in _VARS:
        monkeypatch.delenv(var, raising=False)
    with patch("yopmail.config.load_dotenv"):
        yield monkeypatch


class TestLoadEnv:

    def test_defaults(self):
        cfg = _load_env()
        assert cfg["BASE_URL"] == "https://yopmail.com/en/"
        assert cfg["PROXY"] is None
        assert cfg["TIMEOUT"] == 30.0
        assert cfg["VERSION_TIMEOUT"] == 10.0
        assert cfg["DEFAULT_VERSION"] == "9.0"
        assert cfg["RATE_LIMIT_PER_MINUTE"] == 0
        assert cfg["LOG_LEVEL"] == "INFO"
        assert cfg["LOG_FILE"] is None

    def test_overrides(self, clean_env):
        clean_env.setenv("YOPMAIL_PROXY", " http://127.0.0.1:8080 ")
        clean_env.setenv("YOPMAIL_TIMEOUT", "12.5")
        clean_env.setenv("YOPMAIL_RATE_LIMIT_PER_MINUTE", "20")
        clean_env.setenv("LOG_LEVEL", "debug")

        cfg = _load_env()

        assert cfg["PROXY"] == "http://127.0.0.1:8080"
        assert cfg["TIMEOUT"] == 12.5
        assert cfg["RATE_LIMIT_PER_MINUTE"] == 20
        assert cfg["LOG_LEVEL"] == "DEBUG"

    @pytest.mark.parametrize("var,value", [
        ("YOPMAIL_BASE_URL", "ftp://yopmail.com/en/"),
        ("YOPMAIL_BASE_URL", "https://yopmail.com/en"),
        ("YOPMAIL_TIMEOUT", "0"),
        ("YOPMAIL_TIMEOUT", "301"),
        ("YOPMAIL_VERSION_TIMEOUT", "0.5"),
        ("YOPMAIL_DEFAULT_VERSION", "  "),
        ("YOPMAIL_RATE_LIMIT_PER_MINUTE", "-1"),
        ("YOPMAIL_RATE_LIMIT_PER_MINUTE", "5000"),
    ])
    def test_invalid_values(self, clean_env, var, value):
        clean_env.setenv(var, value)
        with pytest.raises(ValueError):
            _load_env()


class TestInitClient:

    def test_without_rate_limit(self):
        cfg = _load_env()
        with patch("yopmail.config.YopmailClient") as client_cls:
            _init_client(cfg, "test")

        args, kwargs = client_cls.call_args
        assert args == ("test", None)
        assert kwargs["rate_limiter"] is None
        assert kwargs["base_url"] == "https://yopmail.com/en/"
        assert kwargs["timeout"] == 30.0

    def test_with_rate_limit(self, clean_env):
        clean_env.setenv("YOPMAIL_RATE_LIMIT_PER_MINUTE", "15")
        cfg = _load_env()
        with patch("yopmail.config.YopmailClient") as client_cls:
            _init_client(cfg, "test")

        limiter = client_cls.call_args.kwargs["rate_limiter"]
        assert isinstance(limiter, RateLimiter)
        assert limiter.max_calls == 15
        assert limiter.time_window == 60

    def test_construction_errors_propagate(self):
        cfg = _load_env()
        with pytest.raises(ValueError):
            _init_client(cfg, "not valid")
