"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
from datetime import datetime
from pathlib import Path

# Add src to path for imports
PROJ_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = PROJ_ROOT / "src"
for path in (SRC_DIR, PROJ_ROOT):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from tests.mocks.http_mock import (  # noqa: E402
    BASE_URL,
    DOMAIN_URL,
    INBOX_URL,
    MAIL_URL,
    WEBMAIL_JS_URL,
    FakeHTTP,
    make_response,
)

HOME_HTML = """
<html><head>
<script src="/js/jquery.min.js"></script>
<script src="/ver/9.2/webmail.js"></script>
<script src="/ver/1.0/webmail.js"></script>
</head><body>
<form id="f"><input type="hidden" name="yp" id="yp" value="QZGZ5AGx1AGN"></form>
</body></html>
"""

WEBMAIL_JS = "function r(){var u='inbox?login='+l+'&p='+p+'&yp='+$('#yp').value+'&yj=RAGt1ZmD5BQL&v='+ver;}"

INBOX_HTML = """
<html><body>
<div class="m" id="e_ZwRjAGVkZGHlZQN0ZQNjAmx2ZGN0AD=="><span>Newest</span></div>
<div class="lm">not a mail</div>
<div class="m" id="e_ZwRjAGVkZGHlZQN0ZQNjAmx2ZGNmZD=="><span>Middle</span></div>
<div class="m" id="e_ZwRjAGVkZGHlZQN0ZQNjAmx2ZGL5AD=="><span>Oldest</span></div>
</body></html>
"""

EMPTY_INBOX_HTML = "<html><body><div class='wminboxheader'>0 mail</div></body></html>"

MAIL_HTML = """
<html><body>
<div class="fl"><div class="ellipsis">From: sender@example.com</div></div>
<div id="mail"><div>Hello <b>there</b></div></div>
</body></html>
"""

DOMAINS_HTML = """
<html><body>
<div class="lstdom">
<div>@yopmail.fr</div>
<div>@cool.fr.nf</div>
<div> @jetable.fr.nf </div>
</div>
</body></html>
"""


@pytest.fixture
def home_html():
    return HOME_HTML


@pytest.fixture
def routes():
    """Routes of a healthy webmail; tests override single entries."""
    return {
        BASE_URL: make_response(200, HOME_HTML),
        WEBMAIL_JS_URL.format(version="9.2"): make_response(200, WEBMAIL_JS),
        # Script of the fallback version, used when discovery is skipped
        WEBMAIL_JS_URL.format(version="9.0"): make_response(200, WEBMAIL_JS),
        INBOX_URL: make_response(200, INBOX_HTML),
        MAIL_URL: make_response(200, MAIL_HTML),
        DOMAIN_URL: make_response(200, DOMAINS_HTML),
    }


@pytest.fixture
def fake_http(routes):
    return FakeHTTP(routes)


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2024, 5, 17, 9, 5, 42)


@pytest.fixture
def make_client(fake_http, fixed_clock):
    """Factory for a YopmailClient wired to ``fake_http``."""
    from yopmail.webmail.client import YopmailClient

    def _make(username="test", proxy=None, **kwargs):
        kwargs.setdefault("http", fake_http)
        kwargs.setdefault("clock", fixed_clock)
        return YopmailClient(username, proxy, **kwargs)

    return _make
