"""
Unit tests for TokenExtractor.
"""

import pytest

from yopmail.exceptions import (
    RateLimitError,
    StatusError,
    TokenNotFoundError,
    VersionNotFoundError,
    YJNotFoundError,
    YPNotFoundError,
)
from yopmail.session import Session
from yopmail.webmail.extractors import TokenExtractor
from tests.mocks.http_mock import BASE_URL, WEBMAIL_JS_URL, FakeHTTP, make_response


@pytest.fixture
def session():
    return Session("test", BASE_URL)


def _extractor(session, routes):
    return TokenExtractor(session, FakeHTTP(routes))


class TestFindVersion:

    def test_first_versioned_script_wins(self, session, home_html):
        extractor = _extractor(session, {BASE_URL: make_response(200, home_html)})
        assert extractor.find_version() == "9.2"
        assert session.version == "9.2"

    def test_inline_scripts_are_ignored(self, session):
        page = "<script>var x='/ver/1.1/webmail.js';</script><script src='/ver/4.5/webmail.js'></script>"
        extractor = _extractor(session, {BASE_URL: make_response(200, page)})
        assert extractor.find_version() == "4.5"

    def test_not_found(self, session):
        extractor = _extractor(session, {BASE_URL: make_response(200, "<script src='/main.js'></script>")})
        with pytest.raises(VersionNotFoundError) as exc:
            extractor.find_version()
        assert isinstance(exc.value, TokenNotFoundError)
        assert exc.value.token == "version"
        assert session.version == "9.0"

    def test_rate_limited(self, session):
        extractor = _extractor(session, {BASE_URL: make_response(429)})
        with pytest.raises(RateLimitError):
            extractor.find_version()


class TestExtractYP:

    def test_hidden_input(self, session, home_html):
        extractor = _extractor(session, {BASE_URL: make_response(200, home_html)})
        assert extractor.extract_yp() == "QZGZ5AGx1AGN"
        assert session.yp == "QZGZ5AGx1AGN"

    def test_requires_name_and_id(self, session):
        page = "<input name='yp' value='a'><input id='yp' value='b'>"
        extractor = _extractor(session, {BASE_URL: make_response(200, page)})
        with pytest.raises(YPNotFoundError):
            extractor.extract_yp()

    def test_missing_value(self, session):
        extractor = _extractor(session, {BASE_URL: make_response(200, "<input name='yp' id='yp'>")})
        with pytest.raises(YPNotFoundError):
            extractor.extract_yp()
        assert session.yp == ""

    def test_status_error(self, session):
        extractor = _extractor(session, {BASE_URL: make_response(404)})
        with pytest.raises(StatusError) as exc:
            extractor.extract_yp()
        assert exc.value.status_code == 404
        assert exc.value.operation == "yp"


class TestExtractYJ:

    def test_script_url_follows_cached_version(self, session):
        session.set_version("9.4")
        js = "a.value+'&yj=Zm9vYmFy&v='+b"
        http = FakeHTTP({WEBMAIL_JS_URL.format(version="9.4"): make_response(200, js)})
        extractor = TokenExtractor(session, http)

        assert extractor.webmail_js_url("9.4") == "https://yopmail.com/ver/9.4/webmail.js"
        assert extractor.extract_yj() == "Zm9vYmFy"
        assert session.yj == "Zm9vYmFy"
        assert http.calls[0]["url"] == WEBMAIL_JS_URL.format(version="9.4")

    def test_not_found(self, session):
        extractor = _extractor(session, {WEBMAIL_JS_URL.format(version="9.0"): make_response(200, "yj=abc")})
        with pytest.raises(YJNotFoundError):
            extractor.extract_yj()

    def test_empty_token_is_not_found(self, session):
        js = "x.value+'&yj=&v='"
        extractor = _extractor(session, {WEBMAIL_JS_URL.format(version="9.0"): make_response(200, js)})
        with pytest.raises(YJNotFoundError):
            extractor.extract_yj()

    def test_rate_limited(self, session):
        extractor = _extractor(session, {WEBMAIL_JS_URL.format(version="9.0"): make_response(429)})
        with pytest.raises(RateLimitError) as exc:
            extractor.extract_yj()
        assert exc.value.status_code == 429
