"""
Scrapers for the three values the webmail never hands out through an API.

- version: from the ``<script src="/ver/X/webmail.js">`` tag of the home page
- yp: from a hidden ``<input name="yp" id="yp">`` of the home page
- yj: from a string concatenation inside ``webmail.js`` of that version
"""

from __future__ import annotations
from typing import Optional
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from yopmail.exceptions import VersionNotFoundError, YJNotFoundError, YPNotFoundError
from yopmail.logging import logger
from yopmail.session import Session
from yopmail.utils.deadline import Deadline
from yopmail.utils.patterns import VERSION_RE, WEBMAIL_JS_PATH, YJ_RE, YP_INPUT_SELECTOR
from yopmail.webmail.http import fetch


class TokenExtractor:
    """
    Fetches one unauthenticated page per token and stores the result in the
    session under its write lock.

    Extractors are independent of each other except ``extract_yj``, which
    reads the cached version to build the script URL.
    """

    def __init__(self, session: Session, http: requests.Session, *, rate_limiter=None) -> None:
        self.session = session
        self.http = http
        self.rate_limiter = rate_limiter

    def _get_text(self, url: str, deadline: Deadline, operation: str) -> str:
        with fetch(
            self.http,
            url,
            deadline=deadline,
            operation=operation,
            rate_limiter=self.rate_limiter,
        ) as resp:
            return resp.text

    def webmail_js_url(self, version: str) -> str:
        return urljoin(self.session.base_url, WEBMAIL_JS_PATH.format(version=version))

    def find_version(self, deadline: Optional[Deadline] = None) -> str:
        """
        Scrape the current webmail version from the home page.

        Returns:
            The version string, also stored in the session

        Raises:
            VersionNotFoundError: If no script tag references a versioned webmail.js
        """
        deadline = deadline or Deadline(None)
        page = self._get_text(self.session.base_url, deadline, "version")
        soup = BeautifulSoup(page, "html.parser")

        version = ""
        for script in soup.find_all("script", src=True):
            m = VERSION_RE.search(script["src"])
            if m:
                version = m.group(1)
                break

        if not version:
            raise VersionNotFoundError(operation="version")

        self.session.set_version(version)
        logger.debug(f"Webmail version: {version}")
        return version

    def extract_yp(self, deadline: Optional[Deadline] = None) -> str:
        """
        Scrape the ``yp`` token from the hidden home page input.

        Raises:
            YPNotFoundError: If the input or its value is missing
        """
        deadline = deadline or Deadline(None)
        page = self._get_text(self.session.base_url, deadline, "yp")
        soup = BeautifulSoup(page, "html.parser")

        yp = ""
        node = soup.select_one(YP_INPUT_SELECTOR)
        if node is not None:
            yp = node.get("value", "")

        if not yp:
            raise YPNotFoundError(operation="yp")

        self.session.set_yp(yp)
        logger.debug("Extracted 'yp' parameter")
        return yp

    def extract_yj(self, deadline: Optional[Deadline] = None) -> str:
        """
        Scrape the ``yj`` token from the webmail.js of the cached version.

        Raises:
            YJNotFoundError: If the script does not contain the expected pattern
        """
        deadline = deadline or Deadline(None)
        url = self.webmail_js_url(self.session.version)
        script = self._get_text(url, deadline, "yj")

        m = YJ_RE.search(script)
        if not m or not m.group(1):
            raise YJNotFoundError(operation="yj")

        yj = m.group(1)
        self.session.set_yj(yj)
        logger.debug("Extracted 'yj' parameter")
        return yj
