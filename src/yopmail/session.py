"""
Per-mailbox session state: the cached tokens and the lock guarding them.
"""

from __future__ import annotations
from typing import Dict, Tuple

from requests.cookies import RequestsCookieJar

from yopmail.utils.patterns import PARAM_VERSION, PARAM_YJ, PARAM_YP, YTIME_COOKIE
from yopmail.utils.rwlock import ReadWriteLock

#: Webmail version used until the live one has been scraped.
DEFAULT_VERSION = "9.0"


class Session:
    """
    Tokens the webmail expects on every signed request.

    ``version``, ``yp``, ``yj`` and the last emitted ``ytime`` are private and
    only touched under one ``ReadWriteLock``: accessors take it shared,
    mutators take it exclusive. ``stamp_ytime`` also writes the HTTP client's
    cookie jar, which follows the same discipline.

    Tokens are never expired automatically. ``clear_tokens`` is the only way
    to force a new extraction.
    """

    def __init__(self, username: str, base_url: str, version: str = DEFAULT_VERSION) -> None:
        self.username = username
        self.base_url = base_url
        self._lock = ReadWriteLock()
        self._version = version
        self._yp = ""
        self._yj = ""
        self._ytime = ""

    # ---- accessors ----
    @property
    def version(self) -> str:
        with self._lock.read_locked():
            return self._version

    @property
    def yp(self) -> str:
        with self._lock.read_locked():
            return self._yp

    @property
    def yj(self) -> str:
        with self._lock.read_locked():
            return self._yj

    @property
    def last_ytime(self) -> str:
        with self._lock.read_locked():
            return self._ytime

    def missing_tokens(self) -> Tuple[bool, bool]:
        """Return ``(need_yp, need_yj)`` from a single consistent snapshot."""
        with self._lock.read_locked():
            return self._yp == "", self._yj == ""

    def signing_params(self) -> Dict[str, str]:
        """Copy of the query parameters a signed request carries."""
        with self._lock.read_locked():
            return {
                PARAM_YP: self._yp,
                PARAM_YJ: self._yj,
                PARAM_VERSION: self._version,
            }

    # ---- mutators ----
    def set_version(self, version: str) -> None:
        with self._lock.write_locked():
            self._version = version

    def set_yp(self, yp: str) -> None:
        with self._lock.write_locked():
            self._yp = yp

    def set_yj(self, yj: str) -> None:
        with self._lock.write_locked():
            self._yj = yj

    def clear_tokens(self) -> None:
        """Forget ``yp`` and ``yj`` so the next signed request extracts them again."""
        with self._lock.write_locked():
            self._yp = ""
            self._yj = ""

    def stamp_ytime(self, cookies: RequestsCookieJar, domain: str, value: str) -> None:
        """Record ``value`` as the last ytime and set it as a cookie on ``domain``."""
        with self._lock.write_locked():
            self._ytime = value
            cookies.set(YTIME_COOKIE, value, domain=domain, path="/")

    def __repr__(self) -> str:
        return f"Session(username={self.username!r}, base_url={self.base_url!r})"
