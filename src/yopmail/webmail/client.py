from __future__ import annotations
from datetime import datetime
from typing import Callable, Dict, List, Mapping, Optional
from urllib.parse import urljoin, urlsplit

import requests
from bs4 import BeautifulSoup
from requests.adapters import HTTPAdapter

from yopmail.exceptions import (
    ClientInitError,
    InvalidMailIdError,
    InvalidProxyError,
    InvalidUsernameError,
    TokenNotFoundError,
    YopmailError,
)
from yopmail.logging import logger
from yopmail.models import RenderedMessage
from yopmail.session import DEFAULT_VERSION, Session
from yopmail.utils.deadline import Deadline
from yopmail.utils.patterns import (
    DOMAIN_ITEM_SELECTOR,
    INBOX_ITEM_SELECTOR,
    MAIL_CONTENT_SELECTOR,
    MAIL_ID_PREFIX_IMAGES,
    MAIL_ID_PREFIX_TEXT,
)
from yopmail.utils.transform import format_ytime, normalize_username, strip_domain_marker
from yopmail.utils.validation import validate_mail_id, validate_proxy_url, validate_username
from yopmail.webmail.extractors import TokenExtractor
from yopmail.webmail.http import fetch


class YopmailClient:
    """
    Client for one Yopmail mailbox.

    The webmail has no API: every inbox/mail request must carry three values
    scraped from its own pages (``yp``, ``yj``, ``v``) plus a ``ytime``
    cookie. The client keeps them in a ``Session``, extracts the missing
    ones on the first signed request and reuses them afterwards.

    A single instance can be shared between threads. Every public call takes
    an optional ``timeout`` (seconds) that bounds the whole operation,
    token extraction included; it defaults to the client's ``timeout``.
    Nothing is retried: a ``RateLimitError`` means the caller should back
    off or switch proxy.
    """

    #: Home page of the English webmail; every endpoint is relative to it.
    BASE_URL = "https://yopmail.com/en/"

    def __init__(
        self,
        username: str,
        proxy: Optional[str] = None,
        *,
        base_url: str = BASE_URL,
        timeout: float = 30.0,
        version_timeout: float = 10.0,
        default_version: str = DEFAULT_VERSION,
        rate_limiter=None,
        http: Optional[requests.Session] = None,
        discover_version: bool = True,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Validate the mailbox name, set up the transport and, best effort,
        refresh the webmail version.

        Args:
            username: Mailbox name, optionally with a domain ("test@yopmail.com")
            proxy: Optional proxy URL; empty string or None disables it
            base_url: Webmail home page
            timeout: Default budget in seconds for each public operation
            version_timeout: Budget for the version lookup done here
            default_version: Version used when the lookup fails
            rate_limiter: Optional RateLimiter pacing every outbound call
            http: Pre-built requests session (mostly for tests)
            discover_version: If False, skip the construction-time lookup
            clock: Returns the local wall-clock time used for ``ytime``

        Raises:
            InvalidUsernameError: If the name has characters outside [-a-zA-Z0-9@_.+]
            InvalidProxyError: If ``proxy`` is not a usable proxy URL
            ClientInitError: If the HTTP transport could not be created
        """
        if not validate_username(username):
            raise InvalidUsernameError("username is not valid")
        if proxy and not validate_proxy_url(proxy):
            raise InvalidProxyError(f"invalid proxy URL: {proxy!r}")

        self.proxy: Optional[str] = None
        self.timeout = timeout
        self.rate_limiter = rate_limiter
        self._clock = clock or datetime.now
        self.http = http if http is not None else self._build_http()

        self.session = Session(normalize_username(username), base_url, default_version)
        self.extractor = TokenExtractor(self.session, self.http, rate_limiter=rate_limiter)
        if proxy:
            self.set_proxy(proxy)

        if discover_version:
            self._refresh_version(version_timeout)

        logger.info(
            f"Yopmail client ready for '{self.session.username}' "
            f"(version {self.session.version}, proxy={'on' if self.proxy else 'off'})"
        )

    @staticmethod
    def _build_http() -> requests.Session:
        try:
            http = requests.Session()
            adapter = HTTPAdapter(pool_connections=10, pool_maxsize=100)
            http.mount("https://", adapter)
            http.mount("http://", adapter)
        except Exception as e:
            raise ClientInitError(f"failed to create HTTP session: {e}") from e
        return http

    def set_proxy(self, proxy: str) -> None:
        """
        Route every later request through ``proxy``.

        Use it to switch egress after a ``RateLimitError``; cached tokens are
        kept. From then on ``HTTP_PROXY``/``HTTPS_PROXY`` are ignored, since
        requests would otherwise let them override the session proxies.

        Raises:
            InvalidProxyError: If ``proxy`` is not a usable proxy URL
        """
        if not validate_proxy_url(proxy):
            raise InvalidProxyError(f"invalid proxy URL: {proxy!r}")

        self.proxy = proxy
        self.http.trust_env = False
        self.http.proxies.update({"http": proxy, "https": proxy})
        logger.debug(f"Client for '{self.username}' now uses proxy {urlsplit(proxy).hostname}")

    def _refresh_version(self, timeout: float) -> None:
        """Look up the live version; on any client error keep the current one."""
        try:
            self.extractor.find_version(Deadline(timeout))
        except YopmailError as e:
            logger.warning(f"Couldn't refresh webmail version, keeping {self.session.version}: {e}")

    # ---- properties ----
    @property
    def username(self) -> str:
        return self.session.username

    @property
    def base_url(self) -> str:
        return self.session.base_url

    def _deadline(self, timeout: Optional[float]) -> Deadline:
        return Deadline(self.timeout if timeout is None else timeout)

    # ---- bootstrap ----
    def find_version(self, *, timeout: Optional[float] = None) -> str:
        """
        Scrape and cache the current webmail version.

        Unlike the lookup done at construction, failure here is raised.
        """
        return self.extractor.find_version(self._deadline(timeout))

    def ensure_parameters(self, deadline: Optional[Deadline] = None) -> None:
        """
        Make sure ``yp`` and ``yj`` are cached, extracting only the missing ones.

        Once both are present this costs two shared-lock reads and no network.

        Raises:
            YPNotFoundError, YJNotFoundError: If a token could not be scraped
            RateLimitError, StatusError, TransportError: From the extraction request
        """
        deadline = deadline or self._deadline(None)
        need_yp, need_yj = self.session.missing_tokens()

        if need_yp:
            self.extractor.extract_yp(deadline)
        if need_yj:
            self.extractor.extract_yj(deadline)

    # ---- signed request pipeline ----
    def _stamp_ytime(self, url: str) -> str:
        now = self._clock()
        ytime = format_ytime(now.hour, now.minute)
        self.session.stamp_ytime(self.http.cookies, urlsplit(url).hostname or "", ytime)
        return ytime

    def request(
        self,
        url: str,
        params: Optional[Mapping[str, str]] = None,
        operation: str = "request",
        *,
        timeout: Optional[float] = None,
        deadline: Optional[Deadline] = None,
    ) -> requests.Response:
        """
        Send a signed GET.

        Session tokens are added under ``yp``/``yj``/``v`` unless the caller
        already supplied that key, and a fresh ``ytime`` cookie is set for the
        target host.

        Args:
            url: Endpoint URL without query string
            params: Caller query parameters; never overwritten
            operation: Human-readable label for logs and errors
            timeout: Budget in seconds (ignored when ``deadline`` is given)
            deadline: Budget shared with an enclosing operation

        Returns:
            The 2xx response, body not yet read. The caller must close it
            (``with client.request(...) as resp:``).

        Raises:
            RateLimitError: On HTTP 429
            StatusError: On any other non-2xx status
            TokenNotFoundError: If bootstrap could not scrape a token
            TransportError: On network failure or deadline expiry
        """
        deadline = deadline or self._deadline(timeout)

        try:
            self.ensure_parameters(deadline)
        except TokenNotFoundError as e:
            logger.error(f"Couldn't initialize parameters for {operation} request: {e}")
            raise type(e)(
                f"couldn't initialize parameters for {operation} request: failed to extract {e.token}",
                operation=operation,
            ) from e
        except YopmailError as e:
            logger.error(f"Couldn't initialize parameters for {operation} request: {e}")
            raise

        signed: Dict[str, str] = dict(params or {})
        for key, value in self.session.signing_params().items():
            if value and key not in signed:
                signed[key] = value

        ytime = self._stamp_ytime(url)
        logger.debug(f"Signed {operation} request to {url} (ytime={ytime})")

        return fetch(
            self.http,
            url,
            params=signed,
            deadline=deadline,
            operation=operation,
            rate_limiter=self.rate_limiter,
            stream=True,
        )

    # ---- mailbox operations ----
    def _inbox_params(self, page: int, delete_id: str = "") -> Dict[str, str]:
        return {
            "login": self.username,
            "p": str(page),
            "d": delete_id,
            "ctrl": "",
            "r_c": "",
            "id": "",
            "ad": "0",
        }

    def get_inbox(self, page: int = 1, *, timeout: Optional[float] = None) -> requests.Response:
        """Fetch one inbox page as a raw response (caller closes it)."""
        return self.request(urljoin(self.base_url, "inbox"), self._inbox_params(page), "inbox", timeout=timeout)

    def get_mail_ids(self, page: int = 1, *, timeout: Optional[float] = None) -> List[str]:
        """
        List the mail ids of one inbox page.

        Ids come back in document order, which the service renders newest
        first. An empty inbox yields an empty list.
        """
        with self.get_inbox(page, timeout=timeout) as resp:
            soup = BeautifulSoup(resp.text, "html.parser")

        mail_ids = [div["id"] for div in soup.select(INBOX_ITEM_SELECTOR) if div.get("id")]
        logger.debug(f"Inbox '{self.username}' page {page}: {len(mail_ids)} mails")
        return mail_ids

    def get_mail_body(
        self,
        mail_id: str,
        show_images: bool = False,
        *,
        timeout: Optional[float] = None,
    ) -> RenderedMessage:
        """
        Fetch the rendered HTML of one mail.

        Args:
            mail_id: Id as returned by ``get_mail_ids``
            show_images: Ask the service for the variant with images loaded

        Returns:
            RenderedMessage whose content is the outer HTML of ``div#mail``,
            or empty when the page has no such element.
        """
        if not validate_mail_id(mail_id):
            raise InvalidMailIdError("mail id must be a non-empty string", operation="mail body")

        prefix = MAIL_ID_PREFIX_IMAGES if show_images else MAIL_ID_PREFIX_TEXT
        final_id = prefix + mail_id
        params = {"b": self.username, "id": final_id}

        with self.request(urljoin(self.base_url, "mail"), params, "mail body", timeout=timeout) as resp:
            soup = BeautifulSoup(resp.text, "html.parser")

        node = soup.select_one(MAIL_CONTENT_SELECTOR)
        if node is None:
            logger.debug(f"Mail {final_id} has no content container")
            return RenderedMessage.create("", self.username, final_id)
        return RenderedMessage.create(str(node), self.username, final_id)

    def delete_mail(self, mail_id: str, page: int = 1, *, timeout: Optional[float] = None) -> requests.Response:
        """
        Delete one mail.

        Success only means the service answered 2xx; re-list the inbox to
        confirm the mail is gone. Returns the raw response (caller closes it).
        """
        if not validate_mail_id(mail_id):
            raise InvalidMailIdError("mail id must be a non-empty string", operation="delete mail")

        return self.request(
            urljoin(self.base_url, "inbox"),
            self._inbox_params(page, delete_id=mail_id),
            "delete mail",
            timeout=timeout,
        )

    def get_alternative_domains(self, *, timeout: Optional[float] = None) -> List[str]:
        """
        List the alternate domains mails can be received on.

        Unsigned: the endpoint needs no session tokens, but it goes through the
        same HTTP session (proxy, cookies) as everything else.
        """
        with fetch(
            self.http,
            urljoin(self.base_url, "domain"),
            params={"d": "all"},
            deadline=self._deadline(timeout),
            operation="alternative domains",
            rate_limiter=self.rate_limiter,
        ) as resp:
            soup = BeautifulSoup(resp.text, "html.parser")

        return [strip_domain_marker(div.get_text().strip()) for div in soup.select(DOMAIN_ITEM_SELECTOR)]

    # ---- lifecycle ----
    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "YopmailClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"YopmailClient(username={self.username!r}, base_url={self.base_url!r})"
