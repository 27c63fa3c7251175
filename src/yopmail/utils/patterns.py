# src/yopmail/utils/patterns.py
"""
Compiled patterns and fixed names used to talk to the webmail.

Everything here is compiled once at import time and only ever read, so the
objects are safe to share between threads.

The selectors and query keys must match the service byte for byte; the
service silently ignores requests whose parameter names are off.
"""

from __future__ import annotations
import re

# ---------------------------
# Input validation
# ---------------------------
USERNAME_RE = re.compile(r"^[-a-zA-Z0-9@_.+]{1,}$")

# ---------------------------
# Token scraping
# ---------------------------
# <script src="/ver/[VERSION]/webmail.js"></script>
VERSION_RE = re.compile(r"/ver/([0-9.]*)/webmail.js")

# ... value+'&yj=[TOKEN]&v=' ... inside webmail.js
YJ_RE = re.compile(r"value\+'&yj=([0-9a-zA-Z]*)&v='")

WEBMAIL_JS_PATH = "/ver/{version}/webmail.js"
YP_INPUT_SELECTOR = "input[name='yp'][id='yp']"

# ---------------------------
# Document selectors
# ---------------------------
INBOX_ITEM_SELECTOR = "div.m"
MAIL_CONTENT_SELECTOR = "div#mail"
DOMAIN_ITEM_SELECTOR = "div.lstdom > div"

# ---------------------------
# Query / cookie keys
# ---------------------------
PARAM_YP = "yp"
PARAM_YJ = "yj"
PARAM_VERSION = "v"
YTIME_COOKIE = "ytime"

# Prefix of a mail id: "i" loads embedded images, "m" does not
MAIL_ID_PREFIX_IMAGES = "i"
MAIL_ID_PREFIX_TEXT = "m"

__all__ = [
    "USERNAME_RE",
    "VERSION_RE",
    "YJ_RE",
    "WEBMAIL_JS_PATH",
    "YP_INPUT_SELECTOR",
    "INBOX_ITEM_SELECTOR",
    "MAIL_CONTENT_SELECTOR",
    "DOMAIN_ITEM_SELECTOR",
    "PARAM_YP",
    "PARAM_YJ",
    "PARAM_VERSION",
    "YTIME_COOKIE",
    "MAIL_ID_PREFIX_IMAGES",
    "MAIL_ID_PREFIX_TEXT",
]
