"""Visitor classification for profile views.

Only a coarse device/browser label and a truncated digest of the client
address are kept; raw IPs are never stored.
"""
from __future__ import annotations

import base64
import re
from dataclasses import dataclass
from typing import Mapping

_MOBILE = re.compile(r"mobile|android|iphone|ipad", re.IGNORECASE)

# checked in order; Chrome UAs also contain "Safari"
_BROWSERS = (
    ("Chrome", "chrome"),
    ("Firefox", "firefox"),
    ("Safari", "safari"),
    ("Edge", "edge"),
)


@dataclass
class Visit:
    device: str
    browser: str
    visitor_ip_hash: str | None = None
    referrer: str | None = None


def detect_device(user_agent: str) -> str:
    return "mobile" if _MOBILE.search(user_agent) else "desktop"


def detect_browser(user_agent: str) -> str:
    for token, label in _BROWSERS:
        if token in user_agent:
            return label
    return "unknown"


def hash_ip(forwarded_for: str | None) -> str | None:
    if not forwarded_for:
        return None
    first = forwarded_for.split(",")[0]
    return base64.b64encode(first.encode("utf-8")).decode("ascii")[:16]


def visit_from_headers(headers: Mapping[str, str]) -> Visit:
    ua = headers.get("User-Agent") or ""
    return Visit(
        device=detect_device(ua),
        browser=detect_browser(ua),
        visitor_ip_hash=hash_ip(headers.get("X-Forwarded-For")),
        referrer=headers.get("Referer") or None,
    )
