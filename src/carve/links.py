"""Per-type mapping from a profile link to vCard lines and viewer hrefs."""
from __future__ import annotations

import re
from typing import Iterable

from .model import LinkType, ProfileLink

_WA_DIGITS = re.compile(r"wa\.me/(\d+)")
_NON_DIGIT = re.compile(r"\D")

_SOCIAL_TYPES = (
    LinkType.LINKEDIN,
    LinkType.TWITTER,
    LinkType.INSTAGRAM,
    LinkType.FACEBOOK,
)
# stored types without an enum member that still render as social icons
_SOCIAL_RAW = ("youtube", "github")


# ── vCard lines ────────────────────────────────────────────────────────────────

def classify_link(link: ProfileLink) -> list[str]:
    """Return the vCard property lines for one link.

    Zero lines means the link has no vCard representation (an unmatched
    WhatsApp URL, or an unrecognised type without an http URL).
    """
    url = link.url
    match link.type:
        case LinkType.EMAIL:
            return [f"EMAIL;TYPE=WORK:{url.replace('mailto:', '', 1)}"]
        case LinkType.PHONE:
            return [f"TEL;TYPE=CELL:{url.replace('tel:', '', 1)}"]
        case LinkType.WHATSAPP:
            m = _WA_DIGITS.search(url)
            return [f"TEL;TYPE=CELL:+{m.group(1)}"] if m else []
        case LinkType.WEBSITE:
            return [f"URL:{url}"]
        case LinkType.LINKEDIN | LinkType.TWITTER | LinkType.INSTAGRAM | LinkType.FACEBOOK:
            return [f"X-SOCIALPROFILE;TYPE={link.type.value}:{url}"]
        case LinkType.OTHER:
            return [f"URL:{url}"] if url.startswith("http") else []


# ── Viewer helpers ─────────────────────────────────────────────────────────────

def link_href(link: ProfileLink) -> str:
    url = link.url
    if link.type is LinkType.EMAIL:
        return url if url.startswith("mailto:") else f"mailto:{url}"
    if link.type is LinkType.PHONE:
        return url if url.startswith("tel:") else f"tel:{url}"
    if link.type is LinkType.WHATSAPP:
        if "wa.me" in url:
            return url
        return f"https://wa.me/{_NON_DIGIT.sub('', url)}"
    if url.startswith("/") or url.startswith("http"):
        return url
    return f"https://{url}"


def is_social(link: ProfileLink) -> bool:
    if link.type in _SOCIAL_TYPES:
        return True
    return link.type is LinkType.OTHER and link.raw_type in _SOCIAL_RAW


def split_links(links: Iterable[ProfileLink]) -> tuple[list[ProfileLink], list[ProfileLink]]:
    """Partition into (social, action) lists, each keeping input order."""
    social: list[ProfileLink] = []
    action: list[ProfileLink] = []
    for link in links:
        (social if is_social(link) else action).append(link)
    return social, action


def opens_new_tab(link: ProfileLink) -> bool:
    if link.type in (LinkType.EMAIL, LinkType.PHONE):
        return False
    return not link.url.startswith("/")
