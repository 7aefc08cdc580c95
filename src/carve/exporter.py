from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from .encoder import CRLF, generate_vcard
from .model import Profile, ProfileLink, sort_links

logger = logging.getLogger(__name__)

VCARD_MIME = "text/vcard; charset=utf-8"

_WS = re.compile(r"\s+")


def vcard_filename(profile: Profile) -> str:
    return f"{_WS.sub('_', profile.name)}.vcf"


def vcard_bytes(profile: Profile, links: Iterable[ProfileLink], base_url: str) -> bytes:
    """Encoded download payload: the document plus its final line break."""
    text = generate_vcard(profile, sort_links(links), base_url)
    return (text + CRLF).encode("utf-8")


def export_vcard(
    profile: Profile,
    links: Iterable[ProfileLink],
    out_dir: Path,
    base_url: str,
) -> Path:
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / vcard_filename(profile)
    # write bytes so CRLF survives on every platform
    path.write_bytes(vcard_bytes(profile, links, base_url))
    logger.debug("wrote %s for %s", path, profile.username)
    return path
