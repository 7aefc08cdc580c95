from __future__ import annotations

from typing import Iterable

from .links import classify_link
from .model import Profile, ProfileLink

CRLF = "\r\n"


def _structured_name(name: str) -> str:
    parts = name.split()
    if len(parts) >= 2:
        return f"N:{' '.join(parts[1:])};{parts[0]};;;"
    return f"N:;{name};;;"


def generate_vcard(
    profile: Profile,
    links: Iterable[ProfileLink],
    base_url: str,
) -> str:
    """Render a VCARD 3.0 document for a profile.

    Links are emitted in the order given; callers sort them first (see
    ``model.sort_links``). Free-text fields are written as-is apart from
    newlines in the bio, which become a literal ``\\n``.
    """
    lines: list[str] = [
        "BEGIN:VCARD",
        "VERSION:3.0",
        f"FN:{profile.name}",
        _structured_name(profile.name),
    ]

    if profile.title:
        lines.append(f"TITLE:{profile.title}")
    if profile.company:
        lines.append(f"ORG:{profile.company}")
    if profile.bio:
        lines.append("NOTE:" + profile.bio.replace("\n", "\\n"))
    if profile.avatar_url:
        lines.append(f"PHOTO;TYPE=URI:{profile.avatar_url}")

    for link in links:
        lines.extend(classify_link(link))

    lines.append(f"URL:{base_url}/{profile.username}")
    lines.append("END:VCARD")
    return CRLF.join(lines)


def vcard_initials(name: str) -> str:
    return "".join(part[0] for part in name.split()).upper()[:2]
