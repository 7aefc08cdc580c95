from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable


class LinkType(str, Enum):
    EMAIL = "email"
    PHONE = "phone"
    WHATSAPP = "whatsapp"
    WEBSITE = "website"
    LINKEDIN = "linkedin"
    TWITTER = "twitter"
    INSTAGRAM = "instagram"
    FACEBOOK = "facebook"
    OTHER = "other"

    @classmethod
    def parse(cls, raw: str | None) -> LinkType:
        """Map a stored type string onto the enum, matched exactly; anything else is OTHER."""
        try:
            return cls(raw or "")
        except ValueError:
            return cls.OTHER


@dataclass
class Profile:
    name: str
    username: str
    title: str | None = None
    company: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    id: str | None = None
    email: str | None = None
    phone: str | None = None
    website: str | None = None
    theme: str = "default"

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Profile:
        return cls(
            name=row["name"],
            username=row["username"],
            title=row.get("title"),
            company=row.get("company"),
            bio=row.get("bio"),
            avatar_url=row.get("avatar_url"),
            id=row.get("id"),
            email=row.get("email"),
            phone=row.get("phone"),
            website=row.get("website"),
            theme=row.get("theme") or "default",
        )


@dataclass
class ProfileLink:
    type: LinkType
    url: str
    order: int = 0
    label: str | None = None
    id: str | None = None
    profile_id: str | None = None
    raw_type: str | None = None   # stored string, kept when type is OTHER

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> ProfileLink:
        raw = row.get("type")
        return cls(
            type=LinkType.parse(raw),
            url=row.get("url") or "",
            order=int(row.get("order") or 0),
            label=row.get("label"),
            id=row.get("id"),
            profile_id=row.get("profile_id"),
            raw_type=raw,
        )


def sort_links(links: Iterable[ProfileLink]) -> list[ProfileLink]:
    # sorted() is stable, so equal orders keep their original position
    return sorted(links, key=lambda link: link.order)
