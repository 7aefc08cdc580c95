from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, UTC
from pathlib import Path
from typing import Any

from rapidfuzz import fuzz, process

from .errors import DataFileError, LeadError, ProfileNotFound
from .model import Profile, ProfileLink, sort_links
from .tracking import Visit

logger = logging.getLogger(__name__)

TABLES = ("profiles", "profile_links", "profile_views", "lead_captures")

_LEAD_FIELDS = ("email", "phone", "company", "notes")


def _now() -> str:
    return datetime.now(UTC).isoformat()


class RowStore:
    """Table rows kept in a single JSON file, one list per table."""

    def __init__(self, path: Path, tables: dict[str, list[dict[str, Any]]] | None = None):
        self.path = path
        self.tables: dict[str, list[dict[str, Any]]] = {t: [] for t in TABLES}
        for name, rows in (tables or {}).items():
            self.tables[name] = list(rows)

    @classmethod
    def load(cls, path: Path) -> RowStore:
        if not path.exists():
            logger.info("No data file at %s; starting empty", path)
            return cls(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DataFileError(path, str(exc)) from exc
        if not isinstance(data, dict):
            raise DataFileError(path, "expected a JSON object of tables")
        return cls(path, {t: data.get(t, []) for t in TABLES})

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(self.tables, indent=2), encoding="utf-8")
        tmp.replace(self.path)

    # ── Profiles ───────────────────────────────────────────────────────────────

    def usernames(self) -> list[str]:
        return [row["username"] for row in self.tables["profiles"] if row.get("username")]

    def get_profile(self, username: str) -> Profile:
        for row in self.tables["profiles"]:
            if row.get("username") == username:
                return Profile.from_row(row)
        raise ProfileNotFound(username)

    def suggest_usernames(self, username: str, limit: int = 3) -> list[str]:
        matches = process.extract(
            username, self.usernames(), scorer=fuzz.ratio, limit=limit, score_cutoff=60,
        )
        return [name for name, _score, _idx in matches]

    def links_for(self, profile: Profile) -> list[ProfileLink]:
        rows = [r for r in self.tables["profile_links"] if r.get("profile_id") == profile.id]
        return sort_links(ProfileLink.from_row(r) for r in rows)

    # ── Views and leads ────────────────────────────────────────────────────────

    def record_view(self, profile: Profile, visit: Visit) -> dict[str, Any]:
        row = {
            "id": str(uuid.uuid4()),
            "profile_id": profile.id,
            "visitor_ip_hash": visit.visitor_ip_hash,
            "device": visit.device,
            "browser": visit.browser,
            "referrer": visit.referrer,
            "created_at": _now(),
        }
        self.tables["profile_views"].append(row)
        return row

    def capture_lead(self, profile: Profile, form: dict[str, Any]) -> dict[str, Any]:
        name = (form.get("name") or "").strip()
        if not name:
            raise LeadError("Name is required")
        row = {
            "id": str(uuid.uuid4()),
            "profile_id": profile.id,
            "name": name,
            **{f: (form.get(f) or None) for f in _LEAD_FIELDS},
            "created_at": _now(),
        }
        self.tables["lead_captures"].append(row)
        return row
