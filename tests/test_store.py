import json
from pathlib import Path

import pytest

from carve.errors import DataFileError, LeadError, ProfileNotFound
from carve.model import LinkType
from carve.store import RowStore
from carve.tracking import Visit


def _store(tmp_path: Path) -> RowStore:
    return RowStore(tmp_path / "carve.json", {
        "profiles": [
            {"id": "p1", "username": "janesmith", "name": "Jane Smith", "title": "CTO"},
            {"id": "p2", "username": "johndoe", "name": "John Doe"},
        ],
        "profile_links": [
            {"id": "l1", "profile_id": "p1", "type": "linkedin", "url": "https://linkedin.com/in/j", "order": 2},
            {"id": "l2", "profile_id": "p1", "type": "email", "url": "mailto:j@x.com", "order": 1},
            {"id": "l3", "profile_id": "p2", "type": "website", "url": "https://john.dev", "order": 0},
            {"id": "l4", "profile_id": "p1", "type": "calendly", "url": "https://cal.com/j", "order": 2},
        ],
    })


def test_get_profile(tmp_path: Path):
    p = _store(tmp_path).get_profile("janesmith")
    assert p.name == "Jane Smith"
    assert p.title == "CTO"
    assert p.bio is None


def test_get_profile_missing(tmp_path: Path):
    with pytest.raises(ProfileNotFound) as exc:
        _store(tmp_path).get_profile("nobody")
    assert exc.value.username == "nobody"


def test_links_for_ordered_and_scoped(tmp_path: Path):
    store = _store(tmp_path)
    links = store.links_for(store.get_profile("janesmith"))
    assert [l.id for l in links] == ["l2", "l1", "l4"]
    assert links[2].type is LinkType.OTHER
    assert links[2].raw_type == "calendly"


def test_suggest_usernames(tmp_path: Path):
    assert _store(tmp_path).suggest_usernames("janesmit") == ["janesmith"]
    assert _store(tmp_path).suggest_usernames("zzzz") == []


def test_save_and_load(tmp_path: Path):
    store = _store(tmp_path)
    store.record_view(store.get_profile("johndoe"), Visit(device="mobile", browser="safari"))
    store.save()
    data = json.loads((tmp_path / "carve.json").read_text())
    assert data["profile_views"][0]["profile_id"] == "p2"
    loaded = RowStore.load(tmp_path / "carve.json")
    assert loaded.usernames() == ["janesmith", "johndoe"]


def test_load_missing_file(tmp_path: Path):
    store = RowStore.load(tmp_path / "missing.json")
    assert store.usernames() == []


def test_load_corrupt_file(tmp_path: Path):
    path = tmp_path / "carve.json"
    path.write_text("{not json")
    with pytest.raises(DataFileError) as exc:
        RowStore.load(path)
    assert exc.value.path == path


def test_load_non_object_file(tmp_path: Path):
    path = tmp_path / "carve.json"
    path.write_text("[]")
    with pytest.raises(DataFileError):
        RowStore.load(path)


def test_capture_lead(tmp_path: Path):
    store = _store(tmp_path)
    row = store.capture_lead(store.get_profile("janesmith"), {"name": " Bob ", "email": "bob@x.com"})
    assert row["name"] == "Bob"
    assert row["email"] == "bob@x.com"
    assert row["phone"] is None
    assert store.tables["lead_captures"] == [row]


def test_capture_lead_requires_name(tmp_path: Path):
    store = _store(tmp_path)
    with pytest.raises(LeadError, match="Name is required"):
        store.capture_lead(store.get_profile("janesmith"), {"email": "bob@x.com"})
