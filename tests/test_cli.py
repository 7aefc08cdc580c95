import json
from pathlib import Path

from typer.testing import CliRunner

from carve.cli import app
from carve.report import vcard_properties

runner = CliRunner()


def _workspace(tmp_path: Path) -> None:
    data = tmp_path / "data" / "carve.json"
    data.parent.mkdir(parents=True)
    data.write_text(json.dumps({
        "profiles": [{"id": "p1", "username": "janesmith", "name": "Jane Smith"}],
        "profile_links": [
            {"profile_id": "p1", "type": "website", "url": "https://janesmith.dev", "order": 0},
        ],
    }))


def test_init(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("CARVE_APP_URL", raising=False)
    result = runner.invoke(app, ["init", "--root", str(tmp_path)])
    assert result.exit_code == 0
    assert (tmp_path / "local" / "carve.conf").exists()
    assert json.loads((tmp_path / "data" / "carve.json").read_text())["profiles"] == []


def test_export(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("CARVE_APP_URL", raising=False)
    _workspace(tmp_path)
    result = runner.invoke(app, [
        "export", "janesmith", "--root", str(tmp_path), "--base-url", "https://carve.app/",
    ])
    assert result.exit_code == 0, result.output
    text = (tmp_path / "cards-out" / "Jane_Smith.vcf").read_bytes().decode("utf-8")
    assert "URL:https://carve.app/janesmith\r\nEND:VCARD\r\n" in text


def test_export_missing_profile(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("CARVE_APP_URL", raising=False)
    _workspace(tmp_path)
    result = runner.invoke(app, ["export", "janesmit", "--root", str(tmp_path)])
    assert result.exit_code == 2
    assert "janesmith" in result.output


def test_show(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("CARVE_APP_URL", "https://cards.example.com")
    _workspace(tmp_path)
    result = runner.invoke(app, ["show", "janesmith", "--root", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "FN:Jane Smith" in result.output


def test_vcard_properties():
    text = "\r\n".join([
        "BEGIN:VCARD", "VERSION:3.0", "FN:Jane Smith", "N:Smith;Jane;;;",
        "X-SOCIALPROFILE;TYPE=linkedin:https://linkedin.com/in/j", "END:VCARD",
    ])
    rows = vcard_properties(text)
    names = {name for name, _, _ in rows}
    assert {"FN", "N", "X-SOCIALPROFILE"} <= names
    social = next(r for r in rows if r[0] == "X-SOCIALPROFILE")
    assert social[1] == "TYPE=linkedin"
    assert social[2] == "https://linkedin.com/in/j"


def test_corrupt_data_file(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("CARVE_APP_URL", raising=False)
    data = tmp_path / "data" / "carve.json"
    data.parent.mkdir(parents=True)
    data.write_text("{not json")
    result = runner.invoke(app, ["show", "janesmith", "--root", str(tmp_path)])
    assert result.exit_code == 2
    assert "Cannot read data file" in result.output
