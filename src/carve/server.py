"""server.py — local HTTP server for public Carve profile pages.

Uses the stdlib http.server. Serves one page per profile, the matching
vCard download, and a small JSON API for the lead-capture form.
"""
from __future__ import annotations

import html
import json
import logging
from http.server import BaseHTTPRequestHandler, HTTPServer
from pathlib import Path
from urllib.parse import parse_qs, quote, unquote, urlparse

import phonenumbers

from .config import Settings, ensure_workspace
from .encoder import vcard_initials
from .errors import CarveError, LeadError, ProfileNotFound
from .exporter import VCARD_MIME, vcard_bytes, vcard_filename
from .links import link_href, opens_new_tab, split_links
from .model import LinkType, Profile, ProfileLink
from .store import RowStore
from .tracking import visit_from_headers

logger = logging.getLogger(__name__)

_VERSION = "0.1.0"

# (status, headers, body)
Response = tuple[int, dict[str, str], bytes]


# ── State shared with handler ──────────────────────────────────────────────────

_state: dict = {
    "store": None,      # RowStore
    "settings": None,   # Settings
}


def configure(store: RowStore, settings: Settings) -> None:
    _state["store"] = store
    _state["settings"] = settings


def _store() -> RowStore:
    return _state["store"]


def _base_url() -> str:
    return _state["settings"].app_url


# ── Helpers ────────────────────────────────────────────────────────────────────

def _fmt_tel(t: str) -> str:
    """Pretty international form for display; the raw value is kept on failure."""
    raw = t.replace("tel:", "", 1)
    try:
        n = phonenumbers.parse(raw, None)
        return phonenumbers.format_number(n, phonenumbers.PhoneNumberFormat.INTERNATIONAL)
    except phonenumbers.NumberParseException:
        return raw


def _link_text(link: ProfileLink) -> str:
    if link.label:
        return link.label
    if link.type is LinkType.PHONE:
        return _fmt_tel(link.url)
    if link.type is LinkType.EMAIL:
        return link.url.replace("mailto:", "", 1)
    return link.raw_type or link.type.value


def _json(data: dict, status: int = 200) -> Response:
    body = json.dumps(data).encode()
    return status, {"Content-Type": "application/json"}, body


def _html(markup: str, status: int = 200) -> Response:
    return status, {"Content-Type": "text/html; charset=utf-8"}, markup.encode("utf-8")


def _content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback name and the RFC 5987 UTF-8 form.

    Header values go out as Latin-1, so the plain ``filename`` must stay ASCII.
    """
    fallback = "".join(
        ch if ch.isascii() and ch not in '"\\' and ch.isprintable() else "_"
        for ch in filename
    )
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


def _profile_to_dict(profile: Profile, links: list[ProfileLink]) -> dict:
    return {
        "name": profile.name,
        "username": profile.username,
        "title": profile.title,
        "company": profile.company,
        "bio": profile.bio,
        "avatar_url": profile.avatar_url,
        "url": f"{_base_url()}/{profile.username}",
        "links": [
            {
                "type": link.raw_type or link.type.value,
                "url": link.url,
                "href": link_href(link),
                "label": link.label,
                "order": link.order,
            }
            for link in links
        ],
    }


# ── Page rendering ─────────────────────────────────────────────────────────────

_PAGE = """<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{title}</title>
<meta name="description" content="{description}">
<meta property="og:title" content="{title}">
<meta property="og:type" content="profile">
</head>
<body class="theme-{theme}">
<main>
{body}
</main>
</body>
</html>
"""


def _render_anchor(link: ProfileLink) -> str:
    target = ' target="_blank" rel="noopener noreferrer"' if opens_new_tab(link) else ""
    return (
        f'<a class="link link-{html.escape(link.raw_type or link.type.value)}" '
        f'href="{html.escape(link_href(link))}"{target}>{html.escape(_link_text(link))}</a>'
    )


def render_profile_page(profile: Profile, links: list[ProfileLink]) -> str:
    esc = html.escape
    title = f"{profile.name} - {profile.title}" if profile.title else profile.name
    description = profile.bio or f"Connect with {profile.name}"

    parts: list[str] = []
    if profile.avatar_url:
        parts.append(f'<img class="avatar" src="{esc(profile.avatar_url)}" alt="{esc(profile.name)}">')
    else:
        parts.append(f'<div class="avatar initials">{esc(vcard_initials(profile.name))}</div>')
    parts.append(f"<h1>{esc(profile.name)}</h1>")
    if profile.title or profile.company:
        role = " at ".join(p for p in (profile.title, profile.company) if p)
        parts.append(f'<p class="role">{esc(role)}</p>')
    if profile.bio:
        parts.append(f'<p class="bio">{esc(profile.bio).replace(chr(10), "<br>")}</p>')

    social, action = split_links(links)
    if action:
        parts.append('<nav class="actions">' + "".join(_render_anchor(l) for l in action) + "</nav>")
    if social:
        parts.append('<nav class="social">' + "".join(_render_anchor(l) for l in social) + "</nav>")
    parts.append(
        f'<a class="save-contact" href="/{esc(profile.username)}/vcard">Save contact</a>'
    )

    return _PAGE.format(
        title=esc(title),
        description=esc(description),
        theme=esc(profile.theme),
        body="\n".join(parts),
    )


def render_not_found(username: str, suggestions: list[str]) -> str:
    esc = html.escape
    body = [
        "<h1>Profile Not Found</h1>",
        "<p>This profile doesn't exist or may have been removed.</p>",
    ]
    if suggestions:
        items = "".join(f'<li><a href="/{esc(s)}">{esc(s)}</a></li>' for s in suggestions)
        body.append(f'<p>Did you mean:</p><ul class="suggestions">{items}</ul>')
    body.append('<a href="/">Go Home</a>')
    return _PAGE.format(
        title="Profile Not Found",
        description=esc(f"No profile named {username}"),
        theme="default",
        body="\n".join(body),
    )


# ── Route handlers ─────────────────────────────────────────────────────────────

def _not_found(username: str) -> Response:
    return _html(render_not_found(username, _store().suggest_usernames(username)), 404)


def _track(profile: Profile, headers) -> None:
    try:
        _store().record_view(profile, visit_from_headers(headers))
        _store().save()
    except (OSError, CarveError) as exc:
        logger.warning("Failed to track profile view for %s: %s", profile.username, exc)


def profile_page(username: str, headers) -> Response:
    try:
        profile = _store().get_profile(username)
    except ProfileNotFound:
        return _not_found(username)
    links = _store().links_for(profile)
    _track(profile, headers)
    return _html(render_profile_page(profile, links))


def vcard_download(username: str) -> Response:
    try:
        profile = _store().get_profile(username)
    except ProfileNotFound:
        return _not_found(username)
    body = vcard_bytes(profile, _store().links_for(profile), _base_url())
    return 200, {
        "Content-Type": VCARD_MIME,
        "Content-Disposition": _content_disposition(vcard_filename(profile)),
    }, body


def api_profile(params: dict) -> Response:
    username = params.get("username", [""])[0]
    try:
        profile = _store().get_profile(username)
    except ProfileNotFound as exc:
        return _json({"ok": False, "error": str(exc)}, 404)
    return _json({"ok": True, "profile": _profile_to_dict(profile, _store().links_for(profile))})


def api_capture_lead(body: dict) -> Response:
    try:
        profile = _store().get_profile(str(body.get("username", "")))
        _store().capture_lead(profile, body)
        _store().save()
    except ProfileNotFound as exc:
        return _json({"ok": False, "error": str(exc)}, 404)
    except LeadError as exc:
        return _json({"ok": False, "error": str(exc)}, 400)
    except OSError as exc:
        logger.error("Failed to save contact: %s", exc)
        return _json({"ok": False, "error": "Failed to save contact"}, 500)
    return _json({"ok": True})


def route_get(raw_path: str, headers) -> Response:
    parsed = urlparse(raw_path)
    path = unquote(parsed.path)
    params = parse_qs(parsed.query)

    if path == "/health":
        return _json({"ok": True, "version": _VERSION})
    if path == "/api/profile":
        return api_profile(params)

    segments = [s for s in path.split("/") if s]
    if len(segments) == 1 and segments[0].endswith(".vcf"):
        return vcard_download(segments[0][:-4])
    if len(segments) == 2 and segments[1] == "vcard":
        return vcard_download(segments[0])
    if len(segments) == 1:
        return profile_page(segments[0], headers)
    return _json({"error": "Not found"}, 404)


def route_post(raw_path: str, body: dict) -> Response:
    path = urlparse(raw_path).path
    if path == "/api/leads":
        return api_capture_lead(body)
    return _json({"error": "Not found"}, 404)


# ── Request handler ────────────────────────────────────────────────────────────

class CarveHandler(BaseHTTPRequestHandler):

    def log_message(self, fmt, *args):
        logger.debug("%s - " + fmt, self.address_string(), *args)

    def _send(self, response: Response) -> None:
        status, headers, body = response
        self.send_response(status)
        for name, value in headers.items():
            self.send_header(name, value)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def do_GET(self):
        self._send(route_get(self.path, self.headers))

    def do_POST(self):
        try:
            length = int(self.headers.get("Content-Length", 0))
        except ValueError:
            length = -1
        if length < 0:
            self._send(_json({"ok": False, "error": "Invalid Content-Length"}, 400))
            return
        body_raw = self.rfile.read(length)
        try:
            body = json.loads(body_raw) if body_raw else {}
        except json.JSONDecodeError:
            self._send(_json({"ok": False, "error": "Invalid JSON"}, 400))
            return
        if not isinstance(body, dict):
            self._send(_json({"ok": False, "error": "Expected a JSON object"}, 400))
            return
        self._send(route_post(self.path, body))


# ── Entry point ────────────────────────────────────────────────────────────────

def main(root: Path | None = None, port: int | None = None) -> None:
    paths, settings = ensure_workspace(root)
    store = RowStore.load(settings.data_path(paths.root))
    configure(store, settings)
    port = port or settings.port

    print(f"\n  Carve v{_VERSION}")
    print(f"  Data file : {store.path}")
    print(f"  App URL   : {settings.app_url}")
    print(f"  Profiles  : {len(store.usernames())}")

    class _Server(HTTPServer):
        allow_reuse_address = True

    print(f"\n  http://localhost:{port}\n")
    print("  Press Ctrl-C to stop\n")

    server = _Server(("127.0.0.1", port), CarveHandler)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\n  Bye.\n")
    finally:
        server.server_close()


if __name__ == "__main__":
    main()
