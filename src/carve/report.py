from __future__ import annotations

from pathlib import Path

import vobject
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

console = Console()

# ── Palette ────────────────────────────────────────────────────────────────────
_ACCENT  = "#4d9fff"
_GREEN   = "#3ecf8e"
_TEXT    = "#c9d1e0"
_MID     = "#8896af"
_DIM     = "#546075"
_BORDER  = "#2a3347"


def vcard_properties(text: str) -> list[tuple[str, str, str]]:
    """Parse a vCard back and list (name, params, value) in document order."""
    card = vobject.readOne(text)
    rows: list[tuple[str, str, str]] = []
    for child in card.getChildren():
        params = ";".join(
            f"{k}={','.join(v)}" for k, v in sorted(child.params.items())
        )
        value = child.value
        if isinstance(value, list):
            value = ", ".join(str(v) for v in value)
        rows.append((child.name.upper(), params, str(value)))
    return rows


def print_vcard(text: str, title: str) -> None:
    console.print(Panel(
        Text(text.replace("\r\n", "\n"), style=_TEXT),
        title=Text(title, style=f"dim {_DIM}"),
        title_align="left",
        border_style=_BORDER,
        padding=(0, 1),
    ))

    table = Table(show_header=True, header_style=f"bold {_ACCENT}", box=None, padding=(0, 2))
    table.add_column("Property")
    table.add_column("Params", style=_MID)
    table.add_column("Value", style=_TEXT)
    for name, params, value in vcard_properties(text):
        table.add_row(name, params, value)
    console.print(table)
    console.print()


def print_export(path: Path, username: str) -> None:
    body = Text()
    body.append("✓  vCard written\n", style=f"bold {_GREEN}")
    body.append(f"{username}  →  ", style=f"dim {_DIM}")
    body.append(str(path), style=f"dim {_MID}")
    console.print(Panel(body, border_style=_GREEN, padding=(0, 2)))
