from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from .config import ensure_workspace
from .encoder import generate_vcard
from .errors import CarveError, ProfileNotFound
from .exporter import export_vcard
from .report import print_export, print_vcard
from .store import RowStore

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="carve: digital business cards and vCard export.",
)
console = Console()


@app.callback()
def _main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _fail(exc: CarveError) -> typer.Exit:
    console.print(Panel(f"[bold red]{escape(str(exc))}[/bold red]", title="Error", border_style="red"))
    return typer.Exit(code=2)


def _load(root: Path | None):
    paths, settings = ensure_workspace(root)
    try:
        store = RowStore.load(settings.data_path(paths.root))
    except CarveError as exc:
        raise _fail(exc)
    return paths, settings, store


def _missing(store: RowStore, exc: ProfileNotFound) -> typer.Exit:
    hint = ""
    suggestions = store.suggest_usernames(exc.username)
    if suggestions:
        hint = "\n\nDid you mean: " + ", ".join(f"[bold]{s}[/bold]" for s in suggestions)
    console.print(Panel(
        f"[bold red]{exc}[/bold red]{hint}",
        title="Profile not found",
        border_style="red",
    ))
    return typer.Exit(code=2)


@app.command()
def init(
    root: Path | None = typer.Option(None, "--root", help="Workspace folder (default: cwd)"),
) -> None:
    """Create local/carve.conf and an empty data file."""
    paths, settings = ensure_workspace(root)
    data = settings.data_path(paths.root)
    if not data.exists():
        RowStore(data).save()
    console.print(f"[green]Config[/green]    {paths.conf_file}")
    console.print(f"[green]Data file[/green] {data}")


@app.command()
def export(
    username: str = typer.Argument(..., help="Profile username"),
    out: Path | None = typer.Option(None, "--out", "-o", help="Output folder (default from config)"),
    base_url: str | None = typer.Option(
        None, "--base-url", help="App URL for the profile link. Falls back to config/CARVE_APP_URL.",
    ),
    root: Path | None = typer.Option(None, "--root", help="Workspace folder (default: cwd)"),
) -> None:
    """Write USERNAME's vCard to a .vcf file."""
    paths, settings, store = _load(root)
    try:
        profile = store.get_profile(username)
    except ProfileNotFound as exc:
        raise _missing(store, exc)

    out_dir = out or settings.out_path(paths.root)
    path = export_vcard(
        profile,
        store.links_for(profile),
        out_dir,
        (base_url or settings.app_url).rstrip("/"),
    )
    print_export(path, username)


@app.command()
def show(
    username: str = typer.Argument(..., help="Profile username"),
    root: Path | None = typer.Option(None, "--root", help="Workspace folder (default: cwd)"),
) -> None:
    """Print USERNAME's vCard and its parsed properties."""
    _, settings, store = _load(root)
    try:
        profile = store.get_profile(username)
    except ProfileNotFound as exc:
        raise _missing(store, exc)

    text = generate_vcard(profile, store.links_for(profile), settings.app_url)
    print_vcard(text, title=f"  {profile.name}  ")


@app.command()
def serve(
    port: int | None = typer.Option(None, "--port", "-p", help="Port (default from config)"),
    root: Path | None = typer.Option(None, "--root", help="Workspace folder (default: cwd)"),
) -> None:
    """Serve public profile pages and vCard downloads."""
    from .server import main

    try:
        main(root=root, port=port)
    except CarveError as exc:
        raise _fail(exc)


if __name__ == "__main__":
    app()
