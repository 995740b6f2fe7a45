"""
CLI tool for the realtime service.

Lists the registered WebSocket handlers and shows the live state of a
session stored in Redis.
"""

import asyncio

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from marketplace.api.ws.constants import PkgID
from marketplace.api.ws.handlers import load_handlers
from marketplace.exceptions import SessionLookupError
from marketplace.repositories.session_repository import RedisSessionRepository
from marketplace.routing import pkg_router

load_handlers()

typer_app = typer.Typer(
    name="marketplace-cli",
    help="Marketplace realtime CLI - inspect handlers and sessions",
    add_completion=False,
)
console = Console()


@typer_app.command(name="ws-handlers")
def ws_handlers():
    """
    Display a table of all registered WebSocket handlers.

    Example:
        python cli.py ws-handlers
    """
    console.print()
    console.print(
        Panel.fit(
            "[bold cyan]Registered WebSocket Handlers[/bold cyan]",
            border_style="cyan",
        )
    )
    console.print()

    table = Table(
        "PkgID",
        "Handler Path",
        title="WebSocket Handlers Registry",
        show_lines=True,
    )

    missing_handlers = []

    for pkg_id in PkgID:
        if pkg_id == PkgID.UNREGISTERED_HANDLER:
            continue

        handler = pkg_router.handlers_registry.get(pkg_id)

        if not handler:
            table.add_row(
                f"[dim]{pkg_id.value} - {pkg_id.name}[/dim]",
                "[red]No handler registered[/red]",
            )
            missing_handlers.append(pkg_id.name)
            continue

        table.add_row(
            f"[green]{pkg_id.value} - {pkg_id.name}[/green]",
            f"{handler.__module__}.[yellow]{handler.__name__}[/yellow]",
        )

    console.print(table)
    console.print()

    if missing_handlers:
        console.print(
            "[yellow]Missing handlers for:[/yellow]",
            ", ".join(f"[cyan]{h}[/cyan]" for h in missing_handlers),
        )
        console.print()


@typer_app.command(name="session")
def show_session(session_id: str):
    """
    Show a session as the realtime endpoint sees it.

    Example:
        python cli.py session 3f1c...
    """
    try:
        session = asyncio.run(RedisSessionRepository().get_session(session_id))
    except SessionLookupError as ex:
        console.print(f"[red]Session lookup failed:[/red] {ex.message}")
        raise typer.Exit(code=1)

    if session is None:
        console.print(f"[yellow]Session {session_id} not found[/yellow]")
        raise typer.Exit(code=1)

    table = Table("Field", "Value", title=f"Session {session.id}")
    table.add_row("User", session.user_id)
    table.add_row("Created", session.created_at.isoformat())
    table.add_row("Expires", session.expires_at.isoformat())
    table.add_row("Roles", ", ".join(session.roles) or "-")
    table.add_row("Banned", str(session.banned))
    table.add_row("Revoked", str(session.is_revoked))
    status = "[green]valid[/green]" if session.is_valid() else "[red]invalid[/red]"
    table.add_row("Status", status)

    console.print(table)


if __name__ == "__main__":
    typer_app()
