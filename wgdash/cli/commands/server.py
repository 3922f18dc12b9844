"""Server setup commands for the wgdash CLI."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from wgdash._http import mask_key
from wgdash.constants import ERROR_API_KEY_REQUIRED
from wgdash.router import route
from wgdash.session import SessionStore
from wgdash.validator import (
    ApiKeyRequired,
    ConnectionValidator,
    Invalid,
    Unreachable,
    Valid,
    ValidationOutcome,
)

from . import SCREEN_LABELS, get_client

console = Console()


async def _validate(address: str, api_key: str | None) -> ValidationOutcome:
    store = SessionStore()
    async with get_client() as client:
        validator = ConnectionValidator(client, store)
        outcome = await validator.validate(address, api_key)
        if isinstance(outcome, ApiKeyRequired) and api_key is None:
            console.print("[yellow]This server requires an API key.[/yellow]")
            api_key = typer.prompt("API key", hide_input=True)
            outcome = await validator.validate(address, api_key)
        return outcome


def connect(
    address: str = typer.Argument(..., help="Server address, e.g. 192.168.2.43:10086"),
    api_key: str = typer.Option(None, "--api-key", help="API key, if the server requires one"),
) -> None:
    """Validate a server address and remember it."""
    outcome = asyncio.run(_validate(address, api_key))

    if isinstance(outcome, Valid):
        console.print(f"[green]Connected to {outcome.server_address}[/green]")
        console.print("Run [bold]wgdash login[/bold] to sign in.")
        return

    reason = outcome.reason if isinstance(outcome, (Unreachable, Invalid)) else ERROR_API_KEY_REQUIRED
    console.print(f"[red]{reason}[/red]")
    raise typer.Exit(1)


def status() -> None:
    """Show the saved server and the current screen."""
    store = SessionStore()
    session = store.session

    console.print(f"[bold]{SCREEN_LABELS[route(session)]}[/bold]")
    if session.server_address is None:
        console.print("[yellow]No server configured.[/yellow]")
        console.print("Run [bold]wgdash connect <address>[/bold] to set one up.")
        return

    console.print(f"  Server: {session.server_address}")
    if session.api_key:
        console.print(f"  API Key: {mask_key(session.api_key)}")


def forget() -> None:
    """Remove the saved server and API key."""
    store = SessionStore()
    if store.server_address is None and not store.path.exists():
        console.print("[yellow]No server saved.[/yellow]")
        return
    store.forget()
    console.print("[green]Server forgotten.[/green]")
