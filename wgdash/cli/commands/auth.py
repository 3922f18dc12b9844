"""Sign-in command for the wgdash CLI."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from wgdash.auth_flow import AuthFlow
from wgdash.models import ConfigurationEntry
from wgdash.router import Screen, route
from wgdash.session import SessionStore

from . import get_client, get_configured_store

console = Console()


def _format_gb(value: float) -> str:
    return f"{value:.4f} GB"


def render_configurations(configurations: list[ConfigurationEntry] | None) -> None:
    if not configurations:
        console.print("[yellow]No configurations.[/yellow]")
        return

    table = Table(title="WireGuard Configurations")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Status")
    table.add_column("Address")
    table.add_column("Port")
    table.add_column("Peers")
    table.add_column("Usage")

    for entry in configurations:
        table.add_row(
            entry.name,
            "[green]up[/green]" if entry.status else "[dim]down[/dim]",
            entry.address,
            str(entry.listen_port),
            f"{entry.connected_peers}/{entry.total_peers}",
            _format_gb(entry.data_usage.total),
        )

    console.print(table)


async def _login(store: SessionStore, username: str | None) -> bool:
    async with get_client() as client:
        flow = AuthFlow(client, store)
        await flow.start()

        flow.username = username or typer.prompt("Username")
        flow.password = typer.prompt("Password", hide_input=True)
        while True:
            if flow.otp_required:
                flow.otp = typer.prompt("One-time password")
            if await flow.submit():
                break
            console.print(f"[red]{flow.error}[/red]")
            if not typer.confirm("Try again?", default=True):
                return False
            flow.password = typer.prompt("Password", default=flow.password, hide_input=True, show_default=False)

        if route(store.session) is not Screen.DASHBOARD:
            return False

        console.print(f"\n[green]Signed in to {store.server_address}[/green]\n")
        render_configurations(await client.fetch_configurations())
        return True


def login(
    username: str = typer.Option(None, "--username", "-u", help="Dashboard username"),
) -> None:
    """Sign in to the saved server and list its WireGuard configurations."""
    store = get_configured_store()
    if not asyncio.run(_login(store, username)):
        raise typer.Exit(1)
