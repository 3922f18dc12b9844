"""CLI command modules."""

from __future__ import annotations

import typer
from rich.console import Console

from wgdash.client import AsyncWGDashboardClient
from wgdash.constants import ERROR_NO_SERVER
from wgdash.router import Screen, route
from wgdash.session import SessionStore

_console = Console()


def get_client() -> AsyncWGDashboardClient:
    return AsyncWGDashboardClient()


def get_configured_store() -> SessionStore:
    """Load the session store, or exit with an error message if no server is saved."""
    store = SessionStore()
    if route(store.session) is Screen.SERVER_SETUP:
        _console.print(f"[red]{ERROR_NO_SERVER}[/red]")
        raise typer.Exit(1)
    return store


SCREEN_LABELS = {
    Screen.SERVER_SETUP: "Server setup",
    Screen.LOGIN: "Login",
    Screen.DASHBOARD: "Dashboard",
}
