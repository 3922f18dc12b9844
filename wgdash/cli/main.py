"""Main entry point for the wgdash CLI."""

from __future__ import annotations

import logging

try:
    import typer
except ImportError:
    import sys

    print("wgdash CLI requires extras: pip install wgdash[cli]")
    sys.exit(1)

from .commands import auth, server

app = typer.Typer(
    name="wgdash",
    help="wgdash CLI - Connect and sign in to a WGDashboard server",
    no_args_is_help=True,
)

app.command()(server.connect)
app.command()(server.status)
app.command()(server.forget)
app.command()(auth.login)


def _version_callback(value: bool) -> None:
    """Handle --version and exit early."""
    if value:
        from wgdash import __version__

        typer.echo(f"wgdash {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show the CLI version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests and state changes."),
) -> None:
    """wgdash CLI root callback."""
    _ = version
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@app.command()
def version() -> None:
    """Show the CLI version."""
    from wgdash import __version__

    typer.echo(f"wgdash {__version__}")


if __name__ == "__main__":
    app()
