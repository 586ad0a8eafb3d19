"""CLI entry point for the credchain tool.

This module is the composition root of the application.  It is the only
place that wires the concrete credential sources into a chain and decides
where log output goes.
"""

import json
import logging
import sys
from enum import Enum

# Ensure UTF-8 output on Windows where stdout may default to cp1252.
# reconfigure() is a no-op when encoding is already utf-8.
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
if hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from credchain.auth import settings as settings_store
from credchain.chain import CredentialProviderChain, describe_error
from credchain.core.exceptions import AuthenticationFailure
from credchain.providers import default_sources

app = typer.Typer(help="Resolve credentials from an ordered provider chain.")
settings_app = typer.Typer(help="Manage the application settings key pair.")

app.add_typer(settings_app, name="settings")

console = Console(legacy_windows=False)
err_console = Console(stderr=True, legacy_windows=False)

_LOGGER_NAME = "credchain_cli"


# ---------------------------------------------------------------------------
# Output format
# ---------------------------------------------------------------------------


class OutputFormat(str, Enum):
    """Supported output formats for the resolve command."""

    table = "table"
    json = "json"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_logger(verbose: bool) -> logging.Logger:
    """Return the logger handed to the chain.

    With ``verbose`` every provider attempt is rendered on stderr; otherwise
    the chain stays silent and the resolve command reports the failure.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.handlers.clear()
    logger.addHandler(
        RichHandler(console=err_console, show_time=False, show_path=False)
    )
    logger.setLevel(logging.INFO if verbose else logging.CRITICAL)
    logger.propagate = False
    return logger


def _build_chain(
    skip: list[str] | None = None, logger: logging.Logger | None = None
) -> CredentialProviderChain:
    """Build the default chain without the skipped providers.

    Args:
        skip: Provider names to remove from the chain.
        logger: Logger receiving one record per attempt.

    Returns:
        A :class:`~credchain.chain.CredentialProviderChain`.
    """
    chain = CredentialProviderChain(logger=logger)
    for name in skip or []:
        chain.remove_provider(name)
    return chain


# ---------------------------------------------------------------------------
# Top-level commands
# ---------------------------------------------------------------------------


@app.command()
def resolve(
    skip: list[str] = typer.Option(
        [],
        "--skip",
        "-s",
        help="Provider to leave out of the chain. May be repeated.",
    ),
    output: OutputFormat = typer.Option(
        OutputFormat.table, "--output", "-o", help="Output format."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show every provider attempt."
    ),
):
    """Walk the provider chain and show which source supplied credentials."""
    chain = _build_chain(skip=skip, logger=_get_logger(verbose))
    try:
        credentials = chain.resolve()
    except AuthenticationFailure as e:
        err_console.print(f"[red]✗ {escape(str(e))}[/red]", highlight=False)
        for name, error in e.errors:
            err_console.print(
                f"  [cyan]{escape(name)}[/cyan]: {escape(describe_error(error))}",
                highlight=False,
            )
        raise typer.Exit(1)

    data = {
        "source": credentials.source,
        "access_key_id": credentials.masked_access_key(),
        "temporary": credentials.is_temporary,
    }
    if output == OutputFormat.json:
        print(json.dumps(data, indent=2))
        return

    table = Table(title="Resolved credentials", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Source", data["source"] or "—")
    table.add_row("Access key", data["access_key_id"])
    table.add_row("Temporary", "yes" if data["temporary"] else "no")
    console.print(table)


@app.command()
def providers():
    """List the default providers in the order they are tried."""
    table = Table(title="Default provider chain")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Source")
    for n, source in enumerate(default_sources(), start=1):
        table.add_row(str(n), source.name, type(source).__name__)
    console.print(table)


# ---------------------------------------------------------------------------
# settings commands
# ---------------------------------------------------------------------------


@settings_app.command()
def setup():
    """Save an access key pair to the application settings file."""
    console.print("\n[bold]Application settings setup[/bold]\n")
    access_key_id = typer.prompt("Access key ID")
    secret_access_key = typer.prompt("Secret access key", hide_input=True)
    session_token = typer.prompt(
        "Session token (leave empty for none)",
        default="",
        show_default=False,
        hide_input=True,
    )

    settings_store.save(access_key_id, secret_access_key, session_token or None)
    console.print(
        f"[green]✓ Settings saved to:[/green] {settings_store.settings_path()}"
    )


@settings_app.command()
def status():
    """Show whether the settings file holds an access key pair."""
    stored = settings_store.load()
    if not stored.get("access_key_id") or not stored.get("secret_access_key"):
        console.print("[yellow]No access key pair in application settings.[/yellow]")
        console.print("Run [bold]credchain settings setup[/bold] to add one.")
        raise typer.Exit(1)
    console.print(
        f"[green]✓ Access key pair[/green]  {settings_store.settings_path()}"
    )
    if stored.get("session_token"):
        console.print("  Includes a session token.")


@settings_app.command()
def clear():
    """Remove the application settings file."""
    if settings_store.clear():
        console.print("[green]✓ Application settings removed.[/green]")
    else:
        console.print("[yellow]No saved settings found.[/yellow]")
