"""Utility functions for the snapql CLI.

Shared helpers: version lookup, service construction, async bridging and
rendering of entries and result rows.
"""

import asyncio
import json
import sys
from importlib.metadata import PackageNotFoundError, version
from typing import Any

import click
from rich.console import Console
from rich.table import Table
from snapql_models import QueryEntry

from snapql.config import Settings
from snapql.service import SnapQLService

console = Console()


def _get_cli_version() -> str:
    """Get installed package version, "unknown" from a source checkout."""
    try:
        return version("snapql")
    except PackageNotFoundError:
        return "unknown"


def get_service(ctx: click.Context) -> SnapQLService:
    """Build the service on first use and cache it on the root context."""
    root = ctx.find_root()
    root.ensure_object(dict)
    service = root.obj.get("service")
    if service is None:
        settings: Settings = root.obj["settings"]
        service = SnapQLService(settings)
        root.obj["service"] = service
    return service


def run_async(coro):
    return asyncio.run(coro)


def fail(message: str) -> None:
    """Print an error and exit with status 1."""
    console.print(f"[red]{message}[/red]")
    sys.exit(1)


def print_rows(columns: list[str], rows: list[dict[str, Any]], title: str | None = None) -> None:
    """Render result rows as a table."""
    if not columns:
        console.print("[dim]Statement returned no rows.[/dim]")
        return

    table = Table(title=title, show_header=True)
    for column in columns:
        table.add_column(str(column))
    for row in rows:
        table.add_row(*(_cell(row.get(column)) for column in columns))
    console.print(table)
    console.print(f"[dim]{len(rows)} row(s)[/dim]")


def print_entries(entries: list[QueryEntry], title: str) -> None:
    """Render history or favorite entries, newest first."""
    if not entries:
        console.print(f"[dim]No {title.lower()} yet.[/dim]")
        return

    table = Table(title=title, show_header=True)
    table.add_column("ID", style="cyan")
    table.add_column("Timestamp")
    table.add_column("Rows", justify="right")
    table.add_column("Query")
    for entry in entries:
        query = entry.query if len(entry.query) <= 80 else entry.query[:77] + "..."
        table.add_row(entry.id, entry.timestamp, str(len(entry.results)), query)
    console.print(table)


def _cell(value: Any) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)
