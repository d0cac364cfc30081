"""Query entry commands: history and favorites subgroups."""

import click

from snapql.cli.utils import console, fail, get_service, print_entries, print_rows, run_async
from snapql.errors import SnapQLError


@click.group(invoke_without_command=True)
@click.argument("name")
@click.pass_context
def history(ctx: click.Context, name: str):
    """Show the last queries run on connection NAME, newest first.

    Examples:
        snapql history mydb
        snapql history mydb show 1718000000000
    """
    ctx.obj["connection"] = name
    if ctx.invoked_subcommand is not None:
        return

    service = get_service(ctx)
    try:
        entries = run_async(service.get_history(name))
    except SnapQLError as e:
        fail(str(e))
    print_entries(entries, "History")


@history.command("show")
@click.argument("entry_id")
@click.pass_context
def history_show(ctx: click.Context, entry_id: str):
    """Show the query and stored results of a history entry."""
    name = ctx.obj["connection"]
    service = get_service(ctx)
    try:
        entries = run_async(service.get_history(name))
    except SnapQLError as e:
        fail(str(e))

    entry = next((e for e in entries if e.id == entry_id), None)
    if entry is None:
        fail(f"No history entry '{entry_id}' for '{name}'")

    console.print(f"[bold]{entry.timestamp}[/bold]")
    console.print(entry.query)
    rows = [row for row in entry.results if isinstance(row, dict)]
    print_rows(list(rows[0].keys()) if rows else [], rows)


@click.group()
def favorites():
    """Manage favorite queries of a connection.

    Examples:
        snapql favorites list mydb
        snapql favorites add mydb 1718000000000
        snapql favorites remove mydb 1718000000000
    """
    pass


@favorites.command("list")
@click.argument("name")
@click.pass_context
def favorites_list(ctx: click.Context, name: str):
    """List favorites of connection NAME, newest first."""
    service = get_service(ctx)
    try:
        entries = run_async(service.get_favorites(name))
    except SnapQLError as e:
        fail(str(e))
    print_entries(entries, "Favorites")


@favorites.command("add")
@click.argument("name")
@click.argument("entry_id")
@click.pass_context
def favorites_add(ctx: click.Context, name: str, entry_id: str):
    """Save history entry ENTRY_ID of connection NAME as a favorite."""
    service = get_service(ctx)
    try:
        added = run_async(service.favorite_from_history(name, entry_id))
    except SnapQLError as e:
        fail(str(e))

    if not added:
        fail(f"No history entry '{entry_id}' for '{name}'")
    console.print(f"[green]✓ Saved '{entry_id}' to favorites[/green]")


@favorites.command("remove")
@click.argument("name")
@click.argument("entry_id")
@click.pass_context
def favorites_remove(ctx: click.Context, name: str, entry_id: str):
    """Remove favorite ENTRY_ID from connection NAME."""
    service = get_service(ctx)
    try:
        removed = run_async(service.remove_favorite(name, entry_id))
    except SnapQLError as e:
        fail(str(e))

    if removed:
        console.print(f"[green]✓ Removed '{entry_id}' from favorites[/green]")
    else:
        console.print(f"[dim]No favorite '{entry_id}', nothing removed.[/dim]")
