"""Click command group and top-level commands for snapql.

Commands stay thin - they call the SnapQLService and render its results.
"""

from pathlib import Path

import click
from rich.table import Table

from snapql.cli.commands.connections import connections
from snapql.cli.commands.queries import favorites, history
from snapql.cli.utils import _get_cli_version, console, fail, get_service, print_rows, run_async
from snapql.config import Settings, configure_logging
from snapql.migrations import get_all_migrations, is_migration_applied, run_migrations
from snapql.storage import StorageLayout

_SECRET_FIELDS = {"openai_key", "claude_api_key"}


@click.group()
@click.version_option(version=_get_cli_version())
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Configuration root (default: ~/SnapQL or SNAPQL_ROOT_DIR)",
)
@click.option("--log-level", default=None, help="Logging level (default: INFO)")
@click.pass_context
def main(ctx: click.Context, root: Path | None, log_level: str | None):
    """snapql - SQL client with per-connection history, favorites and AI query generation."""
    overrides = {}
    if root is not None:
        overrides["root_dir"] = root
    if log_level is not None:
        overrides["log_level"] = log_level

    settings = Settings(**overrides)
    configure_logging(settings.log_level)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


main.add_command(connections)
main.add_command(history)
main.add_command(favorites)


@main.command()
@click.argument("name")
@click.argument("sql")
@click.option("--no-history", is_flag=True, help="Do not record the query in history")
@click.pass_context
def run(ctx: click.Context, name: str, sql: str, no_history: bool):
    """Run SQL on connection NAME and print the rows."""
    service = get_service(ctx)
    envelope = run_async(service.run_query(name, sql, record_history=not no_history))
    if envelope.error:
        fail(envelope.error)

    data = envelope.data
    print_rows(data["columns"], data["rows"])
    if data["history_id"]:
        console.print(f"[dim]Saved to history as {data['history_id']}[/dim]")


@main.command()
@click.argument("name")
@click.option("--table", "-t", "table_name", default=None, help="Only show this table")
@click.pass_context
def schema(ctx: click.Context, name: str, table_name: str | None):
    """Show the tables and columns of connection NAME."""
    service = get_service(ctx)
    envelope = run_async(service.get_schema(name))
    if envelope.error:
        fail(envelope.error)

    tables = envelope.data
    if table_name:
        tables = [t for t in tables if t["table_name"] == table_name]
        if not tables:
            fail(f"Table '{table_name}' not found")

    if not tables:
        console.print("[dim]No tables found.[/dim]")
        return

    for table_info in tables:
        table = Table(title=table_info["table_name"], show_header=True)
        table.add_column("Column", style="cyan")
        table.add_column("Type")
        table.add_column("Nullable")
        table.add_column("Key")
        table.add_column("Default")
        for column in table_info["columns"]:
            data_type = column["data_type"]
            if column["max_length"]:
                data_type += f"({column['max_length']})"
            key = "PK" if column["is_primary_key"] else ("UNIQUE" if column["is_unique"] else "")
            table.add_row(
                column["column_name"],
                data_type,
                "yes" if column["is_nullable"] else "no",
                key,
                column["default_value"] or "",
            )
        console.print(table)


@main.command()
@click.argument("name")
@click.argument("prompt")
@click.option("--existing", "-e", default="", help="Current query to modify")
@click.option("--run", "run_it", is_flag=True, help="Run the generated query")
@click.pass_context
def generate(ctx: click.Context, name: str, prompt: str, existing: str, run_it: bool):
    """Generate SQL for connection NAME from a natural-language PROMPT."""
    service = get_service(ctx)
    envelope = run_async(service.generate_query(name, prompt, existing_query=existing))
    if envelope.error:
        fail(envelope.error)

    response = envelope.data
    console.print(response["query"])
    if response["graph_x_column"] and response["graph_y_columns"]:
        console.print(
            f"[dim]Chart: x={response['graph_x_column']}, "
            f"y={', '.join(response['graph_y_columns'])}[/dim]"
        )

    if run_it:
        result = run_async(service.run_query(name, response["query"]))
        if result.error:
            fail(result.error)
        print_rows(result.data["columns"], result.data["rows"])


@main.group()
def settings():
    """Show or change the global AI settings."""
    pass


@settings.command("show")
@click.pass_context
def settings_show(ctx: click.Context):
    """Show the global settings. API keys are masked."""
    service = get_service(ctx)
    current = run_async(service.get_global_settings())

    table = Table(title="Global settings", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for field_name, value in current.model_dump(mode="json").items():
        if value is None:
            shown = "[dim]not set[/dim]"
        elif field_name in _SECRET_FIELDS:
            shown = _mask(value)
        else:
            shown = str(value)
        table.add_row(field_name, shown)
    console.print(table)


@settings.command("set")
@click.option("--provider", type=click.Choice(["openai", "claude"]), default=None)
@click.option("--openai-key", default=None)
@click.option("--openai-base-url", default=None)
@click.option("--openai-model", default=None)
@click.option("--claude-api-key", default=None)
@click.option("--claude-model", default=None)
@click.pass_context
def settings_set(ctx: click.Context, provider: str | None, **fields):
    """Update global settings. Pass an empty string to clear a value."""
    updates = {key: (value or None) for key, value in fields.items() if value is not None}
    if provider is not None:
        updates["ai_provider"] = provider

    if not updates:
        console.print("[dim]Nothing to update.[/dim]")
        return

    service = get_service(ctx)
    run_async(service.update_global_settings(**updates))
    console.print(f"[green]✓ Updated {', '.join(sorted(updates))}[/green]")


@main.command()
@click.option("--status", "show_status", is_flag=True, help="Only show migration status")
@click.pass_context
def migrate(ctx: click.Context, show_status: bool):
    """Upgrade a legacy single-connection configuration root."""
    layout = StorageLayout(ctx.obj["settings"].root_dir)

    if show_status:
        table = Table(title="Migrations", show_header=True)
        table.add_column("ID", style="cyan")
        table.add_column("Description")
        table.add_column("Applied")
        for migration in get_all_migrations():
            applied = is_migration_applied(layout, migration["id"])
            table.add_row(
                migration["id"],
                migration["description"],
                "[green]✓[/green]" if applied else "[dim]-[/dim]",
            )
        console.print(table)
        return

    result = run_migrations(layout)
    for migration_id in result["applied"]:
        console.print(f"[green]✓ {migration_id}[/green]")
    for migration_id in result["unchanged"]:
        console.print(f"[dim]- {migration_id} (nothing to do)[/dim]")
    if result["failed"]:
        fail(f"Migration failed: {', '.join(result['failed'])}")
    if not result["applied"] and not result["unchanged"]:
        console.print("[dim]Already up to date.[/dim]")


def _mask(value: str) -> str:
    if len(value) <= 8:
        return "****"
    return f"{value[:4]}...{value[-4:]}"
