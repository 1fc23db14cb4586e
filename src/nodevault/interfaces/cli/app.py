"""CLI application for NodeVault using Rich and Typer."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from nodevault.core.config import (
    AUTO_BACKUP,
    BACKUP_DIR,
    EXPORT_DIR,
    EXPORT_FILE_NAME,
    setup_logging,
    validate_core_environment,
)
from nodevault.core.errors import PersistenceError, RecordValidationError, VaultError
from nodevault.core.events import EventLog
from nodevault.core.export import backup_records, export_records
from nodevault.core.factory import build_store
from nodevault.core.store import RecordStore
from nodevault.core.types import Record, RecordEvent, SortField, SortOrder
from nodevault.core.views import compute_statistics, search, sort_records

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="nodevault",
    help="NodeVault - Personal Record Manager",
    no_args_is_help=False,
)

console = Console()

MENU_OPTIONS = [
    ("1", "Add Record"),
    ("2", "List Records"),
    ("3", "Update Record"),
    ("4", "Delete Record"),
    ("5", "Search Records"),
    ("6", "Sort Records"),
    ("7", "Export Data"),
    ("8", "View Statistics"),
    ("9", "Create Backup"),
    ("10", "Event History"),
    ("0", "Exit"),
]


@dataclass
class VaultContext:
    """Everything a command needs: the open store and where to write files."""

    store: RecordStore
    events: EventLog = field(default_factory=EventLog)
    backup_dir: Path = BACKUP_DIR
    export_dir: Path = EXPORT_DIR
    auto_backup: bool = AUTO_BACKUP


def parse_record_id(text: str) -> int:
    """Turn typed input into a record ID."""
    try:
        record_id = int(str(text).strip())
    except ValueError:
        raise RecordValidationError(f"Invalid record ID: '{text}'") from None
    if record_id < 1:
        raise RecordValidationError(f"Invalid record ID: '{text}'")
    return record_id


def print_menu():
    """Print the numbered main menu."""
    lines = "\n".join(f"[green]{key}.[/green] {label}" for key, label in MENU_OPTIONS)
    console.print(Panel.fit(lines, title="NodeVault", border_style="blue"))


def records_table(records: list[Record], title: str = "Records") -> Table:
    """Build a table with one row per record."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim")
    table.add_column("ID")
    table.add_column("Name", style="green")
    table.add_column("Value")
    table.add_column("Created")

    for i, record in enumerate(records, 1):
        table.add_row(
            str(i),
            str(record.id),
            record.name,
            record.value,
            record.created_label,
        )
    return table


def print_records(records: list[Record], title: str = "Records"):
    if not records:
        console.print("[dim]No records found.[/dim]")
        return
    console.print(records_table(records, title))


def print_statistics(records: list[Record]):
    stats = compute_statistics(records)
    table = Table(title="Vault Statistics", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")
    for metric, value in stats.as_display().items():
        table.add_row(metric, value)
    console.print(table)


def print_events(events: list[RecordEvent]):
    if not events:
        console.print("[dim]No changes recorded this session.[/dim]")
        return
    table = Table(title="Event History", show_header=True)
    table.add_column("Time", style="dim")
    table.add_column("Operation", style="cyan")
    table.add_column("Record ID")
    for event in events:
        table.add_row(
            event.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            event.kind.value,
            str(event.record_id),
        )
    console.print(table)


def create_backup(ctx: VaultContext) -> Path | None:
    """Write a backup of the current records, reporting failures."""
    try:
        path = backup_records(ctx.store.list(), ctx.backup_dir)
    except PersistenceError as e:
        console.print(f"[yellow]Backup failed: {e}[/yellow]")
        return None
    console.print(f"[green]Backup created successfully: {path.name}[/green]")
    return path


def run_export(ctx: VaultContext) -> Path | None:
    records = ctx.store.list()
    if not records:
        console.print("[dim]Vault is empty. Nothing to export.[/dim]")
        return None
    path = export_records(records, ctx.export_dir, EXPORT_FILE_NAME)
    console.print(f"[green]Data exported successfully to {path}[/green]")
    return path


def run_search(ctx: VaultContext, keyword: str) -> list[Record]:
    records = ctx.store.list()
    if not records:
        console.print("[dim]Vault is empty. No records to search.[/dim]")
        return []
    matches = search(records, keyword)
    if not matches:
        console.print("[dim]No records found.[/dim]")
    else:
        plural = "s" if len(matches) > 1 else ""
        print_records(matches, f"Found {len(matches)} matching record{plural}")
    return matches


def run_sort(ctx: VaultContext, sort_field: str, order: str) -> list[Record]:
    records = ctx.store.list()
    if not records:
        console.print("[dim]Vault is empty. Nothing to sort.[/dim]")
        return []
    ordered = sort_records(records, sort_field, order)
    title = f"Sorted Records ({sort_field.strip().lower()}, {order.strip().upper()})"
    print_records(ordered, title)
    return ordered


def handle_choice(ctx: VaultContext, choice: str) -> bool:
    """
    Handle a menu choice.

    Returns True if the menu should be shown again, False to exit.
    """
    choice = choice.strip()

    if choice == "0":
        console.print("[dim]Exiting NodeVault...[/dim]")
        return False

    elif choice == "1":
        name = Prompt.ask("Enter name", default="", show_default=False)
        value = Prompt.ask("Enter value", default="", show_default=False)
        record = ctx.store.add(name, value)
        console.print(f"[green]Record added successfully! (ID: {record.id})[/green]")
        if ctx.auto_backup:
            create_backup(ctx)

    elif choice == "2":
        print_records(ctx.store.list())

    elif choice == "3":
        record_id = parse_record_id(Prompt.ask("Enter record ID to update"))
        name = Prompt.ask("New name", default="", show_default=False)
        value = Prompt.ask("New value", default="", show_default=False)
        updated = ctx.store.update(record_id, name, value)
        if updated:
            console.print("[green]Record updated![/green]")
        else:
            console.print("[red]Record not found.[/red]")

    elif choice == "4":
        record_id = parse_record_id(Prompt.ask("Enter record ID to delete"))
        if ctx.store.delete(record_id):
            console.print("[green]Record deleted![/green]")
            if ctx.auto_backup:
                create_backup(ctx)
        else:
            console.print("[red]Record not found.[/red]")

    elif choice == "5":
        if not ctx.store.list():
            console.print("[dim]Vault is empty. No records to search.[/dim]")
        else:
            keyword = Prompt.ask(
                "Enter search keyword (ID or Name)", default="", show_default=False
            )
            run_search(ctx, keyword)

    elif choice == "6":
        if not ctx.store.list():
            console.print("[dim]Vault is empty. Nothing to sort.[/dim]")
        else:
            sort_field = Prompt.ask(
                "Choose field to sort by", choices=[f.value for f in SortField]
            )
            order = Prompt.ask("Choose order", choices=[o.value for o in SortOrder])
            run_sort(ctx, sort_field, order)

    elif choice == "7":
        run_export(ctx)

    elif choice == "8":
        print_statistics(ctx.store.list())

    elif choice == "9":
        create_backup(ctx)

    elif choice == "10":
        print_events(ctx.events.recent())

    else:
        console.print("[red]Invalid option.[/red]")

    return True


def repl(ctx: VaultContext):
    """Run the menu loop until the user exits."""
    while True:
        try:
            print_menu()
            choice = Prompt.ask("[bold blue]Choose option[/bold blue]")
            if not handle_choice(ctx, choice):
                break

        except KeyboardInterrupt:
            console.print("\n[dim]Choose 0 to exit.[/dim]")
        except EOFError:
            break
        except VaultError as e:
            console.print(f"[red]Error: {e}[/red]")
        except Exception as e:
            logger.exception("Unexpected error in menu loop")
            console.print(f"[red]Error: {e}[/red]")


def open_context(
    store: Optional[str] = None,
    path: Optional[str] = None,
    debug: bool = False,
) -> VaultContext:
    """Configure logging and open the record store with an event log attached."""
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        console.print("[dim]Debug logging enabled[/dim]")
    else:
        setup_logging()

    if store is None:
        is_valid, message = validate_core_environment()
        if not is_valid:
            console.print(f"[red]Error: {message}[/red]")
            raise typer.Exit(1)

    events = EventLog()
    try:
        record_store = build_store(
            store,
            Path(path).expanduser() if path else None,
            observers=[events],
        )
    except VaultError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    return VaultContext(
        store=record_store,
        events=events,
        backup_dir=BACKUP_DIR,
        export_dir=EXPORT_DIR,
        auto_backup=AUTO_BACKUP,
    )


def _vault(ctx: typer.Context) -> VaultContext:
    if ctx.obj is None:
        ctx.obj = open_context()
    return ctx.obj


def _fail(message: str):
    console.print(f"[red]{message}[/red]")
    raise typer.Exit(1)


@app.command()
def menu(ctx: typer.Context):
    """Start the interactive menu."""
    vault = _vault(ctx)
    try:
        repl(vault)
    finally:
        vault.store.close()


@app.command()
def add(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Record name"),
    value: str = typer.Argument("", help="Record value"),
):
    """Add a record."""
    vault = _vault(ctx)
    try:
        record = vault.store.add(name, value)
    except VaultError as e:
        _fail(f"Error: {e}")
    console.print(f"[green]Record added successfully! (ID: {record.id})[/green]")
    if vault.auto_backup:
        create_backup(vault)


@app.command("list")
def list_records(ctx: typer.Context):
    """List all records."""
    vault = _vault(ctx)
    try:
        print_records(vault.store.list())
    except VaultError as e:
        _fail(f"Error: {e}")


@app.command()
def update(
    ctx: typer.Context,
    record_id: int = typer.Argument(..., help="ID of the record to update"),
    name: str = typer.Argument(..., help="New name"),
    value: str = typer.Argument("", help="New value"),
):
    """Update a record's name and value."""
    vault = _vault(ctx)
    try:
        updated = vault.store.update(record_id, name, value)
    except VaultError as e:
        _fail(f"Error: {e}")
    if not updated:
        _fail("Record not found.")
    console.print("[green]Record updated![/green]")


@app.command()
def delete(
    ctx: typer.Context,
    record_id: int = typer.Argument(..., help="ID of the record to delete"),
):
    """Delete a record."""
    vault = _vault(ctx)
    try:
        deleted = vault.store.delete(record_id)
    except VaultError as e:
        _fail(f"Error: {e}")
    if not deleted:
        _fail("Record not found.")
    console.print("[green]Record deleted![/green]")
    if vault.auto_backup:
        create_backup(vault)


@app.command("search")
def search_command(
    ctx: typer.Context,
    keyword: str = typer.Argument("", help="Text to find in record IDs or names"),
):
    """Search records by ID or name."""
    vault = _vault(ctx)
    try:
        run_search(vault, keyword)
    except VaultError as e:
        _fail(f"Error: {e}")


@app.command("sort")
def sort_command(
    ctx: typer.Context,
    sort_field: str = typer.Option(
        "name",
        "--field",
        "-f",
        help="Field to sort by (name/created)",
    ),
    order: str = typer.Option(
        "asc",
        "--order",
        "-o",
        help="Sort order (asc/desc)",
    ),
):
    """Show records sorted by name or creation time."""
    vault = _vault(ctx)
    try:
        run_sort(vault, sort_field, order)
    except VaultError as e:
        _fail(f"Error: {e}")


@app.command()
def stats(ctx: typer.Context):
    """Show vault statistics."""
    vault = _vault(ctx)
    try:
        print_statistics(vault.store.list())
    except VaultError as e:
        _fail(f"Error: {e}")


@app.command("export")
def export_command(ctx: typer.Context):
    """Export all records to a text file."""
    vault = _vault(ctx)
    try:
        run_export(vault)
    except VaultError as e:
        _fail(f"Error: {e}")


@app.command()
def backup(ctx: typer.Context):
    """Write a JSON backup of all records."""
    vault = _vault(ctx)
    try:
        path = backup_records(vault.store.list(), vault.backup_dir)
    except VaultError as e:
        _fail(f"Error: {e}")
    console.print(f"[green]Backup created successfully: {path.name}[/green]")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    store: Optional[str] = typer.Option(
        None,
        "--store",
        "-s",
        help="Storage backend: memory, json or sqlite (default: $NODEVAULT_STORE)",
    ),
    path: Optional[str] = typer.Option(
        None,
        "--path",
        "-p",
        help="File backing the json/sqlite store",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug logging",
    ),
):
    """NodeVault - Personal Record Manager."""
    ctx.obj = open_context(store, path, debug)
    if ctx.invoked_subcommand is None:
        # Default to the interactive menu
        menu(ctx)


def run_cli():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run_cli()
