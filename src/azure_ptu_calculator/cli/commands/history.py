"""History commands for the PTU calculator CLI."""

import click

from ...errors import HistoryError
from ...history import HistoryStore
from ..formatters import create_console, format_history_json, format_history_table, format_json
from ..utils import ExitCode, handle_error


@click.group()
def history() -> None:
    """Recently saved calculations."""
    pass


@history.command("list")
@click.pass_context
def list_history(ctx: click.Context) -> None:
    """Show saved calculations, newest first."""
    store = HistoryStore()
    try:
        entries = store.entries()
    except HistoryError as e:
        handle_error(e, ExitCode.GENERIC_ERROR)
        return

    if ctx.obj["format"] == "json":
        format_json(format_history_json(entries, str(store.path)))
    else:
        console = create_console(no_color=ctx.obj["no_color"])
        format_history_table(entries, console)


@history.command()
@click.option("--yes", is_flag=True, help="Confirm deletion without prompting (required for non-interactive use).")
@click.pass_context
def clear(ctx: click.Context, yes: bool = False) -> None:
    """Delete all saved calculations."""
    store = HistoryStore()
    try:
        if not yes:
            if not store.path.exists():
                click.echo("No saved calculations to clear.")
                return
            if not click.confirm(f"Delete the calculation history at {store.path}?"):
                click.echo("History clear cancelled.")
                return

        removed = store.clear()
    except HistoryError as e:
        handle_error(e, ExitCode.GENERIC_ERROR)
        return

    if ctx.obj["format"] == "json":
        format_json({"success": True, "entries_removed": removed, "path": str(store.path)})
    else:
        console = create_console(no_color=ctx.obj["no_color"])
        console.print(f"Removed {removed} saved calculations.")
