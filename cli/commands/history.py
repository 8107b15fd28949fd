import json
import logging

import typer
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from promptcraft.errors import PersistenceError
from promptcraft.history import select_item
from promptcraft.models import BuilderHistoryItem, Feature
from cli.utils import console, fail, format_timestamp, open_history_store, preview, show_result

logger = logging.getLogger("promptcraft.cli")

app = typer.Typer(help="Recent Builder and Optimizer results")


@app.command("list")
def history_list(
    feature: Feature = typer.Argument(..., help="Which history: builder or optimizer"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """List recent history entries, newest first."""
    entries = open_history_store().load(feature)

    if json_output:
        typer.echo(
            json.dumps(
                [e.model_dump(mode="json", by_alias=True) for e in entries],
                ensure_ascii=False,
                indent=2,
            )
        )
        return

    if not entries:
        console.print("[yellow]No history entries found[/yellow]")
        return

    title = "Recent Generations" if feature is Feature.BUILDER else "Recent Optimizations"
    console.print(f"\n[bold cyan]{title}[/bold cyan]\n")

    table = Table(show_header=True)
    table.add_column("ID", style="dim")
    table.add_column("Time", style="cyan")
    if feature is Feature.BUILDER:
        table.add_column("Role", style="magenta")
        table.add_column("Task")
        for entry in entries:
            table.add_row(
                entry.id,
                format_timestamp(entry.timestamp),
                Text(entry.inputs.role),
                Text(preview(entry.inputs.task)),
            )
    else:
        table.add_column("Prompt")
        for entry in entries:
            table.add_row(
                entry.id,
                format_timestamp(entry.timestamp),
                Text(preview(entry.original_prompt, 60)),
            )

    console.print(table)


@app.command("show")
def history_show(
    feature: Feature = typer.Argument(..., help="Which history: builder or optimizer"),
    entry_id: str = typer.Argument(..., help="Entry ID"),
):
    """Show the inputs and result of a history entry."""
    entry = open_history_store().find(feature, entry_id)
    if entry is None:
        fail(f"Entry '{entry_id}' not found")

    inputs, result = select_item(entry)
    console.print(f"\n[bold]Entry {entry.id}[/bold] [dim]{format_timestamp(entry.timestamp)}[/dim]\n")
    if isinstance(entry, BuilderHistoryItem):
        body = Text()
        for name in ("role", "task", "context", "format"):
            body.append(f"{name.title()}: ", style="bold")
            body.append(getattr(inputs, name) or "-")
            body.append("\n")
        console.print(Panel(body, title="Inputs", border_style="cyan"))
    else:
        console.print(Panel(Text(inputs), title="Original Prompt", border_style="cyan"))
    show_result(result, "Result")


@app.command("clear")
def history_clear(
    feature: Feature = typer.Argument(..., help="Which history: builder or optimizer"),
    force: bool = typer.Option(False, "--force", help="Skip confirmation"),
):
    """Clear a history list after confirmation."""

    def confirm(message: str) -> bool:
        return force or typer.confirm(message)

    try:
        cleared = open_history_store().clear(feature, confirm)
    except PersistenceError as exc:
        logger.debug("Clearing %s history failed: %s", feature.value, exc)
        fail(f"Could not clear history: {exc}")

    if not cleared:
        typer.echo("Cancelled")
        raise typer.Exit()

    console.print("[green]✓ History cleared[/green]")
