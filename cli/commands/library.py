import json

import typer
from rich.table import Table
from rich.text import Text

from promptcraft.controller import LibraryController
from promptcraft.template_catalog import ALL_CATEGORIES, CATEGORY_FILTERS, get_template
from cli.utils import console, fail, show_result

app = typer.Typer(help="Curated prompt templates")

CATEGORY_STYLES = {
    "Coding": "blue",
    "Writing": "magenta",
    "Analysis": "yellow",
    "Education": "green",
}


@app.command("list")
def library_list(
    category: str = typer.Option(
        ALL_CATEGORIES, "--category", "-c", help=f"One of: {', '.join(CATEGORY_FILTERS)}"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """List templates, optionally filtered by category."""
    library = LibraryController()
    try:
        library.set_filter(category)
    except ValueError as exc:
        fail(str(exc))

    templates = library.templates
    if json_output:
        typer.echo(json.dumps([t.model_dump() for t in templates], ensure_ascii=False, indent=2))
        return

    console.print(f"\n[bold cyan]Template Library[/bold cyan] [dim]({library.filter})[/dim]\n")
    table = Table(show_header=True)
    table.add_column("ID", style="dim", width=4)
    table.add_column("Category", width=10)
    table.add_column("Title", style="bold")
    table.add_column("Description")
    for t in templates:
        style = CATEGORY_STYLES.get(t.category, "white")
        table.add_row(t.id, f"[{style}]{t.category}[/{style}]", Text(t.title), Text(t.description))
    console.print(table)


@app.command("show")
def library_show(
    template_id: str = typer.Argument(..., help="Template ID"),
    copy: bool = typer.Option(False, "--copy", help="Copy template to clipboard"),
):
    """Show a template's full content."""
    template = get_template(template_id)
    if template is None:
        fail(f"Template '{template_id}' not found")

    console.print(f"\n[bold]{template.title}[/bold] [dim]({template.category})[/dim]")
    console.print(Text(template.description, style="dim"))
    show_result(template.content, "Template")

    if copy:
        if LibraryController().copy(template.id):
            console.print("[green]✓ Copied to clipboard[/green]")
        else:
            console.print("[yellow]⚠ No clipboard available - cannot copy[/yellow]")
