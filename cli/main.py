from __future__ import annotations
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from promptcraft import get_version
from promptcraft.controller import BuilderController, OptimizerController
from promptcraft.models import Feature
from cli.commands.history import app as history_app
from cli.commands.library import app as library_app
from cli.utils import (
    console,
    copy_result,
    fail,
    make_client,
    open_history_store,
    show_result,
)

app = typer.Typer(help="PromptCraft - build, optimize and browse LLM prompts")
app.add_typer(library_app, name="library")
app.add_typer(history_app, name="history")


@app.callback(invoke_without_command=True)
def root(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
):
    """Top-level CLI. Shows help when no subcommand is given."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s", force=True
        )
    if version:
        typer.echo(get_version())
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command()
def build(
    role: str = typer.Option("", "--role", "-r", help="Persona/role, e.g. 'Senior Python Developer'"),
    task: str = typer.Option("", "--task", "-t", help="What the AI should do"),
    context: str = typer.Option("", "--context", "-c", help="Background info or constraints"),
    format: str = typer.Option("", "--format", "-f", help="Desired output format"),
    from_history: Optional[str] = typer.Option(
        None, "--from-history", help="Start from the inputs of a Builder history entry"
    ),
    provider: Optional[str] = typer.Option(None, "--provider", "-p", help="LLM provider override"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model identifier override"),
    copy: bool = typer.Option(False, "--copy", help="Copy result to clipboard"),
    json_output: bool = typer.Option(False, "--json", help="Output result as JSON"),
):
    """
    Build a structured "Super Prompt" from role, task, context and format.

    Examples:
        promptcraft build -r "Senior Python Developer" -t "Explain asyncio"
        promptcraft build --from-history 1718000000000 --format Markdown
    """
    store = open_history_store()
    controller = BuilderController(make_client(provider, model), store)

    if from_history:
        entry = store.find(Feature.BUILDER, from_history)
        if entry is None:
            fail(f"Entry '{from_history}' not found")
        controller.select_history_item(entry)

    # Explicit options win over restored inputs
    for name, value in (("role", role), ("task", task), ("context", context), ("format", format)):
        if value:
            controller.update(name, value)

    with console.status("Constructing..."):
        ok = controller.submit()

    state = controller.state
    if not ok:
        fail(state.error)

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "id": state.history[0].id if state.history else None,
                    "inputs": state.inputs.model_dump(),
                    "result": state.result,
                },
                ensure_ascii=False,
                indent=2,
            )
        )
    else:
        show_result(state.result, "Generated Super Prompt")

    if copy:
        copy_result(state.result)


@app.command()
def optimize(
    text: Optional[str] = typer.Argument(
        None, help="Draft prompt (use '-' to read STDIN)", show_default=False
    ),
    from_file: Optional[Path] = typer.Option(
        None, "--from-file", help="Read the draft prompt from a file (UTF-8)"
    ),
    from_history: Optional[str] = typer.Option(
        None, "--from-history", help="Re-run the draft of an Optimizer history entry"
    ),
    provider: Optional[str] = typer.Option(None, "--provider", "-p", help="LLM provider override"),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model identifier override"),
    copy: bool = typer.Option(False, "--copy", help="Copy result to clipboard"),
    json_output: bool = typer.Option(False, "--json", help="Output result as JSON"),
):
    """
    Analyze a draft prompt and rewrite it using prompting best practices.

    Examples:
        promptcraft optimize "Write a blog post about coffee"
        cat draft.txt | promptcraft optimize -
    """
    store = open_history_store()
    controller = OptimizerController(make_client(provider, model), store)

    if from_history:
        entry = store.find(Feature.OPTIMIZER, from_history)
        if entry is None:
            fail(f"Entry '{from_history}' not found")
        controller.select_history_item(entry)

    if from_file:
        controller.update(from_file.read_text(encoding="utf-8"))
    elif text == "-":
        controller.update(sys.stdin.read())
    elif text:
        controller.update(text)

    with console.status("Optimizing..."):
        ok = controller.submit()

    state = controller.state
    if not ok:
        fail(state.error)

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "id": state.history[0].id if state.history else None,
                    "originalPrompt": state.input_prompt,
                    "result": state.result,
                },
                ensure_ascii=False,
                indent=2,
            )
        )
    else:
        show_result(state.result, "Optimized & Analyzed")

    if copy:
        copy_result(state.result)


def main() -> None:  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
