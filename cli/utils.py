from __future__ import annotations
from datetime import datetime
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from promptcraft.client import PromptRequestClient
from promptcraft.clipboard import copy_to_clipboard
from promptcraft.config import load_settings
from promptcraft.history import HistoryStore
from promptcraft.llm import ProviderConfig, get_provider
from promptcraft.storage import JsonFileStorage

console = Console()


def open_history_store() -> HistoryStore:
    """History store backed by the configured storage file."""
    settings = load_settings()
    return HistoryStore(JsonFileStorage(settings.storage_path))


def make_client(provider: Optional[str] = None, model: Optional[str] = None) -> PromptRequestClient:
    """Request client for the CLI, honouring --provider/--model overrides."""
    if provider is None and model is None:
        # Resolved lazily from the environment on first request
        return PromptRequestClient()

    settings = load_settings()
    name = (provider or settings.provider).lower()
    config = ProviderConfig(
        api_key=settings.api_key_for(name),
        base_url=settings.base_url,
        model=model or settings.model,
        timeout=settings.timeout,
    )
    try:
        return PromptRequestClient(get_provider(name, config))
    except ValueError as exc:
        console.print(f"[red]✗ {exc}[/red]")
        raise typer.Exit(code=2)


def fail(message: str) -> None:
    """Print an inline error and exit with status 1."""
    console.print(Text(f"✗ {message}", style="bold red"))
    raise typer.Exit(code=1)


def show_result(content: str, title: str) -> None:
    # Text keeps "[Analysis]"-style headers from being read as rich markup
    console.print(Panel(Text(content), title=f"[bold green]{title}[/bold green]", border_style="green"))


def copy_result(content: str) -> None:
    if copy_to_clipboard(content):
        console.print("[green]✓ Copied to clipboard[/green]")
    else:
        console.print("[yellow]⚠ No clipboard available - cannot copy[/yellow]")


def format_timestamp(timestamp_ms: int, fmt: str = "%Y-%m-%d %H:%M") -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime(fmt)


def preview(text: str, width: int = 50) -> str:
    flat = text.replace("\n", " ")
    if len(flat) > width:
        return flat[:width] + "..."
    return flat
