"""
Rich CLI interface for CompareAI.

Send a prompt to several models from the terminal and browse prompt history.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from compareai import __version__
from compareai.core.config import get_settings
from compareai.core.errors import InvalidRequest
from compareai.core.models import ResultSource
from compareai.core.orchestrator import Orchestrator
from compareai.history.manager import PromptHistory
from compareai.history.store import create_store

app = typer.Typer(
    name="compareai",
    help="Compare responses from multiple AI models side by side",
    no_args_is_help=True,
)
history_app = typer.Typer(help="Browse and manage prompt history", no_args_is_help=True)
app.add_typer(history_app, name="history")

console = Console()

DEFAULT_HISTORY_FILE = Path.home() / ".compareai" / "history.json"


def get_orchestrator() -> Orchestrator:
    """Get orchestrator instance."""
    return Orchestrator()


def get_history() -> PromptHistory:
    """Get the prompt history, persisted to a local file unless Redis is configured."""
    settings = get_settings()
    path = settings.compare.history_file or DEFAULT_HISTORY_FILE
    return PromptHistory(
        create_store(settings.redis, path=path),
        key=settings.compare.history_key,
        max_items=settings.compare.history_max_items,
    )


@app.command()
def version():
    """Show version information."""
    console.print(f"[bold cyan]CompareAI[/bold cyan] v{__version__}")


@app.command()
def models():
    """List registered models and whether they can be queried."""
    orch = get_orchestrator()

    table = Table(title="AI Models", show_header=True, header_style="bold magenta")
    table.add_column("Model ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Provider", style="yellow")
    table.add_column("Credential")
    table.add_column("Status")

    entries = orch.list_models()
    for entry in entries:
        status = "[green]Available[/green]" if entry["available"] else "[red]Not configured[/red]"
        table.add_row(
            entry["id"],
            entry["name"],
            entry["provider"],
            entry["credentialVar"],
            status,
        )

    console.print(table)
    available = sum(1 for e in entries if e["available"])
    console.print(f"\n[dim]{available} of {len(entries)} models available[/dim]")


@app.command()
def compare(
    prompt: str = typer.Argument(..., help="The prompt to compare"),
    models_str: Optional[str] = typer.Option(
        None, "--models", "-m", help="Comma-separated model IDs (default: all available)"
    ),
    save: bool = typer.Option(True, "--save/--no-save", help="Record the prompt in history"),
):
    """Compare responses from multiple AI models."""
    orch = get_orchestrator()

    if models_str:
        model_ids = [m.strip() for m in models_str.split(",") if m.strip()]
    else:
        model_ids = orch.available_models

    async def run():
        try:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True,
            ) as progress:
                progress.add_task("Querying all models in parallel...", total=None)
                return await orch.generate(prompt, model_ids)
        finally:
            await orch.aclose()

    try:
        aggregate = asyncio.run(run())
    except InvalidRequest as e:
        console.print(f"[red]{e.message}[/red]")
        console.print(f"Known models: {', '.join(orch.models.ids)}")
        raise typer.Exit(2)

    if save:
        get_history().save(prompt, model_ids)

    names = {m.id: m.name for m in aggregate.resolved_models}
    for model_id, result in aggregate.results.items():
        name = names.get(model_id, model_id)
        if result.source == ResultSource.LIVE:
            console.print(Panel(
                Markdown(result.text),
                title=f"[bold cyan]{name}[/bold cyan]",
                subtitle=f"[dim]{result.latency_ms:.0f}ms[/dim]",
            ))
        else:
            console.print(Panel(
                Markdown(result.text),
                title=f"[bold yellow]{name}[/bold yellow] (mock response)",
                subtitle=f"[dim]{result.error}[/dim]",
            ))
        console.print()

    if aggregate.skipped:
        console.print(f"[dim]Skipped (no adapter): {', '.join(aggregate.skipped)}[/dim]")
    if aggregate.errored_count:
        console.print(
            f"[yellow]{aggregate.errored_count} of {len(aggregate.results)} "
            f"models failed and show mock responses[/yellow]"
        )


@history_app.command("list")
def history_list():
    """Show saved prompts, newest first."""
    items = get_history().list()
    if not items:
        console.print("[dim]No history yet[/dim]")
        return

    table = Table(title="Prompt History", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("When")
    table.add_column("Prompt", style="cyan")
    table.add_column("Models", style="green")

    for item in items:
        when = datetime.fromtimestamp(item.timestamp / 1000).strftime("%Y-%m-%d %H:%M")
        table.add_row(item.id, when, item.prompt, ", ".join(item.model_ids))

    console.print(table)


@history_app.command("delete")
def history_delete(item_id: str = typer.Argument(..., help="History entry ID")):
    """Delete one history entry."""
    if not get_history().delete(item_id):
        console.print(f"[red]No history entry with ID {item_id}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Deleted {item_id}[/green]")


@history_app.command("clear")
def history_clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Clear all history."""
    if not yes:
        typer.confirm("Are you sure you want to clear all history?", abort=True)
    get_history().clear()
    console.print("[green]History cleared[/green]")


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Host to bind"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to bind"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
):
    """Start the API server."""
    from compareai.api.server import run_server

    console.print(Panel(
        f"Starting CompareAI API server\n"
        f"Host: [cyan]{host}[/cyan]\n"
        f"Port: [cyan]{port}[/cyan]\n"
        f"Docs: [link]http://{host}:{port}/docs[/link]",
        title="CompareAI Server",
    ))

    run_server(host=host, port=port, reload=reload)


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
