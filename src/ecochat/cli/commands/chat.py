"""
Chat command for EcoChat CLI.

Answers a query through the completion provider and reports the
sustainability estimate alongside the reply.
"""

from __future__ import annotations

import asyncio
import json
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn

from ecochat.cli.commands.analyze import print_sustainability_table
from ecochat.core.config import get_config
from ecochat.core.pipeline import PROCESSING_STAGES, EcoChat
from ecochat.core.types import ChatResult
from ecochat.utils.errors import EcoChatError

console = Console()
error_console = Console(stderr=True)

STAGE_LABELS = dict(PROCESSING_STAGES)


async def _chat_async(
    query: str,
    progress: Progress | None,
    task_id: Any,
    **kwargs: Any,
) -> ChatResult:
    """Run the pipeline, mirroring stage updates onto the spinner."""

    async def on_stage(stage_id: str, fraction: float) -> None:
        if progress is not None:
            progress.update(task_id, description=STAGE_LABELS.get(stage_id, stage_id))

    eco = EcoChat(config=get_config())
    try:
        return await eco.chat(query, progress_callback=on_stage, **kwargs)
    finally:
        await eco.close()


def chat(
    query: Annotated[str, typer.Argument(help="Question to ask")],
    model: Annotated[
        str | None,
        typer.Option("--model", "-m", help="Override the completion model"),
    ] = None,
    max_tokens: Annotated[
        int | None,
        typer.Option("--max-tokens", help="Maximum tokens to generate"),
    ] = None,
    output: Annotated[
        str,
        typer.Option("--output", "-o", help="Output format: text, json"),
    ] = "text",
) -> None:
    """
    Ask a question and see its estimated environmental savings.

    Examples:
        ecochat chat "Explain how quantum computers work"
        ecochat chat "Write a sorting function" --output json
    """
    kwargs: dict[str, Any] = {}
    if model:
        kwargs["model"] = model
    if max_tokens:
        kwargs["max_tokens"] = max_tokens

    try:
        if output == "json":
            result = asyncio.run(_chat_async(query, None, None, **kwargs))
        else:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True,
            ) as progress:
                task_id = progress.add_task(PROCESSING_STAGES[0][1], total=None)
                result = asyncio.run(_chat_async(query, progress, task_id, **kwargs))

    except EcoChatError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    if output == "json":
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return

    console.print()
    console.print(
        Panel(
            Markdown(result.answer),
            title=f"[bold blue]{result.model}[/bold blue]",
            expand=False,
        )
    )
    console.print()
    print_sustainability_table(result.estimate.to_dict())

    if result.footprint:
        console.print(
            f"[dim]Data-center footprint ({result.footprint.source}):[/dim] "
            f"{result.footprint.co2e_kg:.6f} kg CO2e"
        )
    console.print(f"[dim]Completed in {result.execution_time:.2f}s[/dim]")


__all__ = ["chat"]
