"""
Main EcoChat CLI application.

Provides the entry point for the ecochat command-line interface
with subcommands for analysis, chat, and serving.
"""

from __future__ import annotations

import sys
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from ecochat.cli.commands import analyze, chat, serve
from ecochat.core.config import get_config
from ecochat.utils.errors import ConfigurationError
from ecochat.utils.logging import setup_logging

# =============================================================================
# CLI Application Setup
# =============================================================================

app = typer.Typer(
    name="ecochat",
    help="EcoChat CLI - Sustainability-aware chat estimation",
    add_completion=False,
    rich_markup_mode="rich",
    pretty_exceptions_enable=True,
    pretty_exceptions_show_locals=False,
)

console = Console()
error_console = Console(stderr=True)

app.command()(analyze.analyze)
app.command()(chat.chat)
app.command()(serve.serve)


# =============================================================================
# Version and Info Commands
# =============================================================================


def _get_version() -> str:
    from ecochat import __version__

    return __version__


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold green]EcoChat[/bold green] version [green]{_get_version()}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    EcoChat - Sustainability-aware chat estimation.

    Scores each query, picks the provider/region with the lowest
    environmental cost and reports energy, CO2 and water savings.

    Examples:
        ecochat analyze "Explain how quantum computers work"
        ecochat chat "Write a function that reverses a list"
        ecochat serve --host 0.0.0.0 --port 8000
    """
    pass


# =============================================================================
# Additional Commands
# =============================================================================


@app.command()
def providers() -> None:
    """List catalog providers and their regional carbon intensity."""
    try:
        catalog = get_config().build_catalog()
    except ConfigurationError as e:
        error_console.print(f"[red]Error loading catalog:[/red] {e}")
        raise typer.Exit(code=1)

    table = Table(
        title="Provider Catalog (resources per 1k tokens)",
        show_header=True,
        header_style="bold cyan",
    )
    # Narrow enough for an 80-column terminal
    table.add_column("Provider", style="cyan", no_wrap=True, min_width=10)
    table.add_column("Model", no_wrap=True)
    table.add_column("Region", no_wrap=True)
    table.add_column("CO2/kWh", justify="right")
    table.add_column("Wh/g/ml", justify="right")
    table.add_column("Status", no_wrap=True)

    for profile in catalog.providers:
        status = "[green]Available[/green]" if profile.available else "[dim]Disabled[/dim]"
        table.add_row(
            profile.name,
            profile.model,
            profile.region,
            f"{catalog.intensity_for(profile.region):.3f}",
            f"{profile.base_energy_per_k_tokens:g}/"
            f"{profile.base_co2_per_k_tokens:g}/"
            f"{profile.water_usage_per_k_tokens:g}",
            status,
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def config(
    show_all: Annotated[
        bool,
        typer.Option("--all", "-a", help="Show all configuration values"),
    ] = False,
) -> None:
    """Display current configuration."""
    cfg = get_config()

    table = Table(title="EcoChat Configuration", show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Completion Model", cfg.completion.model)
    table.add_row("Completion URL", cfg.completion.base_url or "default")
    table.add_row("API Key", "[green]Set[/green]" if cfg.completion.api_key else "[red]Missing[/red]")
    table.add_row("Footprint Lookup", "Climatiq" if cfg.climatiq.enabled else "[dim]Off[/dim]")

    if show_all:
        table.add_row("Catalog File", cfg.catalog_file or "built-in")
        table.add_row("Disabled Providers", ", ".join(cfg.disabled_providers) or "-")
        table.add_row("Timeout", f"{cfg.completion.timeout}s")
        table.add_row("Max Retries", str(cfg.completion.max_retries))
        table.add_row("System Prompt", cfg.system_prompt)
        table.add_row("API Host", f"{cfg.api.host}:{cfg.api.port}")
        table.add_row("Log Level", cfg.logging.level)

    console.print()
    console.print(table)
    console.print()

    if not show_all:
        console.print("[dim]Use --all to see full configuration.[/dim]")


# =============================================================================
# Entry Point
# =============================================================================


def cli() -> None:
    """Entry point for the CLI."""
    log_config = get_config().logging
    setup_logging(log_config.level, log_config.json_format, log_config.log_file)

    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    cli()


__all__ = ["app", "cli", "main"]
