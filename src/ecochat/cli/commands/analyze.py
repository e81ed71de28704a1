"""
Analyze command for EcoChat CLI.

Scores a query and shows the selected provider and estimated savings
without calling the completion API.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table

from ecochat.core.config import get_config
from ecochat.core.pipeline import EcoChat
from ecochat.utils.errors import EcoChatError

console = Console()
error_console = Console(stderr=True)


async def _analyze_async(query: str, footprint: bool) -> dict[str, Any]:
    """Run the estimate and, if requested, the footprint lookup."""
    eco = EcoChat(config=get_config())

    try:
        analysis, estimate = eco.estimate(query)
        ranking = eco.selector.rank(analysis)
        result: dict[str, Any] = {
            "query": query,
            "analysis": analysis.to_dict(),
            "sustainability": estimate.to_dict(),
            "ranking": [score.to_dict() for score in ranking],
            "footprint": None,
        }
        if footprint:
            fp = await eco.footprint(estimate)
            if fp is not None:
                result["footprint"] = {
                    "co2e_kg": fp.co2e_kg,
                    "region": fp.region,
                    "energy_kwh": fp.energy_kwh,
                    "source": fp.source,
                }
        return result

    finally:
        await eco.close()


def _format_analysis_text(result: dict[str, Any]) -> str:
    """Format analysis as plain text."""
    analysis = result["analysis"]
    info = result["sustainability"]
    lines = [
        f"Category: {analysis['category']}",
        f"Complexity: {analysis['complexity']:.3f}",
        f"Provider: {info['provider']} ({info['model']}, {info['location']})",
        f"Tokens: {info['token_count']}",
        f"Energy saved: {info['energy_saved']:.4f} Wh",
        f"CO2 saved: {info['co2_saved']:.4f} g",
        f"Water saved: {info['water_saved']:.4f} ml",
    ]
    if result.get("footprint"):
        lines.append(f"Data-center footprint: {result['footprint']['co2e_kg']:.6f} kg CO2e")
    return "\n".join(lines)


def print_sustainability_table(info: dict[str, Any], title: str = "Sustainability") -> None:
    """Print the chosen provider and savings."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Provider", f"[bold]{info['provider']}[/bold] ({info['model']})")
    table.add_row("Location", info["location"])
    table.add_row("Tokens", str(info["token_count"]))
    table.add_row("Energy Saved", f"{info['energy_saved']:.4f} Wh")
    table.add_row("CO2 Saved", f"{info['co2_saved']:.4f} g")
    table.add_row("Water Saved", f"{info['water_saved']:.4f} ml")
    if info.get("impact_increased"):
        table.add_row("Note", "[yellow]Impact higher than baseline[/yellow]")

    console.print(table)


def _print_analysis_panel(result: dict[str, Any]) -> None:
    analysis = result["analysis"]

    table = Table(title="Query Analysis", show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    complexity = analysis["complexity"]
    color = "green" if complexity < 0.4 else "yellow" if complexity < 0.7 else "red"
    table.add_row("Category", analysis["category"])
    table.add_row("Complexity", f"[{color}]{complexity:.3f}[/{color}]")
    table.add_row("Sustainability Impact", f"{analysis['sustainability_impact']:.3f}")
    console.print(table)
    console.print()

    ranking = Table(title="Provider Ranking", show_header=True, header_style="bold cyan")
    ranking.add_column("#", style="dim")
    ranking.add_column("Provider", style="cyan")
    ranking.add_column("Region")
    ranking.add_column("Score", style="green")
    for i, score in enumerate(result["ranking"], 1):
        ranking.add_row(str(i), score["provider"], score["region"], f"{score['total_score']:.4f}")
    console.print(ranking)
    console.print()

    print_sustainability_table(result["sustainability"])

    footprint = result.get("footprint")
    if footprint:
        console.print(
            f"[dim]Data-center footprint ({footprint['source']}):[/dim] "
            f"{footprint['co2e_kg']:.6f} kg CO2e"
        )


def analyze(
    query: Annotated[str, typer.Argument(help="Query to analyze")],
    output: Annotated[
        str,
        typer.Option("--output", "-o", help="Output format: text, json"),
    ] = "text",
    footprint: Annotated[
        bool,
        typer.Option("--footprint", "-f", help="Include data-center footprint"),
    ] = False,
    output_file: Annotated[
        Path | None,
        typer.Option("--output-file", "-O", help="Write output to file"),
    ] = None,
) -> None:
    """
    Analyze a query and show the most sustainable provider.

    Examples:
        ecochat analyze "Explain how quantum computers work"
        ecochat analyze "Solve x^2 = 4" --output json
    """
    if output not in ("text", "json"):
        error_console.print(f"[red]Error:[/red] Unknown output format: {output}")
        raise typer.Exit(code=1)

    try:
        result = asyncio.run(_analyze_async(query, footprint))
    except EcoChatError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    if output == "json":
        formatted = json.dumps(result, indent=2)
        if output_file:
            output_file.write_text(formatted, encoding="utf-8")
            console.print(f"[green]Output written to:[/green] {output_file}")
        else:
            typer.echo(formatted)
    elif output_file:
        output_file.write_text(_format_analysis_text(result), encoding="utf-8")
        console.print(f"[green]Output written to:[/green] {output_file}")
    else:
        _print_analysis_panel(result)


__all__ = ["analyze", "print_sustainability_table"]
