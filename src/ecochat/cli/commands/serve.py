"""
Serve command for EcoChat CLI.

Starts the REST API with uvicorn. Host and port default to the values in
``EcoChatConfig.api`` (ECOCHAT_API_HOST / ECOCHAT_API_PORT).
"""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel

from ecochat.core.config import get_config

console = Console()
error_console = Console(stderr=True)


def serve(
    host: Annotated[
        str | None,
        typer.Option("--host", "-h", help="Host to bind to [default: from config]"),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option("--port", "-p", help="Port to listen on [default: from config]"),
    ] = None,
    workers: Annotated[
        int,
        typer.Option("--workers", "-w", min=1, help="Number of worker processes"),
    ] = 1,
    reload: Annotated[
        bool,
        typer.Option("--reload", help="Restart on code changes (single worker)"),
    ] = False,
    log_level: Annotated[
        str,
        typer.Option("--log-level", "-l", help="uvicorn log level"),
    ] = "info",
) -> None:
    """
    Start the EcoChat REST API server.

    Examples:
        ecochat serve
        ecochat serve --host 0.0.0.0 --port 8080
        ecochat serve --reload --log-level debug
    """
    from ecochat.api.server import API_PREFIX, run_server

    api_config = get_config().api
    host = host or api_config.host
    port = port or api_config.port
    if reload and workers > 1:
        error_console.print("[yellow]--reload runs a single worker; ignoring --workers[/yellow]")
        workers = 1

    url = f"http://{host}:{port}"
    console.print(
        Panel(
            f"[bold green]Listening on[/bold green] {url} "
            f"({workers} worker{'s' if workers > 1 else ''}"
            f"{', reload' if reload else ''})\n"
            f"[dim]Docs:[/dim]   {url}/docs\n"
            f"[dim]Health:[/dim] {url}{API_PREFIX}/health",
            title="[bold blue]EcoChat API[/bold blue]",
            expand=False,
        )
    )

    try:
        run_server(host=host, port=port, reload=reload, workers=workers, log_level=log_level)
    except OSError as e:
        error_console.print(f"[red]Error:[/red] Failed to start server: {e}")
        raise typer.Exit(code=1)


__all__ = ["serve"]
