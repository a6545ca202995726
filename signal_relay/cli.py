"""
CLI for running and inspecting the signaling relay.

Provides commands for serving the application with uvicorn and for
showing the effective configuration.
"""

import typer
import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from signal_relay.settings import app_settings
from signal_relay.uvicorn_filters import build_log_config

typer_app = typer.Typer(
    name="signal-relay",
    help="Signaling relay between WebSocket clients and a media server",
    add_completion=False,
)
console = Console()


@typer_app.command(name="serve")
def serve(
    host: str = typer.Option(
        None, "--host", help="Bind address (defaults to HOST)"
    ),
    port: int = typer.Option(
        None, "--port", help="Listen port (defaults to PORT)"
    ),
    reload: bool = typer.Option(
        False, "--reload", help="Reload on code changes (development only)"
    ),
):
    """
    Serve the relay with uvicorn.

    Example:
        signal-relay serve --port 3000
    """
    uvicorn.run(
        "signal_relay:application",
        factory=True,
        host=host or app_settings.HOST,
        port=port or app_settings.PORT,
        reload=reload,
        log_config=build_log_config(),
    )


@typer_app.command(name="show-config")
def show_config():
    """
    Display the effective configuration. Secrets are masked.

    Example:
        signal-relay show-config
    """
    console.print()
    console.print(
        Panel.fit(
            "[bold cyan]Signaling relay configuration[/bold cyan]",
            border_style="cyan",
        )
    )
    console.print()

    table = Table("Setting", "Value", show_lines=True)
    for name, value in app_settings.model_dump().items():
        table.add_row(f"[green]{name}[/green]", str(value))

    console.print(table)
    console.print()


if __name__ == "__main__":
    typer_app()
