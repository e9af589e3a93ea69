"""
Top-level CLI commands: endpoint, connect.
"""

import asyncio
import os
from typing import Optional

import typer

from pokerdot.config import CONFIG, PROJECT_DIR


def configure_logging(verbose: bool = False):
    """Configure logging for the CLI."""
    from pokerdot.logger import setup_logging

    log_level = "DEBUG" if verbose else os.getenv("LOG_LEVEL", "WARNING")
    setup_logging(level=log_level, log_file=os.getenv("LOG_FILE"))


def load_environment():
    """Load ``.env`` from the working directory or project root, then refresh CONFIG."""
    from dotenv import load_dotenv

    load_dotenv()
    load_dotenv(PROJECT_DIR / ".env")
    CONFIG.reload()


def _resolve_endpoint(host: Optional[str], url: Optional[str]) -> str:
    from pokerdot.transport.endpoint import InvalidHostnameError, api_uri

    if url:
        return url
    try:
        return api_uri(host or CONFIG.host)
    except InvalidHostnameError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=1)


def endpoint(hostname: str = typer.Argument(..., help="Host name the client is served from")):
    """Print the game server endpoint derived from a host name."""
    typer.echo(_resolve_endpoint(hostname, None))


def connect(
    host: Optional[str] = typer.Option(
        None, "--host", help="Host name to derive the endpoint from"
    ),
    url: Optional[str] = typer.Option(
        None, "--url", help="Explicit WebSocket URL (overrides --host)"
    ),
):
    """
    Bridge stdin/stdout to the game server.

    Each stdin line is a JSON request ({"intent": "send" | "save" | "remove" |
    "list", ...}) or a bare JSON message to send. Events are printed as JSON lines.
    """
    from pokerdot.cli.console import run_console

    target = _resolve_endpoint(host, url)
    typer.echo(f"🔌 Bridging to {target}", err=True)
    typer.echo("   Press Ctrl+C to stop.\n", err=True)

    try:
        asyncio.run(run_console(target))
    except KeyboardInterrupt:
        typer.echo("\n🛑 Bridge stopped.", err=True)


def register_commands(app: typer.Typer):
    app.command("endpoint")(endpoint)
    app.command("connect")(connect)
