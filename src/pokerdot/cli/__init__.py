"""
pokerdot CLI.

This package splits CLI commands into focused modules:
- main:     endpoint, connect
- sessions: list, save, remove, clear (saved games on this machine)
"""

import typer

from pokerdot.cli.main import configure_logging, load_environment, register_commands
from pokerdot.cli.sessions import sessions_app

app = typer.Typer(help="pokerdot client - game server bridge and saved games")


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose logging (DEBUG level)"
    ),
):
    """
    pokerdot client - game server bridge and saved games.
    """
    load_environment()
    configure_logging(verbose)


register_commands(app)

app.add_typer(sessions_app, name="sessions")

if __name__ == "__main__":
    app()
