"""
CLI subcommands for the saved games on this machine.

Usage:
    pokerdot sessions list
    pokerdot sessions save --game-id ID --player-key KEY [--field name=value ...]
    pokerdot sessions remove ID KEY
    pokerdot sessions clear
"""

import json
from datetime import datetime
from typing import List, Optional

import typer

from pokerdot.config import CONFIG
from pokerdot.session import SessionCache, SessionRecord
from pokerdot.storage import FileStorage

sessions_app = typer.Typer(help="Manage saved games")


def get_cache() -> SessionCache:
    """Cache backed by files under the configured data directory."""
    return SessionCache(
        FileStorage(CONFIG.data_dir),
        storage_key=CONFIG.storage_key,
        max_age_ms=CONFIG.session_max_age_ms,
    )


def _infer_type(value_str: str):
    """Infer a Python value from a CLI string."""
    try:
        return json.loads(value_str)
    except json.JSONDecodeError:
        return value_str


def _parse_fields(fields: Optional[List[str]]) -> dict:
    payload = {}
    for item in fields or []:
        if "=" not in item:
            typer.echo(f"❌ Invalid field '{item}', expected name=value", err=True)
            raise typer.Exit(code=1)
        name, value = item.split("=", 1)
        payload[name.strip()] = _infer_type(value)
    return payload


def _print_records(records: List[SessionRecord]) -> None:
    if not records:
        typer.echo("No saved games.")
        return

    typer.echo(f"🃏 Saved games ({len(records)}):\n")
    for record in records:
        saved = datetime.fromtimestamp(record.saved_at / 1000).strftime("%Y-%m-%d %H:%M")
        typer.echo(
            f"  {record.session_id}\n"
            f"     Player key: {record.participant_key}\n"
            f"     Saved: {saved}"
        )
        if record.payload:
            typer.echo(f"     Data: {json.dumps(record.payload, ensure_ascii=False)}")
        typer.echo("")


@sessions_app.command("list")
def sessions_list(
    as_json: bool = typer.Option(False, "--json", help="Print the raw stored records"),
):
    """List saved games, most recent first. Expired games are purged."""
    records = get_cache().list()
    if as_json:
        typer.echo(json.dumps([r.to_stored() for r in records], indent=2))
        return
    _print_records(records)


@sessions_app.command("save")
def sessions_save(
    game_id: str = typer.Option(..., "--game-id", "-g", help="Game (session) ID"),
    player_key: str = typer.Option(..., "--player-key", "-k", help="Player key"),
    field: Optional[List[str]] = typer.Option(
        None, "--field", "-f", help="Extra data as name=value (repeatable)"
    ),
):
    """Save or refresh a game."""
    record = SessionRecord(
        session_id=game_id, participant_key=player_key, payload=_parse_fields(field)
    )
    get_cache().save(record)
    typer.echo(f"✅ Saved game {game_id}")


@sessions_app.command("remove")
def sessions_remove(
    game_id: str = typer.Argument(..., help="Game (session) ID"),
    player_key: str = typer.Argument(..., help="Player key"),
):
    """Forget a saved game."""
    remaining = get_cache().remove(game_id, player_key)
    typer.echo(f"🗑️  Removed game {game_id} ({len(remaining)} saved game(s) left)")


@sessions_app.command("clear")
def sessions_clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Forget all saved games."""
    if not yes:
        typer.confirm("Forget all saved games?", abort=True)
    get_cache().clear()
    typer.echo("✅ Saved games cleared")
