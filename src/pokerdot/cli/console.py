"""
Line-oriented console host for ``pokerdot connect``.

stdin lines become application requests, adapter callbacks become JSON lines
on stdout.
"""

import asyncio
import json
import sys
import threading
from typing import Any, Callable, Optional, TextIO

import typer
from pydantic import ValidationError

from pokerdot.adapter import (
    ApplicationAdapter,
    ApplicationPorts,
    Request,
    SendMessage,
    request_from_dict,
)
from pokerdot.cli.sessions import get_cache
from pokerdot.session.models import SessionRecord
from pokerdot.transport.bridge import TransportBridge


class ConsolePorts(ApplicationPorts):
    """Prints every inbound application event as one JSON line."""

    def __init__(self, echo: Callable[[str], None] = typer.echo):
        self._echo = echo

    def _emit(self, event: str, **fields: Any) -> None:
        self._echo(json.dumps({"event": event, **fields}, ensure_ascii=False))

    def socket_connect(self) -> None:
        self._emit("connected")

    def socket_disconnect(self) -> None:
        self._emit("disconnected")

    def receive_message(self, data: Any) -> None:
        self._emit("message", data=data)

    def saved_sessions(self, records: list[SessionRecord]) -> None:
        self._emit("saved_sessions", sessions=[r.to_stored() for r in records])


def parse_line(line: str) -> Optional[Request]:
    """
    Turn one console line into a request.

    Objects carrying an ``intent`` are parsed as requests; any other JSON value
    is sent to the server as is. Blank lines yield None.

    Raises:
        ValueError: If the line is not JSON or not a valid request.
    """
    line = line.strip()
    if not line:
        return None

    data = json.loads(line)
    if isinstance(data, dict) and "intent" in data:
        return request_from_dict(data)
    return SendMessage(data=data)


def _start_reader(stream: TextIO, lines: asyncio.Queue) -> threading.Thread:
    """
    Feed lines from a blocking stream into ``lines``; None marks end of input.

    The thread is a daemon so a reader blocked in ``readline`` never holds up
    interpreter shutdown after Ctrl+C.
    """
    loop = asyncio.get_running_loop()

    def _read() -> None:
        try:
            for line in iter(stream.readline, ""):
                loop.call_soon_threadsafe(lines.put_nowait, line)
            loop.call_soon_threadsafe(lines.put_nowait, None)
        except RuntimeError:
            # Event loop already closed
            return

    thread = threading.Thread(target=_read, name="pokerdot-stdin", daemon=True)
    thread.start()
    return thread


async def _pump_stdin(adapter: ApplicationAdapter, stream: TextIO) -> None:
    lines: asyncio.Queue = asyncio.Queue()
    _start_reader(stream, lines)
    while True:
        line = await lines.get()
        if line is None:
            break
        try:
            request = parse_line(line)
        except (json.JSONDecodeError, ValidationError) as e:
            typer.echo(f"❌ Ignoring invalid input: {e}", err=True)
            continue
        if request is not None:
            adapter.handle(request)


async def run_console(
    endpoint: str,
    stream: Optional[TextIO] = None,
    bridge: Optional[TransportBridge] = None,
) -> None:
    """Run the adapter until the input stream (stdin by default) closes."""
    adapter = ApplicationAdapter(bridge or TransportBridge(), get_cache(), ConsolePorts())
    adapter.start(endpoint)
    events = asyncio.create_task(adapter.run())
    try:
        await _pump_stdin(adapter, stream or sys.stdin)
    finally:
        await adapter.stop()
        await events
