"""
Reconnecting WebSocket bridge to the game server.

The bridge owns one client connection at a time and keeps reopening it with
backoff until ``close()`` is called. The application sees three things:

    ConnectionOpened   - a connection is up, ``send`` now transmits
    MessageReceived    - one decoded inbound frame, in arrival order
    ConnectionClosed   - the live connection went away

``send`` is fire-and-forget. Frames are written in call order on the current
connection; anything sent while not connected is dropped, and frames still
waiting when a connection drops are discarded with it. The application is
responsible for re-syncing its state after ``ConnectionOpened``.
"""

import asyncio
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, AsyncIterator, Awaitable, Callable, Optional

import websockets
import websockets.exceptions

from pokerdot.config import CONFIG, Config
from pokerdot.logger import get_logger
from pokerdot.transport.codec import (
    BridgeError,
    FrameDecodeError,
    decode_frame,
    encode_frame,
)
from pokerdot.transport.endpoint import api_uri

logger = get_logger(__name__)

Connector = Callable[[str], Awaitable[Any]]


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


# ─── Events ──────────────────────────────────────────────────────────


@dataclass
class BridgeEvent:
    """Base class for events delivered to the application."""


@dataclass
class ConnectionOpened(BridgeEvent):
    endpoint: str


@dataclass
class ConnectionClosed(BridgeEvent):
    reason: str = ""


@dataclass
class MessageReceived(BridgeEvent):
    data: Any


_END = object()


# ─── Bridge ──────────────────────────────────────────────────────────


class TransportBridge:
    """
    Resilient duplex message channel over an auto-reconnecting WebSocket.

    Args:
        config: Reconnect policy and host settings. Defaults to ``CONFIG``.
        connect: Coroutine factory opening a connection for a URI. Defaults to
            ``websockets.connect``; the returned object must support
            ``send``, ``close`` and async iteration over inbound frames.
        rng: Source of jitter for the base reconnect delay.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        connect: Optional[Connector] = None,
        rng: Callable[[], float] = random.random,
    ):
        self.config = config or CONFIG
        self.endpoint: Optional[str] = None
        self._connect = connect or websockets.connect
        self._base_delay = (
            self.config.min_reconnect_delay + rng() * self.config.reconnect_jitter
        )

        self._state = ConnectionState.DISCONNECTED
        self._state_listeners: list[Callable[[ConnectionState], None]] = []
        self._events: asyncio.Queue = asyncio.Queue()

        self._task: Optional[asyncio.Task] = None
        self._ws: Any = None
        self._outbox: Optional[asyncio.Queue] = None
        self._failures = 0
        self._closed = False

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    def on_state_change(self, listener: Callable[[ConnectionState], None]) -> None:
        """Register a callback invoked with the new state on every transition."""
        self._state_listeners.append(listener)

    # ─── Public API ──────────────────────────────────────────────────

    def open(self, endpoint: Optional[str] = None) -> asyncio.Task:
        """
        Start connecting in the background and keep reconnecting on drops.

        Args:
            endpoint: WebSocket URI. Derived from ``config.host`` when omitted.

        Returns:
            The background task driving the connection.

        Raises:
            BridgeError: If the bridge has already been closed.
        """
        if self._closed:
            raise BridgeError("Bridge has been closed")
        if self._task and not self._task.done():
            return self._task

        self.endpoint = endpoint or api_uri(self.config.host)
        self._task = asyncio.get_running_loop().create_task(self._run())
        return self._task

    def send(self, event: Any) -> bool:
        """
        Transmit ``event`` on the current connection.

        Returns:
            True if the frame was handed to the live connection, False if it was
            dropped because the bridge is not connected.

        Raises:
            FrameEncodeError: If ``event`` cannot be encoded as JSON.
        """
        frame = encode_frame(event)
        if self._state is not ConnectionState.CONNECTED or self._outbox is None:
            logger.debug("Not connected, dropping outbound message")
            return False
        self._outbox.put_nowait(frame)
        return True

    async def next_event(self) -> Optional[BridgeEvent]:
        """Wait for the next event; None once the bridge is closed and drained."""
        event = await self._events.get()
        if event is _END:
            # Leave the marker in place for any other waiter
            self._events.put_nowait(_END)
            return None
        return event

    async def events(self) -> AsyncIterator[BridgeEvent]:
        """Iterate over events until the bridge is closed."""
        while True:
            event = await self.next_event()
            if event is None:
                return
            yield event

    async def close(self) -> None:
        """Close the connection and stop reconnecting. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        self._outbox = None
        logger.info("🛑 Closing connection to game server")

        ws = self._ws
        if ws is not None:
            try:
                await ws.close()
            except (websockets.exceptions.WebSocketException, OSError) as e:
                logger.debug(f"Error while closing socket: {e}")

        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

        self._set_state(ConnectionState.DISCONNECTED)
        self._events.put_nowait(_END)

    # ─── Connection loop ─────────────────────────────────────────────

    async def _run(self) -> None:
        try:
            while not self._closed:
                await self._run_once()
                if self._closed:
                    break
                delay = self._next_delay()
                logger.info(f"Reconnecting in {delay:.1f}s...")
                await asyncio.sleep(delay)
        finally:
            self._set_state(ConnectionState.DISCONNECTED)

    async def _run_once(self) -> None:
        """Make one connection attempt and pump frames until it ends."""
        self._set_state(ConnectionState.CONNECTING)
        logger.info(f"🔌 Connecting to {self.endpoint} ...")

        try:
            ws = await asyncio.wait_for(
                self._connect(self.endpoint), timeout=self.config.connection_timeout
            )
        except (
            OSError,
            asyncio.TimeoutError,
            websockets.exceptions.WebSocketException,
        ) as e:
            self._failures += 1
            logger.warning(f"⚠️  Connection attempt {self._failures} failed: {e!r}")
            self._set_state(ConnectionState.DISCONNECTED)
            return

        if self._closed:
            await ws.close()
            return

        self._failures = 0
        self._ws = ws
        self._outbox = asyncio.Queue()
        self._set_state(ConnectionState.CONNECTED)
        logger.info("✅ Websocket connection opened")
        self._emit(ConnectionOpened(endpoint=self.endpoint))

        writer = asyncio.create_task(self._write_loop(ws, self._outbox))
        reason = ""
        try:
            async for frame in ws:
                self._handle_frame(frame)
        except (websockets.exceptions.ConnectionClosed, OSError) as e:
            reason = str(e)
            logger.warning(f"⚠️  Websocket connection error: {e}")
        finally:
            writer.cancel()
            try:
                await writer
            except asyncio.CancelledError:
                pass
            except Exception:
                logger.exception("Outbound writer failed")
            self._outbox = None
            self._ws = None
            self._set_state(ConnectionState.DISCONNECTED)
            logger.info("Websocket connection closed")
            self._emit(ConnectionClosed(reason=reason))

    async def _write_loop(self, ws: Any, outbox: asyncio.Queue) -> None:
        while True:
            frame = await outbox.get()
            logger.debug(f">> Sending message {frame}")
            try:
                await ws.send(frame)
            except (websockets.exceptions.ConnectionClosed, OSError) as e:
                logger.warning(f"Dropping outbound message, connection lost: {e}")
                return

    def _handle_frame(self, frame: str | bytes) -> None:
        try:
            data = decode_frame(frame)
        except FrameDecodeError as e:
            logger.warning(f"Dropping malformed frame from server: {e}")
            return
        logger.debug(f"<< Message from server {data}")
        self._emit(MessageReceived(data=data))

    # ─── Helpers ─────────────────────────────────────────────────────

    def _next_delay(self) -> float:
        """Backoff before the next attempt; grows with consecutive failures."""
        attempt = max(self._failures, 1)
        delay = self._base_delay * self.config.reconnect_grow_factor ** (attempt - 1)
        return min(delay, self.config.max_reconnect_delay)

    def _emit(self, event: BridgeEvent) -> None:
        self._events.put_nowait(event)

    def _set_state(self, state: ConnectionState) -> None:
        if state is self._state:
            return
        logger.debug(f"Connection state {self._state.value} -> {state.value}")
        self._state = state
        for listener in list(self._state_listeners):
            try:
                listener(state)
            except Exception:
                logger.exception(f"State listener failed on {state.value}")
