"""
Wiring between the application, the transport bridge and the session cache.

The application talks to this module through two surfaces:

    ApplicationPorts   inbound calls the adapter makes into the application
                       (connect / disconnect / message / saved sessions)
    Request models     outbound requests the application hands to ``handle``,
                       discriminated by their ``intent`` field

The adapter holds no state of its own beyond references to its collaborators.
"""

from abc import ABC, abstractmethod
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator

from pokerdot.logger import get_logger
from pokerdot.session.cache import SessionCache
from pokerdot.session.models import SessionRecord
from pokerdot.transport.bridge import (
    ConnectionClosed,
    ConnectionOpened,
    MessageReceived,
    TransportBridge,
)

logger = get_logger(__name__)


# ─── Application ports ───────────────────────────────────────────────


class ApplicationPorts(ABC):
    """Inbound side of the application: what the adapter calls into."""

    @abstractmethod
    def socket_connect(self) -> None:
        pass

    @abstractmethod
    def socket_disconnect(self) -> None:
        pass

    @abstractmethod
    def receive_message(self, data: Any) -> None:
        pass

    @abstractmethod
    def saved_sessions(self, records: list[SessionRecord]) -> None:
        pass


# ─── Outbound requests ───────────────────────────────────────────────


class SendMessage(BaseModel):
    """Forward an opaque event to the game server."""

    intent: Literal["send"] = "send"
    data: Any


class SaveSession(BaseModel):
    """Persist (or refresh) a joined game."""

    intent: Literal["save"] = "save"
    record: SessionRecord

    @field_validator("record", mode="before")
    @classmethod
    def _accept_flat_record(cls, value: Any) -> Any:
        # The web client hands over the game object in its stored, flat layout
        if isinstance(value, dict) and "gameId" in value and "payload" not in value:
            return SessionRecord.from_stored(value)
        return value


class RemoveSession(BaseModel):
    """Forget a saved game."""

    intent: Literal["remove"] = "remove"
    session_id: str
    participant_key: str


class ListSessions(BaseModel):
    """Ask for the current saved games."""

    intent: Literal["list"] = "list"


Request = Annotated[
    Union[SendMessage, SaveSession, RemoveSession, ListSessions],
    Field(discriminator="intent"),
]

_REQUEST_ADAPTER = TypeAdapter(Request)


def request_from_dict(data: dict[str, Any]) -> Request:
    """Parse a raw ``{"intent": ...}`` mapping into a request model."""
    return _REQUEST_ADAPTER.validate_python(data)


# ─── Adapter ─────────────────────────────────────────────────────────


class ApplicationAdapter:
    """Routes bridge events to the ports and application requests to the bridge or cache."""

    def __init__(
        self,
        bridge: TransportBridge,
        cache: SessionCache,
        ports: ApplicationPorts,
    ):
        self.bridge = bridge
        self.cache = cache
        self.ports = ports

    def start(self, endpoint: Optional[str] = None) -> None:
        """Open the bridge and seed the application with the saved games."""
        self.bridge.open(endpoint)
        self.ports.saved_sessions(self.cache.list())

    async def run(self) -> None:
        """Forward bridge events to the application until the bridge closes."""
        async for event in self.bridge.events():
            self.dispatch_event(event)

    async def stop(self) -> None:
        await self.bridge.close()

    def dispatch_event(self, event) -> None:
        if isinstance(event, ConnectionOpened):
            self.ports.socket_connect()
        elif isinstance(event, ConnectionClosed):
            self.ports.socket_disconnect()
        elif isinstance(event, MessageReceived):
            self.ports.receive_message(event.data)
        else:
            logger.warning(f"Unhandled bridge event: {event!r}")

    def handle(self, request: Request) -> None:
        """Carry out one outbound request from the application."""
        if isinstance(request, SendMessage):
            self.bridge.send(request.data)
        elif isinstance(request, SaveSession):
            self.cache.save(request.record)
        elif isinstance(request, RemoveSession):
            remaining = self.cache.remove(request.session_id, request.participant_key)
            self.ports.saved_sessions(remaining)
        elif isinstance(request, ListSessions):
            self.ports.saved_sessions(self.cache.list())
        else:
            raise TypeError(f"Unknown request type: {type(request).__name__}")
