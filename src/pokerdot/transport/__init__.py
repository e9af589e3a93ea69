"""
Transport layer for pokerdot.

A single reconnecting WebSocket to the game server, presented to the
application as a typed event stream plus a fire-and-forget ``send``.
"""

from pokerdot.transport.bridge import (
    BridgeEvent,
    ConnectionClosed,
    ConnectionOpened,
    ConnectionState,
    MessageReceived,
    TransportBridge,
)
from pokerdot.transport.codec import (
    BridgeError,
    FrameDecodeError,
    FrameEncodeError,
    decode_frame,
    encode_frame,
)
from pokerdot.transport.endpoint import InvalidHostnameError, api_uri

__all__ = [
    "BridgeEvent",
    "ConnectionClosed",
    "ConnectionOpened",
    "ConnectionState",
    "MessageReceived",
    "TransportBridge",
    "BridgeError",
    "FrameDecodeError",
    "FrameEncodeError",
    "decode_frame",
    "encode_frame",
    "InvalidHostnameError",
    "api_uri",
]
