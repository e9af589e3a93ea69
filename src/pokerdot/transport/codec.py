"""
JSON wire codec. Every frame in either direction is one JSON document; the
bridge never looks inside it.
"""

import json
from typing import Any


class BridgeError(Exception):
    """Base class for transport bridge errors."""


class FrameDecodeError(BridgeError):
    """An inbound frame is not valid JSON."""


class FrameEncodeError(BridgeError):
    """An outbound event cannot be serialized to JSON."""


def encode_frame(event: Any) -> str:
    try:
        return json.dumps(event, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise FrameEncodeError(f"Cannot encode outbound event: {e}") from e


def decode_frame(frame: str | bytes) -> Any:
    try:
        if isinstance(frame, (bytes, bytearray)):
            frame = frame.decode("utf-8")
        return json.loads(frame)
    except UnicodeDecodeError as e:
        raise FrameDecodeError(f"Inbound frame is not UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise FrameDecodeError(f"Inbound frame is not JSON: {e.msg}") from e
