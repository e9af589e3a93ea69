"""
Unit tests for the JSON wire codec.
"""

import pytest

from pokerdot.transport.codec import (
    BridgeError,
    FrameDecodeError,
    FrameEncodeError,
    decode_frame,
    encode_frame,
)


class TestCodec:
    def test_encode_is_compact(self):
        assert encode_frame({"type": "bet", "amount": 10}) == '{"type":"bet","amount":10}'

    def test_encode_unserializable(self):
        with pytest.raises(FrameEncodeError):
            encode_frame({"when": object()})

    def test_decode_text_and_bytes(self):
        assert decode_frame('{"a": 1}') == {"a": 1}
        assert decode_frame(b'{"a": 1}') == {"a": 1}

    def test_decode_invalid_json(self):
        with pytest.raises(FrameDecodeError):
            decode_frame("not json")

    def test_decode_invalid_utf8(self):
        with pytest.raises(FrameDecodeError):
            decode_frame(b"\xff\xfe")

    def test_errors_share_base(self):
        assert issubclass(FrameDecodeError, BridgeError)
        assert issubclass(FrameEncodeError, BridgeError)
