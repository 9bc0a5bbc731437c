"""Test the framed non-blocking reader."""
import io
import logging
import struct

import pytest
from protocol.errors import InvalidTag, MalformedMessage, SizeLimitExceeded, TruncatedMessage
from protocol.packets import ClientDisconnect, ClientMove, ClientPacket, ServerMessage, ServerPacket
from protocol.reader import try_receive


class ScriptedStream:
    """Hands out scripted chunks; a None entry simulates a would-block read."""

    def __init__(self, chunks):
        self.chunks = list(chunks)

    def read(self, n):
        if not self.chunks:
            return None
        chunk = self.chunks[0]
        if chunk is None:
            self.chunks.pop(0)
            return None
        data, rest = chunk[:n], chunk[n:]
        if rest:
            self.chunks[0] = rest
        else:
            self.chunks.pop(0)
        return data


class RaisingStream:
    def __init__(self, exc):
        self.exc = exc

    def read(self, n):
        raise self.exc


def test_empty_stream_is_not_an_error():
    assert try_receive(ClientPacket, io.BytesIO(b"")) is None


def test_would_block_returns_none():
    assert try_receive(ClientPacket, ScriptedStream([None])) is None
    assert try_receive(ClientPacket, RaisingStream(BlockingIOError())) is None


def test_would_block_mid_message_returns_none():
    stream = ScriptedStream([struct.pack("<I", 0), None])
    assert try_receive(ClientPacket, stream) is None


def test_disconnect_is_received():
    data = ClientDisconnect().to_bytes()
    assert try_receive(ClientPacket, io.BytesIO(data)) == ClientDisconnect()


def test_message_split_across_reads():
    data = ServerMessage(text="ready").to_bytes()
    stream = ScriptedStream([data[:3], data[3:9], data[9:]])
    assert try_receive(ServerPacket, stream) == ServerMessage(text="ready")


def test_reads_one_message_at_a_time():
    stream = io.BytesIO(ClientMove(option_id=1).to_bytes() + ClientMove(option_id=2).to_bytes())
    assert try_receive(ClientPacket, stream) == ClientMove(option_id=1)
    assert try_receive(ClientPacket, stream) == ClientMove(option_id=2)
    assert try_receive(ClientPacket, stream) is None


def test_io_errors_propagate():
    with pytest.raises(ConnectionResetError):
        try_receive(ClientPacket, RaisingStream(ConnectionResetError()))


def test_size_limit_exceeded():
    data = ClientMove(option_id=5).to_bytes()
    with pytest.raises(SizeLimitExceeded) as info:
        try_receive(ClientPacket, io.BytesIO(data), size_limit=8)
    assert info.value.raw == data[:4]


def test_size_limit_with_input_shorter_than_minimum():
    """A limit below the tag size fails cleanly even on a 1-byte input."""
    with pytest.raises(SizeLimitExceeded) as info:
        try_receive(ClientPacket, io.BytesIO(b"\x01"), size_limit=2)
    assert info.value.raw == b""


def test_size_limit_large_enough_passes():
    data = ClientMove(option_id=5).to_bytes()
    assert try_receive(ClientPacket, io.BytesIO(data), size_limit=len(data)) == ClientMove(option_id=5)


def test_malformed_bytes_are_logged_and_attached(caplog):
    data = struct.pack("<I", 9)
    with caplog.at_level(logging.WARNING, logger="protocol.reader"):
        with pytest.raises(MalformedMessage) as info:
            try_receive(ClientPacket, io.BytesIO(data))
    assert info.value.raw == data
    assert data.hex() in caplog.text


def test_stream_ending_mid_message_is_malformed():
    data = struct.pack("<I", 0) + b"\x01\x02"
    with pytest.raises(TruncatedMessage) as info:
        try_receive(ClientPacket, io.BytesIO(data))
    assert info.value.raw == data


def test_variant_class_rejects_other_variants(caplog):
    """Reading a specific variant fails when a different one is on the wire."""
    data = ClientDisconnect().to_bytes()
    with caplog.at_level(logging.WARNING, logger="protocol.reader"):
        with pytest.raises(InvalidTag) as info:
            try_receive(ClientMove, io.BytesIO(data))
    assert info.value.raw == data
    assert data.hex() in caplog.text


def test_variant_class_accepts_its_own_variant():
    data = ClientMove(option_id=4).to_bytes()
    assert try_receive(ClientMove, io.BytesIO(data)) == ClientMove(option_id=4)
