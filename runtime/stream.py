import logging
from typing import Generic, List, Optional, Type, TypeVar

from protocol.codec import WireRecord
from protocol.config import ProtocolConfig
from protocol.constants import DEFAULT_READ_CHUNK_SIZE
from protocol.packets import ClientPacket, ServerPacket
from protocol.reader import try_receive

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=WireRecord)

class ResumableStream:
    """Buffers a non-blocking source so a half-read message can be decoded again.

    Reads advance a cursor over the buffer. `rewind()` moves the cursor back
    to the start of the current message, `commit()` drops everything before
    the cursor once a message decoded.
    """

    def __init__(self, source, chunk_size: int = DEFAULT_READ_CHUNK_SIZE):
        self._source = source
        self.chunk_size = chunk_size
        self._buf = bytearray()
        self._pos = 0
        self.eof = False

    @property
    def pending(self) -> int:
        """Bytes buffered for the current (uncommitted) message."""
        return len(self._buf)

    def read(self, n: int) -> Optional[bytes]:
        if self._pos >= len(self._buf) and not self._fill():
            return b"" if self.eof else None
        end = min(len(self._buf), self._pos + n)
        data = bytes(self._buf[self._pos:end])
        self._pos = end
        return data

    def _fill(self) -> bool:
        if self.eof:
            return False
        try:
            chunk = self._source.read(self.chunk_size)
        except BlockingIOError:
            return False
        if chunk is None:
            return False
        if not chunk:
            self.eof = True
            logger.debug("[receiver] source reached end of stream")
            return False
        self._buf += chunk
        return True

    def rewind(self) -> None:
        self._pos = 0

    def commit(self) -> None:
        del self._buf[:self._pos]
        self._pos = 0

class PacketReceiver(Generic[P]):
    """Polls one connection for complete packets without ever blocking.

    Not thread-safe: one receiver owns the source's read side.
    """

    def __init__(self, packet_type: Type[P], source, size_limit: Optional[int] = None,
                 chunk_size: int = DEFAULT_READ_CHUNK_SIZE):
        self.packet_type = packet_type
        self.size_limit = size_limit
        self._stream = ResumableStream(source, chunk_size)

    @classmethod
    def for_server(cls, source, config: Optional[ProtocolConfig] = None) -> "PacketReceiver[ClientPacket]":
        """Receiver used by the server: reads client packets."""
        config = config or ProtocolConfig()
        return cls(ClientPacket, source, config.client_packet_limit, config.read_chunk_size)

    @classmethod
    def for_client(cls, source, config: Optional[ProtocolConfig] = None) -> "PacketReceiver[ServerPacket]":
        """Receiver used by a client: reads server packets."""
        config = config or ProtocolConfig()
        return cls(ServerPacket, source, config.server_packet_limit, config.read_chunk_size)

    @property
    def closed(self) -> bool:
        """True once the peer ended the stream and nothing is left to decode."""
        return self._stream.eof and self._stream.pending == 0

    def poll(self) -> Optional[P]:
        """Return the next complete packet, or None if it has not fully arrived."""
        packet = try_receive(self.packet_type, self._stream, self.size_limit)
        if packet is None:
            self._stream.rewind()
            return None
        self._stream.commit()
        return packet

    def drain(self) -> List[P]:
        """Return every complete packet available right now."""
        packets: List[P] = []
        while True:
            packet = self.poll()
            if packet is None:
                return packets
            packets.append(packet)

def send_packet(sock, packet: WireRecord) -> int:
    """Encode `packet` and write it to a socket (`sendall`) or file (`write`)."""
    data = packet.to_bytes()
    if hasattr(sock, "sendall"):
        sock.sendall(data)
    else:
        sock.write(data)
    return len(data)
