import io
import struct
from typing import Callable, List, Optional, Sequence, Type, TypeVar

from .constants import F64_FMT, STRING_READ_CHUNK, U8_FMT, U32_FMT, U64_FMT
from .errors import InvalidTag, MalformedMessage, SizeLimitExceeded, TruncatedMessage, WouldBlock

T = TypeVar("T")
R = TypeVar("R", bound="WireRecord")

class Encoder:
    """Builds the binary form of a record, field by field."""

    def __init__(self):
        self._buf = bytearray()

    def getvalue(self) -> bytes:
        return bytes(self._buf)

    def write_raw(self, data: bytes) -> None:
        self._buf += data

    def write_u8(self, value: int) -> None:
        self._buf += struct.pack(U8_FMT, value)

    def write_u32(self, value: int) -> None:
        self._buf += struct.pack(U32_FMT, value)

    def write_u64(self, value: int) -> None:
        self._buf += struct.pack(U64_FMT, value)

    def write_f64(self, value: float) -> None:
        self._buf += struct.pack(F64_FMT, value)

    def write_bool(self, value: bool) -> None:
        self.write_u8(1 if value else 0)

    def write_string(self, value: str) -> None:
        data = value.encode("utf-8")
        self.write_u64(len(data))
        self._buf += data

    def write_option(self, value: Optional[T], write_item: Callable[["Encoder", T], None]) -> None:
        if value is None:
            self.write_u8(0)
        else:
            self.write_u8(1)
            write_item(self, value)

    def write_seq(self, items: Sequence[T], write_item: Callable[["Encoder", T], None]) -> None:
        self.write_u64(len(items))
        for item in items:
            write_item(self, item)

class Decoder:
    """Reads one record from a byte stream.

    The stream only needs a ``read(n)`` method. ``None`` or
    ``BlockingIOError`` from it means no bytes are ready; ``b""`` means the
    stream is finished. Every byte read is kept in ``raw`` so a failed
    decode can be reported with the exact input.
    """

    def __init__(self, stream, limit: Optional[int] = None):
        self._stream = stream
        self._remaining = limit
        self._raw = bytearray()

    @property
    def raw(self) -> bytes:
        return bytes(self._raw)

    @property
    def consumed(self) -> int:
        return len(self._raw)

    def _claim(self, n: int) -> None:
        """Charge n bytes against the size limit before anything is read."""
        if self._remaining is None:
            return
        if n > self._remaining:
            raise SizeLimitExceeded(
                f"need {n} more bytes but size limit leaves {self._remaining}")
        self._remaining -= n

    def _read_exact(self, n: int) -> bytes:
        buf = bytearray()
        while len(buf) < n:
            try:
                chunk = self._stream.read(n - len(buf))
            except BlockingIOError:
                chunk = None
            if chunk is None:
                raise WouldBlock()
            if not chunk:
                raise TruncatedMessage(
                    f"stream ended after {self.consumed} bytes, {n - len(buf)} more needed")
            buf += chunk
            self._raw += chunk
        return bytes(buf)

    def read_raw(self, n: int) -> bytes:
        self._claim(n)
        return self._read_exact(n)

    def read_u8(self) -> int:
        return struct.unpack(U8_FMT, self.read_raw(1))[0]

    def read_u32(self) -> int:
        return struct.unpack(U32_FMT, self.read_raw(4))[0]

    def read_u64(self) -> int:
        return struct.unpack(U64_FMT, self.read_raw(8))[0]

    def read_f64(self) -> float:
        return struct.unpack(F64_FMT, self.read_raw(8))[0]

    def read_bool(self) -> bool:
        b = self.read_u8()
        if b > 1:
            raise InvalidTag(f"invalid bool byte {b}")
        return b == 1

    def read_string(self) -> str:
        n = self.read_u64()
        self._claim(n)
        # bounded chunks: a corrupt length must not allocate up front
        data = bytearray()
        while len(data) < n:
            data += self._read_exact(min(STRING_READ_CHUNK, n - len(data)))
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedMessage(f"invalid utf-8 in string: {e}") from e

    def read_option(self, read_item: Callable[["Decoder"], T]) -> Optional[T]:
        flag = self.read_u8()
        if flag == 0:
            return None
        if flag == 1:
            return read_item(self)
        raise InvalidTag(f"invalid option byte {flag}")

    def read_seq(self, read_item: Callable[["Decoder"], T]) -> List[T]:
        n = self.read_u64()
        return [read_item(self) for _ in range(n)]

    def read_tag(self, count: int, what: str) -> int:
        tag = self.read_u32()
        if tag >= count:
            raise InvalidTag(f"invalid {what} tag {tag}")
        return tag

class WireRecord:
    """Base for everything that travels over the wire."""

    def encode(self, enc: Encoder) -> None:
        raise NotImplementedError

    @classmethod
    def decode(cls: Type[R], dec: Decoder) -> R:
        raise NotImplementedError

    def to_bytes(self) -> bytes:
        enc = Encoder()
        self.encode(enc)
        return enc.getvalue()

    @classmethod
    def from_bytes(cls: Type[R], data: bytes, limit: Optional[int] = None) -> R:
        """Decode one record from the front of `data`. Trailing bytes are ignored."""
        return cls.decode(Decoder(io.BytesIO(data), limit))
