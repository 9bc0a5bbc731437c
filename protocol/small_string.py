"""Fixed-width string blocks.

Some records need a text field of statically known size. Such fields use a
32-byte block: the standard string encoding (u64 length + UTF-8) with the
seven always-zero high bytes of the length removed.

    [len_byte][payload, up to 31 bytes][zero padding]
"""
import io

from .codec import Decoder, Encoder
from .constants import LENGTH_PREFIX_SIZE, SMALL_STRING_MAX_ENCODED, SMALL_STRING_SIZE
from .errors import MalformedMessage, SmallStringError, StringTooLong

def encode_small_string(s: str) -> bytes:
    """Pack `s` into a 32-byte block. Raises StringTooLong past 31 UTF-8 bytes."""
    enc = Encoder()
    enc.write_string(s)
    encoded = enc.getvalue()
    if len(encoded) >= SMALL_STRING_MAX_ENCODED:
        raise StringTooLong(len(encoded) - LENGTH_PREFIX_SIZE)
    block = bytearray(SMALL_STRING_SIZE)
    block[0] = encoded[0]
    payload = encoded[LENGTH_PREFIX_SIZE:]
    block[1:1 + len(payload)] = payload
    return bytes(block)

def decode_small_string(block: bytes) -> str:
    """Inverse of encode_small_string. Bytes past the stored length are ignored."""
    if not block:
        raise SmallStringError("empty small string block")
    rebuilt = bytes(block[:1]) + bytes(LENGTH_PREFIX_SIZE - 1) + bytes(block[1:])
    try:
        return Decoder(io.BytesIO(rebuilt)).read_string()
    except MalformedMessage as e:
        raise SmallStringError(f"invalid small string block: {e}") from e
