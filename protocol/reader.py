import logging
from typing import Optional, Type, TypeVar

from .codec import Decoder, WireRecord
from .errors import MalformedMessage, TruncatedMessage, WouldBlock

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=WireRecord)

def try_receive(packet_type: Type[R], stream, size_limit: Optional[int] = None) -> Optional[R]:
    """Try to read exactly one `packet_type` message from `stream`.

    Returns None when the stream has nothing ready (or has ended before the
    first byte of a message); call again later. Bytes consumed before a
    would-block are not put back, so a stream that cannot resume (see
    runtime.stream.ResumableStream) may lose a partially read message.

    Transport errors (OSError) propagate unchanged. Data that does not decode,
    including data over `size_limit`, raises MalformedMessage with the bytes
    read attached as `raw`.
    """
    dec = Decoder(stream, size_limit)
    try:
        return packet_type.decode(dec)
    except WouldBlock:
        return None
    except TruncatedMessage as e:
        if dec.consumed == 0:
            return None
        _report(e, dec)
        raise
    except MalformedMessage as e:
        _report(e, dec)
        raise

def _report(exc: MalformedMessage, dec: Decoder) -> None:
    exc.raw = dec.raw
    logger.warning("[reader] error in try_receive: %s, binary: %s", exc, dec.raw.hex())
