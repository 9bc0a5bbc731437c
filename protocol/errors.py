"""Protocol error types.

Transport failures are not wrapped: they stay ``OSError`` and reach the
caller unchanged.
"""

class ProtocolError(Exception):
    """Base class for everything the protocol layer raises itself."""

class MalformedMessage(ProtocolError):
    """Bytes on the stream do not decode as the expected record.

    The connection is out of sync after this and should be dropped.
    ``raw`` holds the bytes that were read for the failed message.
    """

    def __init__(self, message: str, raw: bytes = b""):
        super().__init__(message)
        self.raw = raw

class SizeLimitExceeded(MalformedMessage):
    """Message needs more bytes than the configured decode limit."""

class TruncatedMessage(MalformedMessage):
    """Stream ended in the middle of a message."""

class InvalidTag(MalformedMessage):
    """Unknown enum discriminant, bool byte or option byte."""

class StringTooLong(ProtocolError, ValueError):
    """String does not fit a fixed-width 32-byte block."""

    def __init__(self, length: int):
        super().__init__(f"string of {length} bytes does not fit a small string block")
        self.length = length

class SmallStringError(ProtocolError, ValueError):
    """A 32-byte block does not hold a valid small string."""

class WouldBlock(Exception):
    """Source has no bytes ready. Caught by the reader; never reaches callers."""
