import logging
import socket
import threading
from typing import Callable, Optional

from protocol.constants import DEFAULT_READ_CHUNK_SIZE

logger = logging.getLogger(__name__)

MAX_BUFFERED_CHUNKS = 16
FULL_BUFFER_WAIT_S = 0.1

class BackgroundReader:
    """Non-blocking `read()` over a blocking source, fed by a daemon thread.

    `recv` is any blocking call returning up to n bytes and b"" at end of
    stream, e.g. ``sock.recv`` or ``file.read1``. `read()` returns buffered
    bytes, None when nothing has arrived yet, or b"" once the source ended
    and the buffer is empty. An error raised by the source is re-raised from
    `read()` after the buffered bytes have been handed out.

    At most `max_buffered` bytes are held; past that the thread stops calling
    `recv` until the consumer reads, so an abandoned reader cannot grow
    without bound.
    """

    def __init__(self, recv: Callable[[int], bytes], chunk_size: int = DEFAULT_READ_CHUNK_SIZE,
                 max_buffered: Optional[int] = None):
        self._recv = recv
        self.chunk_size = chunk_size
        self.max_buffered = max_buffered if max_buffered is not None else chunk_size * MAX_BUFFERED_CHUNKS
        self._buf = bytearray()
        self._cond = threading.Condition()
        self._eof = False
        self._error: Optional[BaseException] = None
        self._running = False
        self._thread: Optional[threading.Thread] = None

    def start(self) -> "BackgroundReader":
        if self._thread:
            return self
        self._running = True
        self._thread = threading.Thread(target=self._loop, name="background-reader", daemon=True)
        self._thread.start()
        return self

    def stop(self, timeout: float = 1.0) -> None:
        """Ask the reader thread to finish. A recv already in progress is not interrupted."""
        self._running = False
        with self._cond:
            self._cond.notify()
        if self._thread:
            self._thread.join(timeout)
            self._thread = None

    def _loop(self) -> None:
        while self._running:
            with self._cond:
                if len(self._buf) >= self.max_buffered:
                    self._cond.wait(FULL_BUFFER_WAIT_S)
                    continue
                room = min(self.chunk_size, self.max_buffered - len(self._buf))
            try:
                chunk = self._recv(room)
            except socket.timeout:
                continue
            except Exception as e:
                logger.warning("[poller] source failed: %s", e)
                with self._cond:
                    self._error = e
                return
            with self._cond:
                if not chunk:
                    self._eof = True
                    logger.debug("[poller] source reached end of stream")
                    return
                self._buf += chunk

    def read(self, n: int) -> Optional[bytes]:
        with self._cond:
            if self._buf:
                data = bytes(self._buf[:n])
                del self._buf[:n]
                self._cond.notify()
                return data
            if self._error is not None:
                raise self._error
            if self._eof:
                return b""
            return None

    def __enter__(self) -> "BackgroundReader":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
