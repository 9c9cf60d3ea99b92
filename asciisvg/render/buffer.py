from __future__ import annotations

import io
import threading
from contextlib import contextmanager
from typing import Iterator, List


class ScratchBufferPool:
    """Reusable text buffers for serializing output documents.

    ``acquire()`` always hands out an empty buffer; ``release()`` returns it to
    the idle list, or drops it once ``max_idle`` buffers are already idle.
    Use ``borrow()`` so the buffer goes back on every exit path.
    """

    def __init__(self, max_idle: int = 4) -> None:
        self.max_idle = max(0, int(max_idle))
        self._idle: List[io.StringIO] = []
        self._lock = threading.Lock()

    def acquire(self) -> io.StringIO:
        with self._lock:
            buffer = self._idle.pop() if self._idle else None
        if buffer is None:
            return io.StringIO()
        buffer.seek(0)
        buffer.truncate(0)
        return buffer

    def release(self, buffer: io.StringIO) -> None:
        with self._lock:
            if len(self._idle) < self.max_idle and not any(b is buffer for b in self._idle):
                self._idle.append(buffer)

    @property
    def idle_count(self) -> int:
        with self._lock:
            return len(self._idle)

    @contextmanager
    def borrow(self) -> Iterator[io.StringIO]:
        buffer = self.acquire()
        try:
            yield buffer
        finally:
            self.release(buffer)


DEFAULT_POOL = ScratchBufferPool()
