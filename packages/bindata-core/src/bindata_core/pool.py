"""Reusable scratch buffers and compressors for encoding many assets."""

from __future__ import annotations

import io
import threading
import zlib
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Generic, Protocol, TypeVar

T = TypeVar("T")

# wbits for zlib streams wrapped in a gzip header and trailer
_GZIP_WBITS = 16 + zlib.MAX_WBITS


class ObjectPool(Generic[T]):
    """Thread-safe free list with checkout/return discipline.

    An instance is owned by exactly one caller between ``get()`` and
    ``put()``. The optional *reset* hook runs on every return.
    """

    def __init__(
        self,
        factory: Callable[[], T],
        reset: Callable[[T], None] | None = None,
        max_idle: int = 64,
    ) -> None:
        self._factory = factory
        self._reset = reset
        self._max_idle = max_idle
        self._idle: list[T] = []
        self._lock = threading.Lock()

    def get(self) -> T:
        with self._lock:
            if self._idle:
                return self._idle.pop()
        return self._factory()

    def put(self, item: T) -> None:
        if self._reset is not None:
            self._reset(item)
        with self._lock:
            if len(self._idle) < self._max_idle:
                self._idle.append(item)

    @contextmanager
    def acquire(self) -> Iterator[T]:
        item = self.get()
        try:
            yield item
        finally:
            self.put(item)

    def __len__(self) -> int:
        with self._lock:
            return len(self._idle)


class Writer(Protocol):
    def write(self, data: bytes) -> int: ...


class GzipCompressor:
    """Streaming gzip writer that can be re-pointed at a new destination.

    The gzip header carries no timestamp or file name, so identical input
    always compresses to identical output.
    """

    def __init__(self) -> None:
        self._dest: Writer | None = None
        self._zobj = None

    def reset(self, dest: Writer, level: int = -1) -> None:
        self._dest = dest
        self._zobj = zlib.compressobj(level, zlib.DEFLATED, _GZIP_WBITS)

    def write(self, data: bytes) -> int:
        if self._zobj is None:
            raise ValueError("compressor used before reset()")
        chunk = self._zobj.compress(data)
        if chunk:
            self._dest.write(chunk)
        return len(data)

    def close(self) -> None:
        if self._zobj is None:
            raise ValueError("compressor used before reset()")
        self._dest.write(self._zobj.flush())
        self._zobj = None
        self._dest = None


def _reset_buffer(buf: io.BytesIO) -> None:
    buf.seek(0)
    buf.truncate()


buffer_pool: ObjectPool[io.BytesIO] = ObjectPool(io.BytesIO, reset=_reset_buffer)
gzip_pool: ObjectPool[GzipCompressor] = ObjectPool(GzipCompressor)
