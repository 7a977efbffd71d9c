"""Escaping raw bytes into wrapped Python bytes literals."""

from __future__ import annotations

import ast
import io

from bindata_core.pool import ObjectPool, buffer_pool


def _escape(byte: int) -> bytes:
    if byte == 0x22:
        return b'\\"'
    if byte == 0x5C:
        return b"\\\\"
    if 0x20 <= byte < 0x7F:
        return bytes((byte,))
    return b"\\x%02x" % byte


_ESCAPES = tuple(_escape(b) for b in range(256))


class LiteralWriter:
    """Writes escaped bytes into *buf*, breaking lines at *wrap_at* columns.

    Each break closes the current ``b"..."`` piece and opens a new one on
    the next line after *indent*, so the pieces concatenate back into a
    single bytes value. The caller writes the opening ``b"`` and the
    closing quote.
    """

    def __init__(self, buf: io.BytesIO, indent: str = "", wrap_at: int = 96) -> None:
        self._buf = buf
        self._break = b'"\n' + indent.encode("ascii") + b'b"'
        self._wrap_at = wrap_at
        self._column = 0

    def write(self, data: bytes) -> int:
        parts: list[bytes] = []
        column = self._column
        for byte in data:
            esc = _ESCAPES[byte]
            if column and column + len(esc) > self._wrap_at:
                parts.append(self._break)
                column = 0
            parts.append(esc)
            column += len(esc)
        self._column = column
        self._buf.write(b"".join(parts))
        return len(data)


def encode_literal(
    data: bytes,
    indent: str = "",
    wrap_at: int = 96,
    buffers: ObjectPool[io.BytesIO] = buffer_pool,
) -> str:
    """Render *data* as one or more adjacent ``b"..."`` literals."""
    with buffers.acquire() as buf:
        buf.write(b'b"')
        LiteralWriter(buf, indent, wrap_at).write(data)
        buf.write(b'"')
        return buf.getvalue().decode("ascii")


def decode_literal(text: str) -> bytes:
    """Inverse of encode_literal()."""
    value = ast.literal_eval(f"({text})")
    if not isinstance(value, bytes):
        raise ValueError(f"not a bytes literal: {text[:40]!r}")
    return value
