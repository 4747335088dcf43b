"""A buffered, counting writer with packed-integer helpers."""

from __future__ import annotations

from typing import BinaryIO

DEFAULT_BUFFER_SIZE = 4096


def packed_size(n: int) -> int:
    """Return the number of bytes needed to hold ``n`` (1 to 8)."""
    return min(8, max(1, (n.bit_length() + 7) // 8))


class Writer:
    """Buffers writes to a binary stream and counts the bytes written."""

    def __init__(self, stream: BinaryIO, buffer_size: int = DEFAULT_BUFFER_SIZE):
        if buffer_size < 1:
            raise ValueError("buffer size must be positive")
        self._stream = stream
        self._buffer_size = buffer_size
        self._pending = bytearray()
        self.counter = 0

    def reset(self, stream: BinaryIO) -> None:
        """Discard unflushed data and start writing to ``stream``."""
        self._stream = stream
        self._pending.clear()
        self.counter = 0

    def write_byte(self, c: int) -> None:
        """Write a single byte."""
        if len(self._pending) >= self._buffer_size:
            self.flush()
        self._pending.append(c & 0xFF)
        self.counter += 1

    def write(self, data: bytes) -> int:
        """Write ``data`` and return the number of bytes taken."""
        if len(self._pending) + len(data) > self._buffer_size:
            self.flush()
        if len(data) >= self._buffer_size:
            self._stream.write(bytes(data))
        else:
            self._pending.extend(data)
        self.counter += len(data)
        return len(data)

    def flush(self) -> None:
        """Send buffered bytes to the underlying stream."""
        if self._pending:
            self._stream.write(bytes(self._pending))
            self._pending.clear()
        flush = getattr(self._stream, "flush", None)
        if flush is not None:
            flush()

    def write_packed_uint_in(self, v: int, n: int) -> None:
        """Write the low ``n`` bytes of ``v`` in little-endian order."""
        mask = (1 << (8 * n)) - 1
        self.write((v & mask).to_bytes(n, "little"))

    def write_packed_uint(self, v: int) -> None:
        """Write ``v`` in as few little-endian bytes as it needs."""
        self.write_packed_uint_in(v, packed_size(v))