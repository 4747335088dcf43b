"""Byte-range sequences that describe the UTF-8 encodings of a code point range."""

from __future__ import annotations

from dataclasses import dataclass

_SURROGATE_START = 0xD800
_SURROGATE_END = 0xDFFF
_MAX_RUNE = 0x10FFFF
_REPLACEMENT = "\ufffd".encode("utf-8")
_UTF_MAX = 4


@dataclass(frozen=True)
class Range:
    """An inclusive range of byte values."""

    start: int
    end: int

    def matches(self, b: int) -> bool:
        """Return True if byte ``b`` lies within this range."""
        return self.start <= b <= self.end

    def __str__(self) -> str:
        if self.start == self.end:
            return f"[{self.start:X}]"
        return f"[{self.start:X}-{self.end:X}]"


class Sequence(tuple):
    """A sequence of byte ranges, one per byte of an encoded code point."""

    def __new__(cls, ranges=()):
        return super().__new__(cls, ranges)

    def matches(self, data: bytes) -> bool:
        """Return True if the leading bytes of ``data`` fall in every range."""
        if len(data) < len(self):
            return False
        return all(r.matches(b) for r, b in zip(self, data))

    def __str__(self) -> str:
        if 1 <= len(self) <= _UTF_MAX:
            return "".join(str(r) for r in self)
        return "invalid utf8 sequence"

    def __repr__(self) -> str:
        return f"Sequence({tuple.__repr__(self)})"


def sequence_from_encoded_range(start: bytes, end: bytes) -> Sequence:
    """Build a sequence from the encodings of the first and last code point."""
    if len(start) != len(end):
        raise ValueError("byte slices must be the same length")
    if not 2 <= len(start) <= _UTF_MAX:
        raise ValueError("invalid encoded byte length")
    return Sequence(Range(a, b) for a, b in zip(start, end))


def _max_scalar_value(nbytes: int) -> int:
    return {1: 0x007F, 2: 0x07FF, 3: 0xFFFF}.get(nbytes, _MAX_RUNE)


def _encode(rune: int) -> bytes:
    if 0 <= rune <= _MAX_RUNE and not _SURROGATE_START <= rune <= _SURROGATE_END:
        return chr(rune).encode("utf-8")
    return _REPLACEMENT


def _scalar_cut(start: int, end: int) -> int | None:
    """Return the end of the first piece if the range spans encoding lengths."""
    for nbytes in range(1, _UTF_MAX):
        limit = _max_scalar_value(nbytes)
        if start <= limit < end:
            return limit
    return None


def _continuation_cut(start: int, end: int) -> int | None:
    """Return the end of the first piece if continuation bytes do not align."""
    for i in range(1, _UTF_MAX):
        mask = (1 << (6 * i)) - 1
        if start & ~mask != end & ~mask:
            if start & mask:
                return start | mask
            if end & mask != mask:
                return (end & ~mask) - 1
    return None


def new_sequences(start: int, end: int) -> list[Sequence]:
    """Return the byte-range sequences covering code points ``start..end``.

    Surrogate code points are never included.
    """
    result: list[Sequence] = []
    stack = [(start, end)]
    while stack:
        lo, hi = stack.pop()
        while True:
            if lo < 0xE000 and hi > 0xD7FF:
                stack.append((0xE000, hi))
                hi = 0xD7FF
                continue
            if lo > hi:
                break
            cut = _scalar_cut(lo, hi)
            if cut is None and hi <= 0x7F:
                result.append(Sequence((Range(lo, hi),)))
                break
            if cut is None:
                cut = _continuation_cut(lo, hi)
            if cut is not None:
                stack.append((cut + 1, hi))
                hi = cut
                continue
            result.append(sequence_from_encoded_range(_encode(lo), _encode(hi)))
            break
    return result