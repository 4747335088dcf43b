"""Characteristic vectors of the distinct characters of a query."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

_WORD_BITS = 32
_WORD_MASK = 0xFFFF_FFFF


class FullCharacteristicVector(tuple):
    """Bit words marking the positions at which a character occurs in a query.

    Bit ``i`` of word ``k`` is set when the character is at position
    ``32 * k + i``. The last word is always zero.
    """

    def __new__(cls, words=()):
        return super().__new__(cls, words)

    def shift_and_mask(self, offset: int, mask: int) -> int:
        """Return the bits starting at ``offset``, restricted to ``mask``."""
        bucket, align = divmod(offset, _WORD_BITS)
        if align == 0:
            return self[bucket] & mask
        left = self[bucket] >> align
        right = (self[bucket + 1] << (_WORD_BITS - align)) & _WORD_MASK
        return (left | right) & mask

    def __repr__(self) -> str:
        return f"FullCharacteristicVector({list(self)!r})"


@dataclass(frozen=True)
class Alphabet:
    """The distinct characters of a query, in code point order, with their vectors."""

    charset: tuple[tuple[str, FullCharacteristicVector], ...] = ()

    def __iter__(self) -> Iterator[tuple[str, FullCharacteristicVector]]:
        return iter(self.charset)

    def __len__(self) -> int:
        return len(self.charset)


def _vector_for(query: str, char: str) -> FullCharacteristicVector:
    words = []
    for start in range(0, len(query), _WORD_BITS):
        chunk = query[start:start + _WORD_BITS]
        words.append(sum(1 << i for i, c in enumerate(chunk) if c == char))
    words.append(0)
    return FullCharacteristicVector(words)


def query_chars(query: str) -> Alphabet:
    """Build the alphabet of ``query``."""
    return Alphabet(tuple((c, _vector_for(query, c)) for c in sorted(set(query))))