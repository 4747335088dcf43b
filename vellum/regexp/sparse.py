"""A sparse set of small integers with constant-time clear."""

from __future__ import annotations


class SparseSet:
    """Holds integers below a fixed size, remembering insertion order."""

    def __init__(self, size: int):
        self._dense = [0] * size
        self._sparse = [0] * size
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def add(self, ip: int) -> int:
        """Add ``ip`` and return its position."""
        i = self._size
        self._dense[i] = ip
        self._sparse[ip] = i
        self._size += 1
        return i

    def get(self, i: int) -> int:
        """Return the value at position ``i``."""
        return self._dense[i]

    def contains(self, ip: int) -> bool:
        """Return True if ``ip`` is in the set."""
        i = self._sparse[ip]
        return i < self._size and self._dense[i] == ip

    def clear(self) -> None:
        """Remove every value."""
        self._size = 0

    def __iter__(self):
        return iter(self._dense[: self._size])