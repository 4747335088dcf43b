"""Merging several sorted key/value iterators into one."""

from __future__ import annotations

from typing import Callable, Iterator, Protocol, Sequence

MergeFunc = Callable[[Sequence[int]], int]

_UINT64_MASK = 0xFFFF_FFFF_FFFF_FFFF


class IteratorDone(Exception):
    """Raised when an iterator moves past its last key."""

    def __init__(self, message: str = "iterator-done"):
        super().__init__(message)


class KeyValueIterator(Protocol):
    def current(self) -> tuple[bytes | None, int]: ...

    def next(self) -> None: ...

    def seek(self, key: bytes) -> None: ...

    def close(self) -> None: ...


class MergeIterator:
    """Walks several sorted iterators in key order.

    When the same key appears in more than one iterator, ``merge_func`` is
    called with their values, in the order the iterators were given.
    """

    def __init__(self, iterators: Sequence[KeyValueIterator], merge_func: MergeFunc):
        self._iterators = list(iterators)
        self._merge = merge_func
        self._entries = [itr.current() for itr in self._iterators]
        self._low_key: bytes | None = None
        self._low_value = 0
        self._low_indexes: list[int] = []
        self._update_matches()

    def _update_matches(self) -> None:
        if not self._iterators:
            return
        low_key = self._entries[0][0]
        low_indexes = [0]
        for i, (key, _) in enumerate(self._entries[1:], start=1):
            if key is None:
                continue
            if low_key is None or key < low_key:
                low_key = key
                low_indexes = [i]
            elif key == low_key:
                low_indexes.append(i)
        self._low_key = low_key
        self._low_indexes = low_indexes
        values = [self._entries[i][1] for i in low_indexes]
        self._low_value = self._merge(values) if len(values) > 1 else values[0]

    def current(self) -> tuple[bytes | None, int]:
        """Return the current key and value; the key is None when exhausted."""
        return self._low_key, self._low_value

    def next(self) -> None:
        """Advance to the next key, raising IteratorDone when there is none."""
        for i in self._low_indexes:
            itr = self._iterators[i]
            try:
                itr.next()
            except IteratorDone:
                pass
            self._entries[i] = itr.current()
        self._update_matches()
        if self._low_key is None:
            raise IteratorDone()

    def seek(self, key: bytes) -> None:
        """Move to ``key`` or the next larger key, raising IteratorDone past the end."""
        for i, itr in enumerate(self._iterators):
            try:
                itr.seek(key)
            except IteratorDone:
                pass
            self._entries[i] = itr.current()
        self._update_matches()
        if self._low_key is None:
            raise IteratorDone()

    def close(self) -> None:
        """Close every underlying iterator, re-raising the first failure."""
        first_error: BaseException | None = None
        for itr in self._iterators:
            try:
                itr.close()
            except Exception as exc:
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error

    def __iter__(self) -> Iterator[tuple[bytes, int]]:
        while self._low_key is not None:
            yield self._low_key, self._low_value
            try:
                self.next()
            except IteratorDone:
                return

    def __enter__(self) -> "MergeIterator":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def merge_min(values: Sequence[int]) -> int:
    """Choose the smallest value."""
    return min(values)


def merge_max(values: Sequence[int]) -> int:
    """Choose the largest value."""
    return max(values)


def merge_sum(values: Sequence[int]) -> int:
    """Sum the values, wrapping at 64 bits."""
    return sum(values) & _UINT64_MASK