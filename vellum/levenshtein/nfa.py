"""Levenshtein non-deterministic automaton over normalised state sets."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Sequence


@dataclass(frozen=True)
class Exact:
    """A distance known exactly."""

    distance: int


@dataclass(frozen=True)
class AtLeast:
    """A distance beyond what the automaton tracks; it is at least this value."""

    distance: int


def characteristic_vector(query: Sequence[str], c: str) -> int:
    """Return a bit mask of the positions of ``c`` in ``query``."""
    return sum(1 << i for i, q in enumerate(query) if q == c)


def _bit(bits: int, pos: int) -> bool:
    return (bits >> pos) & 1 == 1


@dataclass(frozen=True, order=True)
class NFAState:
    """A position in the query with the edits spent to get there."""

    offset: int = 0
    distance: int = 0
    in_transpose: bool = False

    def imply(self, other: "NFAState") -> bool:
        """Return True if reaching ``self`` makes ``other`` redundant."""
        transpose_imply = self.in_transpose or not other.in_transpose
        delta = abs(self.offset - other.offset)
        if transpose_imply:
            return other.distance >= self.distance + delta
        return other.distance > self.distance + delta


@dataclass
class MultiState:
    """A set of NFA states none of which implies another."""

    states: list[NFAState] = field(default_factory=list)

    def clear(self) -> None:
        """Remove every state."""
        self.states.clear()

    def add_state(self, state: NFAState) -> None:
        """Add ``state`` unless implied, dropping the states it implies."""
        if any(s.imply(state) for s in self.states):
            return
        self.states[:] = [s for s in self.states if not state.imply(s)]
        self.states.append(state)

    def normalize(self) -> int:
        """Shift offsets so the smallest is zero, sort, and return the shift."""
        min_offset = min((s.offset for s in self.states), default=0)
        self.states[:] = sorted(
            replace(s, offset=s.offset - min_offset) for s in self.states
        )
        return min_offset


@dataclass
class LevenshteinNFA:
    """The automaton for a maximum edit distance, optionally counting transpositions."""

    max_distance: int
    damerau: bool = False
    diameter: int = field(init=False)

    def __post_init__(self) -> None:
        self.diameter = 2 * self.max_distance + 1

    def initial_states(self) -> MultiState:
        """Return the state set before any input."""
        ms = MultiState()
        ms.add_state(NFAState())
        return ms

    def multistate_distance(self, multistate: MultiState, query_len: int) -> Exact | AtLeast:
        """Return the distance of ``multistate`` once the input ends."""
        reachable = [
            t
            for t in (s.distance + abs(query_len - s.offset) for s in multistate.states)
            if t <= self.max_distance
        ]
        if not reachable:
            return AtLeast(self.max_distance + 1)
        return Exact(min(reachable))

    def _simple_transition(self, state: NFAState, symbol: int, dest: MultiState) -> None:
        if state.distance < self.max_distance:
            # insertion
            dest.add_state(NFAState(state.offset, state.distance + 1, False))
            # substitution
            dest.add_state(NFAState(state.offset + 1, state.distance + 1, False))
            # deletions followed by a match
            for d in range(1, self.max_distance + 1 - state.distance):
                if _bit(symbol, d):
                    dest.add_state(
                        NFAState(state.offset + 1 + d, state.distance + d, False)
                    )
            if self.damerau and _bit(symbol, 1):
                dest.add_state(NFAState(state.offset, state.distance + 1, True))

        if _bit(symbol, 0):
            dest.add_state(NFAState(state.offset + 1, state.distance, False))

        if state.in_transpose and _bit(symbol, 0):
            dest.add_state(NFAState(state.offset + 2, state.distance, False))

    def transition(self, current: MultiState, dest: MultiState, scv: int) -> None:
        """Fill ``dest`` with the states reached from ``current`` on vector ``scv``."""
        dest.clear()
        mask = (1 << self.diameter) - 1
        for state in list(current.states):
            self._simple_transition(state, (scv >> state.offset) & mask, dest)
        dest.states.sort()

    def compute_distance(self, query: Sequence[str], other: Sequence[str]) -> Exact | AtLeast:
        """Return the edit distance between ``query`` and ``other``."""
        current = self.initial_states()
        following = MultiState()
        for c in other:
            self.transition(current, following, characteristic_vector(query, c))
            current, following = following, current
        return self.multistate_distance(current, len(query))