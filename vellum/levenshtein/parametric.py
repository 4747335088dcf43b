"""Parametric DFA: a Levenshtein automaton independent of the query text."""

from __future__ import annotations

from dataclasses import dataclass, field

from .alphabet import query_chars
from .dfa import DFA, Utf8DFABuilder
from .nfa import AtLeast, Exact, LevenshteinNFA, MultiState, characteristic_vector

STATE_LIMIT = 10000


class TooManyStatesError(Exception):
    """Raised when an automaton would need more than STATE_LIMIT states."""

    def __init__(self, message: str = f"dfa contains more than {STATE_LIMIT} states"):
        super().__init__(message)


@dataclass(frozen=True)
class ParametricState:
    """A shape of NFA states placed at an offset in the query."""

    shape_id: int = 0
    offset: int = 0

    @property
    def is_dead_end(self) -> bool:
        """True for the state from which nothing can match."""
        return self.shape_id == 0


@dataclass(frozen=True)
class Transition:
    """The shape reached on some input and how far the offset moves."""

    dest_shape_id: int
    delta_offset: int

    def apply(self, state: ParametricState) -> ParametricState:
        """Return the state reached from ``state``; the dead state has offset 0."""
        if self.dest_shape_id == 0:
            return ParametricState(0, 0)
        return ParametricState(self.dest_shape_id, state.offset + self.delta_offset)


class ParametricStateIndex:
    """Numbers parametric states in the order they are first seen."""

    def __init__(self, query_len: int, num_param_states: int):
        self.num_offsets = query_len + 1
        if num_param_states == 0:
            num_param_states = self.num_offsets
        self.max_num_states = num_param_states * self.num_offsets
        self._index: dict[int, int] = {}
        self._queue: list[ParametricState] = []

    @property
    def num_states(self) -> int:
        """The number of states numbered so far."""
        return len(self._queue)

    def get(self, state_id: int) -> ParametricState:
        """Return the state numbered ``state_id``."""
        return self._queue[state_id]

    def get_or_allocate(self, state: ParametricState) -> int:
        """Return the number of ``state``, numbering it if it is new."""
        bucket = state.shape_id * self.num_offsets + state.offset
        found = self._index.get(bucket)
        if found is not None:
            return found
        new_id = len(self._queue)
        self._queue.append(state)
        self._index[bucket] = new_id
        return new_id


@dataclass
class ParametricDFA:
    """Transitions and distances for every shape of a Levenshtein NFA."""

    distances: list[int]
    transitions: list[Transition]
    max_distance: int
    transition_stride: int
    diameter: int
    _shape_count: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._shape_count = len(self.transitions) // self.transition_stride

    @classmethod
    def from_nfa(cls, nfa: LevenshteinNFA) -> "ParametricDFA":
        """Enumerate the normalised state sets reachable in ``nfa``."""
        index: dict[tuple, int] = {}
        items: list[MultiState] = []

        def get_or_allocate(ms: MultiState) -> int:
            key = tuple(ms.states)
            found = index.get(key)
            if found is not None:
                return found
            index[key] = len(items)
            items.append(ms)
            return len(items) - 1

        get_or_allocate(MultiState())
        get_or_allocate(nfa.initial_states())

        diameter = nfa.diameter
        num_chi = 1 << diameter
        transitions: list[Transition] = []

        state_id = 0
        while state_id < STATE_LIMIT and state_id < len(items):
            ms = items[state_id]
            for chi in range(num_chi):
                dest = MultiState()
                nfa.transition(ms, dest, chi)
                translation = dest.normalize()
                dest_id = get_or_allocate(dest)
                transitions.append(Transition(dest_id, translation))
            state_id += 1

        if state_id == STATE_LIMIT:
            raise TooManyStatesError()

        distances = [
            nfa.multistate_distance(ms, offset).distance
            for ms in items
            for offset in range(diameter)
        ]
        return cls(
            distances=distances,
            transitions=transitions,
            max_distance=nfa.max_distance,
            transition_stride=num_chi,
            diameter=diameter,
        )

    def initial_state(self) -> ParametricState:
        """Return the state before any input."""
        return ParametricState(shape_id=1, offset=0)

    def num_states(self) -> int:
        """Return the number of shapes."""
        return self._shape_count

    def transition(self, state: ParametricState, chi: int) -> Transition:
        """Return the transition out of ``state`` on characteristic vector ``chi``."""
        return self.transitions[self.transition_stride * state.shape_id + chi]

    def get_distance(self, state: ParametricState, query_len: int) -> Exact | AtLeast:
        """Return the distance of ``state`` when the input ends."""
        remaining = query_len - state.offset
        if state.is_dead_end or not 0 <= remaining < self.diameter:
            return AtLeast(self.max_distance + 1)
        dist = self.distances[self.diameter * state.shape_id + remaining]
        if dist > self.max_distance:
            return AtLeast(dist)
        return Exact(dist)

    def is_prefix_sink(self, state: ParametricState, query_len: int) -> bool:
        """Return True if no further input can lower the distance."""
        if state.is_dead_end:
            return True
        remaining = query_len - state.offset
        if not 0 <= remaining < self.diameter:
            return False
        state_distances = self.distances[self.diameter * state.shape_id:]
        prefix_distance = state_distances[remaining]
        if prefix_distance > self.max_distance:
            return False
        return all(d >= prefix_distance for d in state_distances)

    def compute_distance(self, left: str, right: str) -> Exact | AtLeast:
        """Return the edit distance between ``left`` and ``right``."""
        state = self.initial_state()
        for char in right:
            start = state.offset
            stop = min(start + self.diameter, len(left))
            chi = characteristic_vector(left[start:stop], char)
            state = self.transition(state, chi).apply(state)
            if state.is_dead_end:
                return AtLeast(self.max_distance + 1)
        return self.get_distance(state, len(left))

    def build_dfa(self, query: str, distance: int, prefix: bool) -> DFA:
        """Build the byte DFA matching words within the distance of ``query``."""
        query_len = len(query)
        alphabet = query_chars(query)

        psi = ParametricStateIndex(query_len, self.num_states())
        if psi.get_or_allocate(ParametricState()) != 0:
            raise ValueError("Invalid dead end state")
        initial_id = psi.get_or_allocate(self.initial_state())
        builder = Utf8DFABuilder(psi.max_num_states)
        mask = (1 << self.diameter) - 1

        state_id = 0
        while state_id < STATE_LIMIT and state_id < psi.num_states:
            state = psi.get(state_id)
            if prefix and self.is_prefix_sink(state, query_len):
                builder.add_state(state_id, state_id, self.get_distance(state, query_len))
            else:
                default_successor = self.transition(state, 0).apply(state)
                default_id = psi.get_or_allocate(default_successor)
                try:
                    state_builder = builder.add_state(
                        state_id, default_id, self.get_distance(state, query_len)
                    )
                except ValueError as exc:
                    raise ValueError(f"parametric_dfa: buildDfa, err: {exc}") from exc
                for char, vector in alphabet:
                    chi = vector.shift_and_mask(state.offset, mask)
                    dest = self.transition(state, chi).apply(state)
                    state_builder.add_transition(char, psi.get_or_allocate(dest))
            state_id += 1

        if state_id == STATE_LIMIT:
            raise TooManyStatesError()

        builder.set_initial_state(initial_id)
        return builder.build(distance)