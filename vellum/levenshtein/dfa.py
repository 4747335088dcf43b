"""A byte-level DFA built from a character-level automaton."""

from __future__ import annotations

from .nfa import AtLeast, Exact

SINK_STATE = 0

_UNSET_DISTANCE = 255


def _original(state_id: int) -> int:
    return _predecessor(state_id, 0)


def _predecessor(state_id: int, num_steps: int) -> int:
    return state_id * 4 + num_steps


def _utf8(char: str | int) -> bytes:
    if isinstance(char, int):
        char = chr(char)
    try:
        return char.encode("utf-8")
    except UnicodeEncodeError:
        return "\ufffd".encode("utf-8")


class DFA:
    """A deterministic automaton over bytes reporting Levenshtein distances."""

    def __init__(self, transitions, distances, initial_state: int, ed: int):
        self.transitions = transitions
        self.distances = distances
        self.initial_state = initial_state
        self.ed = ed

    def start(self) -> int:
        """Return the initial state."""
        return self.initial_state

    def distance(self, state: int) -> Exact | AtLeast:
        """Return the distance associated with ``state``."""
        return self.distances[state]

    def num_states(self) -> int:
        """Return the number of states."""
        return len(self.transitions)

    def is_match(self, state: int) -> bool:
        """Return True if ``state`` lies within the edit distance."""
        return isinstance(self.distance(state), Exact)

    def can_match(self, state: int) -> bool:
        """Return True if ``state`` may still lead to a match."""
        return 0 < state < self.num_states()

    def accept(self, state: int, b: int) -> int:
        """Return the state reached from ``state`` on byte ``b``."""
        return self.transitions[state][b]

    def will_always_match(self, state: int) -> bool:
        """Return True only for a matching state that every byte leads back to.

        A Levenshtein automaton with a bounded distance never has such a
        state, so this is False for every DFA built from a query.
        """
        if not self.can_match(state) or not self.is_match(state):
            return False
        return all(target == state for target in self.transitions[state])

    def eval(self, data: bytes) -> Exact | AtLeast:
        """Run ``data`` from the initial state and return the final distance."""
        state = self.start()
        for b in data:
            state = self.accept(state, b)
        return self.distance(state)


class Utf8DFAStateBuilder:
    """Adds character transitions out of one state of a Utf8DFABuilder."""

    def __init__(self, builder: "Utf8DFABuilder", state_id: int, default_successor: list[int]):
        self._builder = builder
        self._state_id = state_id
        self._default_successor = default_successor

    def add_transition(self, char: str | int, to_state_id: int) -> None:
        """Route the UTF-8 encoding of ``char`` to character state ``to_state_id``."""
        transitions = self._builder.transitions
        encoded = _utf8(char)
        from_id = self._state_id
        for i, b in enumerate(encoded[:-1]):
            remaining = len(encoded) - i - 1
            intermediate = transitions[from_id][b]
            if intermediate == self._default_successor[remaining]:
                intermediate = self._builder._allocate()
                transitions[intermediate][:] = (
                    [self._default_successor[remaining - 1]] * 256
                )
            transitions[from_id][b] = intermediate
            from_id = intermediate
        target = self._builder._get_or_allocate(_original(to_state_id))
        transitions[from_id][encoded[-1]] = target


class Utf8DFABuilder:
    """Builds a byte DFA from states and transitions defined on characters."""

    def __init__(self, max_states: int):
        self.max_num_states = max_states
        self._index: dict[int, int] = {}
        self.distances: list[Exact | AtLeast] = []
        self.transitions: list[list[int]] = []
        self.initial_state = 0

    def _allocate(self) -> int:
        self.distances.append(AtLeast(_UNSET_DISTANCE))
        self.transitions.append([0] * 256)
        return len(self.transitions) - 1

    def _get_or_allocate(self, utf8_state: int) -> int:
        found = self._index.get(utf8_state)
        if found is not None:
            return found
        new_state = self._allocate()
        self._index[utf8_state] = new_state
        return new_state

    def set_initial_state(self, state: int) -> None:
        """Make character state ``state`` the start of the DFA."""
        self.initial_state = self._get_or_allocate(_original(state))

    def build(self, ed: int) -> DFA:
        """Return the DFA for edit distance ``ed``."""
        return DFA(self.transitions, self.distances, self.initial_state, ed)

    def add_state(
        self, state: int, default_successor: int, distance: Exact | AtLeast
    ) -> Utf8DFAStateBuilder:
        """Define ``state``; any character without its own transition goes to ``default_successor``."""
        if state > self.max_num_states:
            raise ValueError("State id is larger than maxNumStates")

        state_id = self._get_or_allocate(_original(state))
        self.distances[state_id] = distance

        default_id = self._get_or_allocate(_original(default_successor))
        # predecessors[k] reaches the default successor after k arbitrary bytes
        predecessors = [default_id]
        for num_bytes in range(1, 4):
            pred_id = self._get_or_allocate(_predecessor(default_successor, num_bytes))
            self.transitions[pred_id][:] = [predecessors[-1]] * 256
            predecessors.append(pred_id)

        row = self.transitions[state_id]
        row[0:192] = [predecessors[0]] * 192
        row[192:224] = [predecessors[1]] * 32
        row[224:240] = [predecessors[2]] * 16
        row[240:256] = [predecessors[3]] * 16

        return Utf8DFAStateBuilder(self, state_id, predecessors)