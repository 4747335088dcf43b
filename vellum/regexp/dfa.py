"""Subset construction of a byte DFA from a compiled regular expression program."""

from __future__ import annotations

from dataclasses import dataclass, field

from .inst import Inst, Op
from .sparse import SparseSet

STATE_LIMIT = 10000


class TooManyStatesError(Exception):
    """Raised when the automaton would need more than STATE_LIMIT states."""

    def __init__(self, message: str = f"dfa contains more than {STATE_LIMIT} states"):
        super().__init__(message)


@dataclass
class State:
    """A DFA state: the program positions it stands for and its transitions."""

    insts: tuple[int, ...] = ()
    next: list[int] = field(default_factory=lambda: [0] * 256)
    match: bool = False


class Dfa:
    """The states of a DFA over the program ``insts``; state 0 is the dead state."""

    def __init__(self, insts: list[Inst]):
        self.insts = insts
        self.states: list[State] = [State()]

    def add(self, states: SparseSet, ip: int) -> None:
        """Add ``ip`` to ``states`` along with everything reachable by jumps and splits."""
        pending = [ip]
        while pending:
            current = pending.pop()
            if states.contains(current):
                continue
            states.add(current)
            inst = self.insts[current]
            if inst.op is Op.JMP:
                pending.append(inst.to)
            elif inst.op is Op.SPLIT:
                pending.append(inst.split_b)
                pending.append(inst.split_a)

    def run(self, source: SparseSet, dest: SparseSet, b: int) -> bool:
        """Fill ``dest`` with the positions reached on byte ``b``.

        Returns True if ``source`` holds a match instruction.
        """
        dest.clear()
        is_match = False
        for ip in list(source):
            inst = self.insts[ip]
            if inst.op is Op.MATCH:
                is_match = True
            elif inst.op is Op.RANGE and inst.range_start <= b <= inst.range_end:
                self.add(dest, ip + 1)
        return is_match


class DfaBuilder:
    """Builds the DFA for a program by exploring every reachable state."""

    def __init__(self, insts: list[Inst]):
        self.dfa = Dfa(insts)
        self._cache: dict[tuple[int, ...], int] = {}

    def build(self) -> Dfa:
        """Return the complete DFA, raising TooManyStatesError if it grows too large."""
        size = len(self.dfa.insts)
        cur = SparseSet(size)
        nxt = SparseSet(size)

        self.dfa.add(cur, 0)
        start = self._cached_state(cur)
        pending = [start] if start else []
        seen = {start}
        while pending:
            s = pending.pop()
            for b in range(256):
                ns = self._run_state(cur, nxt, s, b)
                if ns != 0 and ns not in seen:
                    seen.add(ns)
                    pending.append(ns)
                if len(self.dfa.states) > STATE_LIMIT:
                    raise TooManyStatesError()
        return self.dfa

    def _run_state(self, cur: SparseSet, nxt: SparseSet, state: int, b: int) -> int:
        cur.clear()
        for ip in self.dfa.states[state].insts:
            cur.add(ip)
        self.dfa.run(cur, nxt, b)
        next_state = self._cached_state(nxt)
        self.dfa.states[state].next[b] = next_state
        return next_state

    def _cached_state(self, states: SparseSet) -> int:
        insts = []
        is_match = False
        for ip in states:
            op = self.dfa.insts[ip].op
            if op is Op.RANGE:
                insts.append(ip)
            elif op is Op.MATCH:
                is_match = True
                insts.append(ip)
        if not insts:
            return 0
        key = tuple(insts)
        found = self._cache.get(key)
        if found is not None:
            return found
        self.dfa.states.append(State(insts=key, match=is_match))
        new_id = len(self.dfa.states) - 1
        self._cache[key] = new_id
        return new_id