"""A regular expression automaton for walking an FST."""

from __future__ import annotations

from .compile import Compiler
from .dfa import DfaBuilder
from .syntax import Node, parse

DEFAULT_LIMIT = 10 * (1 << 20)


class Regexp:
    """An automaton that accepts the byte strings matched by ``expr``.

    The compiled program is limited to about ``size_limit`` bytes;
    CompiledTooBigError is raised beyond it. An already parsed tree may be
    passed as ``parsed``.
    """

    def __init__(self, expr: str, size_limit: int = DEFAULT_LIMIT, parsed: Node | None = None):
        if parsed is None:
            parsed = parse(expr)
        insts = Compiler(size_limit).compile(parsed)
        self.expr = expr
        self._dfa = DfaBuilder(insts).build()

    def __repr__(self) -> str:
        return f"Regexp({self.expr!r})"

    def start(self) -> int:
        """Return the start state."""
        return 1

    def is_match(self, state: int) -> bool:
        """Return True if ``state`` is a matching state."""
        if 0 <= state < len(self._dfa.states):
            return self._dfa.states[state].match
        return False

    def can_match(self, state: int) -> bool:
        """Return True if ``state`` can still lead to a match."""
        return 0 < state < len(self._dfa.states)

    def will_always_match(self, state: int) -> bool:
        """Return whether ``state`` always ends in a match; never known here."""
        return False

    def accept(self, state: int, b: int) -> int:
        """Return the state reached from ``state`` on byte ``b``."""
        if 0 <= state < len(self._dfa.states):
            return self._dfa.states[state].next[b]
        return 0