"""Reusable builder of Levenshtein automata for queries."""

from __future__ import annotations

from .dfa import DFA
from .nfa import LevenshteinNFA
from .parametric import ParametricDFA


class LevenshteinAutomatonBuilder:
    """Precomputes the parametric automaton for a maximum distance.

    Construction grows quickly with the distance; it is practical up to
    about 5.
    """

    def __init__(self, max_distance: int, transposition: bool):
        nfa = LevenshteinNFA(max_distance, transposition)
        self.parametric_dfa = ParametricDFA.from_nfa(nfa)

    def build_dfa(self, query: str, fuzziness: int) -> DFA:
        """Build the automaton serving ``query`` with the given edit distance."""
        return self.parametric_dfa.build_dfa(query, fuzziness, False)

    def max_distance(self) -> int:
        """Return the maximum edit distance this builder supports."""
        return self.parametric_dfa.max_distance