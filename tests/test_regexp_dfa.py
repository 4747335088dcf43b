import re

import pytest

from vellum.regexp.compile import Compiler
from vellum.regexp.dfa import STATE_LIMIT, Dfa, DfaBuilder, TooManyStatesError
from vellum.regexp.sparse import SparseSet
from vellum.regexp.syntax import parse


def _program(pattern):
    return Compiler(10000).compile(parse(pattern))


def _build(pattern):
    return DfaBuilder(_program(pattern)).build()


def _walk(dfa, data):
    s = 1
    for b in data:
        s = dfa.states[s].next[b] if s < len(dfa.states) else 0
    return s


def test_add_follows_jumps_and_splits():
    prog = _program("a*")
    dfa = Dfa(prog)
    states = SparseSet(len(prog))
    dfa.add(states, 0)
    assert list(states) == [0, 1, 3]


def test_add_ignores_present_positions():
    prog = _program("a*")
    dfa = Dfa(prog)
    states = SparseSet(len(prog))
    dfa.add(states, 0)
    dfa.add(states, 1)
    assert len(states) == 3


def test_run_reports_match_and_moves():
    prog = _program("a*")
    dfa = Dfa(prog)
    source = SparseSet(len(prog))
    dfa.add(source, 0)
    dest = SparseSet(len(prog))
    assert dfa.run(source, dest, ord("a")) is True
    assert dest.contains(1) and dest.contains(3)

    assert dfa.run(source, dest, ord("b")) is True
    assert len(dest) == 0


def test_run_without_match():
    prog = _program("ab")
    dfa = Dfa(prog)
    source = SparseSet(len(prog))
    dfa.add(source, 0)
    dest = SparseSet(len(prog))
    assert dfa.run(source, dest, ord("a")) is False
    assert dest.contains(1)


def test_dead_state_is_first():
    dfa = _build("a")
    dead = dfa.states[0]
    assert dead.match is False
    assert dead.next == [0] * 256


def test_literal_transitions():
    dfa = _build("a")
    start = dfa.states[1]
    assert start.match is False
    target = start.next[ord("a")]
    assert dfa.states[target].match is True
    assert all(start.next[b] == 0 for b in range(256) if b != ord("a"))


def test_star_loops_back_to_start():
    dfa = _build("a*")
    assert dfa.states[1].match is True
    assert dfa.states[1].next[ord("a")] == 1
    assert len(dfa.states) == 2


def test_transitions_stay_in_range():
    dfa = _build("[a-z]?[1-9]*|x+y")
    for state in dfa.states:
        assert len(state.next) == 256
        assert all(0 <= t < len(dfa.states) for t in state.next)


@pytest.mark.parametrize("pattern", ["[a-c]+", "ab|ac", "a{2,4}", "(ab)*c?"])
@pytest.mark.parametrize("text", ["", "a", "ab", "abc", "aaaa", "aaaaa", "ababc", "c", "ac"])
def test_agrees_with_re(pattern, text):
    dfa = _build(pattern)
    s = _walk(dfa, text.encode())
    assert dfa.states[s].match == (re.fullmatch(pattern, text) is not None)


def test_too_many_states_message():
    assert str(TooManyStatesError()) == f"dfa contains more than {STATE_LIMIT} states"
    assert STATE_LIMIT == 10000