import pytest

from vellum.levenshtein.dfa import SINK_STATE, Utf8DFABuilder
from vellum.levenshtein.nfa import AtLeast, Exact


@pytest.fixture
def two_state_dfa():
    builder = Utf8DFABuilder(2)
    builder.add_state(0, 1, Exact(1))
    builder.add_state(1, 0, Exact(0))
    builder.set_initial_state(1)
    return builder.build(1)


def test_two_state_dfa_start(two_state_dfa):
    assert two_state_dfa.eval(b"") == Exact(0)
    assert two_state_dfa.num_states() == 8
    assert two_state_dfa.ed == 1


def test_two_state_dfa_alternates(two_state_dfa):
    assert two_state_dfa.eval(b"a") == Exact(1)
    assert two_state_dfa.eval(b"ab") == Exact(0)


def test_two_state_dfa_counts_multibyte_char_once(two_state_dfa):
    assert two_state_dfa.eval("é".encode("utf-8")) == Exact(1)
    assert two_state_dfa.eval("あ".encode("utf-8")) == Exact(1)
    assert two_state_dfa.eval("😀".encode("utf-8")) == Exact(1)
    assert two_state_dfa.eval("éa".encode("utf-8")) == Exact(0)


@pytest.fixture
def accent_dfa():
    builder = Utf8DFABuilder(3)
    builder.add_state(0, 0, AtLeast(2))
    state = builder.add_state(1, 0, Exact(1))
    state.add_transition("é", 2)
    builder.add_state(2, 0, Exact(0))
    builder.set_initial_state(1)
    return builder.build(1)


def test_add_transition_multibyte(accent_dfa):
    assert accent_dfa.eval("é".encode("utf-8")) == Exact(0)
    assert accent_dfa.num_states() == 7


def test_other_chars_reach_sink(accent_dfa):
    assert accent_dfa.eval(b"e") == AtLeast(2)
    assert accent_dfa.eval("è".encode("utf-8")) == AtLeast(2)
    assert accent_dfa.eval("éa".encode("utf-8")) == AtLeast(2)


def test_match_predicates(accent_dfa):
    start = accent_dfa.start()
    assert accent_dfa.is_match(start)
    state = start
    for b in "é".encode("utf-8"):
        state = accent_dfa.accept(state, b)
    assert accent_dfa.is_match(state)
    assert accent_dfa.can_match(state)
    assert accent_dfa.distance(state) == Exact(0)
    dead = accent_dfa.accept(start, ord("x"))
    assert dead == SINK_STATE
    assert not accent_dfa.can_match(dead)
    assert not accent_dfa.is_match(dead)
    assert not accent_dfa.will_always_match(state)


def test_can_match_out_of_range(accent_dfa):
    assert not accent_dfa.can_match(accent_dfa.num_states())


def test_add_state_beyond_limit_raises():
    builder = Utf8DFABuilder(2)
    with pytest.raises(ValueError):
        builder.add_state(3, 0, Exact(0))