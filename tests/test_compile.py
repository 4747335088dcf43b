import pytest

from vellum.regexp.compile import (
    CompiledTooBigError,
    Compiler,
    NoEmptyError,
    NoLazyError,
    NoWordBoundaryError,
)
from vellum.regexp.inst import Inst, Op
from vellum.regexp.syntax import parse


def R(a, b):
    return Inst(Op.RANGE, range_start=a, range_end=b)


def S(a, b):
    return Inst(Op.SPLIT, split_a=a, split_b=b)


def J(to):
    return Inst(Op.JMP, to=to)


M = Inst(Op.MATCH)
A = ord("a")
B = ord("b")

DOT = [
    S(1, 3), R(0, 0x09), J(46),
    S(4, 6), R(0x0B, 0x7F), J(46),
    S(7, 10), R(0xC2, 0xDF), R(0x80, 0xBF), J(46),
    S(11, 15), R(0xE0, 0xE0), R(0xA0, 0xBF), R(0x80, 0xBF), J(46),
    S(16, 20), R(0xE1, 0xEC), R(0x80, 0xBF), R(0x80, 0xBF), J(46),
    S(21, 25), R(0xED, 0xED), R(0x80, 0x9F), R(0x80, 0xBF), J(46),
    S(26, 30), R(0xEE, 0xEF), R(0x80, 0xBF), R(0x80, 0xBF), J(46),
    S(31, 36), R(0xF0, 0xF0), R(0x90, 0xBF), R(0x80, 0xBF), R(0x80, 0xBF), J(46),
    S(37, 42), R(0xF1, 0xF3), R(0x80, 0xBF), R(0x80, 0xBF), R(0x80, 0xBF), J(46),
    R(0xF4, 0xF4), R(0x80, 0x8F), R(0x80, 0xBF), R(0x80, 0xBF),
    M,
]


@pytest.mark.parametrize(
    "query, want",
    [
        ("", [M]),
        ("a", [R(A, A), M]),
        ("[a-c]", [R(A, ord("c")), M]),
        ("(a)", [R(A, A), M]),
        ("a?", [S(1, 2), R(A, A), M]),
        ("a*", [S(1, 3), R(A, A), J(0), M]),
        ("a+", [R(A, A), S(0, 2), M]),
        ("a{2,4}", [R(A, A), R(A, A), S(3, 6), R(A, A), S(5, 6), R(A, A), M]),
        ("a{3,}", [R(A, A), R(A, A), R(A, A), S(4, 6), R(A, A), J(3), M]),
        ("a+|b+", [S(1, 4), R(A, A), S(1, 3), J(6), R(B, B), S(4, 6), M]),
        ("a+b+", [R(A, A), S(0, 2), R(B, B), S(2, 4), M]),
        (".", DOT),
    ],
)
def test_compiler(query, want):
    assert Compiler(10000).compile(parse(query)) == want


@pytest.mark.parametrize(
    "query, error",
    [
        ("^", NoEmptyError),
        (r"\b", NoWordBoundaryError),
        (".*?", NoLazyError),
    ],
)
def test_compiler_errors(query, error):
    with pytest.raises(error):
        Compiler(10000).compile(parse(query))


def test_size_limit():
    with pytest.raises(CompiledTooBigError):
        Compiler(10).compile(parse("a"))


def test_case_folded_literal():
    got = Compiler(10000).compile(parse("(?i)a"))
    assert got == [S(1, 3), R(ord("A"), ord("A")), J(4), R(A, A), M]


def test_compile_resets_between_calls():
    c = Compiler(10000)
    c.compile(parse("abc"))
    assert c.compile(parse("a")) == [R(A, A), M]