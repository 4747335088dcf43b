import pytest

from vellum.regexp.syntax import Flag, NodeOp, RegexpSyntaxError, parse


def test_empty_expression():
    assert parse("").op is NodeOp.EMPTY_MATCH


def test_literals_merge():
    node = parse("ab")
    assert node.op is NodeOp.LITERAL
    assert node.runes == [ord("a"), ord("b")]


def test_class_range():
    node = parse("[a-c]")
    assert node.op is NodeOp.CHAR_CLASS
    assert node.runes == [ord("a"), ord("c")]


def test_bounded_repeat():
    node = parse("a{2,4}")
    assert (node.op, node.min, node.max) == (NodeOp.REPEAT, 2, 4)
    assert node.subs[0].runes == [ord("a")]


def test_unbounded_repeat():
    node = parse("a{3,}")
    assert (node.op, node.min, node.max) == (NodeOp.REPEAT, 3, -1)


def test_lazy_star_is_non_greedy():
    node = parse(".*?")
    assert node.op is NodeOp.STAR
    assert node.flags & Flag.NON_GREEDY
    assert node.subs[0].op is NodeOp.ANY_CHAR_NOT_NL


def test_anchors_depend_on_multiline():
    assert parse("^").op is NodeOp.BEGIN_TEXT
    assert parse("(?m)^").op is NodeOp.BEGIN_LINE
    assert parse("$").op is NodeOp.END_TEXT


def test_word_boundary_and_dot_all():
    assert parse(r"\b").op is NodeOp.WORD_BOUNDARY
    assert parse("(?s).").op is NodeOp.ANY_CHAR


def test_capture_and_alternation():
    node = parse("(a)|b+")
    assert node.op is NodeOp.ALTERNATE
    assert node.subs[0].op is NodeOp.CAPTURE
    assert node.subs[1].op is NodeOp.PLUS


def test_case_insensitive_negated_class():
    node = parse("(?i)[^x]")
    assert node.op is NodeOp.CHAR_CLASS
    runes = node.runes
    assert len(runes) % 2 == 0
    intervals = list(zip(runes[0::2], runes[1::2]))
    assert not any(lo <= ord("x") <= hi for lo, hi in intervals)
    assert not any(lo <= ord("X") <= hi for lo, hi in intervals)
    assert any(lo <= ord("a") <= hi for lo, hi in intervals)


def test_scoped_flags_restore():
    node = parse("(?i:a)b")
    assert node.op is NodeOp.CONCAT
    assert node.subs[0].flags & Flag.FOLD_CASE
    assert not node.subs[1].flags & Flag.FOLD_CASE


@pytest.mark.parametrize("expr", ["(a", "a)", "*", "a**", "[b-a]", "[a", "\\", "a{2,1}"])
def test_invalid_expressions(expr):
    with pytest.raises(RegexpSyntaxError):
        parse(expr)