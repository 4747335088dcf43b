"""A parser for Perl-style regular expressions into a syntax tree."""

from __future__ import annotations

import enum
import unicodedata
from dataclasses import dataclass, field
from functools import lru_cache

MAX_RUNE = 0x10FFFF
_REPEAT_LIMIT = 1000
_MIN_FOLD = 0x41
_MAX_FOLD = 0x1E943


class RegexpSyntaxError(ValueError):
    """Raised when an expression cannot be parsed."""


class Flag(enum.IntFlag):
    NONE = 0
    FOLD_CASE = 1
    DOT_NL = 2
    ONE_LINE = 4
    NON_GREEDY = 8


class NodeOp(enum.Enum):
    """The kind of a syntax tree node."""

    EMPTY_MATCH = enum.auto()
    LITERAL = enum.auto()
    CHAR_CLASS = enum.auto()
    ANY_CHAR_NOT_NL = enum.auto()
    ANY_CHAR = enum.auto()
    BEGIN_LINE = enum.auto()
    END_LINE = enum.auto()
    BEGIN_TEXT = enum.auto()
    END_TEXT = enum.auto()
    WORD_BOUNDARY = enum.auto()
    NO_WORD_BOUNDARY = enum.auto()
    CAPTURE = enum.auto()
    STAR = enum.auto()
    PLUS = enum.auto()
    QUEST = enum.auto()
    REPEAT = enum.auto()
    CONCAT = enum.auto()
    ALTERNATE = enum.auto()


@dataclass
class Node:
    """A node of the syntax tree.

    Literals hold their code points in ``runes``; classes hold inclusive
    ``lo, hi`` pairs. A ``max`` of -1 on a repeat means no upper bound.
    """

    op: NodeOp
    flags: Flag = Flag.NONE
    runes: list[int] = field(default_factory=list)
    subs: list["Node"] = field(default_factory=list)
    min: int = 0
    max: int = 0


@lru_cache(maxsize=None)
def case_folds(r: int) -> frozenset[int]:
    """Return the code points equal to ``r`` under simple case folding, ``r`` included."""
    seen = {r}
    todo = [r]
    while todo:
        c = chr(todo.pop())
        for v in (c.lower(), c.upper()):
            if len(v) == 1 and ord(v) not in seen:
                seen.add(ord(v))
                todo.append(ord(v))
    return frozenset(seen)


_PERL_CLASSES = {
    "d": [(0x30, 0x39)],
    "s": [(0x09, 0x0A), (0x0C, 0x0D), (0x20, 0x20)],
    "w": [(0x30, 0x39), (0x41, 0x5A), (0x5F, 0x5F), (0x61, 0x7A)],
}

_POSIX_CLASSES = {
    "alnum": [(0x30, 0x39), (0x41, 0x5A), (0x61, 0x7A)],
    "alpha": [(0x41, 0x5A), (0x61, 0x7A)],
    "ascii": [(0x00, 0x7F)],
    "blank": [(0x09, 0x09), (0x20, 0x20)],
    "cntrl": [(0x00, 0x1F), (0x7F, 0x7F)],
    "digit": [(0x30, 0x39)],
    "graph": [(0x21, 0x7E)],
    "lower": [(0x61, 0x7A)],
    "print": [(0x20, 0x7E)],
    "punct": [(0x21, 0x2F), (0x3A, 0x40), (0x5B, 0x60), (0x7B, 0x7E)],
    "space": [(0x09, 0x0D), (0x20, 0x20)],
    "upper": [(0x41, 0x5A)],
    "word": [(0x30, 0x39), (0x41, 0x5A), (0x5F, 0x5F), (0x61, 0x7A)],
    "xdigit": [(0x30, 0x39), (0x41, 0x46), (0x61, 0x66)],
}

_CATEGORIES = frozenset(
    "C L M N P S Z Cc Cf Co Cs Lu Ll Lt Lm Lo Mn Mc Me Nd Nl No "
    "Pc Pd Ps Pe Pi Pf Po Sm Sc Sk So Zs Zl Zp".split()
)


@lru_cache(maxsize=None)
def _category_ranges(name: str) -> tuple[tuple[int, int], ...]:
    ranges: list[tuple[int, int]] = []
    start = None
    for cp in range(MAX_RUNE + 2):
        inside = cp <= MAX_RUNE and unicodedata.category(chr(cp)).startswith(name)
        if inside and start is None:
            start = cp
        elif not inside and start is not None:
            ranges.append((start, cp - 1))
            start = None
    return tuple(ranges)


def _clean(ranges: list[tuple[int, int]]) -> list[tuple[int, int]]:
    merged: list[tuple[int, int]] = []
    for lo, hi in sorted(ranges):
        if merged and lo <= merged[-1][1] + 1:
            merged[-1] = (merged[-1][0], max(merged[-1][1], hi))
        else:
            merged.append((lo, hi))
    return merged


def _negate(ranges: list[tuple[int, int]]) -> list[tuple[int, int]]:
    out = []
    nxt = 0
    for lo, hi in ranges:
        if lo > nxt:
            out.append((nxt, lo - 1))
        nxt = hi + 1
    if nxt <= MAX_RUNE:
        out.append((nxt, MAX_RUNE))
    return out


def _add_folds(ranges: list[tuple[int, int]]) -> list[tuple[int, int]]:
    out = list(ranges)
    for lo, hi in ranges:
        if lo <= _MIN_FOLD and hi >= _MAX_FOLD:
            continue
        for r in range(max(lo, _MIN_FOLD), min(hi, _MAX_FOLD) + 1):
            out.extend((f, f) for f in case_folds(r) if f != r)
    return out


class _Parser:
    def __init__(self, expr: str):
        self.s = expr
        self.pos = 0
        self.flags = Flag.ONE_LINE

    def error(self, message: str) -> RegexpSyntaxError:
        return RegexpSyntaxError(f"{message} at position {self.pos} in {self.s!r}")

    def peek(self) -> str | None:
        return self.s[self.pos] if self.pos < len(self.s) else None

    def parse(self) -> Node:
        node = self.alternation()
        if self.pos < len(self.s):
            raise self.error("unexpected )")
        return node

    def alternation(self) -> Node:
        branches = [self.concat()]
        while self.peek() == "|":
            self.pos += 1
            branches.append(self.concat())
        if len(branches) == 1:
            return branches[0]
        return Node(NodeOp.ALTERNATE, self.flags, subs=branches)

    def concat(self) -> Node:
        items: list[Node] = []
        while True:
            c = self.peek()
            if c is None or c in "|)":
                break
            atom = self.atom()
            if atom is None:
                continue
            atom = self.repeats(atom)
            if (
                atom.op is NodeOp.LITERAL
                and items
                and items[-1].op is NodeOp.LITERAL
                and items[-1].flags == atom.flags
            ):
                items[-1].runes.extend(atom.runes)
            else:
                items.append(atom)
        if not items:
            return Node(NodeOp.EMPTY_MATCH, self.flags)
        if len(items) == 1:
            return items[0]
        return Node(NodeOp.CONCAT, self.flags, subs=items)

    def repeats(self, atom: Node) -> Node:
        repeated = False
        while True:
            c = self.peek()
            lo = hi = 0
            if c == "*":
                op = NodeOp.STAR
            elif c == "+":
                op = NodeOp.PLUS
            elif c == "?":
                op = NodeOp.QUEST
            elif c == "{":
                counts = self.try_repeat()
                if counts is None:
                    break
                op = NodeOp.REPEAT
                lo, hi = counts
            else:
                break
            if op is not NodeOp.REPEAT:
                self.pos += 1
            if repeated:
                raise self.error("invalid nested repetition operator")
            flags = self.flags
            if self.peek() == "?":
                self.pos += 1
                flags ^= Flag.NON_GREEDY
            atom = Node(op, flags, subs=[atom], min=lo, max=hi)
            repeated = True
        return atom

    def try_repeat(self) -> tuple[int, int] | None:
        s, i = self.s, self.pos + 1

        def digits(j: int) -> int:
            while j < len(s) and s[j].isdigit() and s[j].isascii():
                j += 1
            return j

        j = digits(i)
        if j == i:
            return None
        lo = int(s[i:j])
        if j < len(s) and s[j] == ",":
            k = digits(j + 1)
            hi = int(s[j + 1:k]) if k > j + 1 else -1
            j = k
        else:
            hi = lo
        if j >= len(s) or s[j] != "}":
            return None
        if lo > _REPEAT_LIMIT or hi > _REPEAT_LIMIT or (hi != -1 and hi < lo):
            raise self.error("invalid repeat count")
        self.pos = j + 1
        return lo, hi

    def atom(self) -> Node | None:
        c = self.s[self.pos]
        if c == "(":
            return self.group()
        if c == "[":
            return self.char_class()
        if c == ".":
            self.pos += 1
            dot_nl = self.flags & Flag.DOT_NL
            return Node(NodeOp.ANY_CHAR if dot_nl else NodeOp.ANY_CHAR_NOT_NL, self.flags)
        if c == "^":
            self.pos += 1
            one_line = self.flags & Flag.ONE_LINE
            return Node(NodeOp.BEGIN_TEXT if one_line else NodeOp.BEGIN_LINE, self.flags)
        if c == "$":
            self.pos += 1
            one_line = self.flags & Flag.ONE_LINE
            return Node(NodeOp.END_TEXT if one_line else NodeOp.END_LINE, self.flags)
        if c in "*+?":
            raise self.error("missing argument to repetition operator")
        if c == "{":
            start = self.pos
            if self.try_repeat() is not None:
                self.pos = start
                raise self.error("missing argument to repetition operator")
        if c == "\\":
            return self.escape_atom()
        self.pos += 1
        return self.literal(ord(c))

    def literal(self, r: int) -> Node:
        if self.flags & Flag.FOLD_CASE:
            r = min(case_folds(r))
        return Node(NodeOp.LITERAL, self.flags, runes=[r])

    def group(self) -> Node | None:
        self.pos += 1
        saved = self.flags
        capture = True
        rest = self.s[self.pos:]
        if rest.startswith("?P<") or rest.startswith("?<"):
            self.pos += 3 if rest.startswith("?P<") else 2
            end = self.s.find(">", self.pos)
            name = self.s[self.pos:end] if end >= 0 else ""
            if not name or not all(ch.isalnum() or ch == "_" for ch in name):
                raise self.error("invalid named capture")
            self.pos = end + 1
        elif rest.startswith("?"):
            self.pos += 1
            new = self.flags
            negative = False
            seen = False
            while True:
                c = self.peek()
                if c is None:
                    raise self.error("missing closing )")
                self.pos += 1
                if c in "imsU":
                    bit = {
                        "i": Flag.FOLD_CASE,
                        "m": Flag.ONE_LINE,
                        "s": Flag.DOT_NL,
                        "U": Flag.NON_GREEDY,
                    }[c]
                    # m turns multi-line on, which clears one-line mode
                    if (c == "m") != negative:
                        new &= ~bit
                    else:
                        new |= bit
                    seen = True
                elif c == "-":
                    if negative:
                        raise self.error("invalid or unsupported Perl syntax")
                    negative = True
                    seen = False
                elif c in ":)":
                    if negative and not seen:
                        raise self.error("invalid or unsupported Perl syntax")
                    if c == ")":
                        self.flags = new
                        return None
                    self.flags = new
                    capture = False
                    break
                else:
                    raise self.error("invalid or unsupported Perl syntax")
        sub = self.alternation()
        if self.peek() != ")":
            raise self.error("missing closing )")
        self.pos += 1
        self.flags = saved
        if capture:
            return Node(NodeOp.CAPTURE, saved, subs=[sub])
        return sub

    def escape(self, in_class: bool):
        self.pos += 1
        if self.pos >= len(self.s):
            raise self.error("trailing backslash at end of expression")
        c = self.s[self.pos]
        self.pos += 1
        nxt = self.peek()
        if c == "0" or (c in "1234567" and nxt is not None and nxt in "01234567"):
            value = int(c)
            for _ in range(2):
                d = self.peek()
                if d is None or d not in "01234567":
                    break
                value = value * 8 + int(d)
                self.pos += 1
            return value
        if c == "x":
            if nxt == "{":
                end = self.s.find("}", self.pos)
                text = self.s[self.pos + 1:end] if end >= 0 else ""
                try:
                    value = int(text, 16)
                except ValueError:
                    raise self.error("invalid escape sequence") from None
                if value > MAX_RUNE:
                    raise self.error("invalid escape sequence")
                self.pos = end + 1
                return value
            text = self.s[self.pos:self.pos + 2]
            try:
                value = int(text, 16) if len(text) == 2 else -1
            except ValueError:
                value = -1
            if value < 0:
                raise self.error("invalid escape sequence")
            self.pos += 2
            return value
        simple = {"a": 7, "f": 12, "t": 9, "n": 10, "r": 13, "v": 11}
        if c in simple:
            return simple[c]
        if c.lower() in _PERL_CLASSES:
            ranges = list(_PERL_CLASSES[c.lower()])
            return _negate(ranges) if c.isupper() else ranges
        if c in "pP":
            return self.unicode_class(c == "P")
        if not in_class:
            nodes = {
                "b": NodeOp.WORD_BOUNDARY,
                "B": NodeOp.NO_WORD_BOUNDARY,
                "A": NodeOp.BEGIN_TEXT,
                "z": NodeOp.END_TEXT,
            }
            if c in nodes:
                return nodes[c]
        if ord(c) < 0x80 and not c.isalnum():
            return ord(c)
        raise self.error("invalid escape sequence")

    def unicode_class(self, negate: bool) -> list[tuple[int, int]]:
        c = self.peek()
        if c is None:
            raise self.error("invalid character class range")
        if c == "{":
            end = self.s.find("}", self.pos)
            if end < 0:
                raise self.error("invalid character class range")
            name = self.s[self.pos + 1:end]
            self.pos = end + 1
        else:
            name = c
            self.pos += 1
        if name.startswith("^"):
            negate = not negate
            name = name[1:]
        if name == "Any":
            ranges = [(0, MAX_RUNE)]
        elif name in _CATEGORIES:
            ranges = list(_category_ranges(name))
        else:
            raise self.error("invalid character class range")
        return _negate(_clean(ranges)) if negate else ranges

    def escape_atom(self) -> Node:
        result = self.escape(in_class=False)
        if isinstance(result, NodeOp):
            return Node(result, self.flags)
        if isinstance(result, list):
            return self.class_node(result, False)
        return self.literal(result)

    def class_char(self):
        if self.peek() == "\\":
            return self.escape(in_class=True)
        c = self.s[self.pos]
        self.pos += 1
        return ord(c)

    def char_class(self) -> Node:
        self.pos += 1
        negate = False
        if self.peek() == "^":
            negate = True
            self.pos += 1
        ranges: list[tuple[int, int]] = []
        first = True
        while True:
            c = self.peek()
            if c is None:
                raise self.error("missing closing ]")
            if c == "]" and not first:
                self.pos += 1
                break
            first = False
            if self.s.startswith("[:", self.pos):
                end = self.s.find(":]", self.pos + 2)
                if end >= 0:
                    name = self.s[self.pos + 2:end]
                    neg = name.startswith("^")
                    table = _POSIX_CLASSES.get(name.lstrip("^"))
                    if table is None:
                        raise self.error("invalid character class range")
                    ranges.extend(_negate(list(table)) if neg else table)
                    self.pos = end + 2
                    continue
            lo = self.class_char()
            if isinstance(lo, list):
                ranges.extend(lo)
                continue
            if (
                self.peek() == "-"
                and self.pos + 1 < len(self.s)
                and self.s[self.pos + 1] != "]"
            ):
                self.pos += 1
                hi = self.class_char()
                if isinstance(hi, list) or hi < lo:
                    raise self.error("invalid character class range")
                ranges.append((lo, hi))
            else:
                ranges.append((lo, lo))
        return self.class_node(ranges, negate)

    def class_node(self, ranges: list[tuple[int, int]], negate: bool) -> Node:
        if self.flags & Flag.FOLD_CASE:
            ranges = _add_folds(ranges)
        merged = _clean(ranges)
        if negate:
            merged = _negate(merged)
        runes = [v for pair in merged for v in pair]
        return Node(NodeOp.CHAR_CLASS, self.flags, runes=runes)


def parse(expr: str) -> Node:
    """Parse ``expr`` with Perl syntax, raising RegexpSyntaxError when it is invalid."""
    return _Parser(expr).parse()