"""Compilation of a regular expression syntax tree into byte instructions."""

from __future__ import annotations

from ..utf8 import Sequence, new_sequences
from .inst import INST_SIZE, Inst, Op
from .syntax import MAX_RUNE, Flag, Node, NodeOp, case_folds


class RegexpError(ValueError):
    """Raised when an expression cannot be turned into an automaton."""


class NoEmptyError(RegexpError):
    def __init__(self, message: str = "zero width assertions not allowed"):
        super().__init__(message)


class NoWordBoundaryError(RegexpError):
    def __init__(self, message: str = "word boundaries are not allowed"):
        super().__init__(message)


class NoLazyError(RegexpError):
    def __init__(self, message: str = "lazy quantifiers are not allowed"):
        super().__init__(message)


class CompiledTooBigError(RegexpError):
    def __init__(self, message: str = "too many instructions"):
        super().__init__(message)


_EMPTY_WIDTH = {NodeOp.BEGIN_LINE, NodeOp.END_LINE, NodeOp.BEGIN_TEXT, NodeOp.END_TEXT}
_BOUNDARIES = {NodeOp.WORD_BOUNDARY, NodeOp.NO_WORD_BOUNDARY}


class Compiler:
    """Compiles syntax trees into programs no larger than ``size_limit`` bytes."""

    def __init__(self, size_limit: int):
        self.size_limit = size_limit
        self._insts: list[Inst] = []

    def compile(self, ast: Node) -> list[Inst]:
        """Return the program for ``ast``, ending with a match instruction."""
        self._insts = []
        self._c(ast)
        self._insts.append(Inst(Op.MATCH))
        return self._insts

    def _c(self, node: Node) -> None:
        if node.flags & Flag.NON_GREEDY:
            raise NoLazyError()
        op = node.op
        if op in _EMPTY_WIDTH:
            raise NoEmptyError()
        if op in _BOUNDARIES:
            raise NoWordBoundaryError()
        if op is NodeOp.EMPTY_MATCH:
            return
        if op is NodeOp.LITERAL:
            for r in node.runes:
                if node.flags & Flag.FOLD_CASE:
                    self._c(Node(NodeOp.CHAR_CLASS, Flag.FOLD_CASE, runes=self._fold_runes(r)))
                else:
                    for seq in new_sequences(r, r):
                        self._compile_utf8_ranges(seq)
        elif op is NodeOp.ANY_CHAR:
            self._c(Node(NodeOp.CHAR_CLASS, node.flags & Flag.FOLD_CASE, runes=[0, MAX_RUNE]))
        elif op is NodeOp.ANY_CHAR_NOT_NL:
            self._c(
                Node(
                    NodeOp.CHAR_CLASS,
                    node.flags & Flag.FOLD_CASE,
                    runes=[0, 0x09, 0x0B, MAX_RUNE],
                )
            )
        elif op is NodeOp.CHAR_CLASS:
            self._compile_class(node)
        elif op is NodeOp.CAPTURE:
            self._c(node.subs[0])
        elif op is NodeOp.CONCAT:
            for sub in node.subs:
                self._c(sub)
        elif op is NodeOp.ALTERNATE:
            self._compile_alternate(node.subs)
        elif op is NodeOp.QUEST:
            split = self._empty_split()
            j1 = self._top()
            self._c(node.subs[0])
            self._set_split(split, j1, self._top())
        elif op is NodeOp.STAR:
            j1 = self._top()
            split = self._empty_split()
            j2 = self._top()
            self._c(node.subs[0])
            jmp = self._empty_jump()
            j3 = self._top()
            self._set_jump(jmp, j1)
            self._set_split(split, j2, j3)
        elif op is NodeOp.PLUS:
            j1 = self._top()
            self._c(node.subs[0])
            split = self._empty_split()
            self._set_split(split, j1, self._top())
        elif op is NodeOp.REPEAT:
            self._compile_repeat(node)
        self._check_size()

    @staticmethod
    def _fold_runes(r: int) -> list[int]:
        orbit = sorted(case_folds(r))
        i = orbit.index(r)
        ordered = [r] + orbit[i + 1:] + orbit[:i]
        return [v for c in ordered for v in (c, c)]

    def _compile_alternate(self, subs: list[Node]) -> None:
        if not subs:
            return
        jumps = []
        for sub in subs[:-1]:
            split = self._empty_split()
            j1 = self._top()
            self._c(sub)
            jumps.append(self._empty_jump())
            self._set_split(split, j1, self._top())
        self._c(subs[-1])
        end = self._top()
        for jmp in jumps:
            self._set_jump(jmp, end)

    def _compile_repeat(self, node: Node) -> None:
        for _ in range(node.min):
            self._c(node.subs[0])
        if node.max == -1:
            self._c(Node(NodeOp.STAR, node.flags, subs=node.subs))
            return
        pending = []
        for _ in range(node.min, node.max):
            split = self._empty_split()
            pending.append((split, self._top()))
            self._c(node.subs[0])
        end = self._top()
        for split, start in pending:
            self._set_split(split, start, end)

    def _check_size(self) -> None:
        if len(self._insts) * INST_SIZE > self.size_limit:
            raise CompiledTooBigError()

    def _compile_class(self, node: Node) -> None:
        pairs = list(zip(node.runes[0::2], node.runes[1::2]))
        if not pairs:
            return
        jumps = []
        for start, end in pairs[:-1]:
            split = self._empty_split()
            j1 = self._top()
            self._compile_class_range(start, end)
            jumps.append(self._empty_jump())
            self._set_split(split, j1, self._top())
        self._compile_class_range(*pairs[-1])
        end = self._top()
        for jmp in jumps:
            self._set_jump(jmp, end)

    def _compile_class_range(self, start: int, end: int) -> None:
        sequences = new_sequences(start, end)
        if not sequences:
            raise RegexpError("character class range holds no encodable code points")
        jumps = []
        for seq in sequences[:-1]:
            split = self._empty_split()
            j1 = self._top()
            self._compile_utf8_ranges(seq)
            jumps.append(self._empty_jump())
            self._set_split(split, j1, self._top())
        self._compile_utf8_ranges(sequences[-1])
        stop = self._top()
        for jmp in jumps:
            self._set_jump(jmp, stop)

    def _compile_utf8_ranges(self, seq: Sequence) -> None:
        self._insts.extend(
            Inst(Op.RANGE, range_start=r.start, range_end=r.end) for r in seq
        )

    def _empty_split(self) -> int:
        self._insts.append(Inst(Op.SPLIT))
        return self._top() - 1

    def _empty_jump(self) -> int:
        self._insts.append(Inst(Op.JMP))
        return self._top() - 1

    def _set_split(self, i: int, pc1: int, pc2: int) -> None:
        self._insts[i].split_a = pc1
        self._insts[i].split_b = pc2

    def _set_jump(self, i: int, pc: int) -> None:
        self._insts[i].to = pc

    def _top(self) -> int:
        return len(self._insts)