"""Instructions of the compiled regular expression program."""

from __future__ import annotations

import enum
from dataclasses import dataclass

# approximate size of one instruction in bytes, used for the size limit
INST_SIZE = 40


class Op(enum.IntEnum):
    """The operation an instruction performs."""

    MATCH = 0
    JMP = 1
    SPLIT = 2
    RANGE = 3


@dataclass
class Inst:
    """One program instruction; only the fields of its operation are used."""

    op: Op
    to: int = 0
    split_a: int = 0
    split_b: int = 0
    range_start: int = 0
    range_end: int = 0

    def __str__(self) -> str:
        if self.op is Op.JMP:
            return f"JMP: {self.to}"
        if self.op is Op.SPLIT:
            return f"SPLIT: {self.split_a} - {self.split_b}"
        if self.op is Op.RANGE:
            return f"RANGE: {self.range_start:x} - {self.range_end:x}"
        return "MATCH"