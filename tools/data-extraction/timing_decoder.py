#!/usr/bin/env python3
"""
Instruction Timing Decoder

Timing fields in the opcode table are either a single cycle count ("8") or,
for conditional instructions, the cycles when the condition is taken and when
it is not ("12/8").
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Union

from cell_grammar import MalformedFieldError


CYCLES_PATTERN = re.compile(r'[0-9]+')


@dataclass(frozen=True)
class Time:
    """Cycle count of an instruction, with a second count for conditionals."""
    taken: int
    not_taken: Optional[int] = None

    @property
    def is_conditional(self) -> bool:
        return self.not_taken is not None

    def to_value(self) -> Union[int, List[int]]:
        """Serialization form: an int, or [taken, not_taken]."""
        if self.is_conditional:
            return [self.taken, self.not_taken]
        return self.taken

    def __str__(self) -> str:
        if self.is_conditional:
            return f"{self.taken}/{self.not_taken}"
        return str(self.taken)


def _parse_cycles(text: str, field: str) -> int:
    if not CYCLES_PATTERN.fullmatch(text):
        raise MalformedFieldError(f"Bad time {text!r} in timing field {field!r}")
    return int(text)


def parse_time(field: str) -> Time:
    """
    Decode a timing field.

    Raises:
        MalformedFieldError: wrong number of '/' segments or non-numeric cycles
    """
    if '/' in field:
        parts = field.split('/')
        if len(parts) != 2:
            raise MalformedFieldError(
                f"Timing field {field!r} has {len(parts)} values, expected 2"
            )
        taken, not_taken = parts
        return Time(_parse_cycles(taken, field), _parse_cycles(not_taken, field))

    return Time(_parse_cycles(field, field))
