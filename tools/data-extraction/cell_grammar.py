#!/usr/bin/env python3
"""
Opcode Table Cell Grammar

Parses the text of one cell of the pastraiser Game Boy opcode table into its
parts. A cell holding an instruction reads:

    LD (HL),d8          <- operator and 0-2 operands
    2  12               <- size in bytes, timing (cycles, or taken/not taken)
    - - - -             <- Z N H C flag effects

The size/timing and flag separators on the page are non-breaking spaces, so
every whitespace class below accepts them. Header, blank and illegal-opcode
cells do not match and raise CellSyntaxError.

Usage:
    from cell_grammar import parse_cell

    parsed = parse_cell("LD A,d8\\n2\\n8\\nZ N H C")
    # ParsedCell(operator='LD', operands=('A', 'd8'), size='2', time='8',
    #            flags=('Z', 'N', 'H', 'C'))
"""

from dataclasses import dataclass
from typing import List, Tuple

from lark import Lark, Token, Transformer
from lark.exceptions import UnexpectedInput


CELL_GRAMMAR = r"""
    cell: mnemonic _NEWLINE size _WS time _NEWLINE flags

    mnemonic: OPERATOR (_SPACE OPERAND (_SEP OPERAND)?)?
    size: SIZE
    time: TIME
    flags: FLAG _SPACE FLAG _SPACE FLAG _SPACE FLAG

    OPERATOR: /[A-Za-z][A-Za-z0-9]*/
    OPERAND: /\(?[A-Za-z0-9+\-]+\)?/
    SIZE: /[0-9]+/
    TIME: /\S+/
    FLAG: /\S/

    _NEWLINE: /[^\S\n]*\n\s*/
    _WS: /\s+/
    _SPACE: /[^\S\n]+/
    _SEP: /[^\S\n]*,[^\S\n]*/ | /[^\S\n]+/
"""


class CellSyntaxError(ValueError):
    """Cell text does not have the shape of an instruction."""


class MalformedFieldError(ValueError):
    """A cell matched the grammar but one of its fields cannot be decoded."""


@dataclass(frozen=True)
class ParsedCell:
    """Raw fields of an instruction cell, exactly as written on the page."""
    operator: str
    operands: Tuple[str, ...]
    size: str
    time: str
    flags: Tuple[str, ...]


class CellTransformer(Transformer):
    def cell(self, items: List) -> ParsedCell:
        (operator, operands), size, time, flags = items
        return ParsedCell(
            operator=operator,
            operands=operands,
            size=size,
            time=time,
            flags=flags,
        )

    def mnemonic(self, items: List[Token]) -> Tuple[str, Tuple[str, ...]]:
        operator, *operands = items
        return str(operator), tuple(str(op) for op in operands)

    def size(self, items: List[Token]) -> str:
        return str(items[0])

    def time(self, items: List[Token]) -> str:
        return str(items[0])

    def flags(self, items: List[Token]) -> Tuple[str, ...]:
        return tuple(str(flag) for flag in items)


cell_parser = Lark(CELL_GRAMMAR, start="cell", parser="earley", maybe_placeholders=False)


def parse_cell(text: str) -> ParsedCell:
    """
    Parse the text content of one table cell.

    Args:
        text: Cell text with line breaks between the mnemonic, size/timing
              and flag lines (e.g. from ``Tag.get_text("\\n")``)

    Returns:
        ParsedCell with the raw operator, operands, size, timing and flags

    Raises:
        CellSyntaxError: text is not an instruction cell
    """
    try:
        tree = cell_parser.parse(text.strip())
    except UnexpectedInput as e:
        raise CellSyntaxError(f"Not an instruction cell: {text.strip()!r} ({e.__class__.__name__})") from e
    return CellTransformer().transform(tree)
