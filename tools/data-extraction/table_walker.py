#!/usr/bin/env python3
"""
Opcode Table Walker

Walks the <td> cells of the pastraiser opcode tables in document order and
builds one Instruction per instruction cell. Grid positions come from the cell
count (see opcode_resolver), so every <td> of the table must be visited,
including header and blank ones, which are skipped after their position has
been taken into account.

Usage:
    from table_walker import TableWalker

    walker = TableWalker(verbose=True)
    instructions = walker.parse_tables(soup.find_all('table')[:2])
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple

from bs4 import Tag

from cell_grammar import CellSyntaxError, MalformedFieldError, ParsedCell, parse_cell
from opcode_resolver import advance, resolve
from operand_normalizer import normalize_operand
from timing_decoder import Time, parse_time


# Prefix byte per table, in document order
TABLE_PREFIXES = (0x00, 0xCB)


@dataclass(frozen=True)
class Instruction:
    """One opcode of the LR35902 instruction set."""
    code: int
    operator: str
    operands: Tuple[str, ...]
    bits: int
    size: int
    time: Time
    z: str
    n: str
    h: str
    c: str

    @property
    def prefix(self) -> int:
        return self.code >> 8

    def to_dict(self) -> Dict[str, Any]:
        """Convert to output dictionary format."""
        return {
            "code": self.code,
            "operator": self.operator,
            "operands": list(self.operands),
            "bits": self.bits,
            "size": self.size,
            "time": self.time.to_value(),
            "z": self.z,
            "n": self.n,
            "h": self.h,
            "c": self.c,
        }

    def __str__(self) -> str:
        operands = ",".join(self.operands)
        return (f"{self.code:04x}: {self.operator} {operands}: bits: {self.bits}, size: {self.size}, "
                f"time: {self.time}, flags: z[{self.z}],n[{self.n}],h[{self.h}],c[{self.c}]")


def build_instruction(parsed: ParsedCell, code: int, bits: int) -> Instruction:
    """
    Build an Instruction from a parsed cell.

    Raises:
        MalformedFieldError: size, timing or flags cannot be decoded
    """
    if not parsed.size.isdigit():
        raise MalformedFieldError(f"Bad size {parsed.size!r} for opcode {code:04x}")

    if len(parsed.flags) != 4:
        raise MalformedFieldError(
            f"Expected 4 flags for opcode {code:04x}, got {len(parsed.flags)}"
        )
    z, n, h, c = parsed.flags

    return Instruction(
        code=code,
        operator=parsed.operator.lower(),
        operands=tuple(normalize_operand(op) for op in parsed.operands),
        bits=bits,
        size=int(parsed.size),
        time=parse_time(parsed.time),
        z=z,
        n=n,
        h=h,
        c=c,
    )


class TableWalker:
    """Extracts instructions from the opcode table cells."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose
        self.skipped_cells = 0

    def log(self, message: str) -> None:
        """Print debug messages if verbose mode is enabled"""
        if self.verbose:
            print(f"[DEBUG] {message}")

    def walk_cells(self, cells: Iterable[Tag], op_prefix: int) -> List[Instruction]:
        """
        Extract instructions from table cells in row-major order.

        Args:
            cells: All <td> elements of one table, headers included
            op_prefix: Prefix byte for the table's opcodes

        Returns:
            Instructions in table order

        Raises:
            MalformedFieldError: an instruction cell has an undecodable field
        """
        instructions = []
        x, y = 0, 0

        for cell in cells:
            code, bits = resolve(x, y, cell.get('bgcolor'), op_prefix)
            position = (x, y)
            x, y = advance(x, y)

            try:
                parsed = parse_cell(cell.get_text("\n"))
            except CellSyntaxError as e:
                self.skipped_cells += 1
                self.log(f"Skipping cell {position}: {e}")
                continue

            instr = build_instruction(parsed, code, bits)
            self.log(str(instr))
            instructions.append(instr)

        return instructions

    def parse_table(self, table: Tag, op_prefix: int) -> List[Instruction]:
        """Extract instructions from one <table> element."""
        return self.walk_cells(table.find_all('td'), op_prefix)

    def parse_tables(self, tables: Iterable[Tag]) -> List[Instruction]:
        """
        Extract the unprefixed table followed by the CB-prefixed table.

        Tables beyond the second are ignored; a missing table contributes
        nothing.
        """
        instructions = []
        for table, op_prefix in zip(tables, TABLE_PREFIXES):
            instructions.extend(self.parse_table(table, op_prefix))
        return instructions
