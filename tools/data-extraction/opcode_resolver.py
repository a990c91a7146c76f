#!/usr/bin/env python3
"""
Opcode and Operand Width Resolver

The opcode table is a 17x17 grid: one header row, one header column, and 16x16
instruction cells. An instruction's opcode comes from its position in the
grid, and the width of its immediate operand from the cell's background
colour:

    x:   0    1    2   ...  16
    y=0  hdr  x0   x1  ...  xF
    y=1  0x   00   01  ...  0F
    ...
    y=16 Fx   F0   F1  ...  FF

Positions are plain (x, y) pairs threaded through by the caller. Advance them
once per visited cell, including header and blank cells.
"""

from types import MappingProxyType
from typing import Optional, Tuple


GRID_WIDTH = 17  # 16 opcode columns + header column

# Background colour → immediate operand width in bits
OPERAND_BITS_BY_COLOR = MappingProxyType({
    "#ff99cc": 0,
    "#ffcc99": 0,
    "#ccccff": 8,
    "#ccffcc": 16,
    "#ffff99": 8,
    "#ffcccc": 16,
    "#80ffff": 8,
})


def operand_bits(color: Optional[str]) -> int:
    """Immediate operand width for a background colour (0 if unknown)."""
    if not color:
        return 0
    return OPERAND_BITS_BY_COLOR.get(color.strip().lower(), 0)


def opcode_low_byte(x: int, y: int) -> int:
    """Opcode byte of the cell at (x, y). Only meaningful for x, y >= 1."""
    return ((y - 1) & 0xF) << 4 | ((x - 1) & 0xF)


def advance(x: int, y: int) -> Tuple[int, int]:
    """Position of the next cell in row-major order."""
    x += 1
    if x % GRID_WIDTH == 0:
        return 0, y + 1
    return x, y


def resolve(x: int, y: int, color: Optional[str], op_prefix: int = 0) -> Tuple[int, int]:
    """
    Compute the (code, bits) of the cell at (x, y).

    Args:
        x, y: Grid position of the cell
        color: Cell's bgcolor attribute, if any
        op_prefix: Prefix byte of the table (0x00 or 0xCB)

    Returns:
        (16-bit opcode with the prefix as high byte, operand width in bits)
    """
    code = (op_prefix & 0xFF) << 8 | opcode_low_byte(x, y)
    return code, operand_bits(color)
