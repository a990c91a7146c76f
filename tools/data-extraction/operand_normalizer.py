#!/usr/bin/env python3
"""
Operand Normalizer

Rewrites operands from the opcode table notation into the canonical form used
in the extracted table:

    FFh   -> 0xff   (trailing 'h' hex literals)
    d8    -> n      (8-bit immediate)
    d16   -> nn     (16-bit immediate)
    a8    -> n      (8-bit address, high page)
    a16   -> nn     (16-bit address)
    r8    -> n      (signed 8-bit relative offset)

Hex literals are rewritten before placeholders are substituted.
"""

import re
from types import MappingProxyType


HEX_SUFFIX_PATTERN = re.compile(r'(?<![0-9a-z])([0-9a-f]+)h(?![0-9a-z])')

# Applied in order
PLACEHOLDERS = MappingProxyType({
    "d8": "n",
    "d16": "nn",
    "a8": "n",
    "a16": "nn",
    "r8": "n",
})


def normalize_operand(token: str) -> str:
    """
    Normalize one raw operand token.

    Examples:
        FFh     → 0xff
        (a16)   → (nn)
        SP+r8   → sp+n
        (HL+)   → (hl+)
    """
    operand = token.lower()
    operand = HEX_SUFFIX_PATTERN.sub(r'0x\1', operand)

    for placeholder, replacement in PLACEHOLDERS.items():
        operand = operand.replace(placeholder, replacement)

    return operand
