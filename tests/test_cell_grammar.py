"""
Tests for the opcode table cell grammar.

Cells are fed the way BeautifulSoup renders them with get_text("\\n"): one
line per text node, with the page's non-breaking spaces kept.
"""

import pytest

from cell_grammar import CellSyntaxError, ParsedCell, parse_cell


NBSP = "\xa0"


class TestInstructionCells:
    """Cells that hold an instruction."""

    def test_two_operands(self):
        parsed = parse_cell("LD A,d8\n2\n8\nZ N H C")

        assert parsed == ParsedCell(
            operator="LD",
            operands=("A", "d8"),
            size="2",
            time="8",
            flags=("Z", "N", "H", "C"),
        )

    def test_no_operands(self):
        parsed = parse_cell(f"NOP\n1{NBSP}{NBSP}4\n-{NBSP}-{NBSP}-{NBSP}-")

        assert parsed.operator == "NOP"
        assert parsed.operands == ()
        assert parsed.size == "1"
        assert parsed.time == "4"
        assert parsed.flags == ("-", "-", "-", "-")

    def test_single_operand(self):
        parsed = parse_cell(f"RST 38H\n1{NBSP}{NBSP}16\n-{NBSP}-{NBSP}-{NBSP}-")

        assert parsed.operator == "RST"
        assert parsed.operands == ("38H",)

    def test_memory_indirect_operand(self):
        parsed = parse_cell(f"LD (HL+),A\n1{NBSP}{NBSP}8\n-{NBSP}-{NBSP}-{NBSP}-")

        assert parsed.operands == ("(HL+)", "A")

    def test_indirect_placeholder_operand(self):
        parsed = parse_cell(f"LDH (a8),A\n2{NBSP}{NBSP}12\n-{NBSP}-{NBSP}-{NBSP}-")

        assert parsed.operator == "LDH"
        assert parsed.operands == ("(a8)", "A")

    def test_offset_operand(self):
        parsed = parse_cell(f"LD HL,SP+r8\n2{NBSP}{NBSP}12\n0{NBSP}0{NBSP}H{NBSP}C")

        assert parsed.operands == ("HL", "SP+r8")
        assert parsed.flags == ("0", "0", "H", "C")

    def test_conditional_timing_kept_as_text(self):
        parsed = parse_cell(f"JR NZ,r8\n2{NBSP}{NBSP}12/8\n-{NBSP}-{NBSP}-{NBSP}-")

        assert parsed.time == "12/8"

    def test_prefixed_bit_instruction(self):
        parsed = parse_cell(f"BIT 7,(HL)\n2{NBSP}{NBSP}16\nZ{NBSP}0{NBSP}1{NBSP}-")

        assert parsed.operator == "BIT"
        assert parsed.operands == ("7", "(HL)")

    def test_space_after_comma(self):
        parsed = parse_cell("LD B, C\n1 4\n- - - -")

        assert parsed.operands == ("B", "C")

    def test_surrounding_whitespace_ignored(self):
        parsed = parse_cell("\n  DI\n1 4\n- - - -  \n")

        assert parsed.operator == "DI"

    def test_operator_case_preserved(self):
        parsed = parse_cell("ld a,b\n1 4\n- - - -")

        assert parsed.operator == "ld"

    def test_malformed_timing_still_matches(self):
        """Timing is validated by the decoder, not the grammar."""
        parsed = parse_cell("JP NZ,a16\n3\nx/y\n- - - -")

        assert parsed.time == "x/y"


class TestNonInstructionCells:
    """Header, blank and illegal-opcode cells."""

    @pytest.mark.parametrize("text", [
        "",
        NBSP,
        "   ",
        "x0",
        "Fx",
        "LD A,d8",
        "LD A,d8\n2 8",
        "LD A,d8\n2 8\nZ N H",
        "LD A,B,C\n1 4\n- - - -",
        "NOP\nx 4\n- - - -",
        "NOP\n1 4\n- - - - -",
    ])
    def test_rejected(self, text):
        with pytest.raises(CellSyntaxError):
            parse_cell(text)

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            parse_cell("")
