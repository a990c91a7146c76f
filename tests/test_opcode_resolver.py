"""Tests for grid position and colour resolution."""

import pytest

from opcode_resolver import (
    GRID_WIDTH,
    OPERAND_BITS_BY_COLOR,
    advance,
    opcode_low_byte,
    operand_bits,
    resolve,
)


class TestOperandBits:
    """Tests for the background colour lookup."""

    @pytest.mark.parametrize("color, bits", [
        ("#ccccff", 8),
        ("#ccffcc", 16),
        ("#ffff99", 8),
        ("#ffcccc", 16),
        ("#80ffff", 8),
        ("#ff99cc", 0),
        ("#ffcc99", 0),
    ])
    def test_known_colors(self, color, bits):
        assert operand_bits(color) == bits

    @pytest.mark.parametrize("color", ["#123456", "", None])
    def test_unknown_colors(self, color):
        assert operand_bits(color) == 0

    def test_case_and_whitespace_insensitive(self):
        assert operand_bits(" #CCFFCC ") == 16

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            OPERAND_BITS_BY_COLOR["#000000"] = 8


class TestOpcodeLowByte:
    """Tests for the position → opcode rule."""

    def test_first_data_cell(self):
        assert opcode_low_byte(1, 1) == 0x00

    def test_last_data_cell(self):
        assert opcode_low_byte(16, 16) == 0xFF

    def test_row_and_column(self):
        assert opcode_low_byte(3, 5) == 0x42

    def test_matches_formula(self):
        for y in range(1, 17):
            for x in range(1, 17):
                assert opcode_low_byte(x, y) == ((y - 1) & 0xF) << 4 | ((x - 1) & 0xF)

    def test_data_grid_is_permutation(self):
        codes = [opcode_low_byte(x, y) for y in range(1, 17) for x in range(1, 17)]
        assert sorted(codes) == list(range(256))

    def test_header_cells_stay_in_byte_range(self):
        assert 0 <= opcode_low_byte(0, 0) <= 0xFF
        assert 0 <= opcode_low_byte(0, 5) <= 0xFF


class TestAdvance:
    """Tests for row-major position advance."""

    def test_next_column(self):
        assert advance(0, 0) == (1, 0)
        assert advance(15, 3) == (16, 3)

    def test_wraps_after_last_column(self):
        assert advance(GRID_WIDTH - 1, 3) == (0, 4)

    def test_full_table_walk(self):
        x, y = 0, 0
        positions = []
        for _ in range(GRID_WIDTH * GRID_WIDTH):
            positions.append((x, y))
            x, y = advance(x, y)

        assert positions[0] == (0, 0)
        assert positions[GRID_WIDTH] == (0, 1)
        assert positions[GRID_WIDTH + 1] == (1, 1)
        assert positions[-1] == (16, 16)
        assert (x, y) == (0, 17)


class TestResolve:
    """Tests for resolve."""

    def test_unprefixed(self):
        assert resolve(1, 1, "#ccccff") == (0x0000, 8)

    def test_prefixed(self):
        assert resolve(16, 16, None, 0xCB) == (0xCBFF, 0)

    def test_bits_independent_of_position(self):
        assert resolve(2, 7, "#ccffcc", 0)[1] == resolve(9, 12, "#ccffcc", 0xCB)[1] == 16
