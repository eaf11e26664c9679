"""Tests for sb_common.lamports: overflow-checked u64 arithmetic."""

import pytest

from src.sb_common.errors import MathOverflowError
from src.sb_common.lamports import (
    U16_MAX,
    U64_MAX,
    checked_add,
    checked_add_u16,
    checked_sub,
    lamports_to_display,
    mul_div_floor,
)


class TestCheckedAdd:
    def test_simple(self) -> None:
        assert checked_add(100, 300) == 400

    def test_max_is_allowed(self) -> None:
        assert checked_add(U64_MAX - 1, 1) == U64_MAX

    def test_overflow_raises(self) -> None:
        with pytest.raises(MathOverflowError):
            checked_add(U64_MAX, 1)

    def test_negative_operand_rejected(self) -> None:
        with pytest.raises(MathOverflowError):
            checked_add(-1, 5)


class TestCheckedSub:
    def test_simple(self) -> None:
        assert checked_sub(400, 394) == 6

    def test_to_zero(self) -> None:
        assert checked_sub(7, 7) == 0

    def test_underflow_raises(self) -> None:
        with pytest.raises(MathOverflowError):
            checked_sub(5, 6)


class TestCheckedAddU16:
    def test_last_cycle(self) -> None:
        assert checked_add_u16(U16_MAX - 1, 1) == U16_MAX

    def test_overflow_raises(self) -> None:
        with pytest.raises(MathOverflowError):
            checked_add_u16(U16_MAX, 1)


class TestMulDivFloor:
    def test_floor(self) -> None:
        # 100 * 690 / 10000 = 6.9 -> 6
        assert mul_div_floor(100, 690, 10_000) == 6

    def test_wide_intermediate(self) -> None:
        # a * b exceeds u64 but the quotient fits
        assert mul_div_floor(U64_MAX, U64_MAX, U64_MAX) == U64_MAX

    def test_quotient_overflow_raises(self) -> None:
        with pytest.raises(MathOverflowError):
            mul_div_floor(U64_MAX, 2, 1)

    def test_zero_divisor_raises(self) -> None:
        with pytest.raises(MathOverflowError):
            mul_div_floor(1, 1, 0)


class TestLamportsToDisplay:
    def test_whole_and_fraction(self) -> None:
        assert lamports_to_display(1_500_000_000) == "1.500000000 SOL"

    def test_small(self) -> None:
        assert lamports_to_display(6) == "0.000000006 SOL"

    def test_negative_debit(self) -> None:
        assert lamports_to_display(-394) == "-0.000000394 SOL"

    def test_thousands_separator(self) -> None:
        assert lamports_to_display(1_234 * 1_000_000_000) == "1,234.000000000 SOL"
