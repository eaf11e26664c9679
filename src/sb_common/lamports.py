"""Overflow-checked integer arithmetic for lamport amounts.

All amounts, pools and balances are unsigned 64-bit integers (lamports).
No float, no Decimal. Products of two u64 values are formed in a 128-bit
intermediate before narrowing; every narrowing is checked.
"""

from src.sb_common.errors import MathOverflowError

U16_MAX = (1 << 16) - 1
U64_MAX = (1 << 64) - 1
U128_MAX = (1 << 128) - 1

BPS_DENOMINATOR = 10_000
LAMPORTS_PER_SOL = 1_000_000_000


def _require_u64(value: int) -> int:
    if not (0 <= value <= U64_MAX):
        raise MathOverflowError(f"Math overflow: {value} does not fit in u64")
    return value


def checked_add(a: int, b: int) -> int:
    """a + b, raising MathOverflowError if the sum leaves u64."""
    return _require_u64(_require_u64(a) + _require_u64(b))


def checked_sub(a: int, b: int) -> int:
    """a - b, raising MathOverflowError on underflow."""
    return _require_u64(_require_u64(a) - _require_u64(b))


def checked_add_u16(a: int, b: int) -> int:
    total = a + b
    if not (0 <= total <= U16_MAX):
        raise MathOverflowError(f"Math overflow: {total} does not fit in u16")
    return total


def mul_div_floor(a: int, b: int, divisor: int) -> int:
    """floor(a * b / divisor) through a u128 intermediate, narrowed to u64.

    Raises MathOverflowError on a zero divisor, an intermediate beyond u128,
    or a quotient beyond u64.
    """
    if divisor == 0:
        raise MathOverflowError("Math overflow: division by zero")
    product = _require_u64(a) * _require_u64(b)
    if product > U128_MAX:
        raise MathOverflowError("Math overflow: u128 intermediate")
    return _require_u64(product // divisor)


def lamports_to_display(lamports: int) -> str:
    """Convert lamports to a SOL display string: 1500000000 -> '1.500000000 SOL'."""
    sign = "-" if lamports < 0 else ""
    whole, frac = divmod(abs(lamports), LAMPORTS_PER_SOL)
    return f"{sign}{whole:,}.{frac:09d} SOL"
