"""Minimum retainable balance of a persisted record."""

ACCOUNT_STORAGE_OVERHEAD = 128
DEFAULT_LAMPORTS_PER_BYTE_YEAR = 3480
DEFAULT_EXEMPTION_THRESHOLD = 2


def minimum_balance(
    space: int,
    lamports_per_byte_year: int = DEFAULT_LAMPORTS_PER_BYTE_YEAR,
    exemption_threshold: int = DEFAULT_EXEMPTION_THRESHOLD,
) -> int:
    """Lamports a record of `space` bytes must hold to stay persisted."""
    return (ACCOUNT_STORAGE_OVERHEAD + space) * lamports_per_byte_year * exemption_threshold
