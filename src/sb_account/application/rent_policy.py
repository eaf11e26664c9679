"""Rent minimums at the configured rates."""

from config.settings import settings
from src.sb_account.domain.rent import minimum_balance


def record_rent(space: int) -> int:
    return minimum_balance(
        space,
        lamports_per_byte_year=settings.RENT_LAMPORTS_PER_BYTE_YEAR,
        exemption_threshold=settings.RENT_EXEMPTION_THRESHOLD,
    )
