"""Domain models for sb_account — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.sb_common.enums import LedgerEntryType


@dataclass
class AuthorityMeta:
    address: str
    authority: str
    next_cycle: int   # u16, cycle the next initialize_market will use
    bump: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class Transfer:
    """One native-unit movement between two addresses.

    from_escrow marks debits out of a record's own balance, so a shortfall is
    reported as an escrow inconsistency rather than a user's lack of funds.
    """

    source: str
    destination: str
    amount: int
    entry_type: LedgerEntryType
    from_escrow: bool = False


@dataclass
class LedgerEntry:
    id: int                          # BIGSERIAL
    address: str
    entry_type: str                  # LedgerEntryType value
    amount: int                      # lamports, positive=credit negative=debit
    balance_after: int               # lamports
    reference_type: str | None = None
    reference_id: str | None = None
    created_at: datetime | None = None
