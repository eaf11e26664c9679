"""Domain models for sb_ticket — pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime

from src.sb_common.enums import Side


@dataclass
class Ticket:
    address: str
    user: str
    market: str          # market address
    side: Side           # fixed at creation
    amount: int          # lamports staked, only ever grows
    claimed: bool
    bump: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
