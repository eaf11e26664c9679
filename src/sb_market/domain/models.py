"""Domain models for sb_market — pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime

from src.sb_common.enums import MarketPhase, Side


@dataclass
class Market:
    address: str
    authority: str
    cycle: int
    pool_yes: int            # lamports staked on side 0
    pool_no: int             # lamports staked on side 1
    resolved: bool
    frozen: bool
    fee_bps: int             # operator share of the profit fee
    host_fee_bps: int        # platform share of the profit fee
    bump: int
    winning_side: Side | None  # None until resolved
    fees_accrued: int        # lamports held in escrow as fees, not yet withdrawn
    title: str
    label_yes: str
    label_no: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def phase(self) -> MarketPhase:
        if self.resolved:
            return MarketPhase.RESOLVED
        if self.frozen:
            return MarketPhase.FROZEN
        return MarketPhase.OPEN

    @property
    def total_fee_bps(self) -> int:
        return self.fee_bps + self.host_fee_bps

    def pool(self, side: Side) -> int:
        return self.pool_yes if side is Side.YES else self.pool_no
