"""Market events recorded in wal_events and published after commit."""

from dataclasses import dataclass

from src.sb_common.enums import EventType, Side


@dataclass(frozen=True)
class MarketResolvedEvent:
    market: str
    authority: str
    winning_side: Side
    pool_yes: int          # after zero-winner reclassification
    pool_no: int
    no_winner: bool
    fees_accrued: int

    event_type = EventType.MARKET_RESOLVED

    def as_payload(self) -> dict[str, object]:
        return {
            "market": self.market,
            "authority": self.authority,
            "winning_side": int(self.winning_side),
            "pool_yes": self.pool_yes,
            "pool_no": self.pool_no,
            "no_winner": self.no_winner,
            "fees_accrued": self.fees_accrued,
        }
