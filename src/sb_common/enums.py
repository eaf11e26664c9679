"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum, IntEnum


class Side(IntEnum):
    """Ticket side / winning side. Values are the on-record byte."""

    YES = 0
    NO = 1

    @property
    def opposite(self) -> "Side":
        return Side.NO if self is Side.YES else Side.YES


class MarketPhase(str, Enum):
    OPEN = "OPEN"
    FROZEN = "FROZEN"
    RESOLVED = "RESOLVED"


class LedgerEntryType(str, Enum):
    # Faucet
    AIRDROP = "AIRDROP"
    # Record creation / destruction
    RENT_DEPOSIT = "RENT_DEPOSIT"
    RENT_REFUND = "RENT_REFUND"
    # Betting and claims
    STAKE = "STAKE"
    PAYOUT = "PAYOUT"
    # Fee withdrawal (operator + platform paired)
    FEE_AUTHORITY = "FEE_AUTHORITY"
    FEE_HOST = "FEE_HOST"
    # Close-time fallbacks
    SALVAGE_AUTHORITY = "SALVAGE_AUTHORITY"
    SALVAGE_HOST = "SALVAGE_HOST"
    DUST_AUTHORITY = "DUST_AUTHORITY"
    DUST_HOST = "DUST_HOST"


class EventType(str, Enum):
    MARKET_RESOLVED = "MARKET_RESOLVED"
