"""Pydantic schemas for sb_clearing API (resolution, claims, reclamation)."""

from pydantic import BaseModel, Field

from src.sb_account.domain.models import Transfer
from src.sb_clearing.domain.payout import ClaimResult
from src.sb_common.lamports import lamports_to_display
from src.sb_market.application.schemas import MarketDetail

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class ResolveRequest(BaseModel):
    # Out-of-range sides are rejected by the domain with InvalidWinningSideError
    winning_side: int = Field(..., ge=0, le=255, description="0 = YES, 1 = NO")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ResolveResponse(BaseModel):
    market: MarketDetail
    no_winner: bool


class ClaimResponse(BaseModel):
    ticket: str
    gross: int
    profit: int
    fee: int
    payout: int
    payout_display: str

    @classmethod
    def from_result(cls, ticket: str, result: ClaimResult) -> "ClaimResponse":
        return cls(
            ticket=ticket,
            gross=result.gross,
            profit=result.profit,
            fee=result.fee,
            payout=result.payout,
            payout_display=lamports_to_display(result.payout),
        )


class QuoteResponse(BaseModel):
    ticket: str
    side: int
    amount: int
    claimed: bool
    estimated_payout: int
    estimated_payout_display: str


class TransferItem(BaseModel):
    destination: str
    amount: int
    entry_type: str

    @classmethod
    def from_domain(cls, t: Transfer) -> "TransferItem":
        return cls(destination=t.destination, amount=t.amount, entry_type=t.entry_type.value)


class ReclamationResponse(BaseModel):
    """Transfers paid out of a market escrow by a withdraw or close."""

    market: str
    transfers: list[TransferItem]
    total: int
    closed: bool


class InvariantReport(BaseModel):
    market: str
    escrow_balance: int
    rent_minimum: int
    ticket_count: int
    ok: bool
    violations: list[str]
