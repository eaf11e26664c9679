"""Pydantic schemas and cursor utilities for sb_ticket API."""

import base64
import json

from pydantic import BaseModel, Field

from src.sb_common.lamports import U64_MAX, lamports_to_display
from src.sb_ticket.domain.models import Ticket

# ---------------------------------------------------------------------------
# Cursor utilities (tickets page by address within one market)
# ---------------------------------------------------------------------------


def cursor_encode(last_address: str) -> str:
    return base64.b64encode(json.dumps({"address": last_address}).encode()).decode()


def cursor_decode(cursor: str | None) -> str | None:
    if cursor is None:
        return None
    try:
        return str(json.loads(base64.b64decode(cursor.encode()).decode())["address"])
    except Exception:
        return None


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateTicketRequest(BaseModel):
    # Out-of-range sides are rejected by the domain with InvalidSideError
    side: int = Field(..., ge=0, le=255, description="0 = YES, 1 = NO")


class PlaceBetRequest(BaseModel):
    amount: int = Field(..., ge=0, le=U64_MAX, description="Stake in lamports")


class BetRequest(BaseModel):
    """Open the ticket if needed and stake, in one transaction."""

    side: int = Field(..., ge=0, le=255, description="0 = YES, 1 = NO")
    amount: int = Field(..., ge=0, le=U64_MAX, description="Stake in lamports")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class TicketDetail(BaseModel):
    address: str
    user: str
    market: str
    side: int
    amount: int
    amount_display: str
    claimed: bool
    bump: int

    @classmethod
    def from_domain(cls, t: Ticket) -> "TicketDetail":
        return cls(
            address=t.address,
            user=t.user,
            market=t.market,
            side=int(t.side),
            amount=t.amount,
            amount_display=lamports_to_display(t.amount),
            claimed=t.claimed,
            bump=t.bump,
        )


class BetResponse(BaseModel):
    ticket: TicketDetail
    pool_yes: int
    pool_no: int
    staked: int
    ticket_created: bool = False


class TicketListResponse(BaseModel):
    items: list[TicketDetail]
    ticket_count: int
    next_cursor: str | None
    has_more: bool


class CloseTicketResponse(BaseModel):
    address: str
    refunded: int
    refunded_display: str
