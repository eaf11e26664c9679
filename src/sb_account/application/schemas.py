"""Pydantic schemas and cursor utilities for sb_account API."""

import base64
import json

from pydantic import BaseModel, Field

from src.sb_account.domain.models import AuthorityMeta
from src.sb_common.lamports import U64_MAX, lamports_to_display

# ---------------------------------------------------------------------------
# Cursor-based pagination utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_id: int) -> str:
    """Encode a BIGINT primary key into an opaque Base64 cursor string."""
    payload = json.dumps({"id": last_id})
    return base64.b64encode(payload.encode()).decode()


def cursor_decode(cursor: str | None) -> int | None:
    """Decode a cursor string back to the last seen id. Returns None on error."""
    if cursor is None:
        return None
    try:
        payload = json.loads(base64.b64decode(cursor.encode()).decode())
        return int(payload["id"])
    except Exception:
        return None


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class AirdropRequest(BaseModel):
    lamports: int = Field(..., gt=0, le=U64_MAX, description="Amount to credit in lamports")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    address: str
    lamports: int
    display: str

    @classmethod
    def from_lamports(cls, address: str, lamports: int) -> "BalanceResponse":
        return cls(address=address, lamports=lamports, display=lamports_to_display(lamports))


class AuthorityMetaResponse(BaseModel):
    address: str
    authority: str
    next_cycle: int
    bump: int

    @classmethod
    def from_domain(cls, meta: AuthorityMeta) -> "AuthorityMetaResponse":
        return cls(
            address=meta.address,
            authority=meta.authority,
            next_cycle=meta.next_cycle,
            bump=meta.bump,
        )


class LedgerEntryItem(BaseModel):
    id: int
    entry_type: str
    amount: int
    amount_display: str
    balance_after: int
    balance_after_display: str
    reference_type: str | None
    reference_id: str | None
    created_at: str  # ISO8601 string


class LedgerResponse(BaseModel):
    items: list[LedgerEntryItem]
    next_cursor: str | None
    has_more: bool


class LayoutResponse(BaseModel):
    """A record in its fixed-width binary form, base64-encoded."""

    address: str
    account_type: str
    space: int
    rent_minimum: int
    data_base64: str
