"""Pydantic schemas for sb_market API.

Cursor format for markets (base58 PK, not sequential):
  {"ts": "<created_at ISO>", "address": "<market address>"}
  Encoded as Base64 JSON string.
"""

import base64
import json

from pydantic import BaseModel, Field

from src.sb_common.lamports import lamports_to_display
from src.sb_market.domain.models import Market

# ---------------------------------------------------------------------------
# Cursor utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_market: Market) -> str:
    """Encode composite cursor from last market in page."""
    payload = {
        "ts": last_market.created_at.isoformat() if last_market.created_at else None,
        "address": last_market.address,
    }
    return base64.b64encode(json.dumps(payload).encode()).decode()


def cursor_decode(cursor: str | None) -> tuple[str | None, str | None]:
    """Decode composite cursor -> (ts_iso, address), or (None, None) on error."""
    if cursor is None:
        return None, None
    try:
        data = json.loads(base64.b64decode(cursor.encode()).decode())
        return data["ts"], data["address"]
    except Exception:
        return None, None


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class InitializeMarketRequest(BaseModel):
    # Byte limits are enforced in the domain (UTF-8 length, not characters)
    title: str
    label_yes: str
    label_no: str
    fee_bps: int | None = Field(None, ge=0, description="Operator fee; defaults to 20 bps")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class MarketDetail(BaseModel):
    address: str
    authority: str
    cycle: int
    phase: str
    title: str
    label_yes: str
    label_no: str
    pool_yes: int
    pool_no: int
    total_pool: int
    total_pool_display: str
    resolved: bool
    frozen: bool
    winning_side: int | None
    fee_bps: int
    host_fee_bps: int
    fees_accrued: int
    bump: int
    created_at: str | None

    @classmethod
    def from_domain(cls, m: Market) -> "MarketDetail":
        total = m.pool_yes + m.pool_no
        return cls(
            address=m.address,
            authority=m.authority,
            cycle=m.cycle,
            phase=m.phase.value,
            title=m.title,
            label_yes=m.label_yes,
            label_no=m.label_no,
            pool_yes=m.pool_yes,
            pool_no=m.pool_no,
            total_pool=total,
            total_pool_display=lamports_to_display(total),
            resolved=m.resolved,
            frozen=m.frozen,
            winning_side=None if m.winning_side is None else int(m.winning_side),
            fee_bps=m.fee_bps,
            host_fee_bps=m.host_fee_bps,
            fees_accrued=m.fees_accrued,
            bump=m.bump,
            created_at=m.created_at.isoformat() if m.created_at else None,
        )


class MarketListResponse(BaseModel):
    items: list[MarketDetail]
    next_cursor: str | None
    has_more: bool
