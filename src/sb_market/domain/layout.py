"""Fixed-width binary layout of a Market record (194-byte body)."""

import struct

from src.sb_account.domain.addressing import identity_bytes
from src.sb_account.domain.layout import (
    DISCRIMINATOR_LEN,
    discriminator,
    pack_fixed_text,
)
from src.sb_market.domain.constants import LABEL_MAX_LEN, TITLE_MAX_LEN
from src.sb_market.domain.models import Market

_ACCOUNT_NAME = "BetMarket"
WINNING_SIDE_UNSET = 255

# authority, cycle, pool_yes, pool_no, resolved, frozen, fee_bps, host_fee_bps,
# bump, winning_side, fees_accrued, title, label_yes, label_no
_MARKET = struct.Struct(f"<32sHQQ??HHBBQ{TITLE_MAX_LEN}s{LABEL_MAX_LEN}s{LABEL_MAX_LEN}s")
MARKET_SIZE = _MARKET.size  # 194
MARKET_SPACE = DISCRIMINATOR_LEN + MARKET_SIZE


def encode_market(market: Market) -> bytes:
    winning = WINNING_SIDE_UNSET if market.winning_side is None else int(market.winning_side)
    body = _MARKET.pack(
        identity_bytes(market.authority),
        market.cycle,
        market.pool_yes,
        market.pool_no,
        market.resolved,
        market.frozen,
        market.fee_bps,
        market.host_fee_bps,
        market.bump,
        winning,
        market.fees_accrued,
        pack_fixed_text(market.title, TITLE_MAX_LEN),
        pack_fixed_text(market.label_yes, LABEL_MAX_LEN),
        pack_fixed_text(market.label_no, LABEL_MAX_LEN),
    )
    return discriminator(_ACCOUNT_NAME) + body
