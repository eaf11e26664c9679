"""Market resolution — declare the winning side.

Zero-winner case: when nobody backed the winning side, the whole losing pool
becomes fees (there is no one to pay), and that pool is zeroed so that
pools + fees still equal what the escrow holds above its rent.
"""

from src.sb_clearing.domain.events import MarketResolvedEvent
from src.sb_common.enums import Side
from src.sb_common.errors import (
    InvalidWinningSideError,
    MarketAlreadyResolvedError,
    MarketNotFrozenError,
)
from src.sb_common.lamports import checked_add
from src.sb_market.domain.models import Market


def resolve_market(market: Market, winning_side: int) -> MarketResolvedEvent:
    try:
        side = Side(winning_side)
    except ValueError:
        raise InvalidWinningSideError(winning_side) from None
    if market.resolved:
        raise MarketAlreadyResolvedError()
    if not market.frozen:
        raise MarketNotFrozenError()

    winning_pool = market.pool(side)
    losing_pool = market.pool(side.opposite)
    reclassify = winning_pool == 0 and losing_pool > 0
    if reclassify:
        fees_accrued = checked_add(market.fees_accrued, losing_pool)

    market.resolved = True
    market.winning_side = side
    if reclassify:
        market.fees_accrued = fees_accrued
        if side is Side.YES:
            market.pool_no = 0
        else:
            market.pool_yes = 0

    return MarketResolvedEvent(
        market=market.address,
        authority=market.authority,
        winning_side=side,
        pool_yes=market.pool_yes,
        pool_no=market.pool_no,
        no_winner=winning_pool == 0,
        fees_accrued=market.fees_accrued,
    )
