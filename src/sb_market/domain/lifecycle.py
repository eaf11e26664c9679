"""Market state machine: creation and freezing.

    OPEN --freeze--> FROZEN --resolve--> RESOLVED --close--> (deleted)

Resolution lives in sb_clearing.domain.resolution; closing in
sb_clearing.domain.reclamation. Functions here mutate the records they are
given only after every check has passed.
"""

from src.sb_account.domain.addressing import market_address
from src.sb_account.domain.models import AuthorityMeta
from src.sb_clearing.domain.fee import validate_fee_config
from src.sb_common.errors import (
    LabelTooLongError,
    MarketAlreadyFrozenError,
    MarketAlreadyResolvedError,
)
from src.sb_common.lamports import checked_add_u16
from src.sb_market.domain.constants import (
    AUTHORITY_FEE_BPS_DEFAULT,
    HOST_FEE_BPS_DEFAULT,
    LABEL_MAX_LEN,
    TITLE_MAX_LEN,
)
from src.sb_market.domain.models import Market


def _check_text(field: str, value: str, limit: int) -> None:
    length = len(value.encode("utf-8"))
    if length > limit:
        raise LabelTooLongError(field, length, limit)


def initialize_market(
    meta: AuthorityMeta,
    title: str,
    label_yes: str,
    label_no: str,
    fee_bps: int | None,
    program_id: str,
) -> Market:
    """Create the market for meta.next_cycle and advance the cycle counter."""
    fee = AUTHORITY_FEE_BPS_DEFAULT if fee_bps is None else fee_bps
    validate_fee_config(fee, HOST_FEE_BPS_DEFAULT)
    _check_text("title", title, TITLE_MAX_LEN)
    _check_text("label_yes", label_yes, LABEL_MAX_LEN)
    _check_text("label_no", label_no, LABEL_MAX_LEN)

    cycle = meta.next_cycle
    next_cycle = checked_add_u16(cycle, 1)
    address, bump = market_address(meta.authority, cycle, program_id)
    meta.next_cycle = next_cycle
    return Market(
        address=address,
        authority=meta.authority,
        cycle=cycle,
        pool_yes=0,
        pool_no=0,
        resolved=False,
        frozen=False,
        fee_bps=fee,
        host_fee_bps=HOST_FEE_BPS_DEFAULT,
        bump=bump,
        winning_side=None,
        fees_accrued=0,
        title=title,
        label_yes=label_yes,
        label_no=label_no,
    )


def freeze_market(market: Market) -> None:
    """Stop accepting bets ahead of resolution."""
    if market.resolved:
        raise MarketAlreadyResolvedError()
    if market.frozen:
        raise MarketAlreadyFrozenError()
    market.frozen = True
