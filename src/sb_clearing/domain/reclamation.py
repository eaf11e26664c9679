"""Reclamation protocol: fee withdrawal and market closing.

Both operations only compute transfers out of the market escrow; the
application service applies them and, for a close, deletes the market in
the same unit of work. Nothing here touches the market unless every check
has passed.

Close sequence:
  1. salvage:   winning pool empty and escrow above rent: pay out the surplus
  2. fees:      fees_accrued must already be withdrawn
  3. dust:      up to DUST_MAX_LAMPORTS of truncation remainder is swept
  4. exactness: escrow must now equal the rent minimum
  5. refund:    the rent minimum goes back to the operator
"""

from src.sb_account.domain.models import Transfer
from src.sb_clearing.domain.fee import split_fees
from src.sb_common.enums import LedgerEntryType
from src.sb_common.errors import (
    FeesRemainingError,
    InsufficientEscrowError,
    MarketNotResolvedError,
    OutstandingLamportsError,
    ZeroAmountError,
)
from src.sb_common.lamports import checked_sub
from src.sb_market.domain.constants import DUST_MAX_LAMPORTS
from src.sb_market.domain.models import Market


def _split_transfers(
    market: Market,
    amount: int,
    host_identity: str,
    authority_type: LedgerEntryType,
    host_type: LedgerEntryType,
) -> list[Transfer]:
    split = split_fees(amount, market.fee_bps, market.host_fee_bps)
    return [
        Transfer(
            market.address, market.authority, split.authority_share, authority_type,
            from_escrow=True,
        ),
        Transfer(
            market.address, host_identity, split.host_share, host_type, from_escrow=True
        ),
    ]


def withdraw_fees(market: Market, escrow_balance: int, host_identity: str) -> list[Transfer]:
    """Pay out fees_accrued operator:host and zero it."""
    amount = market.fees_accrued
    if amount == 0:
        raise ZeroAmountError()
    if escrow_balance < amount:
        raise InsufficientEscrowError(amount, escrow_balance)
    transfers = _split_transfers(
        market, amount, host_identity, LedgerEntryType.FEE_AUTHORITY, LedgerEntryType.FEE_HOST
    )
    market.fees_accrued = 0
    return transfers


def close_market(
    market: Market, escrow_balance: int, rent_minimum: int, host_identity: str
) -> list[Transfer]:
    """Drain the escrow of a resolved market down to zero.

    Returns salvage, dust and rent-refund transfers in order. Raises before
    returning anything if fees are outstanding or the escrow cannot be
    brought to exactly the rent minimum.
    """
    if not market.resolved:
        raise MarketNotResolvedError()

    transfers: list[Transfer] = []
    current = escrow_balance
    winning_pool = 0 if market.winning_side is None else market.pool(market.winning_side)
    if winning_pool == 0 and current > rent_minimum:
        surplus = checked_sub(current, rent_minimum)
        transfers += _split_transfers(
            market, surplus, host_identity,
            LedgerEntryType.SALVAGE_AUTHORITY, LedgerEntryType.SALVAGE_HOST,
        )
        current = rent_minimum

    if market.fees_accrued != 0:
        raise FeesRemainingError(market.fees_accrued)

    if current > rent_minimum:
        extra = checked_sub(current, rent_minimum)
        if extra <= DUST_MAX_LAMPORTS:
            transfers += _split_transfers(
                market, extra, host_identity,
                LedgerEntryType.DUST_AUTHORITY, LedgerEntryType.DUST_HOST,
            )
            current = rent_minimum

    if current != rent_minimum:
        raise OutstandingLamportsError(current, rent_minimum)

    transfers.append(
        Transfer(
            market.address, market.authority, rent_minimum, LedgerEntryType.RENT_REFUND,
            from_escrow=True,
        )
    )
    return transfers
