"""Claim payout math.

    total   = pool_yes + pool_no
    gross   = floor(amount * total / winning_pool)      (u128 intermediate)
    profit  = gross - amount
    fee     = floor(profit * (fee_bps + host_fee_bps) / 10000)
    payout  = gross - fee

Pools are never decremented by claims, so every winner is priced against
the same final pools. The fee stays in escrow as fees_accrued.
"""

from dataclasses import dataclass

from src.sb_account.domain.models import Transfer
from src.sb_clearing.domain.fee import calc_profit_fee
from src.sb_common.enums import LedgerEntryType
from src.sb_common.errors import (
    AlreadyClaimedError,
    InsufficientEscrowError,
    MarketNotResolvedError,
    MathOverflowError,
    TicketMarketMismatchError,
    TicketSideMismatchError,
)
from src.sb_common.lamports import checked_add, checked_sub, mul_div_floor
from src.sb_market.domain.models import Market
from src.sb_ticket.domain.models import Ticket


@dataclass(frozen=True)
class ClaimResult:
    gross: int
    profit: int
    fee: int
    payout: int


def compute_claim(market: Market, amount: int) -> ClaimResult:
    if market.winning_side is None:
        raise MarketNotResolvedError()
    total = checked_add(market.pool_yes, market.pool_no)
    winning_pool = market.pool(market.winning_side)
    if winning_pool == 0:
        raise MathOverflowError("Math overflow: winning pool is empty")
    gross = mul_div_floor(amount, total, winning_pool)
    profit = checked_sub(gross, amount)
    fee = calc_profit_fee(profit, market.fee_bps, market.host_fee_bps)
    return ClaimResult(gross=gross, profit=profit, fee=fee, payout=checked_sub(gross, fee))


def claim_winnings(
    market: Market, ticket: Ticket, escrow_balance: int
) -> tuple[ClaimResult, Transfer]:
    """Settle one winning ticket; returns the escrow -> user payout transfer."""
    if not market.resolved:
        raise MarketNotResolvedError()
    if ticket.market != market.address:
        raise TicketMarketMismatchError()
    if ticket.claimed:
        raise AlreadyClaimedError()
    if ticket.side != market.winning_side:
        raise TicketSideMismatchError()

    result = compute_claim(market, ticket.amount)
    if escrow_balance < result.payout:
        raise InsufficientEscrowError(result.payout, escrow_balance)
    fees_accrued = market.fees_accrued
    if result.fee:
        fees_accrued = checked_add(fees_accrued, result.fee)

    ticket.claimed = True
    market.fees_accrued = fees_accrued
    transfer = Transfer(
        market.address, ticket.user, result.payout, LedgerEntryType.PAYOUT, from_escrow=True
    )
    return result, transfer


def estimate_payout(market: Market, ticket: Ticket) -> int:
    """Net payout the ticket would receive; 0 for losers and unresolved markets."""
    if not market.resolved or market.winning_side is None:
        return 0
    if ticket.side != market.winning_side:
        return 0
    if market.pool(market.winning_side) == 0:
        return 0
    return compute_claim(market, ticket.amount).payout
