"""Ticket state machine: creation, staking and closure guard.

    (none) --create--> OPEN --bet*--> OPEN
    OPEN (winner) --claim--> CLAIMED --close--> (deleted)
    OPEN (loser)  ------------------------close--> (deleted)

All checks run before any field is touched, so a rejected call leaves both
records exactly as they were.
"""

from src.sb_account.domain.addressing import ticket_address
from src.sb_account.domain.models import Transfer
from src.sb_common.enums import LedgerEntryType, Side
from src.sb_common.errors import (
    AlreadyClaimedError,
    AuthorityCannotBetError,
    CannotCloseActiveTicketError,
    InvalidSideError,
    MarketAlreadyResolvedError,
    MarketFrozenError,
    MarketNotResolvedError,
    TicketMarketMismatchError,
    TicketSideMismatchError,
    UnauthorizedError,
    ZeroAmountError,
)
from src.sb_common.lamports import checked_add
from src.sb_market.domain.models import Market
from src.sb_ticket.domain.models import Ticket


def parse_side(side: int) -> Side:
    try:
        return Side(side)
    except ValueError:
        raise InvalidSideError(side) from None


def create_ticket(market: Market, user: str, side: int, program_id: str) -> Ticket:
    """Open the (market, user) ticket on one side with nothing staked."""
    chosen = parse_side(side)
    if market.resolved:
        raise MarketAlreadyResolvedError()
    if user == market.authority:
        raise AuthorityCannotBetError()
    address, bump = ticket_address(market.address, user, program_id)
    return Ticket(
        address=address,
        user=user,
        market=market.address,
        side=chosen,
        amount=0,
        claimed=False,
        bump=bump,
    )


def check_ticket_side(ticket: Ticket, side: int) -> None:
    """A ticket is bound to the side it was opened on."""
    if ticket.side != parse_side(side):
        raise TicketSideMismatchError("Ticket already created with opposite side")


def _check_ownership(market: Market, ticket: Ticket, user: str) -> None:
    if ticket.market != market.address:
        raise TicketMarketMismatchError()
    if ticket.user != user:
        raise UnauthorizedError("Ticket belongs to another user")


def place_bet(market: Market, ticket: Ticket, user: str, amount: int) -> Transfer:
    """Add `amount` to the ticket and its side's pool.

    Returns the stake transfer (user -> market escrow) for the caller to
    apply in the same unit of work.
    """
    if amount == 0:
        raise ZeroAmountError()
    if market.resolved:
        raise MarketAlreadyResolvedError()
    if market.frozen:
        raise MarketFrozenError()
    if ticket.claimed:
        raise AlreadyClaimedError()
    if user == market.authority:
        raise AuthorityCannotBetError()
    _check_ownership(market, ticket, user)

    new_amount = checked_add(ticket.amount, amount)
    new_pool = checked_add(market.pool(ticket.side), amount)

    ticket.amount = new_amount
    if ticket.side is Side.YES:
        market.pool_yes = new_pool
    else:
        market.pool_no = new_pool
    return Transfer(user, market.address, amount, LedgerEntryType.STAKE)


def is_active(market: Market, ticket: Ticket) -> bool:
    """An unclaimed winning ticket must claim before it can close."""
    return (
        market.winning_side is not None
        and ticket.side == market.winning_side
        and not ticket.claimed
    )


def check_ticket_closable(market: Market, ticket: Ticket, user: str) -> None:
    if not market.resolved:
        raise MarketNotResolvedError()
    _check_ownership(market, ticket, user)
    if is_active(market, ticket):
        raise CannotCloseActiveTicketError()
