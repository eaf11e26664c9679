"""End-to-end market lifecycles against an in-memory balance book.

Drives the pure domain functions through open -> bet -> freeze -> resolve ->
claim -> withdraw -> close and checks that no lamport is created or lost.
"""

from collections import defaultdict

import pytest
from solders.pubkey import Pubkey

from config.settings import settings
from src.sb_account.domain.models import AuthorityMeta, Transfer
from src.sb_account.domain.rent import minimum_balance
from src.sb_clearing.domain.invariants import verify_market_invariants
from src.sb_clearing.domain.payout import claim_winnings
from src.sb_clearing.domain.reclamation import close_market, withdraw_fees
from src.sb_clearing.domain.resolution import resolve_market
from src.sb_common.enums import LedgerEntryType, Side
from src.sb_common.errors import AlreadyClaimedError, ZeroAmountError
from src.sb_market.domain.layout import MARKET_SPACE
from src.sb_market.domain.lifecycle import freeze_market, initialize_market
from src.sb_market.domain.models import Market
from src.sb_ticket.domain.lifecycle import check_ticket_closable, create_ticket, place_bet
from src.sb_ticket.domain.models import Ticket

AUTHORITY = str(Pubkey.from_bytes(bytes([7]) * 32))
HOST = str(Pubkey.from_bytes(bytes([5]) * 32))
RENT = minimum_balance(MARKET_SPACE)
STARTING_BALANCE = 10**19


class _Book:
    """Balances keyed by address; transfers debit and credit atomically."""

    def __init__(self) -> None:
        self.balances: dict[str, int] = defaultdict(int)

    def apply(self, transfers: list[Transfer]) -> None:
        for t in transfers:
            assert self.balances[t.source] >= t.amount, t
            self.balances[t.source] -= t.amount
            self.balances[t.destination] += t.amount

    def total(self) -> int:
        return sum(self.balances.values())


def _user(n: int) -> str:
    return str(Pubkey.from_bytes(bytes([20 + n]) * 32))


def _open_market(book: _Book, fee_bps: int | None = None) -> Market:
    meta = AuthorityMeta(address="meta", authority=AUTHORITY, next_cycle=0, bump=255)
    market = initialize_market(meta, "Match", "Home", "Away", fee_bps, settings.PROGRAM_ID)
    book.balances[AUTHORITY] = STARTING_BALANCE
    book.apply([Transfer(AUTHORITY, market.address, RENT, LedgerEntryType.RENT_DEPOSIT)])
    return market


def _place(book: _Book, market: Market, stakes: list[tuple[Side, int]]) -> list[Ticket]:
    tickets = []
    for n, (side, amount) in enumerate(stakes):
        user = _user(n)
        book.balances[user] = STARTING_BALANCE
        ticket = create_ticket(market, user, int(side), settings.PROGRAM_ID)
        book.apply([place_bet(market, ticket, user, amount)])
        tickets.append(ticket)
    return tickets


def _settle(book: _Book, market: Market, tickets: list[Ticket]) -> list[int]:
    fees = []
    for ticket in tickets:
        if ticket.side != market.winning_side:
            continue
        result, payout = claim_winnings(market, ticket, book.balances[market.address])
        assert result.fee <= result.profit
        assert result.payout >= ticket.amount
        book.apply([payout])
        fees.append(result.fee)
    assert verify_market_invariants(market, tickets, book.balances[market.address], RENT) == []
    for ticket in tickets:
        check_ticket_closable(market, ticket, ticket.user)
    if market.fees_accrued:
        book.apply(withdraw_fees(market, book.balances[market.address], HOST))
    book.apply(close_market(market, book.balances[market.address], RENT, HOST))
    return fees


STAKE_CONFIGS = [
    ([(Side.YES, 100), (Side.NO, 300)], 1),
    ([(Side.YES, 7), (Side.YES, 11), (Side.NO, 13), (Side.NO, 5)], 0),
    ([(Side.YES, 1), (Side.YES, 1), (Side.YES, 1), (Side.NO, 10)], 0),
    ([(Side.NO, 500)], 0),
    ([(Side.YES, 10**18), (Side.NO, 3 * 10**18)], 0),
    ([(Side.YES, 1_000_000), (Side.NO, 999_999), (Side.NO, 1)], 1),
]


class TestFullLifecycle:
    @pytest.mark.parametrize("stakes,winning_side", STAKE_CONFIGS)
    def test_lamports_conserved_and_escrow_drained(
        self, stakes: list[tuple[Side, int]], winning_side: int
    ) -> None:
        book = _Book()
        market = _open_market(book)
        tickets = _place(book, market, stakes)
        total_before = book.total()
        pool_total = sum(amount for _, amount in stakes)

        assert market.pool_yes + market.pool_no == pool_total
        assert book.balances[market.address] == RENT + pool_total
        assert verify_market_invariants(market, tickets, RENT + pool_total, RENT) == []

        freeze_market(market)
        resolve_market(market, winning_side)
        _settle(book, market, tickets)

        assert book.total() == total_before
        assert book.balances[market.address] == 0
        assert market.fees_accrued == 0
        assert book.balances[AUTHORITY] >= STARTING_BALANCE

    def test_scenario_a_amounts(self) -> None:
        book = _Book()
        market = _open_market(book)
        tickets = _place(book, market, [(Side.YES, 100), (Side.NO, 300)])
        freeze_market(market)
        resolve_market(market, 1)

        fees = _settle(book, market, tickets)

        assert fees == [6]
        assert book.balances[_user(1)] == STARTING_BALANCE - 300 + 394
        assert book.balances[_user(0)] == STARTING_BALANCE - 100
        assert book.balances[HOST] == 6
        assert book.balances[AUTHORITY] == STARTING_BALANCE

    def test_no_double_claim(self) -> None:
        book = _Book()
        market = _open_market(book)
        tickets = _place(book, market, [(Side.YES, 100), (Side.NO, 300)])
        freeze_market(market)
        resolve_market(market, 1)
        _, payout = claim_winnings(market, tickets[1], book.balances[market.address])
        book.apply([payout])

        with pytest.raises(AlreadyClaimedError):
            claim_winnings(market, tickets[1], book.balances[market.address])

    def test_zero_winner_pool_goes_to_fees(self) -> None:
        book = _Book()
        market = _open_market(book)
        _place(book, market, [(Side.NO, 500)])
        freeze_market(market)
        event = resolve_market(market, 0)

        assert event.no_winner
        assert market.fees_accrued == 500
        book.apply(withdraw_fees(market, book.balances[market.address], HOST))
        assert book.balances[market.address] == RENT

    def test_fee_free_market(self) -> None:
        book = _Book()
        market = _open_market(book, fee_bps=0)
        market.host_fee_bps = 0
        tickets = _place(book, market, [(Side.YES, 100), (Side.NO, 300)])
        freeze_market(market)
        resolve_market(market, 0)

        result, payout = claim_winnings(market, tickets[0], book.balances[market.address])
        book.apply([payout])

        assert result.fee == 0
        assert result.payout == result.gross == 400
        with pytest.raises(ZeroAmountError):
            withdraw_fees(market, book.balances[market.address], HOST)
        book.apply(close_market(market, book.balances[market.address], RENT, HOST))
        assert book.balances[market.address] == 0
