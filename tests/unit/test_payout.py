"""Tests for sb_clearing.domain.payout: claims and quotes."""

import pytest
from solders.pubkey import Pubkey

from src.sb_clearing.domain.payout import claim_winnings, compute_claim, estimate_payout
from src.sb_common.enums import LedgerEntryType, Side
from src.sb_common.errors import (
    AlreadyClaimedError,
    InsufficientEscrowError,
    MarketNotResolvedError,
    MathOverflowError,
    TicketMarketMismatchError,
    TicketSideMismatchError,
)
from src.sb_market.domain.models import Market
from src.sb_ticket.domain.models import Ticket

AUTHORITY = str(Pubkey.from_bytes(bytes([7]) * 32))
MARKET = str(Pubkey.from_bytes(bytes([8]) * 32))
USER = str(Pubkey.from_bytes(bytes([9]) * 32))
RENT = 1_000


def _make_market(**overrides: object) -> Market:
    fields: dict[str, object] = dict(
        address=MARKET, authority=AUTHORITY, cycle=0, pool_yes=100, pool_no=300,
        resolved=True, frozen=True, fee_bps=20, host_fee_bps=670, bump=255,
        winning_side=Side.NO, fees_accrued=0, title="T", label_yes="Y", label_no="N",
    )
    fields.update(overrides)
    return Market(**fields)  # type: ignore[arg-type]


def _make_ticket(side: Side = Side.NO, amount: int = 300, claimed: bool = False) -> Ticket:
    return Ticket(
        address="ticket", user=USER, market=MARKET, side=side,
        amount=amount, claimed=claimed, bump=255,
    )


class TestComputeClaim:
    def test_sole_winner(self) -> None:
        result = compute_claim(_make_market(), 300)
        assert (result.gross, result.profit, result.fee, result.payout) == (400, 100, 6, 394)

    def test_pro_rata_floor(self) -> None:
        market = _make_market(pool_yes=7, pool_no=3, winning_side=Side.NO)
        result = compute_claim(market, 1)
        # floor(1 * 10 / 3) = 3
        assert result.gross == 3
        assert result.profit == 2
        assert result.fee == 0

    def test_empty_winning_pool(self) -> None:
        market = _make_market(pool_yes=0, pool_no=0, winning_side=Side.YES, fees_accrued=500)
        with pytest.raises(MathOverflowError):
            compute_claim(market, 0)

    def test_fee_free_market_returns_gross(self) -> None:
        market = _make_market(fee_bps=0, host_fee_bps=0)
        result = compute_claim(market, 300)
        assert result.fee == 0
        assert result.payout == result.gross == 400


class TestClaimWinnings:
    def test_claim(self) -> None:
        market = _make_market()
        ticket = _make_ticket()
        result, transfer = claim_winnings(market, ticket, RENT + 400)

        assert result.payout == 394
        assert ticket.claimed
        assert market.fees_accrued == 6
        assert (market.pool_yes, market.pool_no) == (100, 300)
        assert transfer.source == MARKET
        assert transfer.destination == USER
        assert transfer.amount == 394
        assert transfer.entry_type is LedgerEntryType.PAYOUT
        assert transfer.from_escrow

    def test_not_resolved(self) -> None:
        market = _make_market(resolved=False, winning_side=None)
        with pytest.raises(MarketNotResolvedError):
            claim_winnings(market, _make_ticket(), RENT + 400)

    def test_market_mismatch(self) -> None:
        ticket = _make_ticket()
        ticket.market = AUTHORITY
        with pytest.raises(TicketMarketMismatchError):
            claim_winnings(_make_market(), ticket, RENT + 400)

    def test_double_claim(self) -> None:
        market = _make_market()
        ticket = _make_ticket()
        claim_winnings(market, ticket, RENT + 400)
        with pytest.raises(AlreadyClaimedError):
            claim_winnings(market, ticket, RENT + 6)
        assert market.fees_accrued == 6

    def test_loser_cannot_claim(self) -> None:
        with pytest.raises(TicketSideMismatchError):
            claim_winnings(_make_market(), _make_ticket(Side.YES, 100), RENT + 400)

    def test_insufficient_escrow_leaves_state(self) -> None:
        market = _make_market()
        ticket = _make_ticket()
        with pytest.raises(InsufficientEscrowError):
            claim_winnings(market, ticket, 393)
        assert not ticket.claimed
        assert market.fees_accrued == 0

    def test_unfunded_ticket_on_empty_winning_side(self) -> None:
        # Nobody staked YES; resolution moved the NO pool into fees.
        market = _make_market(pool_yes=0, pool_no=0, winning_side=Side.YES, fees_accrued=500)
        ticket = _make_ticket(Side.YES, amount=0)
        with pytest.raises(MathOverflowError):
            claim_winnings(market, ticket, RENT + 500)
        assert not ticket.claimed

    def test_fee_free_claim_adds_no_fee(self) -> None:
        market = _make_market(fee_bps=0, host_fee_bps=0)
        result, transfer = claim_winnings(market, _make_ticket(), RENT + 400)
        assert result.fee == 0
        assert transfer.amount == 400
        assert market.fees_accrued == 0


class TestEstimatePayout:
    def test_winner(self) -> None:
        assert estimate_payout(_make_market(), _make_ticket()) == 394

    def test_loser(self) -> None:
        assert estimate_payout(_make_market(), _make_ticket(Side.YES, 100)) == 0

    def test_unresolved(self) -> None:
        market = _make_market(resolved=False, winning_side=None)
        assert estimate_payout(market, _make_ticket()) == 0

    def test_empty_winning_pool(self) -> None:
        market = _make_market(pool_yes=0, pool_no=0, winning_side=Side.YES, fees_accrued=500)
        assert estimate_payout(market, _make_ticket(Side.YES, 0)) == 0

    def test_does_not_mutate(self) -> None:
        market = _make_market()
        ticket = _make_ticket()
        estimate_payout(market, ticket)
        assert not ticket.claimed
        assert market.fees_accrued == 0
