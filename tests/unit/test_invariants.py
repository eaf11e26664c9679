"""Tests for per-market conservation checks."""

from solders.pubkey import Pubkey

from src.sb_clearing.domain.invariants import verify_market_invariants
from src.sb_common.enums import Side
from src.sb_market.domain.models import Market
from src.sb_ticket.domain.models import Ticket

AUTHORITY = str(Pubkey.from_bytes(bytes([7]) * 32))
MARKET = str(Pubkey.from_bytes(bytes([8]) * 32))
RENT = 1_000


def _make_market(**overrides: object) -> Market:
    fields: dict[str, object] = dict(
        address=MARKET, authority=AUTHORITY, cycle=0, pool_yes=100, pool_no=300,
        resolved=False, frozen=False, fee_bps=20, host_fee_bps=670, bump=255,
        winning_side=None, fees_accrued=0, title="T", label_yes="Y", label_no="N",
    )
    fields.update(overrides)
    return Market(**fields)  # type: ignore[arg-type]


def _make_tickets() -> list[Ticket]:
    return [
        Ticket(address="a", user="ua", market=MARKET, side=Side.YES, amount=100,
               claimed=False, bump=255),
        Ticket(address="b", user="ub", market=MARKET, side=Side.NO, amount=300,
               claimed=False, bump=255),
    ]


class TestVerifyMarketInvariants:
    def test_open_market_consistent(self) -> None:
        assert verify_market_invariants(_make_market(), _make_tickets(), RENT + 400, RENT) == []

    def test_pool_mismatch(self) -> None:
        market = _make_market(pool_yes=150)
        violations = verify_market_invariants(market, _make_tickets(), RENT + 450, RENT)
        assert any(v.startswith("MKT-1") for v in violations)

    def test_escrow_mismatch(self) -> None:
        violations = verify_market_invariants(_make_market(), _make_tickets(), RENT + 399, RENT)
        assert any(v.startswith("MKT-2") for v in violations)
        assert any(v.startswith("MKT-3") for v in violations)

    def test_after_claim_only_coverage_applies(self) -> None:
        market = _make_market(resolved=True, frozen=True, winning_side=Side.NO, fees_accrued=6)
        tickets = _make_tickets()
        tickets[1].claimed = True
        assert verify_market_invariants(market, tickets, RENT + 6, RENT) == []

    def test_resolved_before_claims(self) -> None:
        market = _make_market(resolved=True, frozen=True, winning_side=Side.NO)
        assert verify_market_invariants(market, _make_tickets(), RENT + 400, RENT) == []

    def test_unpaid_winner_not_covered(self) -> None:
        market = _make_market(resolved=True, frozen=True, winning_side=Side.NO)
        violations = verify_market_invariants(market, _make_tickets(), RENT + 300, RENT)
        assert any(v.startswith("MKT-3") for v in violations)

    def test_claimed_loser(self) -> None:
        market = _make_market(resolved=True, frozen=True, winning_side=Side.NO)
        tickets = _make_tickets()
        tickets[0].claimed = True
        violations = verify_market_invariants(market, tickets, RENT + 400, RENT)
        assert any(v.startswith("MKT-4") for v in violations)

    def test_zero_winner_market(self) -> None:
        market = _make_market(
            pool_yes=0, pool_no=0, resolved=True, frozen=True,
            winning_side=Side.YES, fees_accrued=500,
        )
        tickets = [
            Ticket(address="b", user="ub", market=MARKET, side=Side.NO, amount=500,
                   claimed=False, bump=255),
        ]
        assert verify_market_invariants(market, tickets, RENT + 500, RENT) == []
