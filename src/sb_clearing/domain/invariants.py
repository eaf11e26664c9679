"""Per-market conservation checks.

Returns human-readable violations instead of raising, so an operator can
audit a market without aborting anything.

  MKT-1  before resolution each pool equals the sum of its side's tickets
  MKT-2  while no winner has been paid, escrow == rent + pools + fees
  MKT-3  escrow covers rent + fees + the gross of every unpaid winner
  MKT-4  only winning tickets are ever marked claimed
"""

import logging

from src.sb_clearing.domain.payout import compute_claim
from src.sb_common.enums import Side
from src.sb_market.domain.models import Market
from src.sb_ticket.domain.models import Ticket

logger = logging.getLogger(__name__)


def verify_market_invariants(
    market: Market, tickets: list[Ticket], escrow_balance: int, rent_minimum: int
) -> list[str]:
    violations: list[str] = []
    pools: int | None = market.pool_yes + market.pool_no

    if not market.resolved:
        for side in Side:
            staked = sum(t.amount for t in tickets if t.side == side)
            if staked != market.pool(side):
                violations.append(
                    f"MKT-1 violated: market={market.address} pool_{side.name.lower()}="
                    f"{market.pool(side)} != tickets={staked}"
                )
        unpaid_gross = market.pool_yes + market.pool_no
    else:
        winner = market.winning_side
        for t in tickets:
            if t.claimed and t.side != winner:
                violations.append(
                    f"MKT-4 violated: ticket={t.address} claimed on losing side {t.side.name}"
                )
        unpaid = [t for t in tickets if t.side == winner and not t.claimed]
        if winner is None or market.pool(winner) == 0:
            unpaid_gross = 0
        else:
            unpaid_gross = sum(compute_claim(market, t.amount).gross for t in unpaid)
        untouched = winner is not None and sum(t.amount for t in unpaid) == market.pool(winner)
        if not untouched:
            # Some winner has been paid; only the coverage bound still holds
            pools = None

    if pools is not None:
        expected = rent_minimum + pools + market.fees_accrued
        if escrow_balance != expected:
            violations.append(
                f"MKT-2 violated: market={market.address} escrow={escrow_balance} "
                f"!= rent({rent_minimum}) + pools({pools}) + fees({market.fees_accrued})"
            )

    required = rent_minimum + market.fees_accrued + unpaid_gross
    if escrow_balance < required:
        violations.append(
            f"MKT-3 violated: market={market.address} escrow={escrow_balance} "
            f"< rent({rent_minimum}) + fees({market.fees_accrued}) + unpaid({unpaid_gross})"
        )

    if not violations:
        logger.debug(
            "Invariants OK: market=%s, escrow=%d, fees=%d",
            market.address, escrow_balance, market.fees_accrued,
        )
    return violations
