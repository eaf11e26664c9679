"""ClearingService — resolution, claims and reclamation of market escrows.

Each instruction is one `unit_of_work(db)`. The market row (and the ticket,
where one is involved) is locked FOR UPDATE before the escrow balance is
read, so the domain checks see the same balance the transfers debit.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sb_account.application.rent_policy import record_rent
from src.sb_account.domain.repository import AccountRepositoryProtocol
from src.sb_account.infrastructure.persistence import AccountRepository
from src.sb_clearing.application.schemas import (
    ClaimResponse,
    InvariantReport,
    QuoteResponse,
    ReclamationResponse,
    ResolveResponse,
    TransferItem,
)
from src.sb_clearing.domain.invariants import verify_market_invariants
from src.sb_clearing.domain.payout import claim_winnings, estimate_payout
from src.sb_clearing.domain.reclamation import close_market, withdraw_fees
from src.sb_clearing.domain.resolution import resolve_market
from src.sb_clearing.infrastructure.event_log import publish_event, write_wal_event
from src.sb_common.database import unit_of_work
from src.sb_common.lamports import lamports_to_display
from src.sb_gateway.auth.capabilities import assert_market_operator, assert_platform_host
from src.sb_market.application.schemas import MarketDetail
from src.sb_market.application.service import load_market
from src.sb_market.domain.layout import MARKET_SPACE
from src.sb_market.domain.repository import MarketRepositoryProtocol
from src.sb_market.infrastructure.persistence import MarketRepository
from src.sb_ticket.application.service import load_ticket
from src.sb_ticket.domain.repository import TicketRepositoryProtocol
from src.sb_ticket.infrastructure.persistence import TicketRepository

logger = logging.getLogger(__name__)

REFERENCE_TYPE = "MARKET"


class ClearingService:
    def __init__(
        self,
        market_repo: MarketRepositoryProtocol | None = None,
        ticket_repo: TicketRepositoryProtocol | None = None,
        account_repo: AccountRepositoryProtocol | None = None,
    ) -> None:
        self._markets: MarketRepositoryProtocol = market_repo or MarketRepository()
        self._tickets: TicketRepositoryProtocol = ticket_repo or TicketRepository()
        self._accounts: AccountRepositoryProtocol = account_repo or AccountRepository()

    async def resolve_market(
        self, db: AsyncSession, identity: str, address: str, winning_side: int
    ) -> ResolveResponse:
        async with unit_of_work(db):
            market = await load_market(self._markets, db, address, for_update=True)
            assert_market_operator(market, identity)
            event = resolve_market(market, winning_side)
            await self._markets.update_market(db, market)
            await write_wal_event(db, event)
        logger.info(
            "Market resolved: %s winning_side=%s no_winner=%s pools=%d/%d fees=%d",
            address, event.winning_side.name, event.no_winner,
            event.pool_yes, event.pool_no, event.fees_accrued,
        )
        await publish_event(event)
        return ResolveResponse(market=MarketDetail.from_domain(market), no_winner=event.no_winner)

    async def claim_winnings(
        self, db: AsyncSession, user: str, address: str
    ) -> ClaimResponse:
        async with unit_of_work(db):
            market = await load_market(self._markets, db, address, for_update=True)
            ticket = await load_ticket(self._tickets, db, address, user, for_update=True)
            escrow = await self._accounts.get_balance(db, market.address)
            result, payout = claim_winnings(market, ticket, escrow)
            await self._accounts.apply_transfers(db, [payout], REFERENCE_TYPE, market.address)
            await self._tickets.update_ticket(db, ticket)
            await self._markets.update_market(db, market)
        logger.info(
            "Winnings claimed: market=%s ticket=%s gross=%d fee=%d payout=%d",
            address, ticket.address, result.gross, result.fee, result.payout,
        )
        return ClaimResponse.from_result(ticket.address, result)

    async def quote_payout(self, db: AsyncSession, user: str, address: str) -> QuoteResponse:
        market = await load_market(self._markets, db, address)
        ticket = await load_ticket(self._tickets, db, address, user)
        estimate = estimate_payout(market, ticket)
        return QuoteResponse(
            ticket=ticket.address,
            side=int(ticket.side),
            amount=ticket.amount,
            claimed=ticket.claimed,
            estimated_payout=estimate,
            estimated_payout_display=lamports_to_display(estimate),
        )

    async def withdraw_fees(
        self, db: AsyncSession, identity: str, address: str
    ) -> ReclamationResponse:
        async with unit_of_work(db):
            market = await load_market(self._markets, db, address, for_update=True)
            assert_platform_host(identity)
            escrow = await self._accounts.get_balance(db, market.address)
            transfers = withdraw_fees(market, escrow, settings.HOST_IDENTITY)
            await self._accounts.apply_transfers(db, transfers, REFERENCE_TYPE, market.address)
            await self._markets.update_market(db, market)
        total = sum(t.amount for t in transfers)
        logger.info("Fees withdrawn: market=%s total=%d", address, total)
        return ReclamationResponse(
            market=address,
            transfers=[TransferItem.from_domain(t) for t in transfers],
            total=total,
            closed=False,
        )

    async def close_market(
        self, db: AsyncSession, identity: str, address: str
    ) -> ReclamationResponse:
        async with unit_of_work(db):
            market = await load_market(self._markets, db, address, for_update=True)
            assert_platform_host(identity)
            escrow = await self._accounts.get_balance(db, market.address)
            transfers = close_market(
                market, escrow, record_rent(MARKET_SPACE), settings.HOST_IDENTITY
            )
            await self._accounts.apply_transfers(db, transfers, REFERENCE_TYPE, market.address)
            await self._markets.delete_market(db, market.address)
            await self._accounts.drop_balance(db, market.address)
        total = sum(t.amount for t in transfers)
        logger.info("Market closed: %s drained=%d", address, total)
        return ReclamationResponse(
            market=address,
            transfers=[TransferItem.from_domain(t) for t in transfers],
            total=total,
            closed=True,
        )

    async def verify_market(self, db: AsyncSession, address: str) -> InvariantReport:
        market = await load_market(self._markets, db, address)
        tickets = await self._tickets.list_all_tickets(db, address)
        escrow = await self._accounts.get_balance(db, address)
        rent = record_rent(MARKET_SPACE)
        violations = verify_market_invariants(market, tickets, escrow, rent)
        if violations:
            logger.warning("Invariant violations on market %s: %s", address, violations)
        return InvariantReport(
            market=address,
            escrow_balance=escrow,
            rent_minimum=rent,
            ticket_count=len(tickets),
            ok=not violations,
            violations=violations,
        )
