"""TicketApplicationService — ticket creation, betting and closure.

Every mutating call is one `unit_of_work(db)`: market and ticket rows are
locked FOR UPDATE, so concurrent bets on one market serialize on the
market row and the pools always equal the sum of their tickets.
"""

import base64
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sb_account.application.rent_policy import record_rent
from src.sb_account.application.schemas import LayoutResponse
from src.sb_account.domain.addressing import ticket_address
from src.sb_account.domain.models import Transfer
from src.sb_account.domain.repository import AccountRepositoryProtocol
from src.sb_account.infrastructure.persistence import AccountRepository
from src.sb_common.database import unit_of_work
from src.sb_common.enums import LedgerEntryType
from src.sb_common.errors import AccountNotFoundError
from src.sb_common.lamports import lamports_to_display
from src.sb_market.application.service import load_market
from src.sb_market.domain.repository import MarketRepositoryProtocol
from src.sb_market.infrastructure.persistence import MarketRepository
from src.sb_ticket.application.schemas import (
    BetResponse,
    CloseTicketResponse,
    TicketDetail,
    TicketListResponse,
    cursor_decode,
    cursor_encode,
)
from src.sb_ticket.domain.layout import TICKET_SPACE, encode_ticket
from src.sb_ticket.domain.lifecycle import (
    check_ticket_closable,
    check_ticket_side,
    create_ticket,
    place_bet,
)
from src.sb_ticket.domain.models import Ticket
from src.sb_ticket.domain.repository import TicketRepositoryProtocol
from src.sb_ticket.infrastructure.persistence import TicketRepository

logger = logging.getLogger(__name__)

REFERENCE_TYPE = "TICKET"


async def load_ticket(
    repo: TicketRepositoryProtocol,
    db: AsyncSession,
    market_address: str,
    user: str,
    for_update: bool = False,
) -> Ticket:
    address, _ = ticket_address(market_address, user, settings.PROGRAM_ID)
    ticket = await repo.get_ticket(db, address, for_update=for_update)
    if ticket is None:
        raise AccountNotFoundError("Ticket", address)
    return ticket


def _rent_deposit(ticket: Ticket) -> Transfer:
    return Transfer(
        ticket.user, ticket.address, record_rent(TICKET_SPACE), LedgerEntryType.RENT_DEPOSIT
    )


class TicketApplicationService:
    def __init__(
        self,
        repo: TicketRepositoryProtocol | None = None,
        market_repo: MarketRepositoryProtocol | None = None,
        account_repo: AccountRepositoryProtocol | None = None,
    ) -> None:
        self._repo: TicketRepositoryProtocol = repo or TicketRepository()
        self._markets: MarketRepositoryProtocol = market_repo or MarketRepository()
        self._accounts: AccountRepositoryProtocol = account_repo or AccountRepository()

    async def create_ticket(
        self, db: AsyncSession, user: str, market_address: str, side: int
    ) -> TicketDetail:
        async with unit_of_work(db):
            market = await load_market(self._markets, db, market_address, for_update=True)
            ticket = create_ticket(market, user, side, settings.PROGRAM_ID)
            await self._repo.insert_ticket(db, ticket)
            await self._accounts.apply_transfers(
                db, [_rent_deposit(ticket)], REFERENCE_TYPE, ticket.address
            )
        logger.info(
            "Ticket created: %s market=%s user=%s side=%s",
            ticket.address, market_address, user, ticket.side.name,
        )
        return TicketDetail.from_domain(ticket)

    async def place_bet(
        self, db: AsyncSession, user: str, market_address: str, amount: int
    ) -> BetResponse:
        async with unit_of_work(db):
            market = await load_market(self._markets, db, market_address, for_update=True)
            ticket = await load_ticket(self._repo, db, market_address, user, for_update=True)
            stake = place_bet(market, ticket, user, amount)
            await self._accounts.apply_transfers(db, [stake], REFERENCE_TYPE, ticket.address)
            await self._repo.update_ticket(db, ticket)
            await self._markets.update_market(db, market)
        logger.info(
            "Bet placed: market=%s user=%s side=%s amount=%d pools=%d/%d",
            market_address, user, ticket.side.name, amount, market.pool_yes, market.pool_no,
        )
        return BetResponse(
            ticket=TicketDetail.from_domain(ticket),
            pool_yes=market.pool_yes,
            pool_no=market.pool_no,
            staked=amount,
        )

    async def bet(
        self, db: AsyncSession, user: str, market_address: str, side: int, amount: int
    ) -> BetResponse:
        """Stake on `side`, opening the caller's ticket first when it has none.

        Ticket rent and stake are paid in the same transaction, so a failed
        stake leaves no ticket behind.
        """
        async with unit_of_work(db):
            market = await load_market(self._markets, db, market_address, for_update=True)
            address, _ = ticket_address(market_address, user, settings.PROGRAM_ID)
            ticket = await self._repo.get_ticket(db, address, for_update=True)
            created = ticket is None
            if ticket is None:
                ticket = create_ticket(market, user, side, settings.PROGRAM_ID)
            else:
                check_ticket_side(ticket, side)
            stake = place_bet(market, ticket, user, amount)
            if created:
                await self._repo.insert_ticket(db, ticket)
                transfers = [_rent_deposit(ticket), stake]
            else:
                await self._repo.update_ticket(db, ticket)
                transfers = [stake]
            await self._accounts.apply_transfers(db, transfers, REFERENCE_TYPE, ticket.address)
            await self._markets.update_market(db, market)
        logger.info(
            "Bet placed: market=%s user=%s side=%s amount=%d created=%s",
            market_address, user, ticket.side.name, amount, created,
        )
        return BetResponse(
            ticket=TicketDetail.from_domain(ticket),
            pool_yes=market.pool_yes,
            pool_no=market.pool_no,
            staked=amount,
            ticket_created=created,
        )

    async def close_ticket(
        self, db: AsyncSession, user: str, market_address: str
    ) -> CloseTicketResponse:
        async with unit_of_work(db):
            market = await load_market(self._markets, db, market_address)
            ticket = await load_ticket(self._repo, db, market_address, user, for_update=True)
            check_ticket_closable(market, ticket, user)
            refund = await self._accounts.get_balance(db, ticket.address)
            await self._accounts.apply_transfers(
                db,
                [
                    Transfer(
                        ticket.address,
                        user,
                        refund,
                        LedgerEntryType.RENT_REFUND,
                        from_escrow=True,
                    )
                ],
                REFERENCE_TYPE,
                ticket.address,
            )
            await self._repo.delete_ticket(db, ticket.address)
            await self._accounts.drop_balance(db, ticket.address)
        logger.info("Ticket closed: %s refunded=%d", ticket.address, refund)
        return CloseTicketResponse(
            address=ticket.address,
            refunded=refund,
            refunded_display=lamports_to_display(refund),
        )

    async def get_my_ticket(
        self, db: AsyncSession, user: str, market_address: str
    ) -> TicketDetail:
        return TicketDetail.from_domain(
            await load_ticket(self._repo, db, market_address, user)
        )

    async def get_ticket_layout(
        self, db: AsyncSession, user: str, market_address: str
    ) -> LayoutResponse:
        ticket = await load_ticket(self._repo, db, market_address, user)
        return LayoutResponse(
            address=ticket.address,
            account_type="BetTicket",
            space=TICKET_SPACE,
            rent_minimum=record_rent(TICKET_SPACE),
            data_base64=base64.b64encode(encode_ticket(ticket)).decode(),
        )

    async def list_tickets(
        self, db: AsyncSession, market_address: str, cursor: str | None, limit: int
    ) -> TicketListResponse:
        await load_market(self._markets, db, market_address)
        tickets = await self._repo.list_tickets(
            db, market_address, cursor_decode(cursor), limit + 1
        )
        has_more = len(tickets) > limit
        page = tickets[:limit]
        return TicketListResponse(
            items=[TicketDetail.from_domain(t) for t in page],
            ticket_count=await self._repo.count_tickets(db, market_address),
            next_cursor=cursor_encode(page[-1].address) if has_more and page else None,
            has_more=has_more,
        )
