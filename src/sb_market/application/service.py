"""MarketApplicationService — market creation, freezing and reads.

Mutating operations run inside `unit_of_work(db)`: the market row is loaded
FOR UPDATE, mutated by the pure domain functions, written back, and the
rent deposit is applied in the same transaction.
"""

import base64
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sb_account.application.rent_policy import record_rent
from src.sb_account.application.schemas import LayoutResponse
from src.sb_account.application.service import open_authority_meta
from src.sb_account.domain.addressing import authority_meta_address, market_address
from src.sb_account.domain.models import Transfer
from src.sb_account.domain.repository import AccountRepositoryProtocol
from src.sb_account.infrastructure.persistence import AccountRepository
from src.sb_common.database import unit_of_work
from src.sb_common.enums import LedgerEntryType
from src.sb_common.errors import AccountNotFoundError
from src.sb_gateway.auth.capabilities import assert_market_operator
from src.sb_market.application.schemas import (
    InitializeMarketRequest,
    MarketDetail,
    MarketListResponse,
    cursor_decode,
    cursor_encode,
)
from src.sb_market.domain.layout import MARKET_SPACE, encode_market
from src.sb_market.domain.lifecycle import freeze_market, initialize_market
from src.sb_market.domain.models import Market
from src.sb_market.domain.repository import MarketRepositoryProtocol
from src.sb_market.infrastructure.persistence import MarketRepository

logger = logging.getLogger(__name__)

REFERENCE_TYPE = "MARKET"


async def load_market(
    repo: MarketRepositoryProtocol, db: AsyncSession, address: str, for_update: bool = False
) -> Market:
    market = await repo.get_market(db, address, for_update=for_update)
    if market is None:
        raise AccountNotFoundError("Market", address)
    return market


class MarketApplicationService:
    def __init__(
        self,
        repo: MarketRepositoryProtocol | None = None,
        account_repo: AccountRepositoryProtocol | None = None,
    ) -> None:
        self._repo: MarketRepositoryProtocol = repo or MarketRepository()
        self._accounts: AccountRepositoryProtocol = account_repo or AccountRepository()

    async def initialize_market(
        self, db: AsyncSession, authority: str, req: InitializeMarketRequest
    ) -> MarketDetail:
        async with unit_of_work(db):
            meta_address, _ = authority_meta_address(authority, settings.PROGRAM_ID)
            meta = await self._accounts.get_authority_meta(db, meta_address, for_update=True)
            if meta is None:
                # a new operator's first market opens its cycle counter too
                meta = await open_authority_meta(self._accounts, db, authority)
            market = initialize_market(
                meta, req.title, req.label_yes, req.label_no, req.fee_bps, settings.PROGRAM_ID
            )
            await self._repo.insert_market(db, market)
            await self._accounts.update_authority_meta(db, meta)
            rent = record_rent(MARKET_SPACE)
            await self._accounts.apply_transfers(
                db,
                [Transfer(authority, market.address, rent, LedgerEntryType.RENT_DEPOSIT)],
                REFERENCE_TYPE,
                market.address,
            )
        logger.info(
            "Market initialized: %s authority=%s cycle=%d fee_bps=%d",
            market.address, authority, market.cycle, market.fee_bps,
        )
        return MarketDetail.from_domain(market)

    async def freeze_market(
        self, db: AsyncSession, identity: str, address: str
    ) -> MarketDetail:
        async with unit_of_work(db):
            market = await load_market(self._repo, db, address, for_update=True)
            assert_market_operator(market, identity)
            freeze_market(market)
            await self._repo.update_market(db, market)
        logger.info("Market frozen: %s", address)
        return MarketDetail.from_domain(market)

    async def get_market(self, db: AsyncSession, address: str) -> MarketDetail:
        return MarketDetail.from_domain(await load_market(self._repo, db, address))

    async def get_current_market(self, db: AsyncSession, authority: str) -> MarketDetail:
        """The operator's most recent market, cycle next_cycle - 1."""
        meta_address, _ = authority_meta_address(authority, settings.PROGRAM_ID)
        meta = await self._accounts.get_authority_meta(db, meta_address)
        if meta is None:
            raise AccountNotFoundError("AuthorityMeta", meta_address)
        if meta.next_cycle == 0:
            raise AccountNotFoundError("Market", f"no cycle opened by {authority}")
        address, _ = market_address(authority, meta.next_cycle - 1, settings.PROGRAM_ID)
        return MarketDetail.from_domain(await load_market(self._repo, db, address))

    async def list_markets(
        self,
        db: AsyncSession,
        authority: str | None,
        cursor: str | None,
        limit: int,
    ) -> MarketListResponse:
        cursor_ts, cursor_address = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without COUNT(*)
        markets = await self._repo.list_markets(
            db, authority, cursor_ts, cursor_address, limit + 1
        )
        has_more = len(markets) > limit
        page = markets[:limit]

        items = [MarketDetail.from_domain(m) for m in page]
        next_cursor = cursor_encode(page[-1]) if has_more and page else None
        return MarketListResponse(items=items, next_cursor=next_cursor, has_more=has_more)

    async def get_market_layout(self, db: AsyncSession, address: str) -> LayoutResponse:
        market = await load_market(self._repo, db, address)
        return LayoutResponse(
            address=address,
            account_type="BetMarket",
            space=MARKET_SPACE,
            rent_minimum=record_rent(MARKET_SPACE),
            data_base64=base64.b64encode(encode_market(market)).decode(),
        )
