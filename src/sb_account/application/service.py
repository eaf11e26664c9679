"""AccountApplicationService — balances, ledger, authority metas, faucet.

init_authority_meta and airdrop mutate state and run in `unit_of_work(db)`.
Other operations are read-only and run without explicit transaction.
"""

import base64
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.sb_account.application.rent_policy import record_rent
from src.sb_account.application.schemas import (
    AuthorityMetaResponse,
    BalanceResponse,
    LayoutResponse,
    LedgerEntryItem,
    LedgerResponse,
    cursor_decode,
    cursor_encode,
)
from src.sb_account.domain.addressing import authority_meta_address, identity_bytes
from src.sb_account.domain.layout import AUTHORITY_META_SPACE, encode_authority_meta
from src.sb_account.domain.models import AuthorityMeta, Transfer
from src.sb_account.domain.repository import AccountRepositoryProtocol
from src.sb_account.infrastructure.persistence import AccountRepository
from src.sb_common.database import unit_of_work
from src.sb_common.enums import LedgerEntryType
from src.sb_common.errors import AccountNotFoundError, AirdropDisabledError
from src.sb_common.lamports import checked_add, lamports_to_display

logger = logging.getLogger(__name__)

REFERENCE_TYPE = "AUTHORITY_META"


async def open_authority_meta(
    repo: AccountRepositoryProtocol, db: AsyncSession, authority: str
) -> AuthorityMeta:
    """Insert the operator's cycle counter and charge its rent.

    Runs inside the caller's unit of work; a second insert for the same
    authority fails with AccountAlreadyExists.
    """
    address, bump = authority_meta_address(authority, settings.PROGRAM_ID)
    meta = AuthorityMeta(address=address, authority=authority, next_cycle=0, bump=bump)
    await repo.insert_authority_meta(db, meta)
    await repo.apply_transfers(
        db,
        [
            Transfer(
                authority,
                address,
                record_rent(AUTHORITY_META_SPACE),
                LedgerEntryType.RENT_DEPOSIT,
            )
        ],
        REFERENCE_TYPE,
        address,
    )
    logger.info("Authority meta created: %s authority=%s", address, authority)
    return meta


class AccountApplicationService:
    def __init__(self, repo: AccountRepositoryProtocol | None = None) -> None:
        self._repo: AccountRepositoryProtocol = repo or AccountRepository()

    async def init_authority_meta(
        self, db: AsyncSession, authority: str
    ) -> AuthorityMetaResponse:
        async with unit_of_work(db):
            meta = await open_authority_meta(self._repo, db, authority)
        return AuthorityMetaResponse.from_domain(meta)

    async def _load_meta(self, db: AsyncSession, authority: str) -> AuthorityMeta:
        address, _ = authority_meta_address(authority, settings.PROGRAM_ID)
        meta = await self._repo.get_authority_meta(db, address)
        if meta is None:
            raise AccountNotFoundError("AuthorityMeta", address)
        return meta

    async def get_authority_meta(
        self, db: AsyncSession, authority: str
    ) -> AuthorityMetaResponse:
        return AuthorityMetaResponse.from_domain(await self._load_meta(db, authority))

    async def get_authority_meta_layout(
        self, db: AsyncSession, authority: str
    ) -> LayoutResponse:
        meta = await self._load_meta(db, authority)
        return LayoutResponse(
            address=meta.address,
            account_type="AuthorityMeta",
            space=AUTHORITY_META_SPACE,
            rent_minimum=record_rent(AUTHORITY_META_SPACE),
            data_base64=base64.b64encode(encode_authority_meta(meta)).decode(),
        )

    async def get_balance(self, db: AsyncSession, address: str) -> BalanceResponse:
        lamports = await self._repo.get_balance(db, address)
        return BalanceResponse.from_lamports(address, lamports)

    async def airdrop(self, db: AsyncSession, identity: str, lamports: int) -> BalanceResponse:
        if not settings.AIRDROP_ENABLED:
            raise AirdropDisabledError()
        identity_bytes(identity)
        async with unit_of_work(db):
            # balances are NUMERIC(20, 0); keep them inside u64
            checked_add(await self._repo.get_balance(db, identity), lamports)
            entry = await self._repo.credit(
                db, identity, lamports, LedgerEntryType.AIRDROP, "AIRDROP", None
            )
        logger.info("Airdrop: %s +%d", identity, lamports)
        return BalanceResponse.from_lamports(identity, entry.balance_after)

    async def list_ledger(
        self,
        db: AsyncSession,
        address: str,
        cursor: str | None,
        limit: int,
        entry_type: str | None,
    ) -> LedgerResponse:
        cursor_id = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        entries = await self._repo.list_ledger_entries(
            db, address, cursor_id, limit + 1, entry_type
        )
        has_more = len(entries) > limit
        page = entries[:limit]

        items = [
            LedgerEntryItem(
                id=e.id,
                entry_type=e.entry_type,
                amount=e.amount,
                amount_display=lamports_to_display(e.amount),
                balance_after=e.balance_after,
                balance_after_display=lamports_to_display(e.balance_after),
                reference_type=e.reference_type,
                reference_id=e.reference_id,
                created_at=e.created_at.isoformat() if e.created_at else "",
            )
            for e in page
        ]

        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return LedgerResponse(items=items, next_cursor=next_cursor, has_more=has_more)
