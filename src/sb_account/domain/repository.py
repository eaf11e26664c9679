"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from collections.abc import Sequence
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_account.domain.models import AuthorityMeta, LedgerEntry, Transfer
from src.sb_common.enums import LedgerEntryType


class AccountRepositoryProtocol(Protocol):
    async def get_balance(self, db: AsyncSession, address: str) -> int: ...

    async def credit(
        self,
        db: AsyncSession,
        address: str,
        amount: int,
        entry_type: LedgerEntryType,
        reference_type: str,
        reference_id: str | None,
    ) -> LedgerEntry: ...

    async def apply_transfers(
        self,
        db: AsyncSession,
        transfers: Sequence[Transfer],
        reference_type: str,
        reference_id: str,
    ) -> list[LedgerEntry]: ...

    async def drop_balance(self, db: AsyncSession, address: str) -> None: ...

    async def get_authority_meta(
        self, db: AsyncSession, address: str, for_update: bool = False
    ) -> AuthorityMeta | None: ...

    async def insert_authority_meta(self, db: AsyncSession, meta: AuthorityMeta) -> None: ...

    async def update_authority_meta(self, db: AsyncSession, meta: AuthorityMeta) -> None: ...

    async def list_ledger_entries(
        self,
        db: AsyncSession,
        address: str,
        cursor_id: int | None,
        limit: int,
        entry_type: str | None,
    ) -> list[LedgerEntry]: ...
