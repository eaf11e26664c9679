# src/sb_market/domain/repository.py
"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_market.domain.models import Market


class MarketRepositoryProtocol(Protocol):
    async def get_market(
        self, db: AsyncSession, address: str, for_update: bool = False
    ) -> Market | None: ...

    async def insert_market(self, db: AsyncSession, market: Market) -> None: ...

    async def update_market(self, db: AsyncSession, market: Market) -> None: ...

    async def delete_market(self, db: AsyncSession, address: str) -> None: ...

    async def list_markets(
        self,
        db: AsyncSession,
        authority: str | None,
        cursor_ts: str | None,
        cursor_address: str | None,
        limit: int,
    ) -> list[Market]: ...
