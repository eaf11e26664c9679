"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_ticket.domain.models import Ticket


class TicketRepositoryProtocol(Protocol):
    async def get_ticket(
        self, db: AsyncSession, address: str, for_update: bool = False
    ) -> Ticket | None: ...

    async def insert_ticket(self, db: AsyncSession, ticket: Ticket) -> None: ...

    async def update_ticket(self, db: AsyncSession, ticket: Ticket) -> None: ...

    async def delete_ticket(self, db: AsyncSession, address: str) -> None: ...

    async def list_tickets(
        self, db: AsyncSession, market: str, cursor_address: str | None, limit: int
    ) -> list[Ticket]: ...

    async def count_tickets(self, db: AsyncSession, market: str) -> int: ...

    async def list_all_tickets(self, db: AsyncSession, market: str) -> list[Ticket]: ...
