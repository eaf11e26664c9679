"""TicketRepository — concrete implementation of TicketRepositoryProtocol.

All queries use raw text() SQL (no ORM). The owner column is `user_identity`
because `user` is a reserved word in PostgreSQL.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_common.enums import Side
from src.sb_common.errors import AccountAlreadyExistsError
from src.sb_ticket.domain.models import Ticket

_COLUMNS = "address, user_identity, market, side, amount, claimed, bump, created_at, updated_at"

_GET_TICKET_SQL = text(f"SELECT {_COLUMNS} FROM tickets WHERE address = :address")

_GET_TICKET_FOR_UPDATE_SQL = text(
    f"SELECT {_COLUMNS} FROM tickets WHERE address = :address FOR UPDATE"
)

_INSERT_TICKET_SQL = text("""
    INSERT INTO tickets (address, user_identity, market, side, amount, claimed, bump)
    VALUES (:address, :user_identity, :market, :side, :amount, :claimed, :bump)
    ON CONFLICT DO NOTHING
    RETURNING address
""")

_UPDATE_TICKET_SQL = text("""
    UPDATE tickets
    SET amount = :amount,
        claimed = :claimed
    WHERE address = :address
""")

_DELETE_TICKET_SQL = text("DELETE FROM tickets WHERE address = :address")

_LIST_TICKETS_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM tickets
    WHERE market = :market
      AND (CAST(:cursor_address AS TEXT) IS NULL OR address > CAST(:cursor_address AS TEXT))
    ORDER BY address
    LIMIT :limit
""")

_LIST_ALL_TICKETS_SQL = text(f"SELECT {_COLUMNS} FROM tickets WHERE market = :market")

_COUNT_TICKETS_SQL = text("SELECT COUNT(*) FROM tickets WHERE market = :market")


def _row_to_ticket(row: object) -> Ticket:
    return Ticket(
        address=row.address,  # type: ignore[attr-defined]
        user=row.user_identity,  # type: ignore[attr-defined]
        market=row.market,  # type: ignore[attr-defined]
        side=Side(row.side),  # type: ignore[attr-defined]
        amount=int(row.amount),  # type: ignore[attr-defined]
        claimed=row.claimed,  # type: ignore[attr-defined]
        bump=row.bump,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class TicketRepository:
    async def get_ticket(
        self, db: AsyncSession, address: str, for_update: bool = False
    ) -> Ticket | None:
        sql = _GET_TICKET_FOR_UPDATE_SQL if for_update else _GET_TICKET_SQL
        result = await db.execute(sql, {"address": address})
        row = result.fetchone()
        return _row_to_ticket(row) if row else None

    async def insert_ticket(self, db: AsyncSession, ticket: Ticket) -> None:
        result = await db.execute(
            _INSERT_TICKET_SQL,
            {
                "address": ticket.address,
                "user_identity": ticket.user,
                "market": ticket.market,
                "side": int(ticket.side),
                "amount": ticket.amount,
                "claimed": ticket.claimed,
                "bump": ticket.bump,
            },
        )
        if result.fetchone() is None:
            raise AccountAlreadyExistsError("Ticket", ticket.address)

    async def update_ticket(self, db: AsyncSession, ticket: Ticket) -> None:
        await db.execute(
            _UPDATE_TICKET_SQL,
            {"address": ticket.address, "amount": ticket.amount, "claimed": ticket.claimed},
        )

    async def delete_ticket(self, db: AsyncSession, address: str) -> None:
        await db.execute(_DELETE_TICKET_SQL, {"address": address})

    async def list_tickets(
        self, db: AsyncSession, market: str, cursor_address: str | None, limit: int
    ) -> list[Ticket]:
        result = await db.execute(
            _LIST_TICKETS_SQL,
            {"market": market, "cursor_address": cursor_address, "limit": limit},
        )
        return [_row_to_ticket(row) for row in result.fetchall()]

    async def count_tickets(self, db: AsyncSession, market: str) -> int:
        result = await db.execute(_COUNT_TICKETS_SQL, {"market": market})
        return int(result.scalar_one())

    async def list_all_tickets(self, db: AsyncSession, market: str) -> list[Ticket]:
        """Every ticket of a market, for conservation checks."""
        result = await db.execute(_LIST_ALL_TICKETS_SQL, {"market": market})
        return [_row_to_ticket(row) for row in result.fetchall()]
