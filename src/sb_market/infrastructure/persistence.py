"""MarketRepository — concrete implementation of MarketRepositoryProtocol.

All queries use raw text() SQL (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_common.enums import Side
from src.sb_common.errors import AccountAlreadyExistsError
from src.sb_market.domain.models import Market

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_COLUMNS = """
    address, authority, cycle, pool_yes, pool_no, resolved, frozen,
    fee_bps, host_fee_bps, bump, winning_side, fees_accrued,
    title, label_yes, label_no, created_at, updated_at
"""

_GET_MARKET_SQL = text(f"SELECT {_COLUMNS} FROM markets WHERE address = :address")

_GET_MARKET_FOR_UPDATE_SQL = text(
    f"SELECT {_COLUMNS} FROM markets WHERE address = :address FOR UPDATE"
)

_INSERT_MARKET_SQL = text("""
    INSERT INTO markets
        (address, authority, cycle, pool_yes, pool_no, resolved, frozen,
         fee_bps, host_fee_bps, bump, winning_side, fees_accrued,
         title, label_yes, label_no)
    VALUES
        (:address, :authority, :cycle, :pool_yes, :pool_no, :resolved, :frozen,
         :fee_bps, :host_fee_bps, :bump, :winning_side, :fees_accrued,
         :title, :label_yes, :label_no)
    ON CONFLICT (address) DO NOTHING
    RETURNING address
""")

# Identity, cycle, rates, bump and text are immutable after creation
_UPDATE_MARKET_SQL = text("""
    UPDATE markets
    SET pool_yes = :pool_yes,
        pool_no = :pool_no,
        resolved = :resolved,
        frozen = :frozen,
        winning_side = :winning_side,
        fees_accrued = :fees_accrued
    WHERE address = :address
""")

_DELETE_MARKET_SQL = text("DELETE FROM markets WHERE address = :address")

_LIST_MARKETS_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM markets
    WHERE
        (CAST(:authority AS TEXT) IS NULL OR authority = CAST(:authority AS TEXT))
        AND (
            CAST(:cursor_ts AS TIMESTAMPTZ) IS NULL
            OR created_at < CAST(:cursor_ts AS TIMESTAMPTZ)
            OR (
                created_at = CAST(:cursor_ts AS TIMESTAMPTZ)
                AND address < CAST(:cursor_address AS TEXT)
            )
        )
    ORDER BY created_at DESC, address DESC
    LIMIT :limit
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_market(row: object) -> Market:
    winning = row.winning_side  # type: ignore[attr-defined]
    return Market(
        address=row.address,  # type: ignore[attr-defined]
        authority=row.authority,  # type: ignore[attr-defined]
        cycle=row.cycle,  # type: ignore[attr-defined]
        pool_yes=int(row.pool_yes),  # type: ignore[attr-defined]
        pool_no=int(row.pool_no),  # type: ignore[attr-defined]
        resolved=row.resolved,  # type: ignore[attr-defined]
        frozen=row.frozen,  # type: ignore[attr-defined]
        fee_bps=row.fee_bps,  # type: ignore[attr-defined]
        host_fee_bps=row.host_fee_bps,  # type: ignore[attr-defined]
        bump=row.bump,  # type: ignore[attr-defined]
        winning_side=None if winning is None else Side(winning),
        fees_accrued=int(row.fees_accrued),  # type: ignore[attr-defined]
        title=row.title,  # type: ignore[attr-defined]
        label_yes=row.label_yes,  # type: ignore[attr-defined]
        label_no=row.label_no,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _market_params(market: Market) -> dict[str, object]:
    return {
        "address": market.address,
        "authority": market.authority,
        "cycle": market.cycle,
        "pool_yes": market.pool_yes,
        "pool_no": market.pool_no,
        "resolved": market.resolved,
        "frozen": market.frozen,
        "fee_bps": market.fee_bps,
        "host_fee_bps": market.host_fee_bps,
        "bump": market.bump,
        "winning_side": None if market.winning_side is None else int(market.winning_side),
        "fees_accrued": market.fees_accrued,
        "title": market.title,
        "label_yes": market.label_yes,
        "label_no": market.label_no,
    }


class MarketRepository:
    async def get_market(
        self, db: AsyncSession, address: str, for_update: bool = False
    ) -> Market | None:
        sql = _GET_MARKET_FOR_UPDATE_SQL if for_update else _GET_MARKET_SQL
        result = await db.execute(sql, {"address": address})
        row = result.fetchone()
        return _row_to_market(row) if row else None

    async def insert_market(self, db: AsyncSession, market: Market) -> None:
        result = await db.execute(_INSERT_MARKET_SQL, _market_params(market))
        if result.fetchone() is None:
            raise AccountAlreadyExistsError("Market", market.address)

    async def update_market(self, db: AsyncSession, market: Market) -> None:
        params = _market_params(market)
        await db.execute(
            _UPDATE_MARKET_SQL,
            {
                key: params[key]
                for key in (
                    "address", "pool_yes", "pool_no", "resolved",
                    "frozen", "winning_side", "fees_accrued",
                )
            },
        )

    async def delete_market(self, db: AsyncSession, address: str) -> None:
        await db.execute(_DELETE_MARKET_SQL, {"address": address})

    async def list_markets(
        self,
        db: AsyncSession,
        authority: str | None,
        cursor_ts: str | None,
        cursor_address: str | None,
        limit: int,
    ) -> list[Market]:
        result = await db.execute(
            _LIST_MARKETS_SQL,
            {
                "authority": authority,
                "cursor_ts": cursor_ts,
                "cursor_address": cursor_address,
                "limit": limit,
            },
        )
        return [_row_to_market(row) for row in result.fetchall()]
