"""AccountRepository — concrete implementation of AccountRepositoryProtocol.

All balance-mutating operations use atomic PostgreSQL UPDATE ... RETURNING.
A debit returning 0 rows means the source could not cover the amount.

Transaction ownership: the CALLER (application service) owns the transaction
through `unit_of_work(db)`; nothing here commits.
"""

from collections.abc import Sequence

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_account.domain.models import AuthorityMeta, LedgerEntry, Transfer
from src.sb_common.enums import LedgerEntryType
from src.sb_common.errors import (
    AccountAlreadyExistsError,
    InsufficientBalanceError,
    InsufficientEscrowError,
    InternalError,
    MathOverflowError,
)
from src.sb_common.lamports import U64_MAX

# ---------------------------------------------------------------------------
# SQL: balances
# ---------------------------------------------------------------------------

_GET_BALANCE_SQL = text("SELECT lamports FROM balances WHERE address = :address")

_DEBIT_SQL = text("""
    UPDATE balances
    SET lamports = lamports - :amount,
        updated_at = NOW()
    WHERE address = :address AND lamports >= :amount
    RETURNING lamports
""")

# The conflict WHERE keeps a credit inside u64: no row back means overflow
_CREDIT_SQL = text(f"""
    INSERT INTO balances (address, lamports)
    VALUES (:address, :amount)
    ON CONFLICT (address) DO UPDATE
        SET lamports = balances.lamports + EXCLUDED.lamports,
            updated_at = NOW()
        WHERE balances.lamports <= {U64_MAX} - EXCLUDED.lamports
    RETURNING lamports
""")

_DROP_EMPTY_BALANCE_SQL = text(
    "DELETE FROM balances WHERE address = :address AND lamports = 0"
)

_INSERT_LEDGER_SQL = text("""
    INSERT INTO ledger_entries
        (address, entry_type, amount, balance_after, reference_type, reference_id)
    VALUES
        (:address, :entry_type, :amount, :balance_after, :reference_type, :reference_id)
    RETURNING id, address, entry_type, amount, balance_after,
              reference_type, reference_id, created_at
""")

_LIST_LEDGER_SQL = text("""
    SELECT id, address, entry_type, amount, balance_after,
           reference_type, reference_id, created_at
    FROM ledger_entries
    WHERE address = :address
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < CAST(:cursor_id AS BIGINT))
      AND (CAST(:entry_type AS TEXT) IS NULL OR entry_type = CAST(:entry_type AS TEXT))
    ORDER BY id DESC
    LIMIT :limit
""")

# ---------------------------------------------------------------------------
# SQL: authority_metas
# ---------------------------------------------------------------------------

_GET_META_SQL = text("""
    SELECT address, authority, next_cycle, bump, created_at, updated_at
    FROM authority_metas
    WHERE address = :address
""")

_GET_META_FOR_UPDATE_SQL = text("""
    SELECT address, authority, next_cycle, bump, created_at, updated_at
    FROM authority_metas
    WHERE address = :address
    FOR UPDATE
""")

_INSERT_META_SQL = text("""
    INSERT INTO authority_metas (address, authority, next_cycle, bump)
    VALUES (:address, :authority, :next_cycle, :bump)
    ON CONFLICT (address) DO NOTHING
    RETURNING address
""")

_UPDATE_META_SQL = text("""
    UPDATE authority_metas
    SET next_cycle = :next_cycle
    WHERE address = :address
""")


def _row_to_ledger(row: object) -> LedgerEntry:
    return LedgerEntry(
        id=row.id,  # type: ignore[attr-defined]
        address=row.address,  # type: ignore[attr-defined]
        entry_type=row.entry_type,  # type: ignore[attr-defined]
        amount=int(row.amount),  # type: ignore[attr-defined]
        balance_after=int(row.balance_after),  # type: ignore[attr-defined]
        reference_type=row.reference_type,  # type: ignore[attr-defined]
        reference_id=row.reference_id,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


def _row_to_meta(row: object) -> AuthorityMeta:
    return AuthorityMeta(
        address=row.address,  # type: ignore[attr-defined]
        authority=row.authority,  # type: ignore[attr-defined]
        next_cycle=row.next_cycle,  # type: ignore[attr-defined]
        bump=row.bump,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class AccountRepository:
    """Concrete repository — all operations atomic at the SQL level."""

    async def get_balance(self, db: AsyncSession, address: str) -> int:
        result = await db.execute(_GET_BALANCE_SQL, {"address": address})
        row = result.fetchone()
        return int(row.lamports) if row else 0

    async def _write_ledger(
        self,
        db: AsyncSession,
        address: str,
        entry_type: LedgerEntryType,
        amount: int,
        balance_after: int,
        reference_type: str,
        reference_id: str | None,
    ) -> LedgerEntry:
        result = await db.execute(
            _INSERT_LEDGER_SQL,
            {
                "address": address,
                "entry_type": entry_type,
                "amount": amount,
                "balance_after": balance_after,
                "reference_type": reference_type,
                "reference_id": reference_id,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Ledger insert returned no rows: this should never happen")
        return _row_to_ledger(row)

    async def credit(
        self,
        db: AsyncSession,
        address: str,
        amount: int,
        entry_type: LedgerEntryType,
        reference_type: str,
        reference_id: str | None,
    ) -> LedgerEntry:
        result = await db.execute(_CREDIT_SQL, {"address": address, "amount": amount})
        row = result.fetchone()
        if row is None:
            raise MathOverflowError(f"Math overflow: crediting {amount} to {address}")
        balance_after = int(row.lamports)
        return await self._write_ledger(
            db, address, entry_type, amount, balance_after, reference_type, reference_id
        )

    async def apply_transfers(
        self,
        db: AsyncSession,
        transfers: Sequence[Transfer],
        reference_type: str,
        reference_id: str,
    ) -> list[LedgerEntry]:
        """Debit source, credit destination, one ledger row per leg.

        Zero-amount transfers are skipped. A failed debit raises before any
        later transfer is touched; the caller's rollback undoes earlier ones.
        """
        entries: list[LedgerEntry] = []
        for t in transfers:
            if t.amount == 0:
                continue
            result = await db.execute(_DEBIT_SQL, {"address": t.source, "amount": t.amount})
            row = result.fetchone()
            if row is None:
                available = await self.get_balance(db, t.source)
                if t.from_escrow:
                    raise InsufficientEscrowError(t.amount, available)
                raise InsufficientBalanceError(t.amount, available)
            entries.append(
                await self._write_ledger(
                    db, t.source, t.entry_type, -t.amount, int(row.lamports),
                    reference_type, reference_id,
                )
            )
            entries.append(
                await self.credit(
                    db, t.destination, t.amount, t.entry_type, reference_type, reference_id
                )
            )
        return entries

    async def drop_balance(self, db: AsyncSession, address: str) -> None:
        """Remove a closed record's emptied balance row."""
        await db.execute(_DROP_EMPTY_BALANCE_SQL, {"address": address})

    async def get_authority_meta(
        self, db: AsyncSession, address: str, for_update: bool = False
    ) -> AuthorityMeta | None:
        sql = _GET_META_FOR_UPDATE_SQL if for_update else _GET_META_SQL
        result = await db.execute(sql, {"address": address})
        row = result.fetchone()
        return _row_to_meta(row) if row else None

    async def insert_authority_meta(self, db: AsyncSession, meta: AuthorityMeta) -> None:
        result = await db.execute(
            _INSERT_META_SQL,
            {
                "address": meta.address,
                "authority": meta.authority,
                "next_cycle": meta.next_cycle,
                "bump": meta.bump,
            },
        )
        if result.fetchone() is None:
            raise AccountAlreadyExistsError("AuthorityMeta", meta.address)

    async def update_authority_meta(self, db: AsyncSession, meta: AuthorityMeta) -> None:
        await db.execute(
            _UPDATE_META_SQL, {"address": meta.address, "next_cycle": meta.next_cycle}
        )

    async def list_ledger_entries(
        self,
        db: AsyncSession,
        address: str,
        cursor_id: int | None,
        limit: int,
        entry_type: str | None,
    ) -> list[LedgerEntry]:
        result = await db.execute(
            _LIST_LEDGER_SQL,
            {
                "address": address,
                "cursor_id": cursor_id,
                "entry_type": entry_type,
                "limit": limit,
            },
        )
        return [_row_to_ledger(row) for row in result.fetchall()]
