"""SQLAlchemy ORM models for sb_account.

These map to existing tables created by Alembic migrations.
DO NOT add/remove columns here without a corresponding migration.
Lamport columns are NUMERIC(20, 0): u64 does not fit in BIGINT.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import BigInteger, DateTime, Integer, Numeric, SmallInteger, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.sb_common.database import Base


class BalanceORM(Base):
    __tablename__ = "balances"

    address: Mapped[str] = mapped_column(String(64), primary_key=True)
    lamports: Mapped[Decimal] = mapped_column(Numeric(20, 0), nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class LedgerEntryORM(Base):
    __tablename__ = "ledger_entries"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=True)
    address: Mapped[str] = mapped_column(String(64), nullable=False)
    entry_type: Mapped[str] = mapped_column(String(30), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(21, 0), nullable=False)
    balance_after: Mapped[Decimal] = mapped_column(Numeric(20, 0), nullable=False)
    reference_type: Mapped[str | None] = mapped_column(String(30), nullable=True)
    reference_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    # NOTE: No updated_at — ledger_entries is append-only


class AuthorityMetaORM(Base):
    __tablename__ = "authority_metas"

    address: Mapped[str] = mapped_column(String(64), primary_key=True)
    authority: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    next_cycle: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    bump: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
