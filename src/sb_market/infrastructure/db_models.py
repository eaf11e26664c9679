"""SQLAlchemy ORM models for sb_market.

These map to existing tables created by Alembic migrations.
DO NOT add/remove columns here without a corresponding migration.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, Integer, Numeric, SmallInteger, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.sb_common.database import Base


class MarketORM(Base):
    __tablename__ = "markets"

    address: Mapped[str] = mapped_column(String(64), primary_key=True)
    authority: Mapped[str] = mapped_column(String(64), nullable=False)
    cycle: Mapped[int] = mapped_column(Integer, nullable=False)
    pool_yes: Mapped[Decimal] = mapped_column(Numeric(20, 0), nullable=False, default=0)
    pool_no: Mapped[Decimal] = mapped_column(Numeric(20, 0), nullable=False, default=0)
    resolved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    frozen: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    fee_bps: Mapped[int] = mapped_column(Integer, nullable=False)
    host_fee_bps: Mapped[int] = mapped_column(Integer, nullable=False)
    bump: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    winning_side: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    fees_accrued: Mapped[Decimal] = mapped_column(Numeric(20, 0), nullable=False, default=0)
    title: Mapped[str] = mapped_column(String(64), nullable=False)
    label_yes: Mapped[str] = mapped_column(String(32), nullable=False)
    label_no: Mapped[str] = mapped_column(String(32), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
