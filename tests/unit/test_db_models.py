"""ORM metadata mirrors the migrations (used by `alembic check`)."""

from src.sb_account.infrastructure.db_models import AuthorityMetaORM, BalanceORM, LedgerEntryORM
from src.sb_clearing.infrastructure.db_models import WalEventORM
from src.sb_common.database import Base
from src.sb_market.infrastructure.db_models import MarketORM
from src.sb_ticket.infrastructure.db_models import TicketORM


def test_all_tables_registered() -> None:
    assert {
        "balances", "ledger_entries", "authority_metas", "markets", "tickets", "wal_events"
    } <= set(Base.metadata.tables)


def test_primary_keys() -> None:
    assert [c.name for c in BalanceORM.__table__.primary_key] == ["address"]
    assert [c.name for c in LedgerEntryORM.__table__.primary_key] == ["id"]
    assert [c.name for c in AuthorityMetaORM.__table__.primary_key] == ["address"]
    assert [c.name for c in MarketORM.__table__.primary_key] == ["address"]
    assert [c.name for c in TicketORM.__table__.primary_key] == ["address"]
    assert WalEventORM.__tablename__ == "wal_events"


def test_ticket_unique_per_market_and_user() -> None:
    names = {c.name for c in TicketORM.__table__.constraints}
    assert "uq_tickets_market_user" in names
    assert "user_identity" in TicketORM.__table__.columns


def test_amounts_are_u64_numeric() -> None:
    for column in ("pool_yes", "pool_no", "fees_accrued"):
        assert MarketORM.__table__.columns[column].type.precision == 20
    assert BalanceORM.__table__.columns["lamports"].type.precision == 20
