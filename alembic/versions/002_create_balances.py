"""002: create balances and ledger_entries tables

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # u64 lamports do not fit in BIGINT
    op.execute("""
        CREATE TABLE balances (
            address         VARCHAR(64)     PRIMARY KEY,
            lamports        NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_balances_u64 CHECK (
                lamports >= 0 AND lamports <= 18446744073709551615
            )
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_balances_updated_at
            BEFORE UPDATE ON balances
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("""
        CREATE TABLE ledger_entries (
            id              BIGSERIAL       PRIMARY KEY,
            address         VARCHAR(64)     NOT NULL,
            entry_type      VARCHAR(30)     NOT NULL,
            amount          NUMERIC(21, 0)  NOT NULL,
            balance_after   NUMERIC(20, 0)  NOT NULL,
            reference_type  VARCHAR(30),
            reference_id    VARCHAR(64),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_ledger_entry_type CHECK (
                entry_type IN (
                    'AIRDROP',
                    'RENT_DEPOSIT', 'RENT_REFUND',
                    'STAKE', 'PAYOUT',
                    'FEE_AUTHORITY', 'FEE_HOST',
                    'SALVAGE_AUTHORITY', 'SALVAGE_HOST',
                    'DUST_AUTHORITY', 'DUST_HOST'
                )
            ),
            CONSTRAINT ck_ledger_balance_gte_0 CHECK (balance_after >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_ledger_address_id ON ledger_entries (address, id DESC);")
    op.execute("""
        CREATE INDEX idx_ledger_reference
        ON ledger_entries (reference_type, reference_id)
        WHERE reference_id IS NOT NULL;
    """)
    op.execute("""
        CREATE TRIGGER trg_ledger_entries_append_only
            BEFORE UPDATE OR DELETE ON ledger_entries
            FOR EACH ROW EXECUTE FUNCTION fn_reject_audit_change();
    """)
    op.execute("COMMENT ON TABLE ledger_entries IS 'Transfer legs - append-only, amounts in lamports';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS ledger_entries CASCADE;")
    op.execute("DROP TABLE IF EXISTS balances CASCADE;")
