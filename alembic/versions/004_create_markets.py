"""004: create markets table

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE markets (
            address         VARCHAR(64)     PRIMARY KEY,
            authority       VARCHAR(64)     NOT NULL,
            cycle           INT             NOT NULL,
            pool_yes        NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            pool_no         NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            resolved        BOOLEAN         NOT NULL DEFAULT FALSE,
            frozen          BOOLEAN         NOT NULL DEFAULT FALSE,
            fee_bps         INT             NOT NULL,
            host_fee_bps    INT             NOT NULL,
            bump            SMALLINT        NOT NULL,
            winning_side    SMALLINT,
            fees_accrued    NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            title           VARCHAR(64)     NOT NULL,
            label_yes       VARCHAR(32)     NOT NULL,
            label_no        VARCHAR(32)     NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_markets_authority_cycle UNIQUE (authority, cycle),
            CONSTRAINT ck_markets_cycle_u16 CHECK (cycle BETWEEN 0 AND 65535),
            CONSTRAINT ck_markets_pools_gte_0 CHECK (pool_yes >= 0 AND pool_no >= 0),
            CONSTRAINT ck_markets_fees_gte_0 CHECK (fees_accrued >= 0),
            CONSTRAINT ck_markets_fee_bps CHECK (
                fee_bps >= 0 AND host_fee_bps >= 0 AND fee_bps + host_fee_bps <= 10000
            ),
            CONSTRAINT ck_markets_winning_side CHECK (
                (resolved AND winning_side IN (0, 1))
                OR (NOT resolved AND winning_side IS NULL)
            )
        );
    """)
    op.execute("CREATE INDEX idx_markets_created ON markets (created_at DESC, address DESC);")
    op.execute("""
        CREATE TRIGGER trg_markets_updated_at
            BEFORE UPDATE ON markets
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS markets CASCADE;")
