"""005: create tickets table

Revision ID: 005
Revises: 004
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # No FK to markets: closing a market leaves unclosed tickets in place
    op.execute("""
        CREATE TABLE tickets (
            address         VARCHAR(64)     PRIMARY KEY,
            user_identity   VARCHAR(64)     NOT NULL,
            market          VARCHAR(64)     NOT NULL,
            side            SMALLINT        NOT NULL,
            amount          NUMERIC(20, 0)  NOT NULL DEFAULT 0,
            claimed         BOOLEAN         NOT NULL DEFAULT FALSE,
            bump            SMALLINT        NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_tickets_market_user UNIQUE (market, user_identity),
            CONSTRAINT ck_tickets_side CHECK (side IN (0, 1)),
            CONSTRAINT ck_tickets_amount_gte_0 CHECK (amount >= 0)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_tickets_updated_at
            BEFORE UPDATE ON tickets
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS tickets CASCADE;")
