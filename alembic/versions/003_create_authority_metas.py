"""003: create authority_metas table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE authority_metas (
            address         VARCHAR(64)     PRIMARY KEY,
            authority       VARCHAR(64)     NOT NULL UNIQUE,
            next_cycle      INT             NOT NULL DEFAULT 0,
            bump            SMALLINT        NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_authority_metas_cycle_u16 CHECK (next_cycle BETWEEN 0 AND 65535),
            CONSTRAINT ck_authority_metas_bump CHECK (bump BETWEEN 1 AND 255)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_authority_metas_updated_at
            BEFORE UPDATE ON authority_metas
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS authority_metas CASCADE;")
