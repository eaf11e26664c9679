"""006: create wal_events table

Revision ID: 006
Revises: 005
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE wal_events (
            id              BIGSERIAL       PRIMARY KEY,
            market          VARCHAR(64)     NOT NULL,
            event_type      VARCHAR(30)     NOT NULL,
            payload         JSONB           NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_wal_event_type CHECK (event_type IN ('MARKET_RESOLVED'))
        );
    """)
    op.execute("CREATE INDEX idx_wal_market_time ON wal_events (market, created_at);")
    op.execute("""
        CREATE TRIGGER trg_wal_events_append_only
            BEFORE UPDATE OR DELETE ON wal_events
            FOR EACH ROW EXECUTE FUNCTION fn_reject_audit_change();
    """)
    op.execute("COMMENT ON TABLE wal_events IS 'Market events - append-only audit log';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS wal_events CASCADE;")
