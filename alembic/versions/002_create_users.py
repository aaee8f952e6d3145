"""002: create users table

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
    op.execute("""
        CREATE TABLE users (
            id                  BIGSERIAL       PRIMARY KEY,
            steam_id            VARCHAR(20)     NOT NULL,
            username            VARCHAR(100)    NOT NULL,
            avatar              TEXT            NOT NULL DEFAULT '',
            profile_url         TEXT            NOT NULL DEFAULT '',
            balance             BIGINT          NOT NULL DEFAULT 0,
            total_sales         BIGINT          NOT NULL DEFAULT 0,
            total_purchases     BIGINT          NOT NULL DEFAULT 0,
            is_active           BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_users_steam_id            UNIQUE (steam_id),
            CONSTRAINT ck_users_balance_gte_0       CHECK (balance >= 0),
            CONSTRAINT ck_users_total_sales_gte_0   CHECK (total_sales >= 0),
            CONSTRAINT ck_users_total_purch_gte_0   CHECK (total_purchases >= 0)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_users_updated_at
            BEFORE UPDATE ON users
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE users IS 'Marketplace users: all amounts in cents';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS users CASCADE;")
