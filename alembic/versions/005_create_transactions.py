"""005: create transactions table

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
    op.execute("""
        CREATE TABLE transactions (
            id              BIGSERIAL       PRIMARY KEY,
            user_id         BIGINT          NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            type            VARCHAR(20)     NOT NULL,
            amount          BIGINT          NOT NULL,
            balance_after   BIGINT          NOT NULL,
            description     TEXT,
            listing_id      BIGINT          REFERENCES listings(id) ON DELETE SET NULL,
            status          VARCHAR(20)     NOT NULL DEFAULT 'completed',
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_transactions_type CHECK (
                type IN ('purchase', 'sale', 'deposit', 'withdrawal')
            ),
            CONSTRAINT ck_transactions_status CHECK (
                status IN ('completed', 'pending', 'failed')
            ),
            CONSTRAINT ck_transactions_amount_gt_0 CHECK (amount > 0),
            CONSTRAINT ck_transactions_balance_gte_0 CHECK (balance_after >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_transactions_user_time ON transactions (user_id, created_at DESC, id DESC);")
    # At most one completed purchase per listing, enforced by the store itself
    op.execute("""
        CREATE UNIQUE INDEX uq_transactions_listing_purchase
        ON transactions (listing_id)
        WHERE type = 'purchase' AND status = 'completed' AND listing_id IS NOT NULL;
    """)
    op.execute("""
        CREATE UNIQUE INDEX uq_transactions_listing_sale
        ON transactions (listing_id)
        WHERE type = 'sale' AND status = 'completed' AND listing_id IS NOT NULL;
    """)
    op.execute("COMMENT ON TABLE transactions IS 'Balance ledger: Append-Only, amounts in cents';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS transactions CASCADE;")
