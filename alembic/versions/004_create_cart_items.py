"""004: create cart_items table

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
        CREATE TABLE cart_items (
            id              BIGSERIAL       PRIMARY KEY,
            user_id         BIGINT          NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            listing_id      BIGINT          NOT NULL REFERENCES listings(id) ON DELETE CASCADE,
            added_at        TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_cart_items_user_listing UNIQUE (user_id, listing_id)
        );
    """)
    op.execute("CREATE INDEX idx_cart_items_listing ON cart_items (listing_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS cart_items CASCADE;")
