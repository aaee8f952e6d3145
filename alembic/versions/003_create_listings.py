"""003: create listings table

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
        CREATE TABLE listings (
            id              BIGSERIAL       PRIMARY KEY,
            seller_id       BIGINT          NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            name            VARCHAR(200)    NOT NULL,
            weapon          VARCHAR(100)    NOT NULL,
            category        VARCHAR(50)     NOT NULL,
            rarity          VARCHAR(50)     NOT NULL,
            wear            VARCHAR(50)     NOT NULL,
            float_value     NUMERIC(11,10)  NOT NULL DEFAULT 0,
            price           BIGINT          NOT NULL,
            image_url       TEXT            NOT NULL DEFAULT '',
            stattrak        BOOLEAN         NOT NULL DEFAULT FALSE,
            collection      VARCHAR(200),
            inspect_link    TEXT,
            steam_asset_id  VARCHAR(50),
            status          VARCHAR(20)     NOT NULL DEFAULT 'listed',
            listed_at       TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_listings_price_gt_0 CHECK (price > 0),
            CONSTRAINT ck_listings_float_range CHECK (float_value >= 0 AND float_value <= 1),
            CONSTRAINT ck_listings_status CHECK (status IN ('listed', 'sold', 'cancelled'))
        );
    """)
    op.execute("CREATE INDEX idx_listings_status ON listings (status, listed_at DESC);")
    op.execute("CREATE INDEX idx_listings_seller ON listings (seller_id, status);")
    op.execute("CREATE INDEX idx_listings_category ON listings (category);")
    op.execute("CREATE INDEX idx_listings_rarity ON listings (rarity);")
    op.execute("""
        CREATE TRIGGER trg_listings_updated_at
            BEFORE UPDATE ON listings
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute(
        "COMMENT ON TABLE listings IS "
        "'Items for sale: status: listed -> sold | cancelled (terminal), price in cents';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS listings CASCADE;")
