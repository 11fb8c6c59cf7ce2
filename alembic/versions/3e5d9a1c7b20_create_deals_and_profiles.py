"""create_deals_and_profiles

Revision ID: 3e5d9a1c7b20
Revises:
Create Date: 2026-10-19
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3e5d9a1c7b20"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "deals",
        sa.Column("deal_id", sa.String(length=100), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("price_current", sa.Integer(), nullable=False),
        sa.Column("price_original", sa.Integer(), nullable=True),
        sa.Column("discount_rate", sa.Integer(), nullable=True),
        sa.Column("source", sa.String(length=20), nullable=False),
        sa.Column("merchant", sa.String(length=200), nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("posted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("fingerprint", sa.Text(), nullable=False),
        sa.Column("popularity_score", sa.Float(), nullable=False),
        sa.Column("trust_score", sa.Float(), nullable=False),
        sa.Column("extra_json", sa.Text(), nullable=False),
        sa.CheckConstraint("source IN ('community', 'shop', 'manual')", name="ck_deals_source"),
        sa.CheckConstraint("price_current >= 0", name="ck_deals_price_current_non_negative"),
        sa.PrimaryKeyConstraint("deal_id"),
    )
    op.create_index(op.f("ix_deals_posted_at"), "deals", ["posted_at"], unique=False)
    op.create_index(op.f("ix_deals_fingerprint"), "deals", ["fingerprint"], unique=False)

    op.create_table(
        "profiles",
        sa.Column("profile_id", sa.String(length=100), nullable=False),
        sa.Column("categories", sa.JSON(), nullable=False),
        sa.Column("keywords", sa.JSON(), nullable=False),
        sa.Column("brands", sa.JSON(), nullable=False),
        sa.Column("exclude_keywords", sa.JSON(), nullable=False),
        sa.Column("price_max", sa.Integer(), nullable=True),
        sa.Column("min_discount_rate", sa.Float(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("profile_id"),
    )
    op.create_index(op.f("ix_profiles_updated_at"), "profiles", ["updated_at"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_profiles_updated_at"), table_name="profiles")
    op.drop_table("profiles")
    op.drop_index(op.f("ix_deals_fingerprint"), table_name="deals")
    op.drop_index(op.f("ix_deals_posted_at"), table_name="deals")
    op.drop_table("deals")
