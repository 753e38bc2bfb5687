"""create cached_recipes

Revision ID: 5c1e7a9d2b40
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5c1e7a9d2b40"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "cached_recipes",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("spoonacular_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("image", sa.String(1000), nullable=True),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("instructions", sa.Text(), nullable=True),
        sa.Column("ready_in_minutes", sa.Integer(), nullable=True),
        sa.Column("servings", sa.Integer(), nullable=True),
        sa.Column("source_url", sa.String(1000), nullable=True),
        sa.Column("spoonacular_source_url", sa.String(1000), nullable=True),
        sa.Column("extended_ingredients", sa.JSON(), nullable=True),
        sa.Column("analyzed_instructions", sa.JSON(), nullable=True),
        sa.Column("nutrition", sa.JSON(), nullable=True),
        sa.Column("diets", sa.JSON(), nullable=True),
        sa.Column("cuisines", sa.JSON(), nullable=True),
        sa.Column("dish_types", sa.JSON(), nullable=True),
        sa.Column("last_fetched_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("fetch_count", sa.Integer(), nullable=False, server_default="1"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
            onupdate=sa.func.now(),
        ),
    )
    op.create_index(
        "ix_cached_recipes_spoonacular_id", "cached_recipes", ["spoonacular_id"], unique=True
    )
    op.create_index("ix_cached_recipes_last_fetched_at", "cached_recipes", ["last_fetched_at"])


def downgrade() -> None:
    op.drop_index("ix_cached_recipes_last_fetched_at", table_name="cached_recipes")
    op.drop_index("ix_cached_recipes_spoonacular_id", table_name="cached_recipes")
    op.drop_table("cached_recipes")
