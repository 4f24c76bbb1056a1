"""create_catalogue_tables

Revision ID: 3f2a1c9d7b10
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f2a1c9d7b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create categories, aspects, locations and aspect ratings."""
    op.create_table(
        "location_category",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "aspect",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "touristic_location",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("address", sa.String(length=512), nullable=True),
        sa.Column("category_id", sa.Integer(), nullable=True),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("opening_hours", sa.JSON(), nullable=False),
        sa.Column("image", sa.String(length=1024), nullable=True),
        sa.Column("summarized_review", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["category_id"], ["location_category.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "location_aspect_rating",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("location_id", sa.String(length=36), nullable=False),
        sa.Column("aspect_id", sa.Integer(), nullable=False),
        sa.Column("rating", sa.Float(), nullable=False),
        sa.Column("generated_date", sa.Date(), nullable=False),
        sa.ForeignKeyConstraint(["location_id"], ["touristic_location.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["aspect_id"], ["aspect.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("location_id", "aspect_id", "generated_date", name="uq_aspect_rating_per_date"),
    )


def downgrade() -> None:
    """Drop catalogue tables."""
    op.drop_table("location_aspect_rating", if_exists=True)
    op.drop_table("touristic_location", if_exists=True)
    op.drop_table("aspect", if_exists=True)
    op.drop_table("location_category", if_exists=True)
