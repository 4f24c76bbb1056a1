"""unique_user_review

Revision ID: c7d1e9a4b2f3
Revises: 8c4e6b2d1a57
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "c7d1e9a4b2f3"
down_revision: Union[str, Sequence[str], None] = "8c4e6b2d1a57"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Allow one user-sourced review per author and location."""
    op.create_index(
        "uq_site_review_user_location",
        "site_review",
        ["location_id", "user_id"],
        unique=True,
        sqlite_where=sa.text("source = 'USR'"),
        postgresql_where=sa.text("source = 'USR'"),
    )


def downgrade() -> None:
    op.drop_index("uq_site_review_user_location", table_name="site_review")
