"""Create MenuItem table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `MenuItem` table holding the menu catalog.
How:   Integer autoincrement primary key; image is a nullable stored path.

Rollback: downgrade() drops the table entirely (destructive, all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the MenuItem table and its category index."""
    op.create_table(
        "MenuItem",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("category", sa.String(255), nullable=False),
        # "uploads/<timestamp>-<name>", NULL when the item has no image
        sa.Column("image", sa.String(512), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index(
        "idx_menu_item_category",
        "MenuItem",
        ["category"],
    )


def downgrade() -> None:
    """Drop the MenuItem table."""
    op.drop_index("idx_menu_item_category", table_name="MenuItem")
    op.drop_table("MenuItem")
