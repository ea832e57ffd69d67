"""Create users and travel_blogs tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Initial schema: accounts and their travel-journal entries.
How:   PostgreSQL UUID keys, TIMESTAMP WITH TIME ZONE, JSON location list.

Rollback: downgrade() drops both tables (destructive, all data lost).
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
    """Create users, then travel_blogs (FK → users.id, cascade on delete)."""
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("full_name", sa.Text(), nullable=False),
        sa.Column(
            "email",
            sa.String(320),
            nullable=False,
            comment="Exact-match login key; unique across all accounts",
        ),
        sa.Column(
            "password_hash",
            sa.String(255),
            nullable=False,
            comment="passlib hash string; the plaintext is never stored",
        ),
        sa.Column(
            "created_on",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "travel_blogs",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("user_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("story", sa.Text(), nullable=False),
        sa.Column(
            "visited_location",
            sa.JSON(),
            nullable=False,
            comment="Ordered list of place names",
        ),
        sa.Column("image_url", sa.Text(), nullable=False),
        sa.Column(
            "visited_date",
            sa.DateTime(timezone=True),
            nullable=False,
            comment="UTC instant converted from epoch milliseconds",
        ),
        sa.Column(
            "is_favourite",
            sa.Boolean(),
            server_default=sa.false(),
            nullable=False,
        ),
        sa.Column(
            "created_on",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    # List, search, and filter all run WHERE user_id = ? ORDER BY is_favourite DESC, created_on
    op.create_index(
        "idx_travel_blogs_owner_order",
        "travel_blogs",
        ["user_id", "is_favourite", "created_on"],
    )


def downgrade() -> None:
    """Drop both tables. WARNING: destructive."""
    op.drop_index("idx_travel_blogs_owner_order", table_name="travel_blogs")
    op.drop_table("travel_blogs")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
