"""Create catalogue tables

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Creates `sock`, `tag` and the `sock_tag` association table.
How:   Portable column types only (works on PostgreSQL and SQLite).

Rollback: downgrade() drops all three tables (destructive).
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "sock",
        sa.Column("sock_id", sa.String(40), nullable=False),
        sa.Column("name", sa.String(20), nullable=False, server_default=sa.text("''")),
        sa.Column("description", sa.String(200), nullable=False, server_default=sa.text("''")),
        sa.Column("price", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("image_url_1", sa.String(40), nullable=True),
        sa.Column("image_url_2", sa.String(40), nullable=True),
        sa.PrimaryKeyConstraint("sock_id"),
    )

    op.create_table(
        "tag",
        sa.Column("tag_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(20), nullable=False),
        sa.PrimaryKeyConstraint("tag_id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "sock_tag",
        sa.Column("sock_id", sa.String(40), nullable=False),
        sa.Column("tag_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["sock_id"], ["sock.sock_id"]),
        sa.ForeignKeyConstraint(["tag_id"], ["tag.tag_id"]),
        sa.PrimaryKeyConstraint("sock_id", "tag_id"),
    )

    # Tag filter looks up associations by tag first
    op.create_index("idx_sock_tag_tag_id", "sock_tag", ["tag_id"])


def downgrade() -> None:
    op.drop_index("idx_sock_tag_tag_id", table_name="sock_tag")
    op.drop_table("sock_tag")
    op.drop_table("tag")
    op.drop_table("sock")
