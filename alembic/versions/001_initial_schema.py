"""Initial schema — authors, books.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "authors",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("first_name", sa.String(150), nullable=False),
        sa.Column("last_name", sa.String(150), nullable=False),
        sa.Column("version_id", sa.Integer, nullable=False, server_default="1"),
    )

    op.create_table(
        "books",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column(
            "author_id", sa.Uuid,
            sa.ForeignKey("authors.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("title", sa.String(150), nullable=False),
        sa.Column("description", sa.String(2500), nullable=True),
        sa.Column("amount_of_pages", sa.Integer, nullable=True),
    )
    op.create_index("ix_books_author_id", "books", ["author_id"])


def downgrade() -> None:
    op.drop_index("ix_books_author_id", table_name="books")
    op.drop_table("books")
    op.drop_table("authors")
