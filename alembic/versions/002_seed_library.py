"""Seed demonstration authors and books.

Revision ID: 002_seed_library
Revises: 001_initial
Create Date: 2026-10-19

"""
from typing import Sequence, Union
from uuid import UUID

from alembic import op
import sqlalchemy as sa

revision: str = "002_seed_library"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

GEORGE_RR_MARTIN = UUID("d28888e9-2ba9-473a-a40f-e38cb54f9b35")
STEPHEN_FRY = UUID("da2fd609-d754-4feb-8acd-c4f9ff13ba96")
JAMES_ELLROY = UUID("24810dfc-2d94-4cc7-aab5-cdf98b83f0c9")
DOUGLAS_ADAMS = UUID("2902b665-1190-4c70-9915-b9c2d7680450")

AUTHORS = [
    {"id": GEORGE_RR_MARTIN, "first_name": "George", "last_name": "RR Martin"},
    {"id": STEPHEN_FRY, "first_name": "Stephen", "last_name": "Fry"},
    {"id": JAMES_ELLROY, "first_name": "James", "last_name": "Ellroy"},
    {"id": DOUGLAS_ADAMS, "first_name": "Douglas", "last_name": "Adams"},
]

BOOKS = [
    {
        "id": UUID("5b1c2b4d-48c7-402a-80c3-cc796ad49c6b"),
        "author_id": GEORGE_RR_MARTIN,
        "title": "A Game of Thrones",
        "description": "The first novel in A Song of Ice and Fire.",
    },
    {
        "id": UUID("d8663e5e-7494-4f81-8739-6e0de1bea7ee"),
        "author_id": GEORGE_RR_MARTIN,
        "title": "A Clash of Kings",
        "description": "The second novel in A Song of Ice and Fire.",
    },
    {
        "id": UUID("d173e20d-159e-4127-9ce9-b0ac2564ad97"),
        "author_id": STEPHEN_FRY,
        "title": "Mythos",
        "description": "The Greek myths retold.",
    },
    {
        "id": UUID("493c3228-3444-4a49-9cc0-e8532edc59b2"),
        "author_id": JAMES_ELLROY,
        "title": "American Tabloid",
        "description": "The first novel in the Underworld USA Trilogy.",
    },
    {
        "id": UUID("40ff5488-fdab-45b5-bc3a-14302d59869a"),
        "author_id": DOUGLAS_ADAMS,
        "title": "The Hitchhiker's Guide to the Galaxy",
        "description": "A comic science fiction series.",
    },
]


def upgrade() -> None:
    authors = sa.table(
        "authors",
        sa.column("id", sa.Uuid),
        sa.column("first_name", sa.String),
        sa.column("last_name", sa.String),
        sa.column("version_id", sa.Integer),
    )
    books = sa.table(
        "books",
        sa.column("id", sa.Uuid),
        sa.column("author_id", sa.Uuid),
        sa.column("title", sa.String),
        sa.column("description", sa.String),
    )
    op.bulk_insert(authors, [{**author, "version_id": 1} for author in AUTHORS])
    op.bulk_insert(books, BOOKS)


def downgrade() -> None:
    books = sa.table("books", sa.column("id", sa.Uuid))
    authors = sa.table("authors", sa.column("id", sa.Uuid))
    op.execute(books.delete().where(books.c.id.in_([b["id"] for b in BOOKS])))
    op.execute(authors.delete().where(authors.c.id.in_([a["id"] for a in AUTHORS])))
