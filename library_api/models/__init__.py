"""ORM Models — SQLAlchemy declarative models for authors and books.

Invariants:
    - All models inherit from Base (db/base.py)
    - Author is the aggregate root; books are scoped by author_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so metadata is complete before create_all / autogenerate
"""

from library_api.models.author import Author  # noqa: F401
from library_api.models.book import Book  # noqa: F401
