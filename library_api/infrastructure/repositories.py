"""Repositories — the persistence collaborator consumed by handlers.

Invariants:
    - Handlers never issue queries; they call get_by_id/list/exists/add/update/persist
    - persist() is the only commit point; it runs after patch + validation succeed
    - A stale version_id at flush time becomes ConcurrencyError (409), never a silent overwrite

Design Decisions:
    - Thin classes over a shared AsyncSession: one unit of work per request
    - get_by_id returns None (not raises): the 404 decision belongs to the handler
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from library_api.core.errors import ConcurrencyError
from library_api.models.author import Author
from library_api.models.book import Book

logger = logging.getLogger(__name__)


class _Repository:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def persist(self) -> None:
        """Commit pending changes. Stale optimistic-concurrency versions abort the commit."""
        try:
            await self._db.commit()
        except StaleDataError as e:
            await self._db.rollback()
            logger.warning(f"Stale write rejected: {e}")
            raise ConcurrencyError(
                "The resource was modified by another request. Re-fetch and retry.",
            )


class AuthorRepository(_Repository):
    """Authors collaborator."""

    async def get_by_id(self, author_id: UUID) -> Author | None:
        result = await self._db.execute(
            select(Author).where(Author.id == author_id),
        )
        return result.scalar_one_or_none()

    async def list(self) -> list[Author]:
        result = await self._db.execute(
            select(Author).order_by(Author.last_name, Author.first_name),
        )
        return list(result.scalars().all())

    async def exists(self, author_id: UUID) -> bool:
        result = await self._db.execute(
            select(Author.id).where(Author.id == author_id),
        )
        return result.scalar_one_or_none() is not None

    def update(self, author: Author) -> None:
        # Tracked entities flush on commit; add() re-attaches a detached instance.
        self._db.add(author)


class BookRepository(_Repository):
    """Books collaborator, always scoped by author."""

    async def get_by_id(self, author_id: UUID, book_id: UUID) -> Book | None:
        result = await self._db.execute(
            select(Book).where(Book.author_id == author_id, Book.id == book_id),
        )
        return result.scalar_one_or_none()

    async def list(self, author_id: UUID) -> list[Book]:
        result = await self._db.execute(
            select(Book).where(Book.author_id == author_id).order_by(Book.title),
        )
        return list(result.scalars().all())

    def add(self, book: Book) -> None:
        self._db.add(book)
