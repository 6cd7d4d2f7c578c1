"""Repository tests — the persistence collaborator used by handlers.

Tests cover:
    - get_by_id returns None for unknown ids (the 404 decision is the handler's)
    - Listing order and author scoping of books
    - A stale version_id at persist time is ConcurrencyError, not an overwrite
"""

from uuid import uuid4

import pytest

from library_api.core.errors import ConcurrencyError
from library_api.infrastructure.repositories import AuthorRepository, BookRepository
from library_api.models.author import Author
from library_api.models.book import Book


async def test_get_by_id_unknown_is_none(test_db):
    assert await AuthorRepository(test_db).get_by_id(uuid4()) is None


async def test_exists(test_db, seed_author):
    repository = AuthorRepository(test_db)
    assert await repository.exists(seed_author.id)
    assert not await repository.exists(uuid4())


async def test_list_orders_by_last_then_first_name(test_db):
    test_db.add_all([
        Author(first_name="Stephen", last_name="Fry"),
        Author(first_name="Douglas", last_name="Adams"),
    ])
    await test_db.commit()
    names = [a.last_name for a in await AuthorRepository(test_db).list()]
    assert names == ["Adams", "Fry"]


async def test_books_are_scoped_by_author(test_db, seed_book):
    other = Author(first_name="Stephen", last_name="Fry")
    test_db.add(other)
    test_db.add(Book(author=other, title="Mythos"))
    await test_db.commit()

    books = BookRepository(test_db)
    assert [b.title for b in await books.list(seed_book.author_id)] == ["A Game of Thrones"]
    assert await books.get_by_id(other.id, seed_book.id) is None
    assert (await books.get_by_id(seed_book.author_id, seed_book.id)).title == "A Game of Thrones"


async def test_stale_update_raises_concurrency_error(test_session_factory, seed_author):
    async with test_session_factory() as first, test_session_factory() as second:
        mine = await AuthorRepository(first).get_by_id(seed_author.id)
        theirs = await AuthorRepository(second).get_by_id(seed_author.id)

        theirs.first_name = "Jon"
        await AuthorRepository(second).persist()

        mine.first_name = "Arya"
        with pytest.raises(ConcurrencyError) as exc_info:
            await AuthorRepository(first).persist()
        assert exc_info.value.http_status == 409
