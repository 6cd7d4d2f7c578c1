"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness probe sees the test engine

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - Seeded rows inserted through the ORM so version_id starts at 1
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

import library_api.infrastructure.database as db_module
from library_api.db.base import Base
from library_api.infrastructure.database import DatabaseSessionManager, get_db
from library_api.main import app
from library_api.models.author import Author
from library_api.models.book import Book


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def seed_author(test_db):
    """Insert one author directly into the test DB."""
    author = Author(first_name="George", last_name="RR Martin")
    test_db.add(author)
    await test_db.commit()
    return author


@pytest.fixture
async def seed_book(test_db, seed_author):
    """Insert one book for seed_author."""
    book = Book(
        author=seed_author, title="A Game of Thrones",
        description="The first novel in A Song of Ice and Fire.",
    )
    test_db.add(book)
    await test_db.commit()
    return book


@pytest.fixture
def load_author(test_session_factory):
    """Read an author through a fresh session (bypasses the seeding session's identity map)."""
    async def _load(author_id) -> Author | None:
        async with test_session_factory() as session:
            return await session.get(Author, author_id)
    return _load
