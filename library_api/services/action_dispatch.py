"""Action Dispatch — explicit routing from handler name to coroutine.

Invariants:
    - Every handler mapping is visible: no getattr magic, no auto-discovery
    - Every descriptor in ALL_ROUTES has exactly one entry here (checked by tests)
    - An unknown name is a programmer error (KeyError), not a request failure
    - Handlers are instantiated per-dispatch around the request's DB session

Design Decisions:
    - Explicit dict over getattr: every mapping visible in one place
    - Repositories shared between handler classes so one request is one unit of work
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from library_api.infrastructure.repositories import AuthorRepository, BookRepository
from library_api.services.handle_authors import AuthorHandlers
from library_api.services.handle_books import BookHandlers
from library_api.services.request_context import HandlerResponse, RequestContext

logger = logging.getLogger(__name__)


class ActionDispatch:
    """Routes handler name -> handler. Explicit registration, no auto-discovery."""

    def __init__(self, db: AsyncSession | None):
        author_repository = AuthorRepository(db)
        authors = AuthorHandlers(author_repository)
        books = BookHandlers(author_repository, BookRepository(db))

        self._handlers = {
            # Authors (v1.0 / v2.0)
            "get_authors": authors.get_authors,
            "get_authors_v2": authors.get_authors_v2,
            "get_author": authors.get_author,
            "update_author": authors.update_author,
            "patch_author": authors.patch_author,

            # Books (unversioned)
            "get_books": books.get_books,
            "get_book": books.get_book,
            "get_book_with_concatenated_author_name": books.get_book_with_concatenated_author_name,
            "create_book": books.create_book,
            "create_book_with_amount_of_pages": books.create_book_with_amount_of_pages,
        }

    @property
    def handler_names(self) -> frozenset[str]:
        return frozenset(self._handlers)

    async def execute(self, name: str, ctx: RequestContext) -> HandlerResponse:
        handler = self._handlers[name]
        logger.debug(f"Dispatching {name}", extra={"handler": name})
        return await handler(ctx)
