"""Book Handlers — list, fetch (two shapes) and create (two shapes) books of an author.

Invariants:
    - Every book route answers 404 when the author does not exist
    - Output shape follows the selected handler: base vs concatenated author name
    - Input shape follows the selected handler: base vs with amount of pages
    - Creation responds 201 with Location pointing at get_book for the new id
"""

import logging
from uuid import UUID

from library_api.core.domain_types import RepresentationKind
from library_api.core.errors import ResourceNotFoundError, ValidationFailedError
from library_api.core.map_representations import (
    from_representation,
    to_representation,
    to_representations,
)
from library_api.core.validate_representations import validate_book_for_creation
from library_api.infrastructure.repositories import AuthorRepository, BookRepository
from library_api.models.book import Book
from library_api.schemas.books import BookForCreation, BookForCreationWithAmountOfPages
from library_api.schemas.parse_body import parse_body
from library_api.services.request_context import HandlerResponse, RequestContext

logger = logging.getLogger(__name__)


class BookHandlers:
    """Book sub-resource endpoints."""

    def __init__(self, authors: AuthorRepository, books: BookRepository):
        self._authors = authors
        self._books = books

    async def _require_author(self, ctx: RequestContext) -> UUID:
        author_id = ctx.uuid_param("authorId")
        if not await self._authors.exists(author_id):
            raise ResourceNotFoundError("Author", str(author_id))
        return author_id

    async def _book_or_404(self, ctx: RequestContext) -> Book:
        author_id = await self._require_author(ctx)
        book_id = ctx.uuid_param("bookId")
        book = await self._books.get_by_id(author_id, book_id)
        if book is None:
            raise ResourceNotFoundError("Book", str(book_id))
        return book

    async def get_books(self, ctx: RequestContext) -> HandlerResponse:
        author_id = await self._require_author(ctx)
        books = await self._books.list(author_id)
        return HandlerResponse(to_representations(books, RepresentationKind.BOOK))

    async def get_book(self, ctx: RequestContext) -> HandlerResponse:
        book = await self._book_or_404(ctx)
        return HandlerResponse(to_representation(book, RepresentationKind.BOOK))

    async def get_book_with_concatenated_author_name(
        self, ctx: RequestContext,
    ) -> HandlerResponse:
        book = await self._book_or_404(ctx)
        return HandlerResponse(to_representation(
            book, RepresentationKind.BOOK_WITH_CONCATENATED_AUTHOR_NAME,
        ))

    async def create_book(self, ctx: RequestContext) -> HandlerResponse:
        return await self._create(
            ctx, BookForCreation, RepresentationKind.BOOK_FOR_CREATION,
        )

    async def create_book_with_amount_of_pages(
        self, ctx: RequestContext,
    ) -> HandlerResponse:
        return await self._create(
            ctx, BookForCreationWithAmountOfPages,
            RepresentationKind.BOOK_FOR_CREATION_WITH_AMOUNT_OF_PAGES,
        )

    async def _create(
        self, ctx: RequestContext, schema: type[BookForCreation], kind: RepresentationKind,
    ) -> HandlerResponse:
        author_id = ctx.uuid_param("authorId")
        author = await self._authors.get_by_id(author_id)
        if author is None:
            raise ResourceNotFoundError("Author", str(author_id))

        representation = parse_body(schema, ctx.json()).to_representation()
        errors = validate_book_for_creation(
            representation,
            with_amount_of_pages=kind is RepresentationKind.BOOK_FOR_CREATION_WITH_AMOUNT_OF_PAGES,
        )
        if errors:
            raise ValidationFailedError(errors)

        book = Book(author=author, **from_representation(representation, kind))
        self._books.add(book)
        await self._books.persist()
        logger.info(
            f"Book {book.id} created for author {author_id}",
            extra={"author_id": str(author_id), "book_id": str(book.id)},
        )
        return HandlerResponse(
            to_representation(book, RepresentationKind.BOOK),
            status_code=201,
            headers={"Location": ctx.url_for("get_book", authorId=author_id, bookId=book.id)},
        )
