"""Book route descriptors — unversioned sub-resource under /api/authors/{authorId}/books.

Invariants:
    - Books declare no version: they serve whatever version the request resolves to
    - GET single book has two representations split by Accept
    - POST has two input shapes split by Content-Type; their consumes sets are disjoint
"""

from library_api.core.domain_types import (
    BOOK,
    BOOK_FOR_CREATION,
    BOOK_FOR_CREATION_WITH_AMOUNT_OF_PAGES,
    BOOK_WITH_CONCATENATED_AUTHOR_NAME,
    HttpMethod,
    JSON,
)
from library_api.core.select_action import HandlerDescriptor

BOOKS = "/api/authors/{authorId}/books"
BOOK_ITEM = "/api/authors/{authorId}/books/{bookId}"

ROUTES_BOOKS = [
    HandlerDescriptor.declare(
        "get_books", BOOKS, HttpMethod.GET, produces=[JSON],
    ),
    HandlerDescriptor.declare(
        "get_book", BOOK_ITEM, HttpMethod.GET, produces=[JSON, BOOK],
    ),
    HandlerDescriptor.declare(
        "get_book_with_concatenated_author_name", BOOK_ITEM, HttpMethod.GET,
        produces=[BOOK_WITH_CONCATENATED_AUTHOR_NAME],
    ),
    HandlerDescriptor.declare(
        "create_book", BOOKS, HttpMethod.POST,
        consumes=[JSON, BOOK_FOR_CREATION], produces=[JSON, BOOK],
    ),
    HandlerDescriptor.declare(
        "create_book_with_amount_of_pages", BOOKS, HttpMethod.POST,
        consumes=[BOOK_FOR_CREATION_WITH_AMOUNT_OF_PAGES], produces=[JSON, BOOK],
    ),
]
