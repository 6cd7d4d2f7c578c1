"""Domain Types — enums and named media types shared across the Library API core.

Invariants:
    - All valid states encoded as Enums: no raw string matching in core logic
    - Vendor media types are spelled once, here

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum


# ─── Media Types ─────────────────────────────────────────────────

JSON = "application/json"
JSON_PATCH = "application/json-patch+json"
BOOK = "application/vendor.marvin.book+json"
BOOK_WITH_CONCATENATED_AUTHOR_NAME = (
    "application/vendor.marvin.bookwithconcatenatedauthorname+json"
)
BOOK_FOR_CREATION = "application/vendor.marvin.bookforcreation+json"
BOOK_FOR_CREATION_WITH_AMOUNT_OF_PAGES = (
    "application/vendor.marvin.bookforcreationwithamountofpages+json"
)


# ─── Enums ───────────────────────────────────────────────────────

class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @property
    def has_body(self) -> bool:
        return self in (HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH)


class RepresentationKind(str, Enum):
    """Externally visible shapes an entity can be mapped to or from."""
    AUTHOR = "author"
    AUTHOR_FOR_UPDATE = "author_for_update"
    BOOK = "book"
    BOOK_WITH_CONCATENATED_AUTHOR_NAME = "book_with_concatenated_author_name"
    BOOK_FOR_CREATION = "book_for_creation"
    BOOK_FOR_CREATION_WITH_AMOUNT_OF_PAGES = "book_for_creation_with_amount_of_pages"


class PatchOp(str, Enum):
    ADD = "add"
    REMOVE = "remove"
    REPLACE = "replace"
    MOVE = "move"
    COPY = "copy"
    TEST = "test"


class PatchFailureReason(str, Enum):
    """Why a patch operation halted the run."""
    PATH_NOT_FOUND = "PathNotFound"
    INVALID_PATH = "InvalidPath"
    INVALID_INDEX = "InvalidIndex"
    TEST_FAILED = "TestFailed"
    INVALID_OPERATION = "InvalidOperation"


class PatchStatus(str, Enum):
    """Terminal state of a patch run."""
    APPLIED = "applied"
    FAILED = "failed"


class VersionSource(str, Enum):
    """Where the API version token is read from. One per deployment."""
    PATH = "path"
    HEADER = "header"
    QUERY = "query"
