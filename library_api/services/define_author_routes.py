"""Author route descriptors — versioned surface under /api/v{version}/authors.

Invariants:
    - Collection GET exists per version (1.0 and 2.0 are separate handlers)
    - Single-author GET/PUT/PATCH serve both versions with one handler each
    - PATCH consumes JSON Patch documents as application/json-patch+json or application/json
"""

from library_api.core.domain_types import HttpMethod, JSON, JSON_PATCH
from library_api.core.select_action import HandlerDescriptor

AUTHORS = "/api/v{version}/authors"
AUTHOR = "/api/v{version}/authors/{authorId}"

ROUTES_AUTHORS = [
    HandlerDescriptor.declare(
        "get_authors", AUTHORS, HttpMethod.GET,
        produces=[JSON], versions=["1.0"],
    ),
    HandlerDescriptor.declare(
        "get_authors_v2", AUTHORS, HttpMethod.GET,
        produces=[JSON], versions=["2.0"],
    ),
    HandlerDescriptor.declare(
        "get_author", AUTHOR, HttpMethod.GET,
        produces=[JSON], versions=["1.0", "2.0"],
    ),
    HandlerDescriptor.declare(
        "update_author", AUTHOR, HttpMethod.PUT,
        consumes=[JSON], produces=[JSON], versions=["1.0", "2.0"],
    ),
    HandlerDescriptor.declare(
        "patch_author", AUTHOR, HttpMethod.PATCH,
        consumes=[JSON_PATCH, JSON], produces=[JSON], versions=["1.0", "2.0"],
    ),
]
