"""Author Handlers — list, fetch, replace and patch authors.

Invariants:
    - Existence is checked before the body is read (404 wins over 400/422)
    - PUT: structural parse -> semantic validation -> map -> persist
    - PATCH: map to author-for-update -> patch scratch copy -> validate -> map back -> persist
    - persist() is reached only when patch + validation succeeded
    - Single-author responses carry ETag "<version_id>"; If-Match is honored when sent
"""

import logging

from library_api.core.apply_patch import PatchEngine
from library_api.core.domain_types import RepresentationKind
from library_api.core.errors import (
    PreconditionFailedError,
    ResourceNotFoundError,
    ValidationFailedError,
)
from library_api.core.map_representations import (
    apply_delta,
    from_representation,
    to_representation,
    to_representations,
)
from library_api.core.validate_representations import validate_author_for_update
from library_api.infrastructure.repositories import AuthorRepository
from library_api.models.author import Author
from library_api.schemas.authors import AuthorForUpdate
from library_api.schemas.parse_body import parse_body
from library_api.schemas.patch import PatchDocument
from library_api.services.request_context import HandlerResponse, RequestContext

logger = logging.getLogger(__name__)


def make_etag(author: Author) -> str:
    return f'"{author.version_id}"'


def check_if_match(ctx: RequestContext, author: Author) -> None:
    """Reject the write when If-Match names a different version."""
    provided = ctx.headers.get("if-match")
    if provided is None or provided.strip() == "*":
        return
    current = make_etag(author)
    tags = [tag.strip().removeprefix("W/") for tag in provided.split(",")]
    if current not in tags:
        raise PreconditionFailedError(current, provided)


class AuthorHandlers:
    """Author endpoints for API versions 1.0 and 2.0."""

    def __init__(self, authors: AuthorRepository):
        self._authors = authors

    async def _author_or_404(self, ctx: RequestContext) -> Author:
        author_id = ctx.uuid_param("authorId")
        author = await self._authors.get_by_id(author_id)
        if author is None:
            raise ResourceNotFoundError("Author", str(author_id))
        return author

    def _single(self, author: Author) -> HandlerResponse:
        return HandlerResponse(
            to_representation(author, RepresentationKind.AUTHOR),
            headers={"ETag": make_etag(author)},
        )

    async def get_authors(self, ctx: RequestContext) -> HandlerResponse:
        authors = await self._authors.list()
        return HandlerResponse(to_representations(authors, RepresentationKind.AUTHOR))

    async def get_authors_v2(self, ctx: RequestContext) -> HandlerResponse:
        """Version 2.0 collection. Same shape; kept separate so v2 can evolve alone."""
        authors = await self._authors.list()
        return HandlerResponse(to_representations(authors, RepresentationKind.AUTHOR))

    async def get_author(self, ctx: RequestContext) -> HandlerResponse:
        return self._single(await self._author_or_404(ctx))

    async def update_author(self, ctx: RequestContext) -> HandlerResponse:
        author = await self._author_or_404(ctx)
        check_if_match(ctx, author)

        body = parse_body(AuthorForUpdate, ctx.json())
        representation = body.to_representation()
        errors = validate_author_for_update(representation)
        if errors:
            raise ValidationFailedError(errors)

        apply_delta(author, from_representation(
            representation, RepresentationKind.AUTHOR_FOR_UPDATE,
        ))
        self._authors.update(author)
        await self._authors.persist()
        logger.info(f"Author {author.id} replaced", extra={"author_id": str(author.id)})
        return self._single(author)

    async def patch_author(self, ctx: RequestContext) -> HandlerResponse:
        author = await self._author_or_404(ctx)
        check_if_match(ctx, author)

        operations = [op.to_operation() for op in parse_body(PatchDocument, ctx.json())]
        current = to_representation(author, RepresentationKind.AUTHOR_FOR_UPDATE)
        result = PatchEngine(ignore_case=True).apply(
            current, operations, validate=validate_author_for_update,
        )
        if result.failed_index is not None:
            logger.info(
                f"Patch halted for author {author.id}: {result.reason.value}",
                extra={"author_id": str(author.id), "operation_index": result.failed_index},
            )
        patched = result.raise_for_outcome()

        apply_delta(author, from_representation(
            patched, RepresentationKind.AUTHOR_FOR_UPDATE,
        ))
        self._authors.update(author)
        await self._authors.persist()
        logger.info(f"Author {author.id} patched", extra={"author_id": str(author.id)})
        return self._single(author)
