"""Resource Routes — every author/book template bound to one negotiating endpoint.

Invariants:
    - Each template in the action table is registered once, for the methods it declares
    - Selection (route, version, Content-Type, Accept) completes before any handler runs
    - Response Content-Type is the negotiated media type of the selected handler
    - api-supported-versions is set on negotiated responses when reporting is enabled
    - Errors carry method, path, api_version and handler in their context

Design Decisions:
    - Framework routing only finds the template; the action table picks the handler,
      so several handlers share one URL without framework-level overloading
    - Router built from the table (build_router) so tests can supply their own table
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.api.basic_auth import require_basic_auth
from library_api.config import get_settings
from library_api.core.domain_types import VersionSource
from library_api.core.errors import LibraryError
from library_api.core.select_action import ActionTable
from library_api.infrastructure.database import get_db
from library_api.services.action_dispatch import ActionDispatch
from library_api.services.request_context import RequestContext
from library_api.services.routes_registry import get_action_table

logger = logging.getLogger(__name__)

SUPPORTED_VERSIONS_HEADER = "api-supported-versions"


def _version_token(table: ActionTable, request: Request) -> str | None:
    # Path tokens are read from the matched template by the table itself.
    policy = table.policy
    if policy.source is VersionSource.PATH:
        return None
    return policy.extract_token({}, request.headers, request.query_params)


def build_router(table: ActionTable, report_api_versions: bool = True) -> APIRouter:
    """Register every template of `table` on a new router."""

    async def negotiate(request: Request, db: AsyncSession = Depends(get_db)):
        selection = table.select(
            request.method,
            request.url.path,
            request.headers.get("accept"),
            request.headers.get("content-type"),
            _version_token(table, request),
        )
        name = selection.descriptor.name
        ctx = RequestContext(
            path_params=selection.path_params,
            headers=request.headers,
            body=await request.body(),
            base_url=str(request.base_url),
            table=table,
        )
        try:
            result = await ActionDispatch(db).execute(name, ctx)
        except LibraryError as exc:
            exc.context.method = request.method
            exc.context.path = request.url.path
            exc.context.api_version = str(selection.api_version)
            exc.context.handler = name
            raise

        headers = dict(result.headers)
        if report_api_versions and selection.supported_versions:
            headers[SUPPORTED_VERSIONS_HEADER] = ", ".join(selection.supported_versions)
        return JSONResponse(
            content=result.content,
            status_code=result.status_code,
            headers=headers,
            media_type=selection.response_media_type.essence,
        )

    router = APIRouter(tags=["library"], dependencies=[Depends(require_basic_auth)])
    for template, methods in table.templates():
        router.add_api_route(
            template,
            negotiate,
            methods=[method.value for method in methods],
            name=template,
        )
    return router


def create_router() -> APIRouter:
    return build_router(get_action_table(), get_settings().report_api_versions)
