"""Routes Registry — the single action table the HTTP layer dispatches through.

Invariants:
    - ALL_ROUTES is static; the table is built once per process and never mutated
    - Building the table validates it: overlapping declarations fail at startup
    - Versioning policy comes from settings, passed in explicitly

Design Decisions:
    - Explicit imports from each define_*_routes.py: no auto-discovery
    - lru_cache over a module global: tests can build tables with their own policy
"""

from functools import lru_cache

from library_api.config import get_settings
from library_api.core.resolve_version import VersionPolicy
from library_api.core.select_action import ActionTable, HandlerDescriptor
from library_api.services.define_author_routes import ROUTES_AUTHORS
from library_api.services.define_book_routes import ROUTES_BOOKS

ALL_ROUTES: list[HandlerDescriptor] = [
    *ROUTES_AUTHORS,         # 5 handlers
    *ROUTES_BOOKS,           # 5 handlers
]


def build_action_table(policy: VersionPolicy | None = None) -> ActionTable:
    return ActionTable(ALL_ROUTES, policy)


@lru_cache
def get_action_table() -> ActionTable:
    return build_action_table(get_settings().version_policy())
