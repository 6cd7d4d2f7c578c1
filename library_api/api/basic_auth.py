"""HTTP Basic Guard — optional authentication on every resource route.

Invariants:
    - Disabled guard is a no-op (no header required)
    - Enabled guard compares username and password in constant time
    - Failure is AuthenticationError (401 + WWW-Authenticate: Basic)
"""

import hmac
import logging

from fastapi import Depends
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from library_api.config import Settings, get_settings
from library_api.core.errors import AuthenticationError

logger = logging.getLogger(__name__)

_basic = HTTPBasic(auto_error=False)


def _same(provided: str, expected: str) -> bool:
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


async def require_basic_auth(
    credentials: HTTPBasicCredentials | None = Depends(_basic),
    settings: Settings = Depends(get_settings),
) -> None:
    """FastAPI dependency guarding resource routes."""
    if not settings.basic_auth_enabled:
        return
    if credentials is None:
        raise AuthenticationError()
    # Both comparisons always run.
    user_ok = _same(credentials.username, settings.basic_auth_username)
    password_ok = _same(credentials.password, settings.basic_auth_password)
    if not (user_ok and password_ok):
        logger.warning("Rejected Basic credentials", extra={"error_code": "AUTHENTICATION_REQUIRED"})
        raise AuthenticationError()
