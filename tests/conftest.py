"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach a real database or require credentials
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)
os.environ.setdefault("BASIC_AUTH_ENABLED", "false")
