"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache): single instance per process
    - Versioning and negotiation policy is read once; nothing mutates it at runtime

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
    - version_policy() builds the core VersionPolicy here so core/ never reads settings
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from library_api.core.domain_types import VersionSource
from library_api.core.resolve_version import ApiVersion, VersionPolicy


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://library:library@db:5432/library"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting platforms provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # API versioning
    default_api_version: str = "1.0"
    api_version_source: VersionSource = VersionSource.PATH
    api_version_header: str = "api-version"
    api_version_query_param: str = "api-version"
    api_version_exact_match: bool = False
    report_api_versions: bool = True

    @field_validator("default_api_version")
    @classmethod
    def check_default_api_version(cls, v: str) -> str:
        ApiVersion.parse(v)
        return v

    # Authentication (HTTP Basic)
    basic_auth_enabled: bool = False
    basic_auth_username: str = ""
    basic_auth_password: str = ""

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    def version_policy(self) -> VersionPolicy:
        return VersionPolicy(
            default=ApiVersion.parse(self.default_api_version),
            source=self.api_version_source,
            header_name=self.api_version_header,
            query_param=self.api_version_query_param,
            exact_match=self.api_version_exact_match,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
