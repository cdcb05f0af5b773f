"""
Provider settings using Pydantic.

Environment fallbacks for the provider attributes, loaded with the
HASURA_ prefix so the Hasura CLI's own variables are honoured.
"""

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings

DEFAULT_SCHEME = "https"
DEFAULT_API_PATH = "/v1/query"


class Settings(BaseSettings):
    """Provider settings."""

    # Endpoint
    host: str | None = None
    query_uri: str | None = None
    scheme: str = DEFAULT_SCHEME
    api_path: str = DEFAULT_API_PATH

    # Credentials (same variable the Hasura server reads)
    admin_secret: SecretStr | None = Field(
        default=None, validation_alias="HASURA_GRAPHQL_ADMIN_SECRET"
    )

    # HTTP client settings; None keeps httpx's default timeout
    http_timeout: float | None = None

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "HASURA_"
        extra = "ignore"
        populate_by_name = True


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
