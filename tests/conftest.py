"""Root test configuration."""

import logging

import pytest
import structlog
from pydantic import SecretStr

from hasura_provider.config import ProviderConfig, Settings

ADMIN_URL = "https://hasura.example.com/v1/query"
ADMIN_SECRET = "s3cret"


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


@pytest.fixture
def provider_config():
    return ProviderConfig(base_url=ADMIN_URL, admin_secret=SecretStr(ADMIN_SECRET))


@pytest.fixture
def settings(monkeypatch):
    """Settings isolated from the developer's environment and .env file."""
    for var in (
        "HASURA_HOST",
        "HASURA_QUERY_URI",
        "HASURA_GRAPHQL_ADMIN_SECRET",
        "HASURA_SCHEME",
        "HASURA_API_PATH",
        "HASURA_HTTP_TIMEOUT",
        "HASURA_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    return Settings(_env_file=None)
