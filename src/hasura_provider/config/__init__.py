"""
Provider configuration.

- Pydantic-based settings (environment variables, .env files)
- Resolution of the admin endpoint and secret into a ProviderConfig
"""

from hasura_provider.config.provider import (
    ProviderConfig,
    build_base_url,
    configure_provider,
)
from hasura_provider.config.settings import (
    DEFAULT_API_PATH,
    DEFAULT_SCHEME,
    Settings,
    get_settings,
)

__all__ = [
    "DEFAULT_API_PATH",
    "DEFAULT_SCHEME",
    "ProviderConfig",
    "Settings",
    "build_base_url",
    "configure_provider",
    "get_settings",
]
