"""Core error handling for the Hasura provider."""

from hasura_provider.core.errors import (
    AdminAPIError,
    AdminTransportError,
    ConfigurationError,
    ExitCode,
    HasuraProviderError,
    ProviderError,
    RemoteSchemaNotFoundError,
    ResponseDecodeError,
    ValidationError,
    main_with_error_handling,
)

__all__ = [
    "AdminAPIError",
    "AdminTransportError",
    "ConfigurationError",
    "ExitCode",
    "HasuraProviderError",
    "ProviderError",
    "RemoteSchemaNotFoundError",
    "ResponseDecodeError",
    "ValidationError",
    "main_with_error_handling",
]
