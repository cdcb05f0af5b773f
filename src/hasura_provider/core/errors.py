"""
Error types for the Hasura provider.

Lifecycle operations raise these internally and convert them into
diagnostics at their boundary. The command-line driver maps them to exit
codes.

Exit Codes:
- 0: Success
- 1: Warning (operation succeeded with warnings)
- 10: Configuration error
- 11: Provider error (admin API failure)
- 12: Validation error (malformed plan or state)
- 127: Unknown/internal error
"""

from __future__ import annotations

import functools
import sys
import traceback
from enum import IntEnum
from typing import Any, Callable, TypeVar

import structlog

logger = structlog.get_logger()


class ExitCode(IntEnum):
    """Standardized exit codes for CLI commands."""

    SUCCESS = 0
    WARNING = 1
    CONFIG_ERROR = 10
    PROVIDER_ERROR = 11
    VALIDATION_ERROR = 12
    UNKNOWN_ERROR = 127


class HasuraProviderError(Exception):
    """Base exception for provider errors with exit code support."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR
    show_traceback: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(HasuraProviderError):
    """Raised when the provider endpoint or credentials cannot be resolved."""

    exit_code = ExitCode.CONFIG_ERROR


class ProviderError(HasuraProviderError):
    """Raised when the Hasura admin API fails."""

    exit_code = ExitCode.PROVIDER_ERROR


class AdminTransportError(ProviderError):
    """Connection or timeout failure talking to the admin API."""


class AdminAPIError(ProviderError):
    """Admin API answered with a non-200 status."""

    def __init__(self, status_code: int, body: str):
        super().__init__(
            f"HTTP request error. Response code: {status_code}; {body}",
            {"status_code": status_code},
        )
        self.status_code = status_code
        self.body = body


class ResponseDecodeError(ProviderError):
    """Admin API response was not the JSON we expected."""


class RemoteSchemaNotFoundError(ProviderError):
    """Remote schema is absent from the exported metadata."""

    def __init__(self, name: str):
        super().__init__(
            f"Expected to find remote schema {name} in Hasura, but it was not found",
            {"remote_schema": name},
        )
        self.name = name


class ValidationError(HasuraProviderError):
    """Raised when plan or state values have an unexpected shape."""

    exit_code = ExitCode.VALIDATION_ERROR


# Type variable for decorated functions
F = TypeVar("F", bound=Callable[..., int])


def main_with_error_handling(
    *,
    show_traceback: bool = False,
    log_errors: bool = True,
) -> Callable[[F], F]:
    """
    Decorator for CLI main functions that provides unified error handling.

    Args:
        show_traceback: If True, show full traceback for unexpected errors
        log_errors: If True, log errors to structlog

    Exit codes:
        - HasuraProviderError subclasses: Uses the error's exit_code
        - KeyboardInterrupt: Returns 130 (standard for SIGINT)
        - Other exceptions: Returns 127 (unknown error)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> int:
            try:
                return func(*args, **kwargs)
            except HasuraProviderError as e:
                if log_errors:
                    logger.error(
                        "command_error",
                        error_type=type(e).__name__,
                        message=e.message,
                        exit_code=e.exit_code,
                        **e.details,
                    )
                print(f"Error: {format_error_message(e)}", file=sys.stderr)
                if e.show_traceback or show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return e.exit_code
            except KeyboardInterrupt:
                if log_errors:
                    logger.info("command_interrupted")
                return 130  # Standard exit code for SIGINT
            except Exception as e:
                if log_errors:
                    logger.error(
                        "unexpected_error",
                        error_type=type(e).__name__,
                        message=str(e),
                        exit_code=ExitCode.UNKNOWN_ERROR,
                    )
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return ExitCode.UNKNOWN_ERROR

        return wrapper  # type: ignore[return-value]

    return decorator


def format_error_message(error: HasuraProviderError) -> str:
    """Format an error message for display to users."""
    msg = error.message
    if error.details:
        detail_str = ", ".join(f"{k}={v}" for k, v in error.details.items())
        msg = f"{msg} ({detail_str})"
    return msg
