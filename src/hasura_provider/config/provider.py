"""Resolution of the provider's admin endpoint and credentials."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
import structlog
from pydantic import SecretStr

from hasura_provider.config.settings import Settings, get_settings
from hasura_provider.core.diagnostics import Diagnostics
from hasura_provider.core.errors import ConfigurationError
from hasura_provider.core.values import is_unknown

logger = structlog.get_logger()

UNKNOWN_VALUE_DETAIL = (
    "The provider attribute '{attribute}' depends on a value that is not known "
    "until apply, likely an attribute of another resource. The provider needs a "
    "fully resolved endpoint and admin secret before any resource can be managed."
)


@dataclass(frozen=True)
class ProviderConfig:
    """Resolved admin endpoint shared read-only by every resource call."""

    base_url: str
    admin_secret: SecretStr


def _absolute_http_url(value: str, attribute: str) -> str:
    try:
        url = httpx.URL(value)
    except httpx.InvalidURL as exc:
        raise ConfigurationError(
            f"'{attribute}' is not a valid URL: {exc}",
            {"attribute": attribute, "value": value},
        ) from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError(
            f"'{attribute}' must be an absolute http(s) URL",
            {"attribute": attribute, "value": value},
        )
    return str(url)


def build_base_url(
    *,
    host: str | None,
    query_uri: str | None,
    scheme: str,
    api_path: str,
) -> str:
    """Compose the admin API URL from a full query URI or a bare host."""
    if query_uri:
        return _absolute_http_url(query_uri, "query_uri")
    if not host:
        raise ConfigurationError(
            "Neither 'host' nor 'query_uri' is set; configure one of them or set "
            "HASURA_HOST / HASURA_QUERY_URI"
        )
    host = host.rstrip("/")
    if "://" in host:
        return _absolute_http_url(f"{host}{api_path}", "host")
    return _absolute_http_url(f"{scheme}://{host}{api_path}", "host")


def configure_provider(
    host: Any = None,
    query_uri: Any = None,
    admin_secret: Any = None,
    *,
    settings: Settings | None = None,
) -> tuple[ProviderConfig | None, Diagnostics]:
    """Resolve a ProviderConfig from explicit attributes with environment fallback.

    Failures are returned as diagnostics, never raised, so the engine can show
    them against the provider block. A ``None`` config means every resource
    call must refuse to run.
    """
    diags = Diagnostics()

    for attribute, value in (("host", host), ("query_uri", query_uri), ("admin_secret", admin_secret)):
        if is_unknown(value):
            diags.add_error(
                "Unable to configure provider",
                UNKNOWN_VALUE_DETAIL.format(attribute=attribute),
            )
    if diags.has_error():
        logger.warning("provider_configuration_failed", reason="unknown_value")
        return None, diags

    for attribute, value in (("host", host), ("query_uri", query_uri), ("admin_secret", admin_secret)):
        if value is not None and not isinstance(value, str):
            diags.add_error(
                "Unable to configure provider",
                f"The provider attribute '{attribute}' must be a string, got {type(value).__name__}",
            )
    if diags.has_error():
        logger.warning("provider_configuration_failed", reason="invalid_type")
        return None, diags

    settings = settings or get_settings()

    try:
        base_url = build_base_url(
            host=host or settings.host,
            query_uri=query_uri or settings.query_uri,
            scheme=settings.scheme,
            api_path=settings.api_path,
        )
    except ConfigurationError as exc:
        diags.add_error("Missing Hasura endpoint", exc.message)
        logger.warning("provider_configuration_failed", reason="endpoint", error=exc.message)
        return None, diags

    if admin_secret:
        secret = SecretStr(admin_secret)
    elif settings.admin_secret is not None and settings.admin_secret.get_secret_value():
        secret = settings.admin_secret
    else:
        secret = SecretStr("")
        diags.add_warning(
            "No admin secret configured",
            "Neither 'admin_secret' nor HASURA_GRAPHQL_ADMIN_SECRET is set. Requests are "
            "sent without the X-Hasura-Admin-Secret header and will be rejected unless "
            "the Hasura instance runs without an admin secret.",
        )

    if not secret.get_secret_value().isascii():
        diags.add_error(
            "Invalid admin secret",
            "The admin secret contains non-ASCII characters and cannot be sent in the "
            "X-Hasura-Admin-Secret header.",
        )
        logger.warning("provider_configuration_failed", reason="admin_secret")
        return None, diags

    config = ProviderConfig(base_url=base_url, admin_secret=secret)
    logger.info("provider_configured", base_url=base_url)
    return config, diags
