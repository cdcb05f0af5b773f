from __future__ import annotations

import json
from typing import Any

import httpx
import structlog

from hasura_provider import __version__
from hasura_provider.config.provider import ProviderConfig
from hasura_provider.core.errors import (
    AdminAPIError,
    AdminTransportError,
    ResponseDecodeError,
)

logger = structlog.get_logger()

ADMIN_SECRET_HEADER = "X-Hasura-Admin-Secret"
DEFAULT_USER_AGENT = f"hasura-provider/{__version__}"


class HasuraAdminClient:
    """JSON POST client for the Hasura metadata API.

    No retries: every call is made once and any failure is surfaced to the
    caller. Each request uses its own ``httpx.AsyncClient`` so the response
    body is fully read and the connection released before returning, on
    success and on error.
    """

    def __init__(
        self,
        config: ProviderConfig,
        *,
        timeout: float | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._timeout = timeout
        self._user_agent = user_agent
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "User-Agent": self._user_agent,
        }
        secret = self._config.admin_secret.get_secret_value()
        if secret:
            headers[ADMIN_SECRET_HEADER] = secret
        return headers

    def _client_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return kwargs

    async def execute(self, body: dict[str, Any]) -> httpx.Response:
        """POST ``body`` and return the fully read response, whatever its status."""
        request_type = body.get("type")
        logger.debug("admin_request", type=request_type, url=self.base_url)
        try:
            async with httpx.AsyncClient(**self._client_kwargs()) as client:
                response = await client.post(self.base_url, json=body, headers=self._headers())
        except (httpx.HTTPError, UnicodeEncodeError) as exc:
            logger.warning(
                "admin_transport_error",
                type=request_type,
                url=self.base_url,
                error=str(exc),
            )
            raise AdminTransportError(
                f"{type(exc).__name__}: {exc}",
                {"type": request_type, "url": self.base_url},
            ) from exc
        logger.debug("admin_response", type=request_type, status=response.status_code)
        return response

    async def execute_ok(self, body: dict[str, Any]) -> httpx.Response:
        """POST ``body`` and raise AdminAPIError unless Hasura answers 200."""
        response = await self.execute(body)
        if response.status_code != 200:
            logger.warning(
                "admin_request_failed",
                type=body.get("type"),
                status=response.status_code,
            )
            raise AdminAPIError(response.status_code, response.text)
        return response

    async def execute_json(self, body: dict[str, Any]) -> Any:
        """POST ``body``, require 200, and decode the JSON response."""
        response = await self.execute_ok(body)
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ResponseDecodeError(
                f"Unable to decode Hasura response: {exc}",
                {"type": body.get("type")},
            ) from exc
