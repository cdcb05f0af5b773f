"""
Hasura provider and its hasura_remote_schema resource.

Each lifecycle call runs to completion or fails with diagnostics. Calls
that fail return the prior state untouched so the engine never records a
half-applied change.
"""

from __future__ import annotations

from typing import Any, Mapping

import pydantic
import structlog

from hasura_provider import __version__
from hasura_provider.clients import metadata
from hasura_provider.clients.admin import HasuraAdminClient
from hasura_provider.config import ProviderConfig, Settings, configure_provider, get_settings
from hasura_provider.core.diagnostics import Diagnostics
from hasura_provider.core.errors import (
    AdminTransportError,
    HasuraProviderError,
    RemoteSchemaNotFoundError,
    ResponseDecodeError,
    ValidationError,
)
from hasura_provider.domain.models import RemoteSchema
from hasura_provider.logging import bind_context
from hasura_provider.providers.base import (
    AttributeSchema,
    Provider,
    ProviderResource,
    ProviderResourceSchema,
    ResourceResponse,
)
from hasura_provider.providers.registry import (
    register_provider,
    register_resource,
    resource_registry,
)

logger = structlog.get_logger()

USER_AGENT = f"hasura-provider/{__version__}"

NOT_CONFIGURED_SUMMARY = "Provider not configured"
NOT_CONFIGURED_DETAIL = (
    "The provider hasn't been configured before apply, likely because it depends on "
    "an unknown value from another resource. Resolve the provider's 'host' or "
    "'query_uri' before managing resources."
)


def _prior(state: Mapping[str, Any] | None) -> dict[str, Any] | None:
    return dict(state) if isinstance(state, Mapping) else state


def _failure_detail(exc: HasuraProviderError, action: str) -> str:
    if isinstance(exc, AdminTransportError):
        return f"Could not {action}, unexpected error: {exc.message}"
    return exc.message


@register_resource
class RemoteSchemaResource(ProviderResource):
    """Registration of an upstream GraphQL service with Hasura.

    Hasura keys remote schemas by name, so the name doubles as the resource
    identity and cannot change after creation.
    """

    RESOURCE = "hasura_remote_schema"

    def __init__(
        self,
        config: ProviderConfig | None,
        *,
        timeout: float | None = None,
        client: HasuraAdminClient | None = None,
    ) -> None:
        self._config = config
        if client is None and config is not None:
            client = HasuraAdminClient(config, timeout=timeout, user_agent=USER_AGENT)
        self._client = client

    @classmethod
    def schema(cls) -> ProviderResourceSchema:
        return ProviderResourceSchema(
            name=cls.RESOURCE,
            description="Hasura remote schema registration, keyed by name",
            attributes={
                "name": AttributeSchema("string", "Remote schema name", required=True),
                "url": AttributeSchema("string", "URL of the upstream GraphQL server", required=True),
                "forward_headers": AttributeSchema(
                    "bool",
                    "Forward client headers to the upstream server",
                    optional=True,
                    computed=True,
                ),
                "additional_headers": AttributeSchema(
                    "map(string)",
                    "Headers Hasura adds to every request to the upstream server",
                    optional=True,
                ),
            },
        )

    def _not_configured(self, response: ResourceResponse) -> bool:
        if self._client is None:
            response.diagnostics.add_error(NOT_CONFIGURED_SUMMARY, NOT_CONFIGURED_DETAIL)
            return True
        return False

    async def create(self, plan: Mapping[str, Any]) -> ResourceResponse:
        response = ResourceResponse()
        if self._not_configured(response):
            return response
        try:
            desired = RemoteSchema.decode(plan, what="plan")
        except ValidationError as exc:
            response.diagnostics.add_error("Error reading plan", exc.message)
            return response

        log = bind_context(resource=self.RESOURCE, remote_schema=desired.name)
        try:
            await self._client.execute_ok(metadata.add_remote_schema(desired))
        except HasuraProviderError as exc:
            response.diagnostics.add_error(
                "Error registering remote schema",
                _failure_detail(exc, "register remote schema"),
            )
            return response

        # add_remote_schema answers with a bare success message, so echo the plan
        response.state = desired.to_state()
        log.info("remote_schema_created", url=desired.url)
        return response

    async def read(self, state: Mapping[str, Any]) -> ResourceResponse:
        response = ResourceResponse(state=_prior(state))
        if self._not_configured(response):
            return response
        try:
            current = RemoteSchema.decode(state)
        except ValidationError as exc:
            response.diagnostics.add_error("Error reading state", exc.message)
            return response

        name = current.name
        log = bind_context(resource=self.RESOURCE, remote_schema=name)
        try:
            # there is no get-by-name call for remote schemas
            payload = await self._client.execute_json(metadata.export_metadata())
            entry = self._find_entry(payload, name)
            if entry is None:
                raise RemoteSchemaNotFoundError(name)
        except RemoteSchemaNotFoundError as exc:
            # State is kept; the engine decides whether to recreate.
            log.warning("remote_schema_missing")
            response.diagnostics.add_error(f"Remote schema '{name}' does not exist", exc.message)
            return response
        except HasuraProviderError as exc:
            response.diagnostics.add_error(
                f"Error reading remote schema '{name}'",
                _failure_detail(exc, "export Hasura metadata"),
            )
            return response

        # additional_headers are not round-tripped: the export does not carry them
        # in a reusable shape, so the last written value stands.
        updates: dict[str, Any] = {"forward_headers": entry.definition.forward_client_headers}
        if entry.definition.url is not None:
            updates["url"] = entry.definition.url
        response.state = current.model_copy(update=updates).to_state()
        log.debug("remote_schema_read", url=response.state["url"])
        return response

    async def update(self, plan: Mapping[str, Any], state: Mapping[str, Any]) -> ResourceResponse:
        response = ResourceResponse(state=_prior(state))
        if self._not_configured(response):
            return response
        try:
            desired = RemoteSchema.decode(plan, what="plan")
        except ValidationError as exc:
            response.diagnostics.add_error("Error reading plan", exc.message)
            return response
        try:
            prior = RemoteSchema.decode(state)
        except ValidationError as exc:
            response.diagnostics.add_error("Error reading state", exc.message)
            return response

        if desired.name != prior.name:
            response.diagnostics.add_warning(
                "Remote schema name cannot be changed",
                f"Ignoring new name '{desired.name}' and updating '{prior.name}'. "
                "Replace the resource to rename a remote schema.",
            )
            desired = desired.model_copy(update={"name": prior.name})

        name = prior.name
        log = bind_context(resource=self.RESOURCE, remote_schema=name)
        try:
            await self._client.execute_ok(metadata.update_remote_schema(desired))
        except HasuraProviderError as exc:
            response.diagnostics.add_error(
                "Error updating remote schema",
                _failure_detail(exc, "update remote schema"),
            )
            return response

        # Hasura keeps serving the old upstream schema until it is reloaded.
        # The two calls are not atomic: a failed reload leaves Hasura ahead of state.
        try:
            await self._client.execute_ok(metadata.reload_remote_schema(name))
        except HasuraProviderError as exc:
            log.warning("remote_schema_reload_failed", error=exc.message)
            response.diagnostics.add_error(
                "Error updating remote schema",
                f"Remote schema '{name}' was updated in Hasura but reloading it failed, so "
                "Hasura now differs from the recorded state. Apply again to retry. "
                + _failure_detail(exc, "reload remote schema"),
            )
            return response

        response.state = desired.to_state()
        log.info("remote_schema_updated", url=desired.url)
        return response

    async def delete(self, state: Mapping[str, Any]) -> ResourceResponse:
        response = ResourceResponse(state=_prior(state))
        if self._not_configured(response):
            return response
        try:
            current = RemoteSchema.decode(state)
        except ValidationError as exc:
            response.diagnostics.add_error("Error reading state", exc.message)
            return response

        log = bind_context(resource=self.RESOURCE, remote_schema=current.name)
        try:
            await self._client.execute_ok(metadata.remove_remote_schema(current.name))
        except HasuraProviderError as exc:
            response.diagnostics.add_error(
                "Error deleting remote schema",
                _failure_detail(exc, "delete remote schema"),
            )
            return response

        response.state = None
        log.info("remote_schema_deleted")
        return response

    @staticmethod
    def _find_entry(payload: Any, name: str) -> metadata.ExportedRemoteSchema | None:
        try:
            return metadata.MetadataExport.model_validate(payload).find_remote_schema(name)
        except pydantic.ValidationError as exc:
            raise ResponseDecodeError(f"Unable to decode Hasura response: {exc}") from exc


class HasuraProvider(Provider):
    """Provider for Hasura's metadata API."""

    name = "hasura"

    def __init__(self, *, settings: Settings | None = None, timeout: float | None = None) -> None:
        self._settings = settings
        self._timeout = timeout
        self._config: ProviderConfig | None = None

    @staticmethod
    def schema() -> dict[str, AttributeSchema]:
        return {
            "host": AttributeSchema(
                "string",
                "Hasura host, e.g. hasura.example.com; falls back to HASURA_HOST",
                optional=True,
            ),
            "query_uri": AttributeSchema(
                "string",
                "Full metadata API URL, overrides host; falls back to HASURA_QUERY_URI",
                optional=True,
            ),
            "admin_secret": AttributeSchema(
                "string",
                "Admin secret; falls back to HASURA_GRAPHQL_ADMIN_SECRET",
                optional=True,
                sensitive=True,
            ),
        }

    @property
    def config(self) -> ProviderConfig | None:
        return self._config

    @property
    def configured(self) -> bool:
        return self._config is not None

    def _get_settings(self) -> Settings:
        return self._settings or get_settings()

    def configure(self, values: Mapping[str, Any]) -> Diagnostics:
        unsupported = sorted(set(values) - set(self.schema()))
        if unsupported:
            diags = Diagnostics()
            diags.add_error(
                "Unable to configure provider",
                f"Unsupported provider attributes: {', '.join(unsupported)}",
            )
            self._config = None
            return diags

        config, diags = configure_provider(
            values.get("host"),
            values.get("query_uri"),
            values.get("admin_secret"),
            settings=self._get_settings(),
        )
        self._config = config
        return diags

    async def resources(self) -> list[ProviderResourceSchema]:
        return resource_registry.schemas()

    def resource(self, type_name: str) -> ProviderResource:
        """Instantiate a resource handler bound to the current configuration."""
        timeout = self._timeout if self._timeout is not None else self._get_settings().http_timeout
        return resource_registry.create(type_name, self._config, timeout=timeout)

    def remote_schema(self) -> RemoteSchemaResource:
        return self.resource(RemoteSchemaResource.RESOURCE)  # type: ignore[return-value]


register_provider(
    HasuraProvider.name,
    HasuraProvider,
    version=__version__,
    description="Hasura remote schemas through the metadata API",
)

__all__ = [
    "HasuraProvider",
    "RemoteSchemaResource",
]
