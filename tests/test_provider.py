"""Tests for HasuraProvider and the resource registry."""

import pytest
import respx
from httpx import Response

from hasura_provider.core.values import UNKNOWN
from hasura_provider.providers import (
    HasuraProvider,
    RemoteSchemaResource,
    create_provider,
    list_providers,
    list_resource_types,
)
from hasura_provider.providers.base import ProviderResourceSchema
from hasura_provider.providers.registry import (
    ProviderRegistry,
    ResourceRegistry,
    create_resource,
    resource_registry,
)


class TestHasuraProvider:
    def test_configure(self, settings):
        provider = HasuraProvider(settings=settings)

        diags = provider.configure({"host": "hasura.example.com", "admin_secret": "s3cret"})

        assert diags == []
        assert provider.configured
        assert provider.config.base_url == "https://hasura.example.com/v1/query"

    def test_configure_rejects_unsupported_attributes(self, settings):
        provider = HasuraProvider(settings=settings)

        diags = provider.configure({"host": "hasura.example.com", "endpoint": "x"})

        assert diags.has_error()
        assert "endpoint" in diags[0].detail
        assert not provider.configured

    @pytest.mark.asyncio
    async def test_unknown_host_blocks_resources(self, settings):
        provider = HasuraProvider(settings=settings)
        diags = provider.configure({"host": UNKNOWN, "admin_secret": "s3cret"})

        assert diags.has_error()

        with respx.mock(assert_all_called=False) as mock:
            route = mock.post(url__regex=r".*").mock(return_value=Response(200, json={}))
            response = await provider.remote_schema().create(
                {"name": "github", "url": "https://api.github.com/graphql"}
            )
            assert route.call_count == 0

        assert response.diagnostics[0].summary == "Provider not configured"

    @pytest.mark.asyncio
    async def test_resource_uses_configured_endpoint(self, settings):
        provider = HasuraProvider(settings=settings)
        provider.configure({"query_uri": "http://localhost:8080/v1/query", "admin_secret": "abc"})

        with respx.mock:
            route = respx.post("http://localhost:8080/v1/query").mock(return_value=Response(200, json={}))
            response = await provider.remote_schema().delete(
                {"name": "github", "url": "https://api.github.com/graphql"}
            )

            assert route.calls.last.request.headers["X-Hasura-Admin-Secret"] == "abc"

        assert response.state is None

    @pytest.mark.asyncio
    async def test_resources_lists_remote_schema(self, settings):
        schemas = await HasuraProvider(settings=settings).resources()

        assert [schema.name for schema in schemas] == ["hasura_remote_schema"]

    def test_provider_schema_marks_secret_sensitive(self):
        schema = HasuraProvider.schema()

        assert set(schema) == {"host", "query_uri", "admin_secret"}
        assert schema["admin_secret"].sensitive
        assert not schema["host"].sensitive


class TestRemoteSchemaSchema:
    def test_attributes(self):
        schema = RemoteSchemaResource.schema()

        assert schema.name == "hasura_remote_schema"
        assert schema.attributes["name"].required
        assert schema.attributes["url"].required
        assert schema.attributes["forward_headers"].optional
        assert schema.attributes["forward_headers"].computed
        assert schema.attributes["additional_headers"].type == "map(string)"

    def test_to_dict(self):
        data = RemoteSchemaResource.schema().to_dict()

        assert data["attributes"]["url"]["type"] == "string"
        assert data["attributes"]["additional_headers"]["optional"] is True


class TestResourceRegistry:
    def test_builtin_registration(self):
        assert "hasura_remote_schema" in list_resource_types()

    def test_registered_at_import(self):
        resource_type = resource_registry.get("hasura_remote_schema")

        assert resource_type.factory is RemoteSchemaResource
        assert resource_type.schema.name == RemoteSchemaResource.RESOURCE

    def test_schema_follows_subclass_type_name(self):
        class Renamed(RemoteSchemaResource):
            RESOURCE = "hasura_remote_schema_v2"

        assert Renamed.schema().name == "hasura_remote_schema_v2"

    def test_create_passes_config(self, provider_config):
        resource = create_resource("hasura_remote_schema", provider_config)

        assert isinstance(resource, RemoteSchemaResource)

    def test_unknown_type(self):
        with pytest.raises(KeyError):
            create_resource("hasura_action", None)

    def test_duplicate_registration(self):
        registry = ResourceRegistry()
        registry.register(RemoteSchemaResource)

        with pytest.raises(ValueError):
            registry.register(RemoteSchemaResource)

    def test_register_as_decorator(self):
        registry = ResourceRegistry()

        @registry.register
        class Dummy:
            @staticmethod
            def schema():
                return ProviderResourceSchema(name="dummy", description="d", attributes={})

        assert registry.get("dummy").factory is Dummy
        assert registry.names() == ["dummy"]


class TestProviderRegistry:
    def test_hasura_is_registered(self):
        spec = next(spec for spec in list_providers() if spec.name == "hasura")

        assert spec.factory is HasuraProvider
        assert spec.version

    def test_create_provider_passes_kwargs(self, settings):
        provider = create_provider("hasura", settings=settings)

        assert isinstance(provider, HasuraProvider)
        assert provider.configure({"host": "hasura.example.com", "admin_secret": "s"}) == []

    def test_unknown_provider(self):
        with pytest.raises(KeyError):
            create_provider("postgres")

    def test_name_required(self):
        with pytest.raises(ValueError):
            ProviderRegistry().register("", HasuraProvider)
