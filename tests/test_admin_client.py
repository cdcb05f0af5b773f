import json

import httpx
import pytest
import respx
from httpx import Response
from pydantic import SecretStr

from hasura_provider import __version__
from hasura_provider.clients.admin import DEFAULT_USER_AGENT, HasuraAdminClient
from hasura_provider.config import ProviderConfig
from hasura_provider.core.errors import (
    AdminAPIError,
    AdminTransportError,
    ProviderError,
    ResponseDecodeError,
)

ADMIN_URL = "https://hasura.example.com/v1/query"
BODY = {"type": "export_metadata", "version": 1, "args": {}}


@pytest.mark.asyncio
async def test_execute_posts_json_with_admin_secret(provider_config):
    client = HasuraAdminClient(provider_config)

    with respx.mock:
        route = respx.post(ADMIN_URL).mock(return_value=Response(200, json={"ok": True}))

        response = await client.execute(BODY)

        request = route.calls.last.request
        assert request.method == "POST"
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["X-Hasura-Admin-Secret"] == "s3cret"
        assert json.loads(request.content) == BODY

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_execute_returns_non_200_without_raising(provider_config):
    client = HasuraAdminClient(provider_config)

    with respx.mock:
        respx.post(ADMIN_URL).mock(return_value=Response(500, text="boom"))
        response = await client.execute(BODY)

    assert response.status_code == 500
    assert response.text == "boom"


@pytest.mark.asyncio
async def test_empty_secret_omits_header():
    client = HasuraAdminClient(ProviderConfig(base_url=ADMIN_URL, admin_secret=SecretStr("")))

    with respx.mock:
        route = respx.post(ADMIN_URL).mock(return_value=Response(200, json={}))
        await client.execute(BODY)

        assert "X-Hasura-Admin-Secret" not in route.calls.last.request.headers


@pytest.mark.asyncio
async def test_execute_ok_raises_with_body(provider_config):
    client = HasuraAdminClient(provider_config)

    with respx.mock:
        route = respx.post(ADMIN_URL).mock(
            return_value=Response(400, json={"code": "not-exists", "error": "no such schema"})
        )

        with pytest.raises(AdminAPIError) as exc_info:
            await client.execute_ok(BODY)

        # no retries
        assert route.call_count == 1

    error = exc_info.value
    assert isinstance(error, ProviderError)
    assert error.status_code == 400
    assert "no such schema" in error.body
    assert error.message.startswith("HTTP request error. Response code: 400;")


@pytest.mark.asyncio
async def test_transport_error_is_wrapped(provider_config):
    client = HasuraAdminClient(provider_config)

    with respx.mock:
        route = respx.post(ADMIN_URL).mock(side_effect=httpx.ReadTimeout("timed out"))

        with pytest.raises(AdminTransportError) as exc_info:
            await client.execute(BODY)

        assert route.call_count == 1

    assert "ReadTimeout" in exc_info.value.message
    assert exc_info.value.details["type"] == "export_metadata"


@pytest.mark.asyncio
async def test_execute_json_decodes(provider_config):
    client = HasuraAdminClient(provider_config)

    with respx.mock:
        respx.post(ADMIN_URL).mock(return_value=Response(200, json={"remote_schemas": []}))
        payload = await client.execute_json(BODY)

    assert payload == {"remote_schemas": []}


@pytest.mark.asyncio
async def test_execute_json_rejects_malformed_body(provider_config):
    client = HasuraAdminClient(provider_config)

    with respx.mock:
        respx.post(ADMIN_URL).mock(return_value=Response(200, text="{not json"))

        with pytest.raises(ResponseDecodeError) as exc_info:
            await client.execute_json(BODY)

    assert "Unable to decode Hasura response" in exc_info.value.message


@pytest.mark.asyncio
async def test_custom_transport_and_timeout(provider_config):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["timeout"] = request.extensions["timeout"]
        return httpx.Response(200, json={})

    client = HasuraAdminClient(provider_config, timeout=7.5, transport=httpx.MockTransport(handler))
    await client.execute_ok(BODY)

    assert seen["timeout"]["read"] == 7.5


@pytest.mark.asyncio
async def test_unencodable_secret_is_a_transport_error():
    client = HasuraAdminClient(ProviderConfig(ADMIN_URL, SecretStr("sécret")))

    with respx.mock(assert_all_called=False) as mock:
        route = mock.post(ADMIN_URL).mock(return_value=Response(200, json={}))

        with pytest.raises(AdminTransportError) as exc_info:
            await client.execute(BODY)

        assert route.call_count == 0

    assert "UnicodeEncodeError" in exc_info.value.message


def test_default_user_agent_tracks_package_version():
    assert DEFAULT_USER_AGENT == f"hasura-provider/{__version__}"
