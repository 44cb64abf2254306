"""Tests for the pod service API client."""

import json

import httpx
import pytest

from pod_service_cli.client import (
    AuthenticationError,
    ConflictError,
    ConnectionError,
    NotFoundError,
    PodServiceClient,
    ServiceClientError,
)

BASE_URL = "http://localhost:8000"


def make_client(handler) -> PodServiceClient:
    """PodServiceClient whose requests are answered by handler."""
    client = PodServiceClient(BASE_URL, api_key="test-key")
    client._client = httpx.AsyncClient(
        base_url=BASE_URL,
        headers={"Authorization": "Bearer test-key"},
        transport=httpx.MockTransport(handler),
    )
    return client


class TestPodServiceClient:

    def test_initialization_strips_trailing_slash(self):
        client = PodServiceClient("http://localhost:8000/", "key", timeout=10.0)

        assert client.base_url == "http://localhost:8000"
        assert client.api_key == "key"
        assert client.timeout == 10.0

    @pytest.mark.asyncio
    async def test_context_manager_opens_and_closes(self):
        async with PodServiceClient(BASE_URL, "key") as client:
            assert client._client is not None
            assert client._client.headers["Authorization"] == "Bearer key"

        assert client._client is None

    @pytest.mark.asyncio
    async def test_add_pod(self, sample_pod_payload):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(201, json={"id": 5})

        client = make_client(handler)
        pod_id = await client.add_pod(sample_pod_payload)
        await client.close()

        assert pod_id == 5
        assert seen == {
            "method": "POST",
            "path": "/api/v1/pods",
            "body": sample_pod_payload,
            "auth": "Bearer test-key",
        }

    @pytest.mark.asyncio
    async def test_list_pods(self):
        client = make_client(lambda request: httpx.Response(200, json=[{"id": 1, "name": "web"}]))

        pods = await client.list_pods()
        await client.close()

        assert pods == [{"id": 1, "name": "web"}]

    @pytest.mark.asyncio
    async def test_get_pod_not_found(self):
        client = make_client(lambda request: httpx.Response(404, json={"detail": "Pod not found"}))

        with pytest.raises(NotFoundError) as exc_info:
            await client.get_pod(9)
        await client.close()

        assert str(exc_info.value) == "Pod not found"

    @pytest.mark.asyncio
    async def test_create_deployment_conflict_carries_error_triple(self, sample_pod_payload):
        detail = {"code": "1", "message": "Pod web already exists in namespace default", "status": 1003}
        client = make_client(lambda request: httpx.Response(409, json={"detail": detail}))

        with pytest.raises(ConflictError) as exc_info:
            await client.create_deployment(sample_pod_payload)
        await client.close()

        assert exc_info.value.code == "1"
        assert exc_info.value.status == 1003
        assert "already exists" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_delete_deployment_path(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["path"] = request.url.path
            return httpx.Response(200, json={"pod_name": "web", "namespace": "default", "message": "ok"})

        client = make_client(handler)
        await client.delete_deployment(3)
        await client.close()

        assert seen == {"method": "DELETE", "path": "/api/v1/pods/3/deployment"}

    @pytest.mark.asyncio
    async def test_server_error(self, sample_pod_payload):
        detail = {"code": "3", "message": "Failed to update deployment web", "status": 1005}
        client = make_client(lambda request: httpx.Response(502, json={"detail": detail}))

        with pytest.raises(ServiceClientError) as exc_info:
            await client.update_deployment(sample_pod_payload)
        await client.close()

        assert not isinstance(exc_info.value, (NotFoundError, ConflictError))
        assert exc_info.value.code == "3"

    @pytest.mark.asyncio
    async def test_authentication_error(self):
        client = make_client(lambda request: httpx.Response(401, json={"detail": "Unauthorized"}))

        with pytest.raises(AuthenticationError):
            await client.list_pods()
        await client.close()

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        with pytest.raises(ConnectionError) as exc_info:
            await client.list_pods()
        await client.close()

        assert BASE_URL in str(exc_info.value)
