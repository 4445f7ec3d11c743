"""Tests for the remote tenant directory client."""
import asyncio
import json

import httpx
import pytest

from tenantrag.errors import NotFound, TenantServiceError
from tenantrag.services.tenant_client import TenantServiceClient


def make_client(handler) -> TenantServiceClient:
    return TenantServiceClient("http://tenants.internal/", transport=httpx.MockTransport(handler))


class TestTenantServiceClient:

    def test_forwards_authorization(self):
        seen = {}

        def handler(request: httpx.Request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("authorization")
            return httpx.Response(200, json=[{"id": 1, "name": "Acme", "domain": None, "createdAt": "2026-01-01T00:00:00Z"}])

        tenants = asyncio.run(make_client(handler).list_tenants("Bearer abc"))

        assert seen["url"] == "http://tenants.internal/api/tenants"
        assert seen["auth"] == "Bearer abc"
        assert tenants[0]["name"] == "Acme"

    def test_create_sends_body(self):
        def handler(request: httpx.Request):
            body = json.loads(request.content)
            return httpx.Response(201, json={"id": 9, **body, "createdAt": "2026-01-01T00:00:00Z"})

        tenant = asyncio.run(make_client(handler).create_tenant({"name": "Acme", "domain": "acme.io"}))

        assert tenant["id"] == 9
        assert tenant["domain"] == "acme.io"

    def test_not_found(self):
        client = make_client(lambda request: httpx.Response(404, text="missing"))
        with pytest.raises(NotFound):
            asyncio.run(client.get_tenant(5))

    def test_server_error(self):
        client = make_client(lambda request: httpx.Response(502, text="bad gateway"))
        with pytest.raises(TenantServiceError):
            asyncio.run(client.list_tenants())

    def test_unreachable(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(TenantServiceError):
            asyncio.run(make_client(handler).list_tenants())
