"""Client for an external tenant directory service.

Used instead of the local tenant table when ``TENANT_SERVICE_BASE_URL`` is set.
The caller's ``Authorization`` header is forwarded unchanged.
"""
import logging
from typing import Any, Optional

import httpx

from tenantrag.config import get_settings
from tenantrag.errors import NotFound, TenantServiceError

logger = logging.getLogger(__name__)


class TenantServiceClient:
    """Forwards tenant list/get/create calls to the remote service."""

    def __init__(self, base_url: str, timeout: float = 30.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _request(
        self,
        method: str,
        path: str,
        authorization: str | None = None,
        json: Any = None,
    ) -> Any:
        headers = {"content-type": "application/json"}
        if authorization:
            headers["authorization"] = authorization

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(method, path, headers=headers, json=json)
        except httpx.HTTPError as e:
            logger.error(f"Tenant service unreachable ({method} {path}): {e}")
            raise TenantServiceError() from e

        if response.status_code == 404:
            raise NotFound("Tenant not found")
        if response.status_code >= 400:
            logger.error(
                f"Tenant service error {response.status_code} on {method} {path}: "
                f"{response.text or response.reason_phrase}"
            )
            raise TenantServiceError()
        return response.json()

    async def list_tenants(self, authorization: str | None = None) -> list[dict]:
        return await self._request("GET", "/api/tenants", authorization)

    async def get_tenant(self, tenant_id: int, authorization: str | None = None) -> dict:
        return await self._request("GET", f"/api/tenants/{tenant_id}", authorization)

    async def create_tenant(self, body: dict, authorization: str | None = None) -> dict:
        return await self._request("POST", "/api/tenants", authorization, json=body)


def get_tenant_client() -> Optional[TenantServiceClient]:
    """Dependency: the remote client when configured, else None."""
    settings = get_settings()
    if not settings.tenant_service_base_url:
        return None
    return TenantServiceClient(settings.tenant_service_base_url)
