"""API tests for tenants and memberships."""
import httpx

from tenantrag.models.user import TenantRole
from tenantrag.services.tenant_client import TenantServiceClient, get_tenant_client


class TestTenants:

    def test_create_grants_creator_membership(self, client, sample_user, auth_headers, repo):
        response = client.post("/api/tenants", json={"name": "Acme"}, headers=auth_headers(sample_user))

        assert response.status_code == 201
        data = response.json()
        assert isinstance(data["id"], int)
        assert data["name"] == "Acme"
        assert data["domain"] is None
        assert data["membersCount"] == 1
        assert data["creatorMembership"]["role"] == "admin"
        assert data["creatorMembership"]["permissions"] == ["read", "write", "admin"]
        assert data["creatorMembership"]["userId"] == sample_user.id
        assert repo.get_member(data["id"], sample_user.id) is not None

    def test_create_requires_auth(self, client, repo):
        response = client.post("/api/tenants", json={"name": "Acme"})

        assert response.status_code == 401
        assert repo.list_tenants() == []

    def test_create_requires_name(self, client, sample_user, auth_headers):
        response = client.post("/api/tenants", json={"name": ""}, headers=auth_headers(sample_user))

        assert response.status_code == 400
        assert response.json()["field"] == "name"

    def test_get(self, client, sample_user, sample_tenant, add_member, auth_headers):
        add_member(sample_tenant, sample_user, TenantRole.USER.value)

        response = client.get(f"/api/tenants/{sample_tenant.id}", headers=auth_headers(sample_user))

        assert response.status_code == 200
        assert response.json()["name"] == "Test Tenant"
        assert response.json()["membersCount"] == 1

    def test_get_missing(self, client, sample_user, auth_headers):
        response = client.get("/api/tenants/999", headers=auth_headers(sample_user))

        assert response.status_code == 404
        assert response.json() == {"message": "Tenant not found"}

    def test_list_newest_first(self, client, sample_user, auth_headers, repo):
        repo.create_tenant("First")
        repo.create_tenant("Second")

        response = client.get("/api/tenants", headers=auth_headers(sample_user))

        assert response.status_code == 200
        assert [t["name"] for t in response.json()] == ["Second", "First"]

    def test_remote_directory(self, client, sample_user, auth_headers):
        from tenantrag.main import app

        seen = {}

        def handler(request: httpx.Request):
            seen["auth"] = request.headers.get("authorization")
            return httpx.Response(200, json=[
                {"id": 7, "name": "Remote Co", "domain": "remote.io", "createdAt": "2026-01-01T00:00:00"},
            ])

        remote = TenantServiceClient("http://tenants.internal", transport=httpx.MockTransport(handler))
        app.dependency_overrides[get_tenant_client] = lambda: remote
        headers = auth_headers(sample_user)

        response = client.get("/api/tenants", headers=headers)

        assert response.status_code == 200
        assert response.json()[0]["name"] == "Remote Co"
        assert seen["auth"] == headers["Authorization"]


class TestMembers:

    def test_list_as_tenant_admin(self, client, sample_user, sample_tenant, add_member, auth_headers):
        add_member(sample_tenant, sample_user, TenantRole.TENANT_ADMIN.value, ["TENANT_MEMBER_READ"])

        response = client.get(f"/api/tenants/{sample_tenant.id}/members", headers=auth_headers(sample_user))

        assert response.status_code == 200
        [member] = response.json()
        assert member["userName"] == "Test User"
        assert member["role"] == "TENANT_ADMIN"

    def test_list_non_member(self, client, sample_user, sample_tenant, auth_headers):
        response = client.get(f"/api/tenants/{sample_tenant.id}/members", headers=auth_headers(sample_user))

        assert response.status_code == 403
        assert response.json() == {"message": "Access denied for tenant"}

    def test_list_role_not_allowed(self, client, sample_user, sample_tenant, add_member, auth_headers):
        add_member(sample_tenant, sample_user, TenantRole.VIEWER.value, ["TENANT_MEMBER_READ"])

        response = client.get(f"/api/tenants/{sample_tenant.id}/members", headers=auth_headers(sample_user))

        assert response.status_code == 403
        assert response.json() == {"message": "Role not allowed"}

    def test_list_missing_permission(self, client, sample_user, sample_tenant, add_member, auth_headers):
        add_member(sample_tenant, sample_user, TenantRole.MANAGER.value, [])

        response = client.get(f"/api/tenants/{sample_tenant.id}/members", headers=auth_headers(sample_user))

        assert response.status_code == 403
        assert response.json() == {"message": "Missing required permission"}

    def test_creator_role_is_outside_gate(self, client, sample_user, auth_headers):
        headers = auth_headers(sample_user)
        tenant_id = client.post("/api/tenants", json={"name": "Acme"}, headers=headers).json()["id"]

        response = client.get(f"/api/tenants/{tenant_id}/members", headers=headers)

        assert response.status_code == 403
        assert response.json() == {"message": "Role not allowed"}

    def test_super_admin_bypass(self, client, super_admin, sample_tenant, auth_headers):
        response = client.get(f"/api/tenants/{sample_tenant.id}/members", headers=auth_headers(super_admin))

        assert response.status_code == 200
        assert response.json() == []

    def test_add(self, client, sample_user, sample_tenant, add_member, make_user, auth_headers):
        add_member(sample_tenant, sample_user, TenantRole.TENANT_ADMIN.value, ["TENANT_MEMBER_WRITE"])
        newcomer = make_user("new@example.com")

        response = client.post(
            f"/api/tenants/{sample_tenant.id}/members",
            json={"userId": newcomer.id, "role": "USER", "department": "Finance", "permissions": ["DOCUMENT_READ"]},
            headers=auth_headers(sample_user),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["tenantId"] == sample_tenant.id
        assert data["role"] == "USER"
        assert data["department"] == "Finance"
        assert data["permissions"] == ["DOCUMENT_READ"]

    def test_add_requires_tenant_admin(self, client, sample_user, sample_tenant, add_member, make_user, auth_headers):
        add_member(sample_tenant, sample_user, TenantRole.MANAGER.value, ["TENANT_MEMBER_WRITE"])
        newcomer = make_user("new@example.com")

        response = client.post(
            f"/api/tenants/{sample_tenant.id}/members",
            json={"userId": newcomer.id, "role": "USER"},
            headers=auth_headers(sample_user),
        )

        assert response.status_code == 403
        assert response.json() == {"message": "Role not allowed"}

    def test_add_duplicate(self, client, sample_user, sample_tenant, add_member, auth_headers):
        add_member(sample_tenant, sample_user, TenantRole.TENANT_ADMIN.value, ["TENANT_MEMBER_WRITE"])

        response = client.post(
            f"/api/tenants/{sample_tenant.id}/members",
            json={"userId": sample_user.id, "role": "USER"},
            headers=auth_headers(sample_user),
        )

        assert response.status_code == 400
        assert response.json()["field"] == "userId"

    def test_add_unknown_user(self, client, sample_user, sample_tenant, add_member, auth_headers):
        add_member(sample_tenant, sample_user, TenantRole.TENANT_ADMIN.value, ["TENANT_MEMBER_WRITE"])

        response = client.post(
            f"/api/tenants/{sample_tenant.id}/members",
            json={"userId": "no-such-user", "role": "USER"},
            headers=auth_headers(sample_user),
        )

        assert response.status_code == 400
        assert response.json() == {"message": "User not found", "field": "userId"}

    def test_add_invalid_role(self, client, sample_user, sample_tenant, add_member, make_user, auth_headers):
        add_member(sample_tenant, sample_user, TenantRole.TENANT_ADMIN.value, ["TENANT_MEMBER_WRITE"])
        newcomer = make_user("new@example.com")

        response = client.post(
            f"/api/tenants/{sample_tenant.id}/members",
            json={"userId": newcomer.id, "role": "OWNER"},
            headers=auth_headers(sample_user),
        )

        assert response.status_code == 400
        assert response.json()["field"] == "role"

    def test_add_to_missing_tenant(self, client, super_admin, sample_user, auth_headers):
        response = client.post(
            "/api/tenants/999/members",
            json={"userId": sample_user.id, "role": "USER"},
            headers=auth_headers(super_admin),
        )

        assert response.status_code == 404
