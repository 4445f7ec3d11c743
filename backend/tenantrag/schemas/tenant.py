"""Tenant and membership schemas."""
from datetime import datetime
from pydantic import Field

from tenantrag.models.user import TenantRole
from tenantrag.schemas.base import ApiModel


class TenantCreate(ApiModel):
    """Create tenant request."""
    name: str = Field(min_length=1)
    domain: str | None = None


class TenantRead(ApiModel):
    """Tenant response."""
    id: int
    name: str
    domain: str | None = None
    created_at: datetime
    members_count: int | None = None


class MemberCreate(ApiModel):
    """Add member request; the tenant comes from the route."""
    user_id: str = Field(min_length=1)
    role: TenantRole
    department: str | None = None
    permissions: list[str] = []


class MemberRead(ApiModel):
    """Membership response."""
    id: int
    tenant_id: int
    user_id: str
    role: str
    department: str | None = None
    permissions: list[str] = []
    created_at: datetime
    user_name: str | None = None


class TenantCreated(TenantRead):
    """Create tenant response, with the membership granted to the creator."""
    creator_membership: MemberRead | None = None
