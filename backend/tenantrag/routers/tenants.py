"""Tenant directory router: tenants and their memberships."""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.exc import IntegrityError

from tenantrag.access import TenantAccessContext, require_permission
from tenantrag.errors import NotFound, ValidationFailed
from tenantrag.models.user import TenantRole, User
from tenantrag.repository import Repository, get_repository
from tenantrag.security import get_current_user
from tenantrag.schemas.tenant import MemberCreate, MemberRead, TenantCreate, TenantCreated, TenantRead
from tenantrag.services.tenant_client import TenantServiceClient, get_tenant_client

router = APIRouter(prefix="/tenants", tags=["tenants"])
logger = logging.getLogger(__name__)

# Membership granted to whoever creates a tenant
CREATOR_ROLE = "admin"
CREATOR_PERMISSIONS = ["read", "write", "admin"]


# ============ Tenants ============

@router.get("", response_model=List[TenantRead])
async def list_tenants(
    request: Request,
    current_user: User = Depends(get_current_user),
    repo: Repository = Depends(get_repository),
    remote: Optional[TenantServiceClient] = Depends(get_tenant_client),
):
    """List all tenants, newest first."""
    if remote is not None:
        return await remote.list_tenants(request.headers.get("authorization"))
    return repo.list_tenants()


@router.post("", response_model=TenantCreated, status_code=status.HTTP_201_CREATED)
async def create_tenant(
    tenant_in: TenantCreate,
    request: Request,
    current_user: User = Depends(get_current_user),
    repo: Repository = Depends(get_repository),
    remote: Optional[TenantServiceClient] = Depends(get_tenant_client),
):
    """Create a tenant and make the caller its admin member."""
    if remote is not None:
        return await remote.create_tenant(
            tenant_in.model_dump(by_alias=True),
            request.headers.get("authorization"),
        )

    tenant = repo.create_tenant(name=tenant_in.name, domain=tenant_in.domain)
    member = repo.add_member(
        tenant_id=tenant.id,
        user_id=current_user.id,
        role=CREATOR_ROLE,
        permissions=CREATOR_PERMISSIONS,
    )
    tenant.members_count = 1
    logger.info(f"User {current_user.id} created tenant {tenant.id}")

    return TenantCreated(
        **TenantRead.model_validate(tenant).model_dump(),
        creator_membership=MemberRead.model_validate(member),
    )


@router.get("/{tenant_id}", response_model=TenantRead)
async def get_tenant(
    tenant_id: int,
    request: Request,
    current_user: User = Depends(get_current_user),
    repo: Repository = Depends(get_repository),
    remote: Optional[TenantServiceClient] = Depends(get_tenant_client),
):
    """Get tenant by ID."""
    if remote is not None:
        return await remote.get_tenant(tenant_id, request.headers.get("authorization"))

    tenant = repo.get_tenant(tenant_id)
    if not tenant:
        raise NotFound("Tenant not found")
    return tenant


# ============ Members ============

@router.get("/{tenant_id}/members", response_model=List[MemberRead])
async def list_members(
    ctx: TenantAccessContext = Depends(
        require_permission("TENANT_MEMBER_READ", [TenantRole.TENANT_ADMIN, TenantRole.MANAGER])
    ),
    repo: Repository = Depends(get_repository),
):
    """List the members of a tenant."""
    return repo.list_members(ctx.tenant_id)


@router.post("/{tenant_id}/members", response_model=MemberRead, status_code=status.HTTP_201_CREATED)
async def add_member(
    member_in: MemberCreate,
    ctx: TenantAccessContext = Depends(
        require_permission("TENANT_MEMBER_WRITE", [TenantRole.TENANT_ADMIN])
    ),
    repo: Repository = Depends(get_repository),
):
    """Add a user to a tenant with a role and permission allow-list."""
    if repo.get_tenant(ctx.tenant_id) is None:
        raise NotFound("Tenant not found")
    if repo.get_user(member_in.user_id) is None:
        raise ValidationFailed("User not found", field="userId")
    if repo.get_member(ctx.tenant_id, member_in.user_id) is not None:
        raise ValidationFailed("User is already a member of this tenant", field="userId")

    try:
        member = repo.add_member(
            tenant_id=ctx.tenant_id,
            user_id=member_in.user_id,
            role=member_in.role.value,
            department=member_in.department,
            permissions=member_in.permissions,
        )
    except IntegrityError:
        repo.db.rollback()
        raise ValidationFailed("User is already a member of this tenant", field="userId")

    logger.info(f"Added user {member.user_id} to tenant {ctx.tenant_id} as {member.role}")
    return member
