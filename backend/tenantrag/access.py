"""Tenant access control: per-request context resolution and permission gates.

Routes declare what they need through dependencies::

    ctx = Depends(require_permission("DOCUMENT_WRITE", [TenantRole.TENANT_ADMIN]))

The resolver derives a ``TenantAccessContext`` from the tenant id carried by
the request and the caller's membership row; the gate then checks that
context against a permission name and an allowed-role list.
"""
import json
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from fastapi import Depends, Request

from tenantrag.errors import Forbidden, TenantContextRequired, Unauthenticated, ValidationFailed
from tenantrag.models.user import TenantRole, User
from tenantrag.repository import Repository, get_repository
from tenantrag.security import get_current_user

logger = logging.getLogger(__name__)

TENANT_ID_FIELD = "tenantId"
TENANT_ID_HEADER = "x-tenant-id"

DEFAULT_ALLOWED_ROLES = (TenantRole.TENANT_ADMIN, TenantRole.MANAGER, TenantRole.SUPER_ADMIN)


@dataclass
class TenantAccessContext:
    """The caller's standing within the tenant addressed by the request."""
    tenant_id: int
    role: str
    permissions: list[str] = field(default_factory=list)
    is_super_admin: bool = False
    department: str | None = None


# ============ Tenant id extraction ============

def _from_path(request: Request, body: Optional[dict]):
    return request.path_params.get("tenant_id")


def _from_body(request: Request, body: Optional[dict]):
    if isinstance(body, dict):
        return body.get(TENANT_ID_FIELD)
    return None


def _from_query(request: Request, body: Optional[dict]):
    return request.query_params.get(TENANT_ID_FIELD)


def _from_header(request: Request, body: Optional[dict]):
    return request.headers.get(TENANT_ID_HEADER)


# Evaluated in order; the first non-empty value wins
TENANT_ID_EXTRACTORS: tuple[Callable, ...] = (_from_path, _from_body, _from_query, _from_header)


def resolve_tenant_id(request: Request, body: Optional[dict] = None) -> int | None:
    """Return the tenant id carried by the request, or None if there is none."""
    for extractor in TENANT_ID_EXTRACTORS:
        raw = extractor(request, body)
        if raw is None or raw == "":
            continue
        if isinstance(raw, bool):
            raise ValidationFailed("Tenant id must be an integer", field=TENANT_ID_FIELD)
        try:
            return int(raw)
        except (TypeError, ValueError):
            raise ValidationFailed("Tenant id must be an integer", field=TENANT_ID_FIELD)
    return None


async def _read_json_body(request: Request) -> Optional[dict]:
    raw = await request.body()
    if not raw:
        return None
    try:
        body = json.loads(raw)
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


# ============ Resolver ============

def build_access_context(
    repo: Repository,
    user: User | None,
    tenant_id: int | None,
    required: bool = True,
) -> TenantAccessContext | None:
    """Derive the caller's context for ``tenant_id``.

    Raises:
        Unauthenticated: no user.
        TenantContextRequired: no tenant id and ``required`` is set.
        Forbidden: the user has no membership and is not a super-admin.
    """
    if user is None:
        raise Unauthenticated()

    if tenant_id is None:
        if required:
            raise TenantContextRequired()
        return None

    member = repo.get_member(tenant_id, user.id)
    if member is None and not user.is_super_admin:
        logger.info(f"User {user.id} denied access to tenant {tenant_id}: no membership")
        raise Forbidden("Access denied for tenant")

    return TenantAccessContext(
        tenant_id=tenant_id,
        role=member.role if member else TenantRole.SUPER_ADMIN.value,
        permissions=list(member.permissions or []) if member else [],
        is_super_admin=bool(user.is_super_admin),
        department=member.department if member else None,
    )


class TenantContextResolver:
    """Dependency resolving the tenant context and storing it on ``request.state``."""

    def __init__(self, required: bool = True):
        self.required = required

    async def __call__(
        self,
        request: Request,
        user: User = Depends(get_current_user),
        repo: Repository = Depends(get_repository),
    ) -> TenantAccessContext | None:
        body = await _read_json_body(request)
        tenant_id = resolve_tenant_id(request, body)
        ctx = build_access_context(repo, user, tenant_id, required=self.required)
        request.state.tenant_context = ctx
        return ctx


require_tenant_context = TenantContextResolver(required=True)
optional_tenant_context = TenantContextResolver(required=False)


# ============ Permission gate ============

def _role_values(roles: Iterable) -> frozenset[str]:
    return frozenset(r.value if isinstance(r, TenantRole) else str(r) for r in roles)


def _role_allowed(ctx: TenantAccessContext, permission: str, roles: frozenset[str]) -> bool:
    return ctx.role in roles


def _permission_granted(ctx: TenantAccessContext, permission: str, roles: frozenset[str]) -> bool:
    return permission in ctx.permissions


# (predicate, failure message) evaluated after the super-admin bypass and context check
GATE_STAGES = (
    (_role_allowed, "Role not allowed"),
    (_permission_granted, "Missing required permission"),
)


def check_permission(
    ctx: TenantAccessContext | None,
    permission: str,
    allowed_roles: Iterable = DEFAULT_ALLOWED_ROLES,
    is_super_admin: bool = False,
) -> None:
    """Raise unless ``ctx`` may perform ``permission``; the first failing stage wins."""
    if is_super_admin or (ctx is not None and ctx.is_super_admin):
        return
    if ctx is None:
        raise TenantContextRequired()

    roles = _role_values(allowed_roles)
    for predicate, message in GATE_STAGES:
        if not predicate(ctx, permission, roles):
            logger.info(f"Permission {permission} denied in tenant {ctx.tenant_id}: {message}")
            raise Forbidden(message)


def require_permission(
    permission: str,
    allowed_roles: Iterable = DEFAULT_ALLOWED_ROLES,
    context_dependency: TenantContextResolver = require_tenant_context,
):
    """Dependency factory gating a route on ``permission`` and ``allowed_roles``."""
    roles = _role_values(allowed_roles)

    async def permission_checker(
        user: User = Depends(get_current_user),
        ctx: TenantAccessContext | None = Depends(context_dependency),
    ) -> TenantAccessContext | None:
        check_permission(ctx, permission, roles, is_super_admin=bool(user.is_super_admin))
        return ctx

    return permission_checker
