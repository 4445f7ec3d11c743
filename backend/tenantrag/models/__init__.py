"""Database models."""
from tenantrag.models.tenant import Tenant, TenantMember
from tenantrag.models.user import User, TenantRole
from tenantrag.models.document import Document
from tenantrag.models.query import Query

__all__ = [
    "Tenant",
    "TenantMember",
    "User",
    "TenantRole",
    "Document",
    "Query",
]
