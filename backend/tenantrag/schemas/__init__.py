"""Pydantic schemas for API request/response."""
from tenantrag.schemas.tenant import TenantCreate, TenantRead, TenantCreated, MemberCreate, MemberRead
from tenantrag.schemas.user import UserCreate, UserRead, Token
from tenantrag.schemas.document import DocumentCreate, DocumentRead
from tenantrag.schemas.query import QueryCreate, QueryRead, ProcessedQuery

__all__ = [
    "TenantCreate", "TenantRead", "TenantCreated", "MemberCreate", "MemberRead",
    "UserCreate", "UserRead", "Token",
    "DocumentCreate", "DocumentRead",
    "QueryCreate", "QueryRead", "ProcessedQuery",
]
