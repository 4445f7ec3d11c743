"""API routers."""
from tenantrag.routers.health import router as health_router
from tenantrag.routers.auth import router as auth_router
from tenantrag.routers.tenants import router as tenants_router
from tenantrag.routers.documents import router as documents_router
from tenantrag.routers.queries import router as queries_router

__all__ = [
    "health_router",
    "auth_router",
    "tenants_router",
    "documents_router",
    "queries_router",
]
