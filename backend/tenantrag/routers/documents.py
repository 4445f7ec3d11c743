"""Documents router."""
import logging
from typing import List

from fastapi import APIRouter, Depends, Query, Response, status

from tenantrag.access import (
    TenantAccessContext,
    build_access_context,
    optional_tenant_context,
    require_permission,
)
from tenantrag.errors import NotFound
from tenantrag.models.user import TenantRole, User
from tenantrag.repository import Repository, get_repository
from tenantrag.security import get_current_user
from tenantrag.schemas.document import DocumentCreate, DocumentRead

router = APIRouter(prefix="/documents", tags=["documents"])
logger = logging.getLogger(__name__)


@router.get("", response_model=List[DocumentRead])
async def list_documents(
    category: str | None = Query(None),
    ctx: TenantAccessContext | None = Depends(optional_tenant_context),
    current_user: User = Depends(get_current_user),
    repo: Repository = Depends(get_repository),
):
    """List documents, newest first.

    With a tenant (``?tenantId=`` or ``x-tenant-id``) only that tenant's
    documents are returned. Without one, super-admins see every tenant and
    other users see the tenants they belong to.
    """
    if ctx is not None:
        return repo.list_documents(tenant_id=ctx.tenant_id, category=category)

    if current_user.is_super_admin:
        return repo.list_documents(category=category)

    tenant_ids = [m.tenant_id for m in repo.list_memberships_for_user(current_user.id)]
    return repo.list_documents(category=category, tenant_ids=tenant_ids)


@router.get("/{document_id}", response_model=DocumentRead)
async def get_document(
    document_id: int,
    current_user: User = Depends(get_current_user),
    repo: Repository = Depends(get_repository),
):
    """Get document by ID."""
    doc = repo.get_document(document_id)
    if not doc:
        raise NotFound("Document not found")

    if not doc.is_public:
        build_access_context(repo, current_user, doc.tenant_id)
    return doc


@router.post("", response_model=DocumentRead, status_code=status.HTTP_201_CREATED)
async def create_document(
    doc_in: DocumentCreate,
    ctx: TenantAccessContext = Depends(
        require_permission("DOCUMENT_WRITE", [TenantRole.TENANT_ADMIN, TenantRole.MANAGER])
    ),
    current_user: User = Depends(get_current_user),
    repo: Repository = Depends(get_repository),
):
    """Upload a text document into the resolved tenant."""
    if repo.get_tenant(ctx.tenant_id) is None:
        raise NotFound("Tenant not found")

    doc = repo.create_document(
        tenant_id=ctx.tenant_id,
        title=doc_in.title,
        content=doc_in.content,
        category=doc_in.category,
        is_public=doc_in.is_public,
        uploaded_by=current_user.id,
    )
    logger.info(f"User {current_user.id} created document {doc.id} in tenant {ctx.tenant_id}")
    return doc


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: int,
    current_user: User = Depends(get_current_user),
    repo: Repository = Depends(get_repository),
):
    """Delete a document. Unknown ids succeed as well."""
    doc = repo.get_document(document_id)
    if doc is not None:
        build_access_context(repo, current_user, doc.tenant_id)
        repo.delete_document(document_id)
        logger.info(f"User {current_user.id} deleted document {document_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
