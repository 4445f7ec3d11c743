"""Document schemas."""
from datetime import datetime
from pydantic import Field

from tenantrag.schemas.base import ApiModel


class DocumentCreate(ApiModel):
    """Create document request.

    ``tenant_id`` is optional here: it defaults to the tenant resolved for the
    request (path, body, query string or ``x-tenant-id`` header).
    """
    title: str = Field(min_length=1)
    content: str
    category: str | None = None
    is_public: bool = False
    tenant_id: int | None = None


class DocumentRead(ApiModel):
    """Document response."""
    id: int
    tenant_id: int
    title: str
    content: str
    category: str | None = None
    uploaded_by: str
    is_public: bool
    created_at: datetime
    uploader_name: str | None = None
