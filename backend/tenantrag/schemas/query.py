"""Query log schemas."""
from datetime import datetime
from pydantic import Field

from tenantrag.schemas.base import ApiModel
from tenantrag.schemas.document import DocumentRead


class QueryCreate(ApiModel):
    """Ask a question against a tenant's documents."""
    query: str = Field(min_length=1)
    tenant_id: int | None = None


class QueryRead(ApiModel):
    """Stored query log entry."""
    id: int
    tenant_id: int
    user_id: str
    query: str
    response: str | None = None
    context: str | None = None
    relevant_docs: list[str] = []
    created_at: datetime


class ProcessedQuery(QueryRead):
    """Query log entry plus the documents used as context."""
    sources: list[DocumentRead] = []
