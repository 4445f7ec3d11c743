"""Tenant-scoped text document model."""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Boolean, Index
from sqlalchemy.orm import relationship

from tenantrag.database import Base


class Document(Base):
    """Text document owned by a tenant; the unit of retrieval."""

    __tablename__ = "documents"
    __table_args__ = (
        Index("documents_tenant_idx", "tenant_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    category = Column(Text, nullable=True)
    uploaded_by = Column(String(36), ForeignKey("users.id"), nullable=False)
    is_public = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    tenant = relationship("Tenant", back_populates="documents")
    uploader = relationship("User")

    @property
    def uploader_name(self) -> str | None:
        if self.uploader is None:
            return None
        return self.uploader.display_name

    def __repr__(self):
        return f"<Document(id={self.id}, title={self.title})>"
