"""Query log model."""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, JSON, Index
from sqlalchemy.orm import relationship

from tenantrag.database import Base


class Query(Base):
    """Append-only record of a question, its context and the generated answer."""

    __tablename__ = "queries"
    __table_args__ = (
        Index("queries_tenant_idx", "tenant_id"),
        Index("queries_user_idx", "user_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)

    query = Column(Text, nullable=False)
    response = Column(Text, nullable=True)
    context = Column(Text, nullable=True)
    relevant_docs = Column(JSON, nullable=False, default=list)  # document titles

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    tenant = relationship("Tenant", back_populates="queries")

    def __repr__(self):
        return f"<Query(id={self.id}, len={len(self.query)})>"
