"""Tenant and membership models for multi-tenancy."""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, Index, UniqueConstraint
from sqlalchemy.orm import relationship

from tenantrag.database import Base


class Tenant(Base):
    """Organization owning documents, members and queries."""

    __tablename__ = "tenants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    domain = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    members = relationship("TenantMember", back_populates="tenant", cascade="all, delete-orphan", passive_deletes=True)
    documents = relationship("Document", back_populates="tenant", cascade="all, delete-orphan", passive_deletes=True)
    queries = relationship("Query", back_populates="tenant", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Tenant(id={self.id}, name={self.name})>"


class TenantMember(Base):
    """One user's standing (role + permission allow-list) within one tenant."""

    __tablename__ = "tenant_members"
    __table_args__ = (
        UniqueConstraint("tenant_id", "user_id", name="uq_tenant_members_tenant_user"),
        Index("tenant_members_tenant_idx", "tenant_id"),
        Index("tenant_members_user_idx", "user_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    role = Column(Text, nullable=False)
    department = Column(Text, nullable=True)
    permissions = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    tenant = relationship("Tenant", back_populates="members")
    user = relationship("User", back_populates="memberships")

    @property
    def user_name(self) -> str | None:
        if self.user is None:
            return None
        return self.user.display_name

    def __repr__(self):
        return f"<TenantMember(tenant_id={self.tenant_id}, user_id={self.user_id}, role={self.role})>"
