"""Storage repository over a SQLAlchemy session.

One ``Repository`` is built per request (see ``get_repository``) and handed
to handlers through FastAPI dependency injection.
"""
from typing import List, Optional

from fastapi import Depends
from sqlalchemy import func, select, delete
from sqlalchemy.orm import Session, selectinload

from tenantrag.database import get_db
from tenantrag.models import Tenant, TenantMember, User, Document, Query


class Repository:
    """CRUD over tenants, memberships, documents, queries and users."""

    def __init__(self, db: Session):
        self.db = db

    # ============ Tenants ============

    def _tenants_with_counts(self):
        return (
            select(Tenant, func.count(TenantMember.id).label("members_count"))
            .outerjoin(TenantMember, TenantMember.tenant_id == Tenant.id)
            .group_by(Tenant.id)
        )

    @staticmethod
    def _attach_count(row) -> Tenant:
        tenant, members_count = row
        tenant.members_count = members_count
        return tenant

    def get_tenant(self, tenant_id: int) -> Optional[Tenant]:
        row = self.db.execute(
            self._tenants_with_counts().where(Tenant.id == tenant_id)
        ).first()
        return self._attach_count(row) if row else None

    def list_tenants(self) -> List[Tenant]:
        rows = self.db.execute(
            self._tenants_with_counts().order_by(Tenant.created_at.desc(), Tenant.id.desc())
        ).all()
        return [self._attach_count(row) for row in rows]

    def create_tenant(self, name: str, domain: str | None = None) -> Tenant:
        tenant = Tenant(name=name, domain=domain)
        self.db.add(tenant)
        self.db.commit()
        self.db.refresh(tenant)
        tenant.members_count = 0
        return tenant

    # ============ Members ============

    def list_members(self, tenant_id: int) -> List[TenantMember]:
        return self.db.scalars(
            select(TenantMember)
            .options(selectinload(TenantMember.user))
            .where(TenantMember.tenant_id == tenant_id)
            .order_by(TenantMember.id)
        ).all()

    def get_member(self, tenant_id: int, user_id: str) -> Optional[TenantMember]:
        """Membership row for (tenant, user), if any."""
        return self.db.scalars(
            select(TenantMember).where(
                TenantMember.tenant_id == tenant_id,
                TenantMember.user_id == user_id,
            )
        ).first()

    def list_memberships_for_user(self, user_id: str) -> List[TenantMember]:
        return self.db.scalars(
            select(TenantMember)
            .where(TenantMember.user_id == user_id)
            .order_by(TenantMember.created_at, TenantMember.id)
        ).all()

    def add_member(
        self,
        tenant_id: int,
        user_id: str,
        role: str,
        department: str | None = None,
        permissions: list[str] | None = None,
    ) -> TenantMember:
        member = TenantMember(
            tenant_id=tenant_id,
            user_id=user_id,
            role=role,
            department=department,
            permissions=list(permissions or []),
        )
        self.db.add(member)
        self.db.commit()
        self.db.refresh(member)
        return member

    # ============ Documents ============

    def list_documents(
        self,
        tenant_id: int | None = None,
        category: str | None = None,
        tenant_ids: list[int] | None = None,
    ) -> List[Document]:
        """Documents newest first, optionally narrowed by tenant and category."""
        stmt = select(Document).options(selectinload(Document.uploader))
        if tenant_id is not None:
            stmt = stmt.where(Document.tenant_id == tenant_id)
        if tenant_ids is not None:
            stmt = stmt.where(Document.tenant_id.in_(tenant_ids))
        if category:
            stmt = stmt.where(Document.category == category)
        stmt = stmt.order_by(Document.created_at.desc(), Document.id.desc())
        return self.db.scalars(stmt).all()

    def get_document(self, document_id: int) -> Optional[Document]:
        return self.db.scalars(
            select(Document)
            .options(selectinload(Document.uploader))
            .where(Document.id == document_id)
        ).first()

    def create_document(
        self,
        tenant_id: int,
        title: str,
        content: str,
        uploaded_by: str,
        category: str | None = None,
        is_public: bool = False,
    ) -> Document:
        doc = Document(
            tenant_id=tenant_id,
            title=title,
            content=content,
            category=category,
            uploaded_by=uploaded_by,
            is_public=is_public,
        )
        self.db.add(doc)
        self.db.commit()
        self.db.refresh(doc)
        return doc

    def delete_document(self, document_id: int) -> None:
        """Delete by id; absent ids are a no-op."""
        self.db.execute(delete(Document).where(Document.id == document_id))
        self.db.commit()

    # ============ Queries ============

    def list_queries(self, tenant_id: int | None = None, user_id: str | None = None) -> List[Query]:
        stmt = select(Query)
        if tenant_id is not None:
            stmt = stmt.where(Query.tenant_id == tenant_id)
        if user_id is not None:
            stmt = stmt.where(Query.user_id == user_id)
        stmt = stmt.order_by(Query.created_at.desc(), Query.id.desc())
        return self.db.scalars(stmt).all()

    def create_query(
        self,
        tenant_id: int,
        user_id: str,
        query: str,
        response: str | None = None,
        context: str | None = None,
        relevant_docs: list[str] | None = None,
    ) -> Query:
        row = Query(
            tenant_id=tenant_id,
            user_id=user_id,
            query=query,
            response=response,
            context=context,
            relevant_docs=list(relevant_docs or []),
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    # ============ Users ============

    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.scalars(select(User).where(User.email == email)).first()

    def create_user(
        self,
        email: str,
        hashed_password: str,
        first_name: str | None = None,
        last_name: str | None = None,
        is_super_admin: bool = False,
    ) -> User:
        user = User(
            email=email,
            hashed_password=hashed_password,
            first_name=first_name,
            last_name=last_name,
            is_super_admin=is_super_admin,
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user


def get_repository(db: Session = Depends(get_db)) -> Repository:
    """Dependency building the per-request repository."""
    return Repository(db)
