"""Pytest configuration and fixtures."""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tenantrag.database import Base, get_db
from tenantrag.config import Settings
import tenantrag.models  # noqa: F401


class FakeAnswerGenerator:
    """Stands in for the chat-completions call; records what it was asked."""

    def __init__(self, answer: str = "Stub answer."):
        self.answer = answer
        self.error: Exception | None = None
        self.calls: list[tuple[str, str]] = []

    async def generate(self, system_prompt: str, question: str) -> str:
        self.calls.append((system_prompt, question))
        if self.error is not None:
            raise self.error
        return self.answer


@pytest.fixture(scope="session")
def settings():
    """Test settings."""
    return Settings(
        database_url="sqlite://",
        secret_key="test-secret-key",
        debug=True,
    )


@pytest.fixture(scope="function")
def db_session(settings):
    """Create a test database session."""
    engine = create_engine(
        settings.database_url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def repo(db_session):
    from tenantrag.repository import Repository
    return Repository(db_session)


@pytest.fixture
def fake_generator():
    return FakeAnswerGenerator()


@pytest.fixture
def client(db_session, fake_generator):
    """Test client wired to the test session and the fake generator."""
    from tenantrag.main import app
    from tenantrag.services.generation import get_answer_generator

    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_answer_generator] = lambda: fake_generator

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def password_hash():
    from tenantrag.security import get_password_hash
    return get_password_hash("testpass123")


@pytest.fixture
def make_user(db_session, password_hash):
    """Factory creating users directly in the database."""
    from tenantrag.models.user import User

    def _make(email: str, is_super_admin: bool = False, first_name: str | None = None, last_name: str | None = None):
        user = User(
            email=email,
            hashed_password=password_hash,
            first_name=first_name,
            last_name=last_name,
            is_super_admin=is_super_admin,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def sample_user(make_user):
    """Create a sample user."""
    return make_user("test@example.com", first_name="Test", last_name="User")


@pytest.fixture
def super_admin(make_user):
    return make_user("root@example.com", is_super_admin=True)


@pytest.fixture
def sample_tenant(db_session):
    """Create a sample tenant."""
    from tenantrag.models.tenant import Tenant

    tenant = Tenant(name="Test Tenant")
    db_session.add(tenant)
    db_session.commit()
    db_session.refresh(tenant)
    return tenant


@pytest.fixture
def add_member(db_session):
    """Factory adding a membership row."""
    from tenantrag.models.tenant import TenantMember

    def _add(tenant, user, role: str, permissions=(), department: str | None = None):
        member = TenantMember(
            tenant_id=tenant.id,
            user_id=user.id,
            role=role,
            permissions=list(permissions),
            department=department,
        )
        db_session.add(member)
        db_session.commit()
        db_session.refresh(member)
        return member

    return _add


@pytest.fixture
def auth_headers():
    """Factory building bearer headers, optionally carrying ``x-tenant-id``."""
    from tenantrag.security import create_access_token

    def _headers(user, tenant_id=None) -> dict:
        headers = {"Authorization": f"Bearer {create_access_token({'sub': user.id})}"}
        if tenant_id is not None:
            headers["x-tenant-id"] = str(tenant_id)
        return headers

    return _headers


@pytest.fixture
def add_document(db_session):
    """Factory adding a document row."""
    from tenantrag.models.document import Document

    def _add(tenant, user, title: str, content: str, category: str | None = None, is_public: bool = False):
        doc = Document(
            tenant_id=tenant.id,
            uploaded_by=user.id,
            title=title,
            content=content,
            category=category,
            is_public=is_public,
        )
        db_session.add(doc)
        db_session.commit()
        db_session.refresh(doc)
        return doc

    return _add
