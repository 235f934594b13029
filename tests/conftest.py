"""Shared fixtures: an in-memory SQLite database, in-memory storage and users per role."""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["STORAGE_PROVIDER"] = "memory"
os.environ["AI_MOCK_MODE"] = "true"
os.environ["MOCK_AI_LATENCY_SECONDS"] = "0"
os.environ["DOCUMENT_PROCESSING_DELAY_SECONDS"] = "0"
os.environ["OPENAI_API_KEY"] = ""

import uuid
import pytest
from fastapi.testclient import TestClient
from app.api.auth import issue_token
from app.core.security import get_password_hash
from app.db.database import Base, SessionLocal, engine
from app.main import app
from app.models.document import Document, DocumentType, ProcessingStatus
from app.models.user import User, UserRole
from storage.storage import InMemoryStorageProvider, get_storage_provider

PASSWORD = "password123"


@pytest.fixture(scope="session")
def password_hash():
    return get_password_hash(PASSWORD)


@pytest.fixture(autouse=True)
def database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def storage():
    provider = InMemoryStorageProvider()
    app.dependency_overrides[get_storage_provider] = lambda: provider
    yield provider
    app.dependency_overrides.pop(get_storage_provider, None)


@pytest.fixture
def client(storage):
    return TestClient(app)


@pytest.fixture
def make_user(db, password_hash):
    def factory(role: UserRole = UserRole.ANALYST, email: str | None = None, name: str | None = None) -> User:
        user = User(
            email=email or f"{role.value}-{uuid.uuid4().hex[:8]}@example.com",
            name=name or f"{role.value.title()} User",
            password_hash=password_hash,
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return factory


@pytest.fixture
def headers_for():
    def build(user: User) -> dict:
        return {"Authorization": f"Bearer {issue_token(user)}"}

    return build


@pytest.fixture
def analyst(make_user):
    return make_user(UserRole.ANALYST)


@pytest.fixture
def sme(make_user):
    return make_user(UserRole.SME)


@pytest.fixture
def manager(make_user):
    return make_user(UserRole.MANAGER)


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.ADMIN)


@pytest.fixture
def make_document(db):
    def factory(
        owner: User,
        name: str = "GDPR",
        type: DocumentType = DocumentType.REGULATION,
        jurisdiction: str | None = "EU",
        tags: list[str] | None = None,
        status: ProcessingStatus = ProcessingStatus.COMPLETED,
        file_url: str | None = None,
    ) -> Document:
        document = Document(
            name=name,
            type=type,
            jurisdiction=jurisdiction,
            tags=tags or [],
            uploaded_by_id=owner.id,
            processing_status=status,
            file_url=file_url,
            file_size=2048,
            content_type="application/pdf",
        )
        db.add(document)
        db.commit()
        db.refresh(document)
        return document

    return factory
