"""
Pytest Configuration and Fixtures
"""
import os
import tempfile
from contextlib import contextmanager, ExitStack
from unittest.mock import patch

# Settings are read at import time: point them at throwaway resources first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="arsip-biak-uploads-"))

import pytest
from fastapi.testclient import TestClient
from httpx import AsyncClient, ASGITransport
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.models import Base, Admin

# Every module that opens sessions through get_db_context
DB_CONTEXT_MODULES = [
    "app.database",
    "app.services.auth_service",
    "app.services.hierarchy_service",
    "app.services.archive_service",
    "app.services.letter_service",
    "app.services.education_service",
]


@pytest.fixture
def db_engine():
    """In-memory SQLite engine shared by every session of one test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(autouse=True)
def db_context(session_factory):
    """Patch get_db_context in every service module to use the test engine"""

    @contextmanager
    def _test_context():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    with ExitStack() as stack:
        for module in DB_CONTEXT_MODULES:
            stack.enter_context(patch(f"{module}.get_db_context", _test_context))
        yield _test_context


@pytest.fixture
def db_session(session_factory):
    """Session for seeding and asserting directly against the database"""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    """Store uploads of each test in its own temporary directory"""
    from app.services.storage_service import storage_service

    path = tmp_path / "uploads"
    path.mkdir()
    monkeypatch.setattr(storage_service, "upload_dir", str(path))
    return path


@pytest.fixture
def test_client():
    """Create test client for API testing"""
    from app.main import app

    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


@pytest.fixture
async def async_client():
    """Create async test client for async API testing"""
    from app.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


@pytest.fixture(scope="session")
def admin_password_hash():
    from app.services.auth_service import auth_service

    return auth_service.hash_password("admin123")


@pytest.fixture
def admin_user(db_session, admin_password_hash):
    """Admin row in the test database (admin/admin123)"""
    admin = Admin(username="admin", name="Administrator", hashed_password=admin_password_hash, is_active=True)
    db_session.add(admin)
    db_session.commit()
    db_session.refresh(admin)
    return admin


@pytest.fixture
def admin_token(admin_user):
    """Generate admin token for testing protected routes"""
    from app.services.auth_service import auth_service

    return auth_service.create_access_token(
        data={"id": admin_user.id, "username": admin_user.username, "isAdmin": True}
    )


@pytest.fixture
def viewer_token():
    """Token of an authenticated user without admin rights"""
    from app.services.auth_service import auth_service

    return auth_service.create_access_token(
        data={"id": 99, "username": "viewer", "isAdmin": False}
    )


@pytest.fixture
def admin_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def sample_letter_data():
    """Form fields for a plain letter"""
    return {
        "name": "Surat Permohonan Legalisir",
        "date": "15-01-2024",
        "sender": "Bagian Akademik",
        "recipient": "BIAK",
        "subject": "Permohonan legalisir ijazah",
        "letter_type": "biasa",
    }
