import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("SEED_DEMO_DATA", "false")
os.environ.setdefault("ENABLE_STORAGE_SWEEP", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import create_tables  # noqa: F401  registers every model on Base
from config import settings
from database import Base, get_db
from main import app
from modules.auth.services.auth_service import AuthService
from modules.users.models import User, UserRole

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "password123"
_password_hash = None


def password_hash():
    # bcrypt at 12 rounds is slow; hash once per run
    global _password_hash
    if _password_hash is None:
        _password_hash = AuthService.get_password_hash(PASSWORD)
    return _password_hash


@pytest.fixture(autouse=True)
def clean_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "upload_dir", str(path))
    return path


@pytest.fixture
def client(upload_dir):
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


def create_user(session, nomor_id="UW-001", email=None, role=UserRole.NON_IT,
                nama_lengkap="Staff Underwriting", divisi="Underwriting", cabang="Jakarta Pusat"):
    user = User(
        nomor_id=nomor_id,
        nama_lengkap=nama_lengkap,
        email=email or f"{nomor_id.lower()}@ramayana.co.id",
        password_hash=password_hash(),
        divisi=divisi,
        cabang=cabang,
        role=role,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def principal(user):
    return AuthService.principal_for(user)


def auth_headers(user):
    token = AuthService.create_session_token(AuthService.principal_for(user))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def staff(session):
    return create_user(session)


@pytest.fixture
def other_staff(session):
    return create_user(session, nomor_id="CL-001", nama_lengkap="Staff Claims", divisi="Claims")


@pytest.fixture
def admin(session):
    return create_user(
        session, nomor_id="IT-001", email="admin@ramayana.co.id", role=UserRole.IT,
        nama_lengkap="Administrator SIAR", divisi="Information Technology",
    )
