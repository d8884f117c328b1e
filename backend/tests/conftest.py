# backend/tests/conftest.py
import os
import sys
import pathlib
import tempfile

import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# -------------------------------------------------------------------------------------------------
# Path & environment setup (must happen BEFORE importing the app)
# -------------------------------------------------------------------------------------------------

# Ensure backend/ is importable
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Temp SQLite DB file for tests
TEST_DB_FILE = str(pathlib.Path(tempfile.gettempdir()) / "candidate_assessments_test.sqlite")

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{TEST_DB_FILE}")
os.environ.setdefault("CORS_ORIGINS", "http://localhost:3000")
os.environ.setdefault("PUBLIC_BASE_URL", "http://apply.test")
os.environ.setdefault("S3_BUCKET", "test-bucket")
os.environ.setdefault("S3_REGION", "us-east-1")
os.environ.setdefault("S3_ENDPOINT", "http://127.0.0.1:9000")
os.environ.setdefault("ADMIN_PASSWORD", "admin-pass")
os.environ.setdefault("JWT_ALGORITHM", "HS256")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("GROQ_API_KEY", "test-groq-key")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/0")
os.environ.setdefault("TEST_PLAINTEXT_PASSWORDS", "1")


# -------------------------------------------------------------------------------------------------
# Import app & modules AFTER env vars
# -------------------------------------------------------------------------------------------------
from main import app
from api import deps
from db import models as m
from core import security
from services import assessments as assessment_service

# -------------------------------------------------------------------------------------------------
# Test DB engine + session factory
# -------------------------------------------------------------------------------------------------
engine = create_engine(f"sqlite:///{TEST_DB_FILE}", future=True)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture(scope="function", autouse=True)
def reset_db():
    """Drop + recreate DB before each test function to ensure isolation"""
    m.Base.metadata.drop_all(bind=engine)
    m.Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function")
def db():
    """Yield a fresh DB session per test function."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


def _override_get_db():
    session = TestingSessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()


# Override the app's DB dependency
app.dependency_overrides[deps.get_db] = _override_get_db


# -------------------------------------------------------------------------------------------------
# ---- Fake S3 client (no network) ----
class _FakeS3:
    def __init__(self):
        self.deleted = []
        self.fail_keys = set()
        self.presigned = []

    def generate_presigned_url(self, ClientMethod, Params=None, ExpiresIn=3600, **kwargs):
        params = Params or {}
        self.presigned.append((ClientMethod, params.get("Key"), ExpiresIn))
        return f"https://s3.test/{params.get('Bucket')}/{params.get('Key')}?op={ClientMethod}&expires={ExpiresIn}"

    def delete_object(self, Bucket, Key):
        if Key in self.fail_keys:
            raise ClientError({"Error": {"Code": "500", "Message": "boom"}}, "DeleteObject")
        self.deleted.append(Key)

    def reset(self):
        self.deleted.clear()
        self.fail_keys.clear()
        self.presigned.clear()


_FAKE_S3 = _FakeS3()


@pytest.fixture(scope="session", autouse=True)
def patch_s3():
    """Every storage call goes through core.s3_client.get_s3_client at call time."""
    import core.s3_client as s3mod

    s3mod.get_s3_client.cache_clear()
    original = s3mod.get_s3_client
    s3mod.get_s3_client = lambda: _FAKE_S3
    yield
    s3mod.get_s3_client = original


@pytest.fixture(scope="function")
def fake_s3():
    _FAKE_S3.reset()
    yield _FAKE_S3
    _FAKE_S3.reset()


# -------------------------------------------------------------------------------------------------
# TestClient (per test: auth cookies must not leak between tests)
# -------------------------------------------------------------------------------------------------
@pytest.fixture(scope="function")
def client():
    return TestClient(app)


@pytest.fixture(scope="function")
def admin_client():
    """Client holding the shared-password admin flag cookie."""
    c = TestClient(app)
    r = c.post("/api/admin/login", json={"password": os.environ["ADMIN_PASSWORD"]})
    assert r.status_code == 200, r.text
    return c


# -------------------------------------------------------------------------------------------------
# Data helpers
# -------------------------------------------------------------------------------------------------
@pytest.fixture(scope="function")
def assessment(db):
    return assessment_service.create_assessment(db, admin_label="Jane Candidate")


def make_admin(db, email, password, role=m.AdminRole.trainer, is_active=True, name="Staff"):
    admin = m.Admin(
        email=email,
        name=name,
        role=role,
        password_hash=security.get_password_hash(password),
        is_active=is_active,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin


@pytest.fixture(scope="function")
def super_admin(db):
    return make_admin(db, "boss@example.com", "boss123", role=m.AdminRole.super_admin, name="Boss")


@pytest.fixture(scope="function")
def super_client(super_admin):
    c = TestClient(app)
    r = c.post("/api/auth/login", json={"email": "boss@example.com", "password": "boss123"})
    assert r.status_code == 200, r.text
    return c


def complete_personality():
    return {
        "personality": {
            "hobbies": "chess, hiking",
            "dailyAvailability": "2-4h",
            "pressureNotes": "I break the work into small parts.",
            "honestyCommitment": True,
        }
    }


def recordings_for(assessment_id, indices=range(5)):
    return [
        {
            "questionIndex": i,
            "storagePath": f"videos/{assessment_id}/q{i + 1}-1700000000000.webm",
            "durationSec": 60,
            "sizeBytes": 1000,
            "createdAtIso": "2024-01-01T00:00:00Z",
        }
        for i in indices
    ]
