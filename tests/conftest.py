"""
Shared pytest fixtures for the FoodTech workflow API tests.

Provides:
    - db: SQLite in-memory session with all tables (function-scoped)
    - client: FastAPI TestClient bound to that session
    - storage / cache: in-memory doubles patched into the services
    - make_profile / auth_headers: profiles and bearer headers for them
"""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import foodtech.models  # noqa: F401
from foodtech.core.exceptions import StorageError
from foodtech.core.roles import UserRole
from foodtech.db.base import Base
from foodtech.db.session import get_db
from foodtech.main import app
from foodtech.models.profile import Profile
from foodtech.services.attachment_service import purchase_attachments, rd_attachments
from foodtech.services.auth_service import auth_service
from foodtech.services.kb_service import kb_service


class FakeStorage:
    """Dict-backed object store; set ``fail_upload``/``fail_remove`` to inject errors."""

    def __init__(self):
        self.objects = {}
        self.fail_upload = False
        self.fail_remove = False
        self.removed = []

    def upload(self, bucket, key, content, content_type):
        if self.fail_upload:
            raise StorageError("Failed to upload file: injected")
        self.objects[(bucket, key)] = content

    def remove(self, bucket, key):
        self.removed.append((bucket, key))
        if self.fail_remove:
            raise StorageError("Failed to delete file: injected")
        self.objects.pop((bucket, key), None)

    def presigned_url(self, bucket, key, expires=None):
        return f"http://minio.test/{bucket}/{key}?X-Amz-Signature=test"

    def public_url(self, bucket, key):
        return f"http://minio.test/{bucket}/{key}"

    def keys(self, bucket):
        return [k for b, k in self.objects if b == bucket]


class FakeCache:
    def __init__(self):
        self.data = {}

    def get_json(self, key):
        return self.data.get(key)

    def set_json(self, key, value, ttl_seconds=600):
        self.data[key] = value

    def delete(self, key):
        self.data.pop(key, None)

    def health_check(self):
        return True


@pytest.fixture()
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture()
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def storage(monkeypatch):
    fake = FakeStorage()
    monkeypatch.setattr(purchase_attachments, "storage", fake)
    monkeypatch.setattr(rd_attachments, "storage", fake)
    monkeypatch.setattr(kb_service, "storage", fake)
    return fake


@pytest.fixture()
def cache(monkeypatch):
    fake = FakeCache()
    monkeypatch.setattr(purchase_attachments, "cache", fake)
    monkeypatch.setattr(rd_attachments, "cache", fake)
    return fake


@pytest.fixture()
def client(db, storage, cache):
    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def make_profile(db):
    def _make(email, role=UserRole.sales_manager, name=None, **extra):
        profile = Profile(
            email=email,
            name=name,
            role=role,
            is_active=True,
            created_at=extra.pop("created_at", datetime(2026, 1, 1)),
            **extra,
        )
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile
    return _make


@pytest.fixture()
def auth_headers():
    def _headers(profile):
        return {"Authorization": f"Bearer {auth_service.token_for(profile)}"}
    return _headers


@pytest.fixture()
def admin(make_profile):
    return make_profile("admin@foodtech.test", role=UserRole.admin, name="Admin")
