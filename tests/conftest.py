# tests/conftest.py

import os
import shutil
import tempfile

# Settings are read at import time, so point them at a scratch directory
# before anything from postboard is imported.
_TMP_DIR = tempfile.mkdtemp(prefix="postboard-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["IMAGES_DIR"] = os.path.join(_TMP_DIR, "images")
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["ADMIN_USER_ID"] = "1"
os.environ["APP_URL"] = "http://testserver"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient
from postboard.config import settings
from postboard.database import SessionLocal, engine
from postboard.main import app
from postboard.models import Base


PASSWORD = "correct-horse"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture(autouse=True)
def fresh_state():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    shutil.rmtree(settings.images_dir, ignore_errors=True)
    os.makedirs(settings.images_dir, exist_ok=True)
    yield


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register(client, name: str, email: str, password: str = PASSWORD):
    return client.post("/register", json={
        "name": name,
        "email": email,
        "password": password,
        "password_confirmation": password,
    })


@pytest.fixture
def make_user(client):
    """Registers a user and returns (user data, auth headers)."""
    def _make(name: str, email: str | None = None):
        res = register(client, name, email or f"{name.lower()}@example.com")
        assert res.status_code == 200, res.json()
        data = res.json()["data"]
        return data["user"], auth_headers(data["token"])
    return _make


def png_upload(name: str = "photo.png"):
    return {"image": (name, PNG_BYTES, "image/png")}


def image_path(name: str):
    return settings.images_dir / name
