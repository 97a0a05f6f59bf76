import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["UPLOADS_DIR"] = tempfile.mkdtemp(prefix="campus-swipe-uploads-")

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

import app.main as m
from app import repo
from app.auth.security import get_token_codec, hash_password
from app.database import Base, engine

_PASSWORD_HASH = hash_password("password123")


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    m.app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(m.app)


@pytest.fixture
def make_user():
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        fields = {
            "email": f"user{counter['n']}@campus.edu",
            "password_hash": _PASSWORD_HASH,
            "name": f"User {counter['n']}",
            "age": 20,
            "gender": "FEMALE",
            "interested_in": "MALE",
            "image": f"https://img.example/{counter['n']}.jpg",
            "instagram": f"user{counter['n']}",
        }
        fields.update(overrides)
        return repo.create_user(**fields)

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {get_token_codec().issue(str(user['id']))}"}

    return _headers
