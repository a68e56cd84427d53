"""
Shared fixtures. Environment defaults must be in place before `collab_todo.config` is imported.
"""
import os

os.environ.setdefault("SECRET_KEY", "test-signing-key-for-the-suite")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from collab_todo.database.store import InMemoryStore
from collab_todo.database.user_store import UserStore
from collab_todo.main import create_app
from collab_todo.managers.jwt_manager import JWTManager
from collab_todo.services.auth_service import AuthService
from collab_todo.services.project_service import ProjectService
from collab_todo.services.todo_service import TodoService

TEST_SECRET = "test-signing-key-for-the-suite"


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def user_store():
    return UserStore()


@pytest.fixture
def jwt_manager():
    return JWTManager(secret_key=TEST_SECRET)


@pytest.fixture
def todo_service(store):
    return TodoService(store)


@pytest.fixture
def project_service(store, user_store):
    return ProjectService(store, user_store)


@pytest.fixture
def auth_service(user_store, jwt_manager):
    return AuthService(user_store, jwt_manager)


@pytest.fixture
def client():
    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Register through the API and return (user_id, auth headers)."""

    def _register(email, name="Test User", password="secret123"):
        response = client.post("/api/auth/register", json={"email": email, "password": password, "name": name})
        assert response.status_code == 201, response.text
        body = response.json()
        return body["user"]["id"], {"Authorization": f"Bearer {body['token']}"}

    return _register
