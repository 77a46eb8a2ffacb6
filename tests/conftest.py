from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from klystra_agency.api.main import create_app
from klystra_agency.config import Settings
from klystra_agency.data.db import Database
from klystra_agency.data.repository import Repository
from klystra_agency.services.auth import create_user

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "s3cret-admin-pass"
EDITOR_USERNAME = "editor"
EDITOR_PASSWORD = "s3cret-editor-pass"

_ENV_VARS = (
    "APP_ENV",
    "DB_URL",
    "DB_FILE",
    "UPLOAD_DIR",
    "MAX_UPLOAD_BYTES",
    "SESSION_SECRET",
    "SESSION_TTL_HOURS",
    "CORS_ORIGIN",
    "PORT",
    "ADMIN_USERNAME",
    "ADMIN_PASSWORD",
)


@pytest.fixture
def api_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Settings:
    """Point every configurable path at a temporary directory."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("DB_FILE", (tmp_path / "api.db").as_posix())
    monkeypatch.setenv("UPLOAD_DIR", (tmp_path / "uploads").as_posix())
    monkeypatch.setenv("SESSION_SECRET", "test-session-secret")
    monkeypatch.setenv("MAX_UPLOAD_BYTES", str(64 * 1024))
    return Settings.from_env()


@pytest.fixture
def database(tmp_path: Path) -> Iterator[Database]:
    """A fresh SQLite file with every table created."""
    db = Database(f"sqlite:///{(tmp_path / 'store.db').as_posix()}")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def repository(database: Database) -> Repository:
    return Repository(database)


@pytest.fixture
def client(api_env: Settings) -> Iterator[TestClient]:
    """Test client for an app wired to the temporary environment."""
    app = create_app(api_env)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def app_repository(client: TestClient) -> Repository:
    """The repository the client's app is serving from."""
    return client.app.state.repository


@pytest.fixture
def admin_user(app_repository: Repository) -> str:
    return create_user(app_repository, ADMIN_USERNAME, ADMIN_PASSWORD, is_admin=True).id


@pytest.fixture
def editor_user(app_repository: Repository) -> str:
    """A logged-in capable user without the admin role."""
    return create_user(app_repository, EDITOR_USERNAME, EDITOR_PASSWORD).id


def _login(client: TestClient, username: str, password: str) -> str:
    response = client.post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["token"]


@pytest.fixture
def login_as(client: TestClient) -> Callable[[str, str], str]:
    """Log the client in and return the issued session token."""
    return lambda username, password: _login(client, username, password)


@pytest.fixture
def admin_client(client: TestClient, admin_user: str) -> TestClient:
    """The test client holding a live admin session cookie."""
    _login(client, ADMIN_USERNAME, ADMIN_PASSWORD)
    return client


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Automatically add api_env fixture to tests in API test files."""
    for item in items:
        test_file_path = Path(str(item.fspath))
        if "api" in test_file_path.stem.lower():
            item.add_marker(pytest.mark.usefixtures("api_env"))
