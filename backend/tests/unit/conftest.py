from typing import Dict, Iterator
from unittest.mock import MagicMock

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.auth import create_access_token
from app.database import init_db
from app.principal import Caller
from app.services.storage_service import StorageService
from app.services.user_service import UserService


@pytest.fixture
def _unit_engine():
    """A fresh in-memory item store per test."""
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def unit_db(_unit_engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=_unit_engine, expire_on_commit=False, future=True)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def mock_storage() -> MagicMock:
    storage = MagicMock(spec=StorageService)
    storage.upload_bytes.side_effect = (
        lambda data, folder, filename, content_type: f"https://cdn.example.com/{folder}/{filename}"
    )
    storage.delete_by_url.return_value = True
    return storage


@pytest.fixture
def admin_user(unit_db) -> Dict:
    return UserService(unit_db).create_user(
        {"email": "admin@example.com", "firstName": "Ada", "lastName": "Admin", "role": "ADMIN"}
    )


@pytest.fixture
def regular_user(unit_db) -> Dict:
    return UserService(unit_db).create_user(
        {"email": "user@example.com", "firstName": "Uma", "lastName": "User"}
    )


@pytest.fixture
def other_user(unit_db) -> Dict:
    return UserService(unit_db).create_user({"email": "other@example.com", "firstName": "Otto"})


@pytest.fixture
def admin_caller(admin_user) -> Caller:
    return Caller.from_user(admin_user)


@pytest.fixture
def user_caller(regular_user) -> Caller:
    return Caller.from_user(regular_user)


@pytest.fixture
def other_caller(other_user) -> Caller:
    return Caller.from_user(other_user)


@pytest.fixture
def admin_headers(admin_user) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token({'sub': admin_user['id']})}"}


@pytest.fixture
def user_headers(regular_user) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token({'sub': regular_user['id']})}"}


@pytest.fixture
def client(unit_db, mock_storage) -> Iterator[TestClient]:
    """App client bound to the per-test item store, with storage mocked out."""
    from app.api.dependencies.database import get_db
    from app.api.dependencies.services import get_storage_service
    from app.main import app

    def _override_get_db():
        yield unit_db

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_storage_service] = lambda: mock_storage
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
