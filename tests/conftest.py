"""Pytest configuration and fixtures."""

import os
import tempfile
import time
from collections.abc import Callable, Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient
from jose import jwt

TEST_JWT_SECRET = "test-jwt-secret-for-unit-tests"

# Set test environment variables before importing application modules
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SECRET_KEY", "test-secret-key")
os.environ.setdefault("JWT_SECRET_KEY", TEST_JWT_SECRET)
os.environ.setdefault("STORAGE_BACKEND", "local")
os.environ.setdefault("LOCAL_UPLOAD_DIR", tempfile.mkdtemp(prefix="profile-uploads-"))

from src.services.avatar_service import AvatarGenerator  # noqa: E402
from src.services.profile_service import ProfileService  # noqa: E402
from tests.fakes import FakeProfileRepository, FakeStorage  # noqa: E402


@pytest.fixture
def fake_repository() -> FakeProfileRepository:
    """Provide an empty in-memory profile repository."""
    return FakeProfileRepository()


@pytest.fixture
def fake_storage() -> FakeStorage:
    """Provide an in-memory storage backend."""
    return FakeStorage()


@pytest.fixture
def profile_service(fake_repository: FakeProfileRepository, fake_storage: FakeStorage) -> ProfileService:
    """Create ProfileService wired to in-memory collaborators."""
    return ProfileService(
        repository=fake_repository,
        storage=fake_storage,
        avatar_generator=AvatarGenerator(size=40),
        search_default_limit=10,
        search_max_limit=50,
    )


@pytest.fixture(scope="session")
def test_settings() -> Generator[Any, None, None]:
    """Provide test settings with cleared cache.

    Yields:
        Settings: Test configuration settings.
    """
    from src.core.config import get_settings

    get_settings.cache_clear()
    settings = get_settings()
    yield settings
    get_settings.cache_clear()


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Provide a factory for signed test tokens."""

    def _make(
        user_id: str = "u1",
        exp_offset: int = 3600,
        secret: str = TEST_JWT_SECRET,
        claim: str = "userId",
    ) -> str:
        now = int(time.time())
        payload = {claim: user_id, "iat": now, "exp": now + exp_offset}
        return jwt.encode(payload, secret, algorithm="HS256")

    return _make


@pytest.fixture
def auth_headers(make_token: Callable[..., str]) -> Callable[[str], dict[str, str]]:
    """Provide a factory for Authorization headers of a given user."""

    def _headers(user_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token(user_id)}"}

    return _headers


@pytest.fixture
def client(
    fake_repository: FakeProfileRepository,
    fake_storage: FakeStorage,
) -> Generator[TestClient, None, None]:
    """Provide a test client with repository and storage replaced by fakes.

    Yields:
        TestClient: FastAPI test client.
    """
    from src.api.deps import get_profile_repository, get_storage_backend
    from src.main import app

    app.dependency_overrides[get_profile_repository] = lambda: fake_repository
    app.dependency_overrides[get_storage_backend] = lambda: fake_storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
