"""Unit tests for FastAPI dependency injection functions."""

from typing import Callable

import pytest
from fastapi import HTTPException

from src.api.deps import get_current_user, get_profile_service
from src.api.middleware.error_handler import ConfigurationError
from src.core.config import Settings
from src.schemas.auth import UserContext
from src.services.profile_service import ProfileService
from tests.fakes import FakeProfileRepository, FakeStorage

TEST_JWT_SECRET = "test-jwt-secret-for-unit-tests"


def _settings(secret: str = TEST_JWT_SECRET) -> Settings:
    return Settings(
        supabase_url="https://test.supabase.co",
        supabase_secret_key="test-secret",
        jwt_secret_key=secret,
        search_max_limit=25,
    )


class TestGetCurrentUser:
    """Tests for get_current_user dependency."""

    @pytest.mark.asyncio
    async def test_extracts_user_context_correctly(self, make_token: Callable[..., str]) -> None:
        """Test get_current_user extracts UserContext from valid token."""
        user = await get_current_user(_settings(), f"Bearer {make_token('u1')}")

        assert isinstance(user, UserContext)
        assert user.user_id == "u1"

    @pytest.mark.asyncio
    async def test_raises_401_for_missing_header(self) -> None:
        """Test get_current_user raises 401 when Authorization header is missing."""
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(_settings(), "")

        assert exc_info.value.status_code == 401
        assert "Authorization header required" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_raises_401_for_invalid_header_format(self) -> None:
        """Test get_current_user raises 401 for invalid header format."""
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(_settings(), "invalid-token")

        assert exc_info.value.status_code == 401
        assert "Invalid authorization header format" in exc_info.value.detail

    @pytest.mark.asyncio
    async def test_raises_401_for_expired_token(self, make_token: Callable[..., str]) -> None:
        """Test get_current_user raises 401 for an expired token."""
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(_settings(), f"Bearer {make_token(exp_offset=-60)}")

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Token has expired"

    @pytest.mark.asyncio
    async def test_raises_401_for_bad_signature(self, make_token: Callable[..., str]) -> None:
        """Test get_current_user raises 401 for a forged token."""
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(_settings(), f"Bearer {make_token(secret='forged')}")

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_missing_key_is_server_error(self, make_token: Callable[..., str]) -> None:
        """Test that an unconfigured verifier surfaces as a 500."""
        with pytest.raises(ConfigurationError) as exc_info:
            await get_current_user(_settings(secret=""), f"Bearer {make_token()}")

        assert exc_info.value.status_code == 500


class TestGetProfileService:
    """Tests for get_profile_service dependency."""

    def test_wires_collaborators_and_limits(self) -> None:
        """Test that the service receives the injected repository, storage and limits."""
        repository = FakeProfileRepository()
        storage = FakeStorage()

        service = get_profile_service(_settings(), repository, storage)

        assert isinstance(service, ProfileService)
        assert service.repository is repository
        assert service.storage is storage
        assert service.search_max_limit == 25
        assert service.avatar_generator.size == 200
