"""FastAPI dependency injection functions."""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from src.api.middleware.auth import AuthErrorCode, verify_token
from src.api.middleware.error_handler import ConfigurationError
from src.core.config import Settings, get_settings
from src.core.supabase import get_supabase_client
from src.repositories.profile_repository import ProfileRepository, SupabaseProfileRepository
from src.schemas.auth import UserContext
from src.services.avatar_service import AvatarGenerator
from src.services.profile_service import ProfileService
from src.storage import StorageBackend, create_storage_backend

logger = logging.getLogger(__name__)

SettingsDep = Annotated[Settings, Depends(get_settings)]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    settings: SettingsDep,
    authorization: Annotated[str, Header(description="Bearer token")] = "",
) -> UserContext:
    """Extract and validate the current user from the Authorization header.

    This dependency requires a valid JWT token in the Authorization header.
    Use this for endpoints that require authentication.

    Args:
        settings: Application settings holding the verification key.
        authorization: The Authorization header value (Bearer token).

    Returns:
        UserContext: The authenticated user's context.

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired.
        ConfigurationError: 500 if no verification key is configured.
    """
    if not authorization:
        raise _unauthorized("Authorization header required")

    # Extract the token from "Bearer <token>" format
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise _unauthorized("Invalid authorization header format. Expected: Bearer <token>")

    result = verify_token(parts[1], settings)
    if result.ok:
        return result.payload.to_user_context()

    error = result.error
    if error.code == AuthErrorCode.MISCONFIGURED:
        logger.error("Token verification unavailable: %s", error.message)
        raise ConfigurationError()
    if error.code == AuthErrorCode.TOKEN_EXPIRED:
        raise _unauthorized("Token has expired")
    raise _unauthorized(error.message)


CurrentUser = Annotated[UserContext, Depends(get_current_user)]


@lru_cache
def get_storage_backend() -> StorageBackend:
    """Get the process-wide avatar storage backend."""
    settings = get_settings()
    storage = create_storage_backend(settings)
    logger.info("Using %s avatar storage", storage.name)
    return storage


def get_profile_repository(settings: SettingsDep) -> ProfileRepository:
    """Get the Supabase-backed profile repository."""
    return SupabaseProfileRepository(get_supabase_client(), settings.profiles_table)


def get_profile_service(
    settings: SettingsDep,
    repository: Annotated[ProfileRepository, Depends(get_profile_repository)],
    storage: Annotated[StorageBackend, Depends(get_storage_backend)],
) -> ProfileService:
    """Assemble the profile service from its collaborators."""
    return ProfileService(
        repository=repository,
        storage=storage,
        avatar_generator=AvatarGenerator(settings.avatar_size),
        search_default_limit=settings.search_default_limit,
        search_max_limit=settings.search_max_limit,
    )


ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]
