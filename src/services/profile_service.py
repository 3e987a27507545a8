"""Profile business logic service.

Enforces ownership, existence and username uniqueness, and orchestrates
the repository, the avatar storage backend and the default avatar
generator. Every operation touches exactly one profile row.
"""

import logging
import time
from typing import Any

from src.api.middleware.error_handler import (
    AlreadyExistsError,
    AuthenticationError,
    AuthorizationError,
    BadRequestError,
    ConflictError,
    InternalServiceError,
    NotFoundError,
)
from src.models.profile import Profile
from src.repositories.profile_repository import (
    ProfileRepository,
    RepositoryConflictError,
    RepositoryError,
)
from src.schemas.profile import (
    AvatarUpload,
    ProfileCreate,
    ProfileResponse,
    ProfileSummary,
    ProfileUpdate,
)
from src.services.avatar_service import AvatarGenerator
from src.storage import StorageBackend, StorageError

logger = logging.getLogger(__name__)

USERNAME_TAKEN = "Username is already taken"


class ProfileService:
    """Service for managing user profiles."""

    def __init__(
        self,
        repository: ProfileRepository,
        storage: StorageBackend,
        avatar_generator: AvatarGenerator,
        search_default_limit: int = 10,
        search_max_limit: int = 50,
    ) -> None:
        """Initialize profile service with its collaborators.

        Args:
            repository: Profile persistence.
            storage: Backend holding avatar blobs.
            avatar_generator: Renders default avatars on creation.
            search_default_limit: Result count when search gets no limit.
            search_max_limit: Upper bound applied to any search limit.
        """
        self.repository = repository
        self.storage = storage
        self.avatar_generator = avatar_generator
        self.search_default_limit = search_default_limit
        self.search_max_limit = search_max_limit

    # Reads

    async def get_by_id(self, profile_id: str) -> ProfileResponse:
        """Get a profile by id. Public, no authorization.

        Raises:
            NotFoundError: If no profile exists for ``profile_id``.
        """
        profile = await self._find(profile_id)
        if not profile:
            raise NotFoundError("Profile not found")
        return ProfileResponse.model_validate(profile)

    async def get_me(self, caller_id: str | None) -> ProfileResponse:
        """Get the caller's own profile."""
        if not caller_id:
            raise AuthenticationError("Not authenticated")
        return await self.get_by_id(caller_id)

    async def search(self, query: str | None, limit: int | None = None) -> list[ProfileSummary]:
        """Search profiles by username, first or last name.

        Args:
            query: Case-insensitive substring to look for.
            limit: Maximum number of results; clamped to the configured bounds.

        Returns:
            list[ProfileSummary]: Matching profiles, at most ``limit``.

        Raises:
            BadRequestError: If ``query`` is empty.
        """
        if not query or not query.strip():
            raise BadRequestError("Query is required")

        if limit is None:
            limit = self.search_default_limit
        limit = max(1, min(limit, self.search_max_limit))

        try:
            rows = await self.repository.search(query.strip(), limit)
        except RepositoryError as e:
            logger.error("Search profiles failed: %s", e)
            raise InternalServiceError() from e

        return [ProfileSummary.model_validate(row) for row in rows[:limit]]

    async def get_batch(self, profile_ids: Any) -> list[ProfileSummary]:
        """Get summaries for a list of ids, skipping unknown ones.

        Raises:
            BadRequestError: If ``profile_ids`` is missing, not a list, or
                holds anything other than strings.
        """
        if profile_ids is None or not isinstance(profile_ids, list):
            raise BadRequestError("Invalid list of identifiers")
        if not all(isinstance(profile_id, str) for profile_id in profile_ids):
            raise BadRequestError("Invalid list of identifiers")
        if not profile_ids:
            return []

        unique_ids = list(dict.fromkeys(profile_ids))
        try:
            rows = await self.repository.find_many(unique_ids)
        except RepositoryError as e:
            logger.error("Batch get profiles failed: %s", e)
            raise InternalServiceError() from e

        return [ProfileSummary.model_validate(row) for row in rows]

    # Writes

    async def create_for_owner(self, caller_id: str | None, data: ProfileCreate) -> ProfileResponse:
        """Create the caller's profile with a generated default avatar.

        Args:
            caller_id: Authenticated identity; becomes the profile id.
            data: Initial profile fields; ``username`` is required.

        Returns:
            ProfileResponse: The created profile.

        Raises:
            AuthenticationError: If there is no caller identity.
            BadRequestError: If ``username`` is empty.
            AlreadyExistsError: If the caller already has a profile.
            ConflictError: If ``username`` belongs to another profile.
        """
        if not caller_id:
            raise AuthenticationError("Not authenticated")

        username = data.username or ""
        if not username.strip():
            raise BadRequestError("Username is required")

        if await self._find(caller_id):
            raise AlreadyExistsError("Profile already exists")

        await self._ensure_username_available(username, caller_id)

        avatar_url = self._store(
            self.avatar_generator.render(username),
            f"{username}_{int(time.time() * 1000)}.png",
            self.avatar_generator.content_type,
        )

        profile: Profile = {
            "id": caller_id,
            "username": username,
            "first_name": data.first_name or None,
            "last_name": data.last_name or None,
            "description": data.description or None,
            "avatar_url": avatar_url,
        }

        try:
            created = await self.repository.create(profile)
        except RepositoryConflictError as e:
            self._discard(avatar_url)
            # Lost a race: either our id or the username was claimed in between.
            if await self._find(caller_id):
                raise AlreadyExistsError("Profile already exists") from e
            raise ConflictError(USERNAME_TAKEN) from e
        except RepositoryError as e:
            self._discard(avatar_url)
            logger.error("Create profile %s failed: %s", caller_id, e)
            raise InternalServiceError() from e

        logger.info("Created profile %s (%s)", caller_id, username)
        return ProfileResponse.model_validate(created)

    async def update_profile(
        self,
        caller_id: str | None,
        target_id: str,
        data: ProfileUpdate,
    ) -> ProfileResponse:
        """Apply a partial update to the caller's own profile.

        Only fields carrying a non-empty value are written; everything
        else keeps its stored value.

        Raises:
            AuthorizationError: If the caller is not the profile owner.
            NotFoundError: If the profile does not exist.
            ConflictError: If the new username belongs to another profile.
        """
        self._ensure_owner(caller_id, target_id)

        existing = await self._find(target_id)
        if not existing:
            raise NotFoundError("Profile not found")

        changes = data.changes()
        if "username" in changes:
            if not changes["username"].strip():
                del changes["username"]
            else:
                await self._ensure_username_available(changes["username"], target_id)

        if not changes:
            return ProfileResponse.model_validate(existing)

        try:
            updated = await self.repository.update(target_id, changes)
        except RepositoryConflictError as e:
            raise ConflictError(USERNAME_TAKEN) from e
        except RepositoryError as e:
            logger.error("Update profile %s failed: %s", target_id, e)
            raise InternalServiceError() from e

        if not updated:
            raise NotFoundError("Profile not found")
        return ProfileResponse.model_validate(updated)

    async def replace_avatar(
        self,
        caller_id: str | None,
        target_id: str,
        upload: AvatarUpload | None,
    ) -> str:
        """Replace a profile's avatar with an uploaded image.

        The new blob is written and the record updated before the old blob
        is removed, so the profile never references a deleted blob.

        Returns:
            str: URL of the new avatar.

        Raises:
            AuthorizationError: If the caller is not the profile owner.
            BadRequestError: If no file or an empty file was uploaded.
            NotFoundError: If the profile does not exist.
        """
        self._ensure_owner(caller_id, target_id)

        if upload is None or not upload.data:
            raise BadRequestError("File not uploaded")

        existing = await self._find(target_id)
        if not existing:
            raise NotFoundError("Profile not found")

        content_type = upload.content_type or "application/octet-stream"
        new_url = self._store(upload.data, upload.filename or "avatar", content_type)

        try:
            updated = await self.repository.update(target_id, {"avatar_url": new_url})
        except RepositoryError as e:
            self._discard(new_url)
            logger.error("Update avatar for %s failed: %s", target_id, e)
            raise InternalServiceError() from e

        if not updated:
            self._discard(new_url)
            raise NotFoundError("Profile not found")

        old_url = existing.get("avatar_url")
        if old_url and old_url != new_url:
            self._discard(old_url)

        logger.info("Replaced avatar for profile %s", target_id)
        return updated.get("avatar_url") or new_url

    # Helpers

    @staticmethod
    def _ensure_owner(caller_id: str | None, target_id: str) -> None:
        if not caller_id or caller_id != target_id:
            raise AuthorizationError("Access denied")

    async def _find(self, profile_id: str) -> Profile | None:
        try:
            return await self.repository.find_by_id(profile_id)
        except RepositoryError as e:
            logger.error("Lookup of profile %s failed: %s", profile_id, e)
            raise InternalServiceError() from e

    async def _ensure_username_available(self, username: str, owner_id: str) -> None:
        try:
            holder = await self.repository.find_by_username(username)
        except RepositoryError as e:
            logger.error("Username lookup failed: %s", e)
            raise InternalServiceError() from e

        if holder and holder["id"] != owner_id:
            raise ConflictError(USERNAME_TAKEN)

    def _store(self, data: bytes, filename: str, content_type: str) -> str:
        try:
            return self.storage.put(data, filename, content_type)
        except StorageError as e:
            logger.error("Avatar upload failed: %s", e)
            raise InternalServiceError("Failed to upload file") from e

    def _discard(self, url: str) -> None:
        """Delete a blob, logging instead of raising on failure."""
        try:
            self.storage.delete(url)
        except StorageError as e:
            logger.warning("Could not delete avatar %s: %s", url, e)
