"""Profile persistence: the repository contract and its Supabase implementation."""

import logging
from typing import Any, Protocol

from postgrest.exceptions import APIError as PostgrestAPIError
from supabase import Client

from src.models.profile import SUMMARY_COLUMNS, Profile, ProfileSummary, ProfileUpdate

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


class RepositoryError(Exception):
    """Raised when the backing store fails to serve a query."""


class RepositoryConflictError(RepositoryError):
    """Raised when a write violates a unique key (id or username)."""


class ProfileRepository(Protocol):
    """Operations the profile service needs from persistence."""

    async def find_by_id(self, profile_id: str) -> Profile | None: ...

    async def find_by_username(self, username: str) -> Profile | None: ...

    async def find_many(self, profile_ids: list[str]) -> list[ProfileSummary]: ...

    async def search(self, query: str, limit: int) -> list[ProfileSummary]: ...

    async def create(self, profile: Profile) -> Profile: ...

    async def update(self, profile_id: str, fields: ProfileUpdate) -> Profile | None: ...


def _ilike_value(query: str) -> str:
    """Build a quoted PostgREST ILIKE operand matching ``query`` as a substring.

    LIKE wildcards in the query are escaped so they match literally, and the
    operand is double-quoted so commas and parentheses survive the ``or``
    filter syntax.
    """
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    quoted = escaped.replace("\\", "\\\\").replace('"', '\\"')
    return f'"%{quoted}%"'


class SupabaseProfileRepository:
    """Profile repository backed by a Supabase (PostgREST) table."""

    def __init__(self, client: Client, table: str = "profiles") -> None:
        self.client = client
        self.table = table

    def _execute(self, action: str, builder: Any) -> Any:
        try:
            return builder.execute()
        except PostgrestAPIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise RepositoryConflictError(f"{action}: {e.message}") from e
            raise RepositoryError(f"{action} failed: {e.message}") from e
        except Exception as e:
            raise RepositoryError(f"{action} failed: {e}") from e

    async def find_by_id(self, profile_id: str) -> Profile | None:
        """Get a profile by its id.

        Returns:
            Profile | None: The row, or None if not found.
        """
        response = self._execute(
            "find_by_id",
            self.client.table(self.table).select("*").eq("id", profile_id).limit(1),
        )
        return response.data[0] if response.data else None

    async def find_by_username(self, username: str) -> Profile | None:
        """Get a profile by exact (case-sensitive) username."""
        response = self._execute(
            "find_by_username",
            self.client.table(self.table).select("*").eq("username", username).limit(1),
        )
        return response.data[0] if response.data else None

    async def find_many(self, profile_ids: list[str]) -> list[ProfileSummary]:
        """Get summaries for every existing id; unknown ids are skipped."""
        response = self._execute(
            "find_many",
            self.client.table(self.table).select(SUMMARY_COLUMNS).in_("id", profile_ids),
        )
        return list(response.data or [])

    async def search(self, query: str, limit: int) -> list[ProfileSummary]:
        """Case-insensitive substring search over username and names."""
        value = _ilike_value(query)
        condition = ",".join(
            f"{column}.ilike.{value}" for column in ("username", "first_name", "last_name")
        )
        response = self._execute(
            "search",
            self.client.table(self.table).select(SUMMARY_COLUMNS).or_(condition).limit(limit),
        )
        return list(response.data or [])

    async def create(self, profile: Profile) -> Profile:
        """Insert a new profile row.

        Raises:
            RepositoryConflictError: If the id or username already exists.
        """
        response = self._execute(
            "create",
            self.client.table(self.table).insert(dict(profile)),
        )
        if not response.data:
            raise RepositoryError("create returned no row")
        return response.data[0]

    async def update(self, profile_id: str, fields: ProfileUpdate) -> Profile | None:
        """Apply a partial update and return the new row.

        Raises:
            RepositoryConflictError: If the new username is already taken.
        """
        response = self._execute(
            "update",
            self.client.table(self.table).update(dict(fields)).eq("id", profile_id),
        )
        return response.data[0] if response.data else None
