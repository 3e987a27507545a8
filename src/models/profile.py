"""Profile model type definitions for database operations."""

from typing import TypedDict


class Profile(TypedDict):
    """Profile table row representation.

    Represents a user profile stored in the profiles table.
    Maps directly to the database schema: ``id`` is the primary key and
    ``username`` carries a unique index.
    """

    id: str
    username: str
    first_name: str | None
    last_name: str | None
    description: str | None
    avatar_url: str | None


class ProfileSummary(TypedDict):
    """Reduced projection returned by search and batch lookups."""

    id: str
    username: str
    first_name: str | None
    last_name: str | None
    avatar_url: str | None


class ProfileUpdate(TypedDict, total=False):
    """Columns that can be updated on a profile.

    All fields are optional for partial updates.
    """

    username: str
    first_name: str
    last_name: str
    description: str
    avatar_url: str


SUMMARY_COLUMNS = "id, username, first_name, last_name, avatar_url"
