"""Profile Pydantic schemas for API request/response models.

Field names are snake_case in Python and camelCase on the wire, matching
the JSON shape other services already consume.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProfileCreate(BaseModel):
    """Schema for creating the caller's own profile.

    ``username`` is validated by the service so that a missing value is
    reported as a 400 rather than a schema error.
    """

    model_config = ConfigDict(populate_by_name=True)

    username: str | None = Field(default=None, max_length=255, description="Unique username")
    first_name: str | None = Field(default=None, alias="firstName", max_length=255)
    last_name: str | None = Field(default=None, alias="lastName", max_length=255)
    description: str | None = Field(default=None, description="Free-form profile description")


class ProfileUpdate(BaseModel):
    """Schema for updating a profile.

    All fields are optional for partial updates. Absent or empty values
    leave the stored value untouched.
    """

    model_config = ConfigDict(populate_by_name=True)

    username: str | None = Field(default=None, max_length=255, description="New username")
    first_name: str | None = Field(default=None, alias="firstName", max_length=255)
    last_name: str | None = Field(default=None, alias="lastName", max_length=255)
    description: str | None = Field(default=None, description="New description")

    def changes(self) -> dict[str, str]:
        """Return only the fields that carry a non-empty value."""
        return {key: value for key, value in self.model_dump().items() if value}


class ProfileSummary(BaseModel):
    """Reduced profile projection used by search and batch lookups."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str = Field(description="Profile identifier (owner's user id)")
    username: str = Field(description="Unique username")
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    avatar_url: str | None = Field(default=None, alias="avatarUrl")


class ProfileResponse(ProfileSummary):
    """Schema for full profile API responses."""

    description: str | None = Field(default=None, description="Free-form profile description")


class AvatarResponse(BaseModel):
    """Response returned after an avatar replacement."""

    model_config = ConfigDict(populate_by_name=True)

    avatar_url: str = Field(alias="avatarUrl", description="URL of the new avatar image")


class BatchRequest(BaseModel):
    """Request body for batch profile lookups.

    ``user_ids`` is left untyped so the service can reject scalars and
    other shapes with a 400.
    """

    model_config = ConfigDict(populate_by_name=True)

    user_ids: Any = Field(default=None, alias="userIds", description="List of profile ids")


class AvatarUpload(BaseModel):
    """Uploaded avatar blob handed from the HTTP layer to the service."""

    data: bytes = Field(description="Raw image bytes")
    content_type: str | None = Field(default=None, description="MIME type reported by the client")
    filename: str | None = Field(default=None, description="Original filename reported by the client")
