"""Authentication schemas for JWT tokens and user context."""

from pydantic import BaseModel, ConfigDict, Field


class UserContext(BaseModel):
    """Authenticated user context extracted from JWT token.

    This model represents the authenticated user for the current request.
    It is populated by the auth dependency from the validated JWT.
    """

    model_config = ConfigDict(from_attributes=True)

    user_id: str = Field(description="Opaque identifier of the caller (from the identity claim)")


class TokenPayload(BaseModel):
    """Claims extracted from a verified bearer token."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str = Field(description="Caller identity")
    exp: int | None = Field(default=None, description="Expiration timestamp (Unix epoch)")
    iat: int | None = Field(default=None, description="Issued at timestamp (Unix epoch)")

    def to_user_context(self) -> UserContext:
        """Convert token payload to UserContext.

        Returns:
            UserContext: User context derived from token claims.
        """
        return UserContext(user_id=self.user_id)
