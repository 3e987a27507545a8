"""JWT authentication middleware and utilities."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

import jwt

from src.core.config import Settings
from src.schemas.auth import TokenPayload


class AuthErrorCode(str, Enum):
    """Authentication error codes."""

    MISSING = "MISSING"
    MISCONFIGURED = "MISCONFIGURED"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"


class AuthError(Exception):
    """Authentication error with specific error code.

    Raised when JWT validation fails for any reason.
    The error code indicates the specific failure reason.
    """

    def __init__(self, message: str, code: AuthErrorCode) -> None:
        """Initialize authentication error.

        Args:
            message: Human-readable error description.
            code: Specific error code for programmatic handling.
        """
        self.message = message
        self.code = code
        super().__init__(message)

    @property
    def is_server_fault(self) -> bool:
        """Whether the failure is caused by server configuration, not the client."""
        return self.code == AuthErrorCode.MISCONFIGURED


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of a token verification: either a payload or an error."""

    payload: TokenPayload | None = None
    error: AuthError | None = None

    @property
    def ok(self) -> bool:
        return self.payload is not None

    @property
    def user_id(self) -> str | None:
        return self.payload.user_id if self.payload else None


def decode_jwt(token: str, settings: Settings) -> TokenPayload:
    """Decode and validate a JWT token.

    Validates the token signature, expiration (when present), and that it
    carries an identity claim. The identity is read from
    ``settings.jwt_identity_claim`` with ``sub`` as a fallback.

    Args:
        token: The JWT token string to decode.
        settings: Application settings holding the key material.

    Returns:
        TokenPayload: Validated token payload.

    Raises:
        AuthError: If the key is missing, or the token is invalid, expired,
            or has a wrong signature.
    """
    if not token:
        raise AuthError("Token not provided", AuthErrorCode.MISSING)

    if not settings.jwt_secret_key:
        raise AuthError("Signing key not configured", AuthErrorCode.MISCONFIGURED)

    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=settings.jwt_algorithms_list,
            options={
                "verify_signature": True,
                "verify_exp": True,
                "verify_aud": False,
            },
        )

    except jwt.ExpiredSignatureError as e:
        raise AuthError(
            "Token has expired",
            AuthErrorCode.TOKEN_EXPIRED,
        ) from e

    except jwt.InvalidSignatureError as e:
        raise AuthError(
            "Invalid token signature",
            AuthErrorCode.INVALID_SIGNATURE,
        ) from e

    except jwt.DecodeError as e:
        raise AuthError(
            f"Invalid token format: {e}",
            AuthErrorCode.INVALID_TOKEN,
        ) from e

    except jwt.InvalidTokenError as e:
        raise AuthError(
            f"Token validation failed: {e}",
            AuthErrorCode.INVALID_TOKEN,
        ) from e

    user_id = payload.get(settings.jwt_identity_claim) or payload.get("sub")
    if not user_id or not isinstance(user_id, (str, int)):
        raise AuthError(
            f"Token missing required claim: {settings.jwt_identity_claim}",
            AuthErrorCode.INVALID_TOKEN,
        )

    return TokenPayload(
        user_id=str(user_id),
        exp=payload.get("exp"),
        iat=payload.get("iat"),
    )


def verify_token(token: str | None, settings: Settings) -> VerificationResult:
    """Verify a bearer credential without raising.

    Args:
        token: Raw token string, or None when no credential was presented.
        settings: Application settings holding the key material.

    Returns:
        VerificationResult: The payload on success, otherwise the typed error.
    """
    try:
        return VerificationResult(payload=decode_jwt(token or "", settings))
    except AuthError as e:
        return VerificationResult(error=e)
