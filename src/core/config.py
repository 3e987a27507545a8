"""Application configuration management using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Required settings will raise validation errors if not provided.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="profile-service", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/staging/production)")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root log level")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")
    api_prefix: str = Field(default="/api", description="Prefix for all profile routes")

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated list of allowed CORS origins",
    )

    # Supabase (profiles table)
    supabase_url: str = Field(..., description="Supabase project URL")
    supabase_secret_key: str = Field(..., description="Supabase secret key for backend operations")
    profiles_table: str = Field(default="profiles", description="Table holding profile rows")

    # Token verification
    jwt_secret_key: str = Field(
        default="",
        description="Shared secret used to verify bearer tokens (left empty the service answers 500)",
    )
    jwt_algorithms: str = Field(default="HS256", description="Comma-separated list of accepted JWT algorithms")
    jwt_identity_claim: str = Field(default="userId", description="Claim holding the caller identity")

    # Avatar storage
    storage_backend: Literal["local", "s3"] = Field(default="local", description="Avatar storage backend")
    local_upload_dir: str = Field(default="uploads", description="Directory for locally stored avatars")
    local_upload_url_prefix: str = Field(default="/uploads", description="URL prefix for locally stored avatars")
    s3_endpoint: str = Field(default="localhost:9000", description="S3-compatible endpoint as host:port")
    s3_bucket: str = Field(default="public-bucket", description="Bucket holding avatar objects")
    s3_access_key: str = Field(default="write-user", description="Object store access key")
    s3_secret_key: str = Field(default="write123", description="Object store secret key")
    s3_region: str = Field(default="us-east-1", description="Object store region")
    s3_secure: bool = Field(default=False, description="Use HTTPS for the object store")
    s3_key_prefix: str = Field(default="avatars", description="Key prefix for avatar objects")

    # Avatars and requests
    avatar_size: int = Field(default=200, description="Edge length in pixels of generated default avatars")
    max_request_body_size: int = Field(default=5 * 1024 * 1024, description="Maximum request body in bytes")

    # Search
    search_default_limit: int = Field(default=10, description="Default number of search results")
    search_max_limit: int = Field(default=50, description="Upper bound for the search limit parameter")

    @field_validator("storage_backend", mode="before")
    @classmethod
    def normalize_storage_backend(cls, value: str) -> str:
        """Accept backend names in any case."""
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("local_upload_url_prefix")
    @classmethod
    def normalize_url_prefix(cls, value: str) -> str:
        """Mount path with exactly one leading slash and no trailing slash."""
        return "/" + value.strip().strip("/")

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def jwt_algorithms_list(self) -> list[str]:
        """Parse accepted JWT algorithms into a list."""
        return [alg.strip() for alg in self.jwt_algorithms.split(",") if alg.strip()]

    @property
    def s3_endpoint_url(self) -> str:
        """Full endpoint URL for the S3 client."""
        scheme = "https" if self.s3_secure else "http"
        return f"{scheme}://{self.s3_endpoint}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings: Application settings instance.

    Note:
        Settings are cached using lru_cache for performance.
        Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
