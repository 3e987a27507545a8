"""Unit tests for configuration module."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from src.core.config import Settings, get_settings

REQUIRED_ENV = {
    "SUPABASE_URL": "https://test.supabase.co",
    "SUPABASE_SECRET_KEY": "test-secret",
}


class TestSettings:
    """Tests for Settings class."""

    def test_settings_loads_from_environment(self) -> None:
        """Test that Settings loads values from environment variables."""
        env_vars = {
            **REQUIRED_ENV,
            "APP_NAME": "test-app",
            "APP_ENV": "testing",
            "DEBUG": "true",
            "PORT": "9000",
            "JWT_SECRET_KEY": "shh",
            "STORAGE_BACKEND": "s3",
            "S3_ENDPOINT": "minio:9000",
            "S3_BUCKET": "avatars",
            "SEARCH_MAX_LIMIT": "20",
        }

        with patch.dict(os.environ, env_vars, clear=False):
            settings = Settings()

            assert settings.app_name == "test-app"
            assert settings.app_env == "testing"
            assert settings.debug is True
            assert settings.port == 9000
            assert settings.jwt_secret_key == "shh"
            assert settings.storage_backend == "s3"
            assert settings.s3_endpoint == "minio:9000"
            assert settings.s3_bucket == "avatars"
            assert settings.search_max_limit == 20

    def test_defaults_match_local_setup(self) -> None:
        """Test defaults for a local development run."""
        settings = Settings(**{k.lower(): v for k, v in REQUIRED_ENV.items()}, storage_backend="local")

        assert settings.api_prefix == "/api"
        assert settings.profiles_table == "profiles"
        assert settings.jwt_identity_claim == "userId"
        assert settings.avatar_size == 200
        assert settings.search_default_limit == 10
        assert settings.s3_key_prefix == "avatars"

    def test_settings_cors_origins_list(self) -> None:
        """Test that CORS origins are correctly parsed into a list."""
        with patch.dict(
            os.environ,
            {**REQUIRED_ENV, "CORS_ORIGINS": "http://localhost:3000, http://example.com , http://test.com"},
            clear=False,
        ):
            origins = Settings().cors_origins_list

            assert origins == ["http://localhost:3000", "http://example.com", "http://test.com"]

    def test_jwt_algorithms_list(self) -> None:
        """Test that accepted algorithms are parsed into a list."""
        settings = Settings(**{k.lower(): v for k, v in REQUIRED_ENV.items()}, jwt_algorithms="HS256, HS384")

        assert settings.jwt_algorithms_list == ["HS256", "HS384"]

    def test_s3_endpoint_url(self) -> None:
        """Test that the endpoint URL follows the secure flag."""
        base = {k.lower(): v for k, v in REQUIRED_ENV.items()}

        assert Settings(**base, s3_endpoint="minio:9000").s3_endpoint_url == "http://minio:9000"
        assert Settings(**base, s3_endpoint="s3.io", s3_secure=True).s3_endpoint_url == "https://s3.io"

    @pytest.mark.parametrize("prefix", ["uploads", "/uploads", "/uploads/", " uploads/ "])
    def test_local_upload_url_prefix_is_normalized(self, prefix: str) -> None:
        """Test that the static mount path always has one leading slash."""
        base = {k.lower(): v for k, v in REQUIRED_ENV.items()}

        assert Settings(**base, local_upload_url_prefix=prefix).local_upload_url_prefix == "/uploads"

    def test_unknown_storage_backend_is_rejected(self) -> None:
        """Test that only local and s3 backends are accepted."""
        with pytest.raises(ValidationError):
            Settings(**{k.lower(): v for k, v in REQUIRED_ENV.items()}, storage_backend="ftp")


class TestGetSettings:
    """Tests for get_settings function."""

    def test_get_settings_returns_cached_instance(self) -> None:
        """Test that get_settings returns the same instance."""
        get_settings.cache_clear()

        assert get_settings() is get_settings()

        get_settings.cache_clear()
