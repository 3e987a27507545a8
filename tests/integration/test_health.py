"""Integration tests for health check endpoints."""

from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from src.storage import StorageError
from tests.fakes import FakeStorage


class TestHealthEndpoint:
    """Tests for /health endpoint."""

    def test_health_returns_200(self, client: TestClient) -> None:
        """Test that /health endpoint returns 200 status."""
        response = client.get("/health")
        assert response.status_code == 200

    def test_health_returns_healthy_status(self, client: TestClient) -> None:
        """Test that /health endpoint returns healthy status."""
        response = client.get("/health")
        data = response.json()

        assert data["status"] == "healthy"

    def test_health_returns_timestamp(self, client: TestClient) -> None:
        """Test that /health endpoint returns a timestamp."""
        response = client.get("/health")
        data = response.json()

        assert "timestamp" in data
        assert data["timestamp"] is not None


class TestReadinessEndpoint:
    """Tests for /health/ready endpoint."""

    def test_ready_when_all_dependencies_healthy(self, client: TestClient) -> None:
        """Test that readiness reports healthy when database and storage respond."""
        with patch(
            "src.api.routes.health.check_database_connection",
            new=AsyncMock(return_value={"healthy": True}),
        ):
            response = client.get("/health/ready")

        data = response.json()
        assert response.status_code == 200
        assert data["status"] == "healthy"
        assert {check["name"] for check in data["checks"]} == {"database", "storage:fake"}

    def test_database_failure_returns_503(self, client: TestClient) -> None:
        """Test that an unreachable database makes the service unready."""
        with patch(
            "src.api.routes.health.check_database_connection",
            new=AsyncMock(return_value={"healthy": False, "error": "connection refused"}),
        ):
            response = client.get("/health/ready")

        data = response.json()
        assert response.status_code == 503
        assert data["status"] == "unhealthy"
        database = next(check for check in data["checks"] if check["name"] == "database")
        assert database["error"] == "connection refused"

    def test_storage_failure_returns_503(self, client: TestClient, fake_storage: FakeStorage) -> None:
        """Test that an unavailable storage backend makes the service unready."""
        with (
            patch(
                "src.api.routes.health.check_database_connection",
                new=AsyncMock(return_value={"healthy": True}),
            ),
            patch.object(fake_storage, "check", side_effect=StorageError("bucket missing")),
        ):
            response = client.get("/health/ready")

        data = response.json()
        assert response.status_code == 503
        storage = next(check for check in data["checks"] if check["name"].startswith("storage:"))
        assert storage["healthy"] is False
        assert storage["error"] == "bucket missing"
