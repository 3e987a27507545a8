"""Health check endpoints for monitoring and deployment verification."""

import time

from fastapi import APIRouter, Depends, Response, status

from src.api.deps import SettingsDep, get_storage_backend
from src.core.supabase import check_database_connection
from src.schemas.common import CheckResult, HealthResponse, HealthStatus, ReadinessResponse
from src.storage import StorageBackend, StorageError

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness check",
    description="Basic health check to verify the service is running. Used for liveness probes.",
)
async def health_check() -> HealthResponse:
    """Return basic health status.

    This endpoint should always return 200 if the service is running.
    It does not check external dependencies.
    """
    return HealthResponse(status=HealthStatus.HEALTHY)


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    responses={
        200: {"description": "All dependencies healthy"},
        503: {"description": "One or more dependencies unhealthy"},
    },
    summary="Readiness check",
    description="Check if all dependencies are available. Used for readiness probes.",
)
async def readiness_check(
    response: Response,
    settings: SettingsDep,
    storage: StorageBackend = Depends(get_storage_backend),
) -> ReadinessResponse:
    """Check readiness of the database and the avatar storage backend.

    Returns 503 if any dependency is unhealthy.
    """
    checks: list[CheckResult] = []

    start_time = time.perf_counter()
    db_result = await check_database_connection(settings)
    checks.append(
        CheckResult(
            name="database",
            healthy=db_result["healthy"],
            latency_ms=round((time.perf_counter() - start_time) * 1000, 2),
            error=db_result.get("error"),
        )
    )

    start_time = time.perf_counter()
    storage_error = None
    try:
        storage.check()
    except StorageError as e:
        storage_error = str(e)
    checks.append(
        CheckResult(
            name=f"storage:{storage.name}",
            healthy=storage_error is None,
            latency_ms=round((time.perf_counter() - start_time) * 1000, 2),
            error=storage_error,
        )
    )

    all_healthy = all(check.healthy for check in checks)
    if not all_healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadinessResponse(
        status=HealthStatus.HEALTHY if all_healthy else HealthStatus.UNHEALTHY,
        checks=checks,
    )
