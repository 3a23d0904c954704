"""
Health check endpoints.

We provide two endpoints:
- /health: Basic liveness check (is the process running?)
- /health/ready: Readiness check (can we reach the store?)

The distinction matters in orchestration systems where liveness and
readiness have different behaviors.
"""

import logging
from typing import Any

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from ... import __version__
from ...infrastructure.firestore.repositories import StudentRepository
from ..dependencies import AppSessionsDep, SettingsDep, get_collection_paths, get_firestore_client

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Standardized format makes it easy for monitoring tools to parse."""
    status: str
    version: str
    details: dict[str, Any] = {}


class ReadinessCheck(BaseModel):
    """Individual readiness check result."""
    name: str
    status: str  # "ok" or "error"
    error: str | None = None


class ReadinessResponse(BaseModel):
    """Readiness check response with details."""
    status: str  # "ready" or "not_ready"
    version: str
    checks: list[ReadinessCheck]


@router.get(
    "",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Returns 200 if the service is running. Does not check dependencies.",
)
async def health_check(settings: SettingsDep, sessions: AppSessionsDep) -> HealthResponse:
    """Liveness check - fast, and never touches the store."""
    return HealthResponse(
        status="ok",
        version=__version__,
        details={
            "mock_mode": settings.firestore_mock_mode,
            "open_app_sessions": len(sessions),
        },
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    status_code=status.HTTP_200_OK,
    summary="Readiness check",
    description="Returns 200 if the service can handle traffic. Reads the student collection.",
    responses={
        503: {
            "description": "Service not ready",
            "model": ReadinessResponse,
        }
    },
)
async def readiness_check(settings: SettingsDep, response: Response) -> ReadinessResponse:
    """
    Readiness check - can we serve traffic?

    Checks configuration, then signs in and reads the student collection.
    Returns 503 if any check fails, which tells load balancers not to
    route traffic here.
    """
    checks: list[ReadinessCheck] = []

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        checks.append(ReadinessCheck(
            name="configuration",
            status="error",
            error=f"Missing required fields: {', '.join(missing_fields)}",
        ))
    else:
        checks.append(ReadinessCheck(name="configuration", status="ok"))

    try:
        client = get_firestore_client(settings)
        StudentRepository(client, get_collection_paths(settings)).list_students()
        checks.append(ReadinessCheck(
            name="firestore",
            status="ok",
            error="mock mode" if settings.firestore_mock_mode else None,
        ))
    except Exception as e:
        logger.error("Firestore health check failed", extra={"error": str(e)})
        checks.append(ReadinessCheck(name="firestore", status="error", error=str(e)))

    all_ok = all(check.status == "ok" for check in checks)
    if not all_ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning(
            "Readiness check failed",
            extra={
                "checks": [
                    {"name": c.name, "status": c.status, "error": c.error}
                    for c in checks
                ]
            },
        )

    return ReadinessResponse(
        status="ready" if all_ok else "not_ready",
        version=__version__,
        checks=checks,
    )
