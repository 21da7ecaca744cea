# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoints.

This module provides health and readiness endpoints for the API.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Response, status
from pydantic import BaseModel, Field

from src.core.config import get_settings
from src.infrastructure.database.connection import check_database_connection

logger = logging.getLogger(__name__)

router = APIRouter()

# Track server start time for uptime calculation
_server_start_time = time.time()


class ComponentHealth(BaseModel):
    """Individual component health status."""
    status: str = Field(description="Component status")
    latency_ms: float | None = Field(None, description="Response latency in ms")
    message: str | None = Field(None, description="Additional status message")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(description="Overall health status")
    timestamp: datetime = Field(description="Current server timestamp")
    version: str = Field(description="API version")
    environment: str = Field(description="Deployment environment")
    uptime_seconds: int = Field(description="Server uptime in seconds")
    components: dict[str, ComponentHealth] = Field(default_factory=dict)


class ReadinessResponse(BaseModel):
    """Readiness check response model."""
    ready: bool = Field(description="Whether the service is ready")
    checks: dict[str, Any] = Field(description="Individual check results")


async def check_database() -> ComponentHealth:
    """Check the database connection."""
    start = time.time()
    healthy = await check_database_connection()
    latency = (time.time() - start) * 1000

    if not healthy:
        logger.error("Database health check failed")
        return ComponentHealth(status="unhealthy", message="Database did not respond")
    return ComponentHealth(status="healthy", latency_ms=round(latency, 2))


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Service health with component status.",
)
async def health_check() -> HealthResponse:
    """Report overall service health.

    The service is "degraded" rather than down when the database does not
    answer, so that load balancers can tell the process is alive.
    """
    from src.api.app import APP_VERSION

    settings = get_settings()
    database = await check_database()

    return HealthResponse(
        status="healthy" if database.status == "healthy" else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=APP_VERSION,
        environment=settings.environment,
        uptime_seconds=int(time.time() - _server_start_time),
        components={"database": database},
    )


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    description="Whether the service can accept traffic.",
    responses={503: {"description": "Service not ready"}},
)
async def readiness_check(response: Response) -> ReadinessResponse:
    """Report readiness; 503 until the database answers."""
    database = await check_database()
    ready = database.status == "healthy"

    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadinessResponse(
        ready=ready,
        checks={"database": database.model_dump(exclude_none=True)},
    )
