# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Distribution API endpoints.

This module provides endpoints for pushing content to regional nodes:
- POST / - Distribute the current version of a content item
- GET / - List distribution jobs with per-status counts
- GET /{job_id} - Get job details including per-node failures
- POST /{job_id}/retry - Re-distribute to the nodes that failed

A distribution always returns its job. Nodes that could not be synced are
listed in the job's failures; the request itself still succeeds.

Example:
    POST /api/v1/distributions
    {
        "content_id": "5f0c...",
        "target_nodes": ["a1...", "b2..."],
        "mode": "selective"
    }
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import get_actor_id, get_distribution_coordinator
from src.domains.distribution.coordinator import DistributionCoordinator
from src.models.common import DistributionStatus
from src.models.distribution import (
    DistributionJobListResponse,
    DistributionJobResponse,
    DistributionRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=DistributionJobResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Distribute content",
    description="Push the current stable version of a content item to nodes.",
)
async def distribute_content(
    data: DistributionRequest,
    actor_id: str | None = Depends(get_actor_id),
    coordinator: DistributionCoordinator = Depends(get_distribution_coordinator),
) -> DistributionJobResponse:
    """Run a distribution and return the finished job.

    Args:
        data: Content ID with targets, mode and priority.
        actor_id: Acting user, if supplied.
        coordinator: Distribution coordinator.

    Returns:
        The distribution job.
    """
    logger.info(
        "Distribution requested: content=%s, mode=%s, by=%s",
        data.content_id,
        data.mode.value,
        actor_id,
    )
    job = await coordinator.distribute(data.content_id, data, requested_by=actor_id)
    return DistributionJobResponse.model_validate(job)


@router.get(
    "",
    response_model=DistributionJobListResponse,
    summary="List distribution jobs",
)
async def list_distributions(
    job_status: Annotated[
        DistributionStatus | None,
        Query(alias="status", description="Filter by job status"),
    ] = None,
    content_id: Annotated[str | None, Query(description="Filter by content")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Maximum results")] = 20,
    offset: Annotated[int, Query(ge=0, description="Pagination offset")] = 0,
    coordinator: DistributionCoordinator = Depends(get_distribution_coordinator),
) -> DistributionJobListResponse:
    jobs, total, status_counts = await coordinator.list_jobs(
        status=job_status,
        content_id=content_id,
        limit=limit,
        offset=offset,
    )
    return DistributionJobListResponse(
        items=[DistributionJobResponse.model_validate(job) for job in jobs],
        total=total,
        status_counts=status_counts,
    )


@router.get(
    "/{job_id}",
    response_model=DistributionJobResponse,
    summary="Get distribution job",
)
async def get_distribution(
    job_id: str,
    coordinator: DistributionCoordinator = Depends(get_distribution_coordinator),
) -> DistributionJobResponse:
    job = await coordinator.get_job(job_id)
    return DistributionJobResponse.model_validate(job)


@router.post(
    "/{job_id}/retry",
    response_model=DistributionJobResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Retry failed nodes",
    description="Start a new selective distribution to the nodes that failed in a job.",
)
async def retry_distribution(
    job_id: str,
    actor_id: str | None = Depends(get_actor_id),
    coordinator: DistributionCoordinator = Depends(get_distribution_coordinator),
) -> DistributionJobResponse:
    job = await coordinator.retry_failures(job_id, requested_by=actor_id)
    return DistributionJobResponse.model_validate(job)
