# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Prometheus metrics endpoint.

Exposes application metrics in Prometheus format for scraping.
"""

import logging

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/metrics",
    summary="Prometheus metrics",
    description="Get application metrics in Prometheus format.",
    responses={
        200: {
            "description": "Prometheus metrics",
            "content": {"text/plain": {}},
        },
    },
)
async def get_metrics() -> Response:
    """Get Prometheus metrics.

    Returns metrics collected by the application including:
    - Content versions recorded
    - Distribution jobs and per-node sync outcomes
    - Localization passes and translation transitions
    - Access checks

    Returns:
        Response with Prometheus format metrics.
    """
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST,
    )
