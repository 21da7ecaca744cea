# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Translation request API endpoints.

This module provides endpoints for the translation workflow:
- POST / - Open a translation request (claimed by the caller)
- GET / - List requests with per-status counts
- GET /overdue - Requests waiting in review past the alert threshold
- POST /{request_id}/submit - Hand in the translation for review
- POST /{request_id}/approve - Approve and publish the local content

Requests move not_started -> in_progress -> review -> completed, one step
at a time. Any other move is rejected with 422.

Example:
    POST /api/v1/translations/{request_id}/submit
    {
        "translated_text": "...",
        "quality": {"accuracy": 9, "fluency": 8}
    }
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import get_translation_service, require_actor
from src.domains.localization.translation import TranslationService
from src.models.common import TranslationStatus
from src.models.localization import (
    TranslationApproveRequest,
    TranslationCreateRequest,
    TranslationRequestListResponse,
    TranslationRequestResponse,
    TranslationSubmitRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=TranslationRequestResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create translation request",
)
async def create_translation_request(
    data: TranslationCreateRequest,
    translator_id: str = Depends(require_actor),
    service: TranslationService = Depends(get_translation_service),
) -> TranslationRequestResponse:
    """Open a translation request for a node's local content.

    Args:
        data: Languages, source text, mode and priority.
        translator_id: Acting translator.
        service: Translation service.

    Returns:
        The request, already in progress.
    """
    translation = await service.create_translation_request(data, translator_id)
    return TranslationRequestResponse.model_validate(translation)


@router.get(
    "",
    response_model=TranslationRequestListResponse,
    summary="List translation requests",
)
async def list_translation_requests(
    local_content_id: Annotated[str | None, Query(description="Filter by local content")] = None,
    request_status: Annotated[
        TranslationStatus | None,
        Query(alias="status", description="Filter by status"),
    ] = None,
    service: TranslationService = Depends(get_translation_service),
) -> TranslationRequestListResponse:
    items, counts = await service.list_translation_requests(
        local_content_id=local_content_id,
        status=request_status,
    )
    return TranslationRequestListResponse(
        items=[TranslationRequestResponse.model_validate(item) for item in items],
        total=len(items),
        status_counts=counts,
    )


@router.get(
    "/overdue",
    response_model=TranslationRequestListResponse,
    summary="Overdue reviews",
    description="Requests that have waited in review longer than the threshold.",
)
async def list_overdue_reviews(
    threshold_hours: Annotated[
        int | None,
        Query(ge=1, description="Override the configured alert threshold"),
    ] = None,
    service: TranslationService = Depends(get_translation_service),
) -> TranslationRequestListResponse:
    overdue = await service.find_overdue_reviews(threshold_hours)
    return TranslationRequestListResponse(
        items=[TranslationRequestResponse.model_validate(item) for item in overdue],
        total=len(overdue),
        status_counts={TranslationStatus.REVIEW.value: len(overdue)},
    )


@router.post(
    "/{request_id}/submit",
    response_model=TranslationRequestResponse,
    summary="Submit translation",
)
async def submit_translation(
    request_id: str,
    data: TranslationSubmitRequest,
    translator_id: str = Depends(require_actor),
    service: TranslationService = Depends(get_translation_service),
) -> TranslationRequestResponse:
    logger.info("Submitting translation: id=%s, by=%s", request_id, translator_id)
    translation = await service.submit_translation(
        request_id,
        data.translated_text,
        data.quality,
    )
    return TranslationRequestResponse.model_validate(translation)


@router.post(
    "/{request_id}/approve",
    response_model=TranslationRequestResponse,
    summary="Approve translation",
    description="Complete a reviewed translation and publish the local content.",
)
async def approve_translation(
    request_id: str,
    data: TranslationApproveRequest | None = None,
    reviewer_id: str = Depends(require_actor),
    service: TranslationService = Depends(get_translation_service),
) -> TranslationRequestResponse:
    translation = await service.approve_translation(
        request_id,
        reviewer_id,
        notes=data.notes if data else None,
    )
    return TranslationRequestResponse.model_validate(translation)
