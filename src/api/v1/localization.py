# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Localization API endpoints.

- POST / - Apply a localization pass to a node's copy of a content item
- GET /nodes/{node_id} - List a node's local content
- GET /local-content/{local_content_id} - Get one local content row

Localization marks the node's copy as customized. Later distributions
refresh its source fields but keep the customization.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_actor_id, get_localization_workflow
from src.domains.localization.workflow import LocalizationWorkflow
from src.models.common import TranslationStatus
from src.models.localization import (
    LocalContentListResponse,
    LocalContentResponse,
    LocalizeRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=LocalContentResponse,
    summary="Localize content",
    description="Record a translation, adaptation or recreation pass for a node.",
)
async def localize_content(
    data: LocalizeRequest,
    actor_id: str | None = Depends(get_actor_id),
    workflow: LocalizationWorkflow = Depends(get_localization_workflow),
) -> LocalContentResponse:
    """Apply a localization pass.

    Args:
        data: Target node, language, type and customizations.
        actor_id: Acting localizer, if supplied.
        workflow: Localization workflow.

    Returns:
        The node's localized copy.
    """
    local = await workflow.localize(
        global_content_id=data.global_content_id,
        node_id=data.node_id,
        target_language=data.target_language,
        localization_type=data.localization_type,
        cultural_adaptations=data.cultural_adaptations,
        local_examples=data.local_examples,
        additional_resources=data.additional_resources,
        actor_id=actor_id,
    )
    return LocalContentResponse.model_validate(local)


@router.get(
    "/nodes/{node_id}",
    response_model=LocalContentListResponse,
    summary="List node content",
)
async def list_node_content(
    node_id: str,
    translation_status: Annotated[
        TranslationStatus | None,
        Query(description="Filter by translation status"),
    ] = None,
    language: Annotated[str | None, Query(description="Filter by language")] = None,
    workflow: LocalizationWorkflow = Depends(get_localization_workflow),
) -> LocalContentListResponse:
    items = await workflow.list_local_content(
        node_id,
        translation_status=translation_status,
        language=language,
    )
    return LocalContentListResponse(
        items=[LocalContentResponse.model_validate(item) for item in items],
        total=len(items),
    )


@router.get(
    "/local-content/{local_content_id}",
    response_model=LocalContentResponse,
    summary="Get local content",
)
async def get_local_content(
    local_content_id: str,
    workflow: LocalizationWorkflow = Depends(get_localization_workflow),
) -> LocalContentResponse:
    local = await workflow.get_local_content(local_content_id)
    return LocalContentResponse.model_validate(local)
