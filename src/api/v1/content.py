# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Global content catalog API endpoints.

This module provides endpoints for the canonical catalog:
- POST / - Create content (recorded as version 1.0.0)
- GET / - List content with filtering
- GET /statistics - Catalog and localization statistics
- GET /{content_id} - Get content details
- PATCH /{content_id} - Update catalog metadata
- POST /{content_id}/publish - Publish content
- POST /{content_id}/unpublish - Unpublish content

Payload changes go through the versions endpoints.

Example:
    POST /api/v1/content
    {
        "title": "Arabic Alphabet Basics",
        "content_type": "lesson",
        "category": "language",
        "payload": {"sections": [{"title": "Alif"}]}
    }
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import get_actor_id, get_content_service
from src.domains.content.service import ContentService
from src.models.common import ContentCategory, ContentLevel, ContentTier, ContentType
from src.models.content import (
    ContentStatisticsResponse,
    GlobalContentCreateRequest,
    GlobalContentFilters,
    GlobalContentListResponse,
    GlobalContentResponse,
    GlobalContentUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=GlobalContentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create content",
    description="Create a global content item together with version 1.0.0.",
)
async def create_content(
    data: GlobalContentCreateRequest,
    actor_id: str | None = Depends(get_actor_id),
    service: ContentService = Depends(get_content_service),
) -> GlobalContentResponse:
    """Create a global content item.

    Args:
        data: Content creation request.
        actor_id: Acting editor, if supplied.
        service: Content service.

    Returns:
        Created content.
    """
    logger.info("Creating content: type=%s, by=%s", data.content_type.value, actor_id)
    content = await service.create_global_content(data, author_id=actor_id)
    return GlobalContentResponse.model_validate(content)


@router.get(
    "",
    response_model=GlobalContentListResponse,
    summary="List content",
    description="List catalog items with optional filters and pagination.",
)
async def list_content(
    content_type: Annotated[ContentType | None, Query(description="Filter by type")] = None,
    category: Annotated[ContentCategory | None, Query(description="Filter by category")] = None,
    level: Annotated[ContentLevel | None, Query(description="Filter by level")] = None,
    tier: Annotated[ContentTier | None, Query(description="Filter by tier")] = None,
    is_published: Annotated[bool | None, Query(description="Filter by publish state")] = None,
    search: Annotated[str | None, Query(description="Search title and description")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Maximum results")] = 20,
    offset: Annotated[int, Query(ge=0, description="Pagination offset")] = 0,
    service: ContentService = Depends(get_content_service),
) -> GlobalContentListResponse:
    """List catalog items."""
    filters = GlobalContentFilters(
        content_type=content_type,
        category=category,
        level=level,
        tier=tier,
        is_published=is_published,
        search=search,
        limit=limit,
        offset=offset,
    )
    items, total = await service.list_global_content(filters)
    return GlobalContentListResponse(
        items=[GlobalContentResponse.model_validate(item) for item in items],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/statistics",
    response_model=ContentStatisticsResponse,
    summary="Content statistics",
    description="Catalog, local content and translation counts.",
)
async def get_statistics(
    node_id: Annotated[str | None, Query(description="Restrict counts to one node")] = None,
    service: ContentService = Depends(get_content_service),
) -> ContentStatisticsResponse:
    return await service.get_content_statistics(node_id)


@router.get(
    "/{content_id}",
    response_model=GlobalContentResponse,
    summary="Get content",
)
async def get_content(
    content_id: str,
    service: ContentService = Depends(get_content_service),
) -> GlobalContentResponse:
    content = await service.get_global_content(content_id)
    return GlobalContentResponse.model_validate(content)


@router.patch(
    "/{content_id}",
    response_model=GlobalContentResponse,
    summary="Update content metadata",
    description=(
        "Update catalog metadata. Title, description and payload change "
        "through versions."
    ),
)
async def update_content(
    content_id: str,
    data: GlobalContentUpdateRequest,
    actor_id: str | None = Depends(get_actor_id),
    service: ContentService = Depends(get_content_service),
) -> GlobalContentResponse:
    content = await service.update_global_content(content_id, data, actor_id=actor_id)
    return GlobalContentResponse.model_validate(content)


@router.post(
    "/{content_id}/publish",
    response_model=GlobalContentResponse,
    summary="Publish content",
)
async def publish_content(
    content_id: str,
    actor_id: str | None = Depends(get_actor_id),
    service: ContentService = Depends(get_content_service),
) -> GlobalContentResponse:
    content = await service.set_published(content_id, True, actor_id=actor_id)
    return GlobalContentResponse.model_validate(content)


@router.post(
    "/{content_id}/unpublish",
    response_model=GlobalContentResponse,
    summary="Unpublish content",
)
async def unpublish_content(
    content_id: str,
    actor_id: str | None = Depends(get_actor_id),
    service: ContentService = Depends(get_content_service),
) -> GlobalContentResponse:
    content = await service.set_published(content_id, False, actor_id=actor_id)
    return GlobalContentResponse.model_validate(content)
