# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Content version API endpoints.

- POST /{content_id}/versions - Record a major, minor or patch version
- GET /{content_id}/versions - List versions, oldest first
- GET /{content_id}/versions/{version} - Get one version
- POST /{content_id}/versions/{version}/promote - Make a draft current

Patch versions become current immediately. Major and minor versions stay
drafts until promoted, unless force_promote is set.
"""

import logging

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_actor_id, get_version_manager
from src.domains.content.versioning import VersionManager
from src.models.content import ContentVersionResponse, VersionCreateRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/{content_id}/versions",
    response_model=ContentVersionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create version",
)
async def create_version(
    content_id: str,
    data: VersionCreateRequest,
    actor_id: str | None = Depends(get_actor_id),
    manager: VersionManager = Depends(get_version_manager),
) -> ContentVersionResponse:
    """Record a new version of a content item.

    Args:
        content_id: Global content ID.
        data: Change type, notes, payload and optional title/description.
        actor_id: Acting editor, if supplied.
        manager: Version manager.

    Returns:
        The recorded version.
    """
    version = await manager.create_version(
        content_id,
        data.change_type,
        data.change_notes,
        data.payload,
        title=data.title,
        description=data.description,
        force_promote=data.force_promote,
        actor_id=actor_id,
    )
    return ContentVersionResponse.model_validate(version)


@router.get(
    "/{content_id}/versions",
    response_model=list[ContentVersionResponse],
    summary="List versions",
)
async def list_versions(
    content_id: str,
    manager: VersionManager = Depends(get_version_manager),
) -> list[ContentVersionResponse]:
    versions = await manager.list_versions(content_id)
    return [ContentVersionResponse.model_validate(v) for v in versions]


@router.get(
    "/{content_id}/versions/{version}",
    response_model=ContentVersionResponse,
    summary="Get version",
)
async def get_version(
    content_id: str,
    version: str,
    manager: VersionManager = Depends(get_version_manager),
) -> ContentVersionResponse:
    found = await manager.get_version(content_id, version)
    return ContentVersionResponse.model_validate(found)


@router.post(
    "/{content_id}/versions/{version}/promote",
    response_model=ContentVersionResponse,
    summary="Promote version",
    description="Mark a version stable and make it the current version.",
)
async def promote_version(
    content_id: str,
    version: str,
    actor_id: str | None = Depends(get_actor_id),
    manager: VersionManager = Depends(get_version_manager),
) -> ContentVersionResponse:
    promoted = await manager.promote_version(content_id, version, actor_id=actor_id)
    return ContentVersionResponse.model_validate(promoted)
