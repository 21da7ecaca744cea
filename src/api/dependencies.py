# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get database sessions
- Get the acting user
- Get service instances

Example:
    @router.get("/nodes")
    async def list_nodes(
        registry: NodeRegistry = Depends(get_node_registry),
    ):
        ...
"""

import logging
from typing import AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.middleware.request_context import get_user_id
from src.domains.access.service import AccessController
from src.domains.content.service import ContentService
from src.domains.content.versioning import VersionManager
from src.domains.distribution.coordinator import DistributionCoordinator
from src.domains.localization.translation import TranslationService
from src.domains.localization.workflow import LocalizationWorkflow
from src.domains.network.registry import NodeRegistry
from src.infrastructure.database.connection import get_session, get_sessionmaker

logger = logging.getLogger(__name__)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session for the request.

    Yields:
        AsyncSession committed on success and rolled back on error.
    """
    async with get_session() as session:
        yield session


# =========================================================================
# Acting User Dependencies
# =========================================================================


def get_actor_id(request: Request) -> str | None:
    """Get the acting user id if the caller supplied one."""
    return get_user_id(request)


def require_actor(request: Request) -> str:
    """Require the acting user id.

    Raises:
        HTTPException: If the X-User-Id header is missing.
    """
    user_id = get_user_id(request)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Id header required",
        )
    return user_id


# =========================================================================
# Service Dependencies
# =========================================================================


def get_content_service(db: AsyncSession = Depends(get_db)) -> ContentService:
    return ContentService(db)


def get_version_manager(db: AsyncSession = Depends(get_db)) -> VersionManager:
    return VersionManager(db)


def get_node_registry(db: AsyncSession = Depends(get_db)) -> NodeRegistry:
    return NodeRegistry(db)


def get_localization_workflow(db: AsyncSession = Depends(get_db)) -> LocalizationWorkflow:
    return LocalizationWorkflow(db)


def get_translation_service(db: AsyncSession = Depends(get_db)) -> TranslationService:
    return TranslationService(db)


def get_access_controller(db: AsyncSession = Depends(get_db)) -> AccessController:
    return AccessController(db)


def get_distribution_coordinator() -> DistributionCoordinator:
    """Coordinator bound to the application sessionmaker.

    It opens its own session per step, so it does not share the request
    session.
    """
    return DistributionCoordinator(get_sessionmaker())
