# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Global content catalog service.

This module provides the ContentService that handles:
- Creating content together with its initial version
- Reading and filtering the catalog
- Catalog metadata updates and publish/unpublish
- Catalog and localization statistics

Title, description and payload are not edited here; they go through
VersionManager so that everything the network receives is a recorded
version.

Example:
    >>> service = ContentService(db)
    >>> content = await service.create_global_content(request, author_id)
    >>> page, total = await service.list_global_content(filters)
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.content.store import ContentStore
from src.domains.content.validation import PayloadValidator
from src.domains.content.versioning import VersionManager
from src.infrastructure.database.models import GlobalContent
from src.models.common import PublishStatus, TranslationStatus
from src.models.content import (
    ContentStatisticsResponse,
    GlobalContentCreateRequest,
    GlobalContentFilters,
    GlobalContentUpdateRequest,
)

logger = logging.getLogger(__name__)


class ContentService:
    """Service for the global content catalog.

    Attributes:
        _db: Async database session.
        _store: Catalog data access.
        _versions: Version manager used for the initial version.
    """

    def __init__(
        self,
        db: AsyncSession,
        validator: PayloadValidator | None = None,
    ) -> None:
        """Initialize the content service.

        Args:
            db: Async database session.
            validator: Payload validator passed to the version manager.
        """
        self._db = db
        self._store = ContentStore(db)
        self._versions = VersionManager(db, validator=validator)

    async def create_global_content(
        self,
        request: GlobalContentCreateRequest,
        author_id: str | None = None,
    ) -> GlobalContent:
        """Create a content item with version 1.0.0 as its current version.

        Args:
            request: Content creation request.
            author_id: ID of the editor creating the content.

        Returns:
            Created content item.

        Raises:
            SchemaValidationFailedError: If the payload is invalid for the type.
        """
        self._versions.validate_payload(request.content_type.value, request.payload)

        metadata = dict(request.metadata)
        if author_id:
            metadata.update(
                author=author_id,
                created_by=author_id,
                last_modified_by=author_id,
            )

        content = GlobalContent(
            title=request.title,
            description=request.description,
            content_type=request.content_type.value,
            category=request.category.value,
            level=request.level.value,
            age_group=request.age_group.value,
            tier=request.tier.value,
            estimated_duration=request.estimated_duration,
            prerequisites=list(request.prerequisites),
            learning_objectives=list(request.learning_objectives),
            payload=dict(request.payload),
            content_metadata=metadata,
            is_published=False,
        )
        await self._store.add_content(content)
        await self._versions.record_initial_version(content, actor_id=author_id)
        await self._db.commit()

        logger.info(
            "Created global content: id=%s, type=%s, tier=%s",
            content.id,
            content.content_type,
            content.tier,
        )
        return content

    async def get_global_content(self, content_id: str) -> GlobalContent:
        """Get a content item.

        Raises:
            ContentNotFoundError: If the content does not exist.
        """
        return await self._store.get_content_or_raise(content_id)

    async def list_global_content(
        self,
        filters: GlobalContentFilters,
    ) -> tuple[list[GlobalContent], int]:
        """List catalog items.

        Returns:
            Tuple of (page of items, total matching count).
        """
        return await self._store.list_content(filters)

    async def update_global_content(
        self,
        content_id: str,
        request: GlobalContentUpdateRequest,
        actor_id: str | None = None,
    ) -> GlobalContent:
        """Update catalog metadata of a content item.

        Only fields that are not distributed to nodes can change here.

        Raises:
            ContentNotFoundError: If the content does not exist.
        """
        content = await self._store.get_content_or_raise(content_id)

        changes = request.model_dump(exclude_unset=True)
        for field, value in changes.items():
            if value is None and field != "estimated_duration":
                continue
            if hasattr(value, "value"):
                value = value.value
            elif isinstance(value, list):
                value = list(value)
            setattr(content, field, value)

        if actor_id:
            content.content_metadata = {
                **(content.content_metadata or {}),
                "last_modified_by": actor_id,
            }

        await self._db.commit()
        logger.info("Updated global content: id=%s, fields=%s", content_id, sorted(changes))
        return content

    async def set_published(
        self,
        content_id: str,
        published: bool,
        actor_id: str | None = None,
    ) -> GlobalContent:
        """Publish or unpublish a content item. Content is never deleted.

        Raises:
            ContentNotFoundError: If the content does not exist.
        """
        content = await self._store.get_content_or_raise(content_id)
        if content.is_published == published:
            return content

        content.is_published = published
        if actor_id:
            content.content_metadata = {
                **(content.content_metadata or {}),
                "last_modified_by": actor_id,
            }
        await self._db.commit()

        logger.info("Set published: id=%s, published=%s", content_id, published)
        return content

    async def get_content_statistics(
        self,
        node_id: str | None = None,
    ) -> ContentStatisticsResponse:
        """Count catalog items, node mirrors and translations.

        Args:
            node_id: Restrict local content and translation counts to one node.
        """
        total_global = await self._store.count_content()
        published_global = await self._store.count_content(published_only=True)
        total_local = await self._store.count_local_content(node_id)
        published_local = await self._store.count_local_content(
            node_id,
            publish_status=PublishStatus.PUBLISHED.value,
        )
        pending = await self._store.count_translations(
            TranslationStatus.IN_PROGRESS.value,
            node_id,
        )
        completed = await self._store.count_translations(
            TranslationStatus.COMPLETED.value,
            node_id,
        )

        rate = (total_local / published_global) * 100 if published_global > 0 else 0.0

        return ContentStatisticsResponse(
            total_global_content=total_global,
            published_global_content=published_global,
            total_local_content=total_local,
            published_local_content=published_local,
            pending_translations=pending,
            completed_translations=completed,
            localization_rate=round(rate, 2),
        )
