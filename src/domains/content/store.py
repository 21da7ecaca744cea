# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Data access for global content, versions and node mirrors.

ContentStore holds no business rules. It never commits; the calling
service owns the transaction.
"""

import logging
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import NotFoundError
from src.infrastructure.database.models import (
    ContentVersion,
    GlobalContent,
    LocalContent,
    TranslationRequest,
)
from src.models.content import GlobalContentFilters

logger = logging.getLogger(__name__)


class ContentNotFoundError(NotFoundError):
    """Raised when a global content item does not exist."""

    def __init__(self, content_id: str) -> None:
        super().__init__(
            f"Global content '{content_id}' not found",
            {"content_id": content_id},
        )


class LocalContentNotFoundError(NotFoundError):
    """Raised when a local content row does not exist."""

    def __init__(self, local_content_id: str) -> None:
        super().__init__(
            f"Local content '{local_content_id}' not found",
            {"local_content_id": local_content_id},
        )


class ContentStore:
    """Queries and inserts for the catalog tables.

    Attributes:
        _db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    # ------------------------------------------------------------------
    # Global content
    # ------------------------------------------------------------------

    async def get_content(self, content_id: str) -> GlobalContent | None:
        result = await self._db.execute(
            select(GlobalContent).where(GlobalContent.id == content_id)
        )
        return result.scalar_one_or_none()

    async def get_content_or_raise(self, content_id: str) -> GlobalContent:
        """Get a global content item.

        Raises:
            ContentNotFoundError: If no such item exists.
        """
        content = await self.get_content(content_id)
        if content is None:
            raise ContentNotFoundError(content_id)
        return content

    async def add_content(self, content: GlobalContent) -> GlobalContent:
        self._db.add(content)
        await self._db.flush()
        return content

    async def list_content(
        self,
        filters: GlobalContentFilters,
    ) -> tuple[list[GlobalContent], int]:
        """List catalog items matching the filters, most recently updated first.

        Returns:
            Tuple of (page of items, total matching count).
        """
        conditions: list[Any] = []
        if filters.content_type is not None:
            conditions.append(GlobalContent.content_type == filters.content_type.value)
        if filters.category is not None:
            conditions.append(GlobalContent.category == filters.category.value)
        if filters.level is not None:
            conditions.append(GlobalContent.level == filters.level.value)
        if filters.tier is not None:
            conditions.append(GlobalContent.tier == filters.tier.value)
        if filters.is_published is not None:
            conditions.append(GlobalContent.is_published == filters.is_published)
        if filters.search:
            pattern = f"%{filters.search.lower()}%"
            conditions.append(
                or_(
                    func.lower(GlobalContent.title).like(pattern),
                    func.lower(GlobalContent.description).like(pattern),
                )
            )

        count_query = select(func.count()).select_from(GlobalContent).where(*conditions)
        total = (await self._db.execute(count_query)).scalar() or 0

        query = (
            select(GlobalContent)
            .where(*conditions)
            .order_by(GlobalContent.updated_at.desc(), GlobalContent.id)
            .offset(filters.offset)
            .limit(filters.limit)
        )
        result = await self._db.execute(query)
        return list(result.scalars().all()), total

    async def count_content(self, *, published_only: bool = False) -> int:
        query = select(func.count()).select_from(GlobalContent)
        if published_only:
            query = query.where(GlobalContent.is_published.is_(True))
        return (await self._db.execute(query)).scalar() or 0

    # ------------------------------------------------------------------
    # Versions
    # ------------------------------------------------------------------

    async def get_version(self, content_id: str, version: str) -> ContentVersion | None:
        result = await self._db.execute(
            select(ContentVersion).where(
                ContentVersion.global_content_id == content_id,
                ContentVersion.version == version,
            )
        )
        return result.scalar_one_or_none()

    async def get_version_by_id(self, version_id: str) -> ContentVersion | None:
        result = await self._db.execute(
            select(ContentVersion).where(ContentVersion.id == version_id)
        )
        return result.scalar_one_or_none()

    async def get_latest_version(self, content_id: str) -> ContentVersion | None:
        """Get the version with the highest sequence number."""
        result = await self._db.execute(
            select(ContentVersion)
            .where(ContentVersion.global_content_id == content_id)
            .order_by(ContentVersion.sequence.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def list_versions(self, content_id: str) -> list[ContentVersion]:
        """List versions oldest first."""
        result = await self._db.execute(
            select(ContentVersion)
            .where(ContentVersion.global_content_id == content_id)
            .order_by(ContentVersion.sequence)
        )
        return list(result.scalars().all())

    async def add_version(self, version: ContentVersion) -> ContentVersion:
        self._db.add(version)
        await self._db.flush()
        return version

    # ------------------------------------------------------------------
    # Local content
    # ------------------------------------------------------------------

    async def get_local_content(self, node_id: str, content_id: str) -> LocalContent | None:
        """Get a node's mirror of a global content item."""
        result = await self._db.execute(
            select(LocalContent).where(
                LocalContent.node_id == node_id,
                LocalContent.global_content_id == content_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_local_content_by_id(self, local_content_id: str) -> LocalContent | None:
        result = await self._db.execute(
            select(LocalContent).where(LocalContent.id == local_content_id)
        )
        return result.scalar_one_or_none()

    async def get_local_content_or_raise(self, local_content_id: str) -> LocalContent:
        """Get a local content row by id.

        Raises:
            LocalContentNotFoundError: If no such row exists.
        """
        local = await self.get_local_content_by_id(local_content_id)
        if local is None:
            raise LocalContentNotFoundError(local_content_id)
        return local

    async def list_local_content(
        self,
        node_id: str,
        translation_status: str | None = None,
        language: str | None = None,
    ) -> list[LocalContent]:
        query = select(LocalContent).where(LocalContent.node_id == node_id)
        if translation_status is not None:
            query = query.where(LocalContent.translation_status == translation_status)
        if language is not None:
            query = query.where(LocalContent.language == language)
        result = await self._db.execute(query.order_by(LocalContent.updated_at.desc()))
        return list(result.scalars().all())

    async def add_local_content(self, local: LocalContent) -> LocalContent:
        self._db.add(local)
        await self._db.flush()
        return local

    async def count_local_content(
        self,
        node_id: str | None = None,
        publish_status: str | None = None,
    ) -> int:
        query = select(func.count()).select_from(LocalContent)
        if node_id is not None:
            query = query.where(LocalContent.node_id == node_id)
        if publish_status is not None:
            query = query.where(LocalContent.publish_status == publish_status)
        return (await self._db.execute(query)).scalar() or 0

    async def count_translations(self, status: str, node_id: str | None = None) -> int:
        query = (
            select(func.count())
            .select_from(TranslationRequest)
            .where(TranslationRequest.status == status)
        )
        if node_id is not None:
            query = query.join(
                LocalContent,
                LocalContent.id == TranslationRequest.local_content_id,
            ).where(LocalContent.node_id == node_id)
        return (await self._db.execute(query)).scalar() or 0
