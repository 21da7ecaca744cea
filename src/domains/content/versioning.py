# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Content version management.

This module provides the VersionManager that handles:
- Semantic version bumps (major / minor / patch)
- Payload validation before anything is written
- Stability tagging and the current-version pointer
- Promotion of draft versions

Only patch versions are stable on creation. Major and minor versions stay
drafts, retrievable but not distributed, until promoted.

Example:
    >>> manager = VersionManager(db)
    >>> version = await manager.create_version(
    ...     content_id, "patch", ["typo fix"], payload
    ... )
    >>> version.version
    '1.0.1'
"""

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import NotFoundError, ValidationFailedError
from src.domains.content.store import ContentStore
from src.domains.content.validation import PayloadValidator, get_default_validator
from src.infrastructure.database.models import ContentVersion, GlobalContent
from src.infrastructure.metrics import CONTENT_VERSIONS
from src.models.common import ChangeType
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)

INITIAL_VERSION = "1.0.0"


class InvalidChangeTypeError(ValidationFailedError):
    """Raised when a change type is not major, minor or patch."""

    def __init__(self, change_type: Any) -> None:
        super().__init__(
            f"Invalid change type '{change_type}'",
            {"allowed": [c.value for c in ChangeType]},
        )


class SchemaValidationFailedError(ValidationFailedError):
    """Raised when a payload fails the content type's structural rules."""

    def __init__(self, content_type: str, errors: list[str]) -> None:
        super().__init__(
            f"Payload is not valid {content_type} content",
            {"errors": errors},
        )
        self.errors = errors


class VersionConflictError(ValidationFailedError):
    """Raised when a version cannot be recorded or promoted in order."""


class VersionNotFoundError(NotFoundError):
    """Raised when a content version does not exist."""


def parse_version(version: str) -> tuple[int, int, int]:
    """Split a ``MAJOR.MINOR.PATCH`` string.

    Raises:
        ValueError: If the string is not three non-negative integers.
    """
    parts = version.split(".")
    if len(parts) != 3 or not all(part.isdigit() for part in parts):
        raise ValueError(f"Not a semantic version: {version!r}")
    major, minor, patch = (int(part) for part in parts)
    return major, minor, patch


def bump_version(previous: str | None, change_type: ChangeType) -> str:
    """Compute the version that follows ``previous``.

    Args:
        previous: Latest recorded version, or None for a new content item.
        change_type: Kind of change being recorded.

    Returns:
        The next version string.

    Example:
        >>> bump_version("1.2.3", ChangeType.MINOR)
        '1.3.0'
    """
    if previous is None:
        return INITIAL_VERSION

    major, minor, patch = parse_version(previous)
    if change_type == ChangeType.MAJOR:
        return f"{major + 1}.0.0"
    if change_type == ChangeType.MINOR:
        return f"{major}.{minor + 1}.0"
    return f"{major}.{minor}.{patch + 1}"


def coerce_change_type(value: str | ChangeType) -> ChangeType:
    """Convert user input to a ChangeType.

    Raises:
        InvalidChangeTypeError: If the value is not a known change type.
    """
    try:
        return ChangeType(value)
    except ValueError as e:
        raise InvalidChangeTypeError(value) from e


class VersionManager:
    """Records content versions and moves the current-version pointer.

    The pointer on GlobalContent is only changed here. A version is made
    current when it is stable on creation (patch), when the caller forces
    promotion, or through promote_version().

    Attributes:
        _db: Async database session.
        _store: Catalog data access.
        _validator: Payload validator for the content's type.
    """

    def __init__(
        self,
        db: AsyncSession,
        validator: PayloadValidator | None = None,
    ) -> None:
        """Initialize the version manager.

        Args:
            db: Async database session.
            validator: Payload validator. Defaults to the YAML rules validator.
        """
        self._db = db
        self._store = ContentStore(db)
        self._validator = validator or get_default_validator()

    def validate_payload(self, content_type: str, payload: dict[str, Any]) -> None:
        """Run the injected validator.

        Raises:
            SchemaValidationFailedError: If the validator reports errors.
        """
        errors = self._validator.validate(content_type, payload)
        if errors:
            raise SchemaValidationFailedError(content_type, errors)

    async def create_version(
        self,
        content_id: str,
        change_type: str | ChangeType,
        change_notes: list[str],
        payload: dict[str, Any],
        *,
        title: str | None = None,
        description: str | None = None,
        force_promote: bool = False,
        actor_id: str | None = None,
    ) -> ContentVersion:
        """Record a new version of a content item.

        Validation runs before any write. The version row and the pointer
        update share one savepoint, so a failure leaves nothing behind.

        Args:
            content_id: Global content ID.
            change_type: major, minor or patch.
            change_notes: Human-readable change notes.
            payload: New content payload.
            title: New title. None keeps the current title.
            description: New description. None keeps the current one.
            force_promote: Make the version current even if it is a draft.
            actor_id: ID of the editor recording the version.

        Returns:
            The recorded version.

        Raises:
            InvalidChangeTypeError: If change_type is unknown.
            ContentNotFoundError: If the content does not exist.
            SchemaValidationFailedError: If the payload is invalid.
            VersionConflictError: If another writer took the same version.
        """
        kind = coerce_change_type(change_type)
        content = await self._store.get_content_or_raise(content_id)
        self.validate_payload(content.content_type, payload)

        latest = await self._store.get_latest_version(content_id)
        next_version = bump_version(latest.version if latest else None, kind)
        next_sequence = latest.sequence + 1 if latest else 1

        version = ContentVersion(
            global_content_id=content_id,
            version=next_version,
            sequence=next_sequence,
            change_type=kind.value,
            change_notes=list(change_notes),
            title=content.title if title is None else title,
            description=content.description if description is None else description,
            payload=dict(payload),
            is_stable=kind == ChangeType.PATCH,
            created_by=actor_id,
        )

        try:
            async with self._db.begin_nested():
                await self._store.add_version(version)
                if version.is_stable or force_promote:
                    self._make_current(content, version, actor_id)
                    await self._db.flush()
        except IntegrityError as e:
            logger.warning(
                "Version conflict: content=%s, version=%s",
                content_id,
                next_version,
            )
            raise VersionConflictError(
                f"Version {next_version} of content '{content_id}' was recorded concurrently",
                {"content_id": content_id, "version": next_version},
            ) from e

        await self._db.commit()
        CONTENT_VERSIONS.labels(change_type=kind.value).inc()

        logger.info(
            "Recorded version: content=%s, version=%s, stable=%s, current=%s",
            content_id,
            version.version,
            version.is_stable,
            content.current_version_id == version.id,
        )
        return version

    async def record_initial_version(
        self,
        content: GlobalContent,
        actor_id: str | None = None,
    ) -> ContentVersion:
        """Record version 1.0.0 for freshly created content and make it current.

        Does not commit; the caller owns the transaction that created the
        content row.
        """
        version = ContentVersion(
            global_content_id=content.id,
            version=INITIAL_VERSION,
            sequence=1,
            change_type=ChangeType.MAJOR.value,
            change_notes=["Initial version"],
            title=content.title,
            description=content.description,
            payload=dict(content.payload or {}),
            is_stable=True,
            created_by=actor_id,
        )
        await self._store.add_version(version)
        self._make_current(content, version, actor_id)
        await self._db.flush()
        CONTENT_VERSIONS.labels(change_type=ChangeType.MAJOR.value).inc()
        return version

    async def promote_version(
        self,
        content_id: str,
        version: str,
        actor_id: str | None = None,
    ) -> ContentVersion:
        """Mark a version stable and make it current.

        Promoting the current version again is a no-op.

        Raises:
            ContentNotFoundError: If the content does not exist.
            VersionNotFoundError: If the version does not exist.
            VersionConflictError: If the version is older than the current one.
        """
        content = await self._store.get_content_or_raise(content_id)
        target = await self.get_version(content_id, version)

        if content.current_version_id == target.id:
            return target

        if content.current_version_id:
            current = await self._store.get_version_by_id(content.current_version_id)
            if current is not None and target.sequence < current.sequence:
                raise VersionConflictError(
                    f"Version {version} is older than current version {current.version}",
                    {"content_id": content_id, "current_version": current.version},
                )

        self._make_current(content, target, actor_id)
        await self._db.commit()

        logger.info("Promoted version: content=%s, version=%s", content_id, version)
        return target

    async def get_version(self, content_id: str, version: str) -> ContentVersion:
        """Get one version of a content item.

        Raises:
            VersionNotFoundError: If the version does not exist.
        """
        found = await self._store.get_version(content_id, version)
        if found is None:
            raise VersionNotFoundError(
                f"Version {version} of content '{content_id}' not found",
                {"content_id": content_id, "version": version},
            )
        return found

    async def list_versions(self, content_id: str) -> list[ContentVersion]:
        """List all versions of a content item, oldest first.

        Raises:
            ContentNotFoundError: If the content does not exist.
        """
        await self._store.get_content_or_raise(content_id)
        return await self._store.list_versions(content_id)

    def _make_current(
        self,
        content: GlobalContent,
        version: ContentVersion,
        actor_id: str | None,
    ) -> None:
        now = utc_now()
        version.is_stable = True
        version.promoted_at = now
        content.current_version = version.version
        content.current_version_id = version.id
        content.title = version.title
        content.description = version.description
        content.payload = dict(version.payload)
        if actor_id:
            content.content_metadata = {
                **(content.content_metadata or {}),
                "last_modified_by": actor_id,
            }
