# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Localization of node mirrors.

This module provides the LocalizationWorkflow that handles:
- Localization passes on a node's copy of global content
- The customization overlay (adaptations, local examples, resources)
- Node-scoped local content queries

Cultural adaptations form an audit trail: every pass appends its entries
and nothing already recorded is rewritten. Local examples and additional
resources describe the latest pass only.

Example:
    >>> workflow = LocalizationWorkflow(db)
    >>> local = await workflow.localize(
    ...     content_id, node_id, "fr", "translation",
    ...     cultural_adaptations=[...], actor_id=user_id,
    ... )
    >>> local.translation_status
    'in_progress'
"""

import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import ValidationFailedError
from src.domains.content.store import ContentStore
from src.domains.distribution.locks import MirrorLockRegistry, mirror_locks
from src.domains.network.registry import NodeRegistry
from src.infrastructure.database.models import GlobalContent, LocalContent
from src.infrastructure.metrics import LOCALIZATIONS
from src.models.common import LocalizationType, PublishStatus, TranslationStatus
from src.models.localization import CulturalAdaptation, LocalExample
from src.utils.datetime import format_iso, utc_now

logger = logging.getLogger(__name__)


class InvalidLocalizationTypeError(ValidationFailedError):
    """Raised when a localization type is not translation, adaptation or recreation."""

    def __init__(self, localization_type: Any) -> None:
        super().__init__(
            f"Invalid localization type '{localization_type}'",
            {"allowed": [t.value for t in LocalizationType]},
        )


def coerce_localization_type(value: str | LocalizationType) -> LocalizationType:
    """Convert user input to a LocalizationType.

    Raises:
        InvalidLocalizationTypeError: If the value is unknown.
    """
    try:
        return LocalizationType(value)
    except ValueError as e:
        raise InvalidLocalizationTypeError(value) from e


def merge_customization(
    existing: dict[str, Any] | None,
    localization_type: LocalizationType,
    target_language: str,
    adaptations: list[dict[str, Any]],
    examples: list[dict[str, Any]],
    resources: list[Any],
    actor_id: str | None,
) -> dict[str, Any]:
    """Build the customization overlay after one localization pass.

    Returns a new dict; ``existing`` is not modified.
    """
    base = dict(existing or {})
    stamp = format_iso(utc_now())

    recorded = [{**adaptation, "recorded_at": stamp} for adaptation in adaptations]
    passes = list(base.get("passes", []))
    passes.append(
        {
            "localization_type": localization_type.value,
            "target_language": target_language,
            "localized_by": actor_id,
            "localized_at": stamp,
            "adaptations_added": len(recorded),
        }
    )

    base.update(
        localization_type=localization_type.value,
        cultural_adaptations=list(base.get("cultural_adaptations", [])) + recorded,
        local_examples=examples,
        additional_resources=resources,
        localized_by=actor_id,
        localized_at=stamp,
        passes=passes,
    )
    return base


class LocalizationWorkflow:
    """Applies localization passes to node mirrors.

    Writes hold the (node, content) advisory lock shared with the
    distribution coordinator.

    Attributes:
        _db: Async database session.
        _store: Catalog data access.
        _nodes: Node registry.
        _locks: Mirror lock registry.
    """

    def __init__(self, db: AsyncSession, locks: MirrorLockRegistry | None = None) -> None:
        self._db = db
        self._store = ContentStore(db)
        self._nodes = NodeRegistry(db)
        self._locks = locks or mirror_locks

    async def localize(
        self,
        global_content_id: str,
        node_id: str,
        target_language: str,
        localization_type: str | LocalizationType,
        cultural_adaptations: Sequence[CulturalAdaptation | dict[str, Any]] = (),
        local_examples: Sequence[LocalExample | dict[str, Any]] = (),
        additional_resources: Sequence[Any] = (),
        actor_id: str | None = None,
    ) -> LocalContent:
        """Apply a localization pass to a node's copy of a content item.

        An existing mirror keeps its publish status and moves to translation
        status ``in_progress``. A missing mirror is created as a draft from
        the content's current version.

        Args:
            global_content_id: Global content ID.
            node_id: Node ID.
            target_language: Language of the localized copy.
            localization_type: translation, adaptation or recreation.
            cultural_adaptations: Section adaptations to append to the audit trail.
            local_examples: Locally relevant examples for this pass.
            additional_resources: Extra resources for this pass.
            actor_id: ID of the localizer.

        Returns:
            The localized LocalContent row.

        Raises:
            InvalidLocalizationTypeError: If localization_type is unknown.
            ContentNotFoundError: If the content does not exist.
            NodeNotFoundError: If the node does not exist.
        """
        kind = coerce_localization_type(localization_type)
        content = await self._store.get_content_or_raise(global_content_id)
        await self._nodes.get_node(node_id)

        adaptations = [
            CulturalAdaptation.model_validate(item).model_dump() for item in cultural_adaptations
        ]
        examples = [LocalExample.model_validate(item).model_dump() for item in local_examples]
        resources = list(additional_resources)

        async with self._locks.hold(node_id, global_content_id):
            local, created = await self._get_or_create_draft(content, node_id)

            local.language = target_language
            local.is_customized = True
            local.customization = merge_customization(
                local.customization,
                kind,
                target_language,
                adaptations,
                examples,
                resources,
                actor_id,
            )
            local.translation_status = TranslationStatus.IN_PROGRESS.value
            local.localized_by = actor_id
            await self._db.commit()

        LOCALIZATIONS.labels(localization_type=kind.value).inc()
        logger.info(
            "Localized content: node=%s, content=%s, language=%s, type=%s, created=%s",
            node_id,
            global_content_id,
            target_language,
            kind.value,
            created,
        )
        return local

    async def list_local_content(
        self,
        node_id: str,
        translation_status: TranslationStatus | None = None,
        language: str | None = None,
    ) -> list[LocalContent]:
        """List a node's local content.

        Raises:
            NodeNotFoundError: If the node does not exist.
        """
        await self._nodes.get_node(node_id)
        return await self._store.list_local_content(
            node_id,
            translation_status=translation_status.value if translation_status else None,
            language=language,
        )

    async def get_local_content(self, local_content_id: str) -> LocalContent:
        """Get a local content row.

        Raises:
            LocalContentNotFoundError: If the row does not exist.
        """
        return await self._store.get_local_content_or_raise(local_content_id)

    async def _get_or_create_draft(
        self,
        content: GlobalContent,
        node_id: str,
    ) -> tuple[LocalContent, bool]:
        """Find the node's mirror, inserting a draft when there is none.

        Returns:
            The mirror and whether it was created.
        """
        local = await self._store.get_local_content(node_id, content.id)
        if local is not None:
            return local, False

        draft = self._new_draft(content, node_id)
        try:
            async with self._db.begin_nested():
                await self._store.add_local_content(draft)
            return draft, True
        except IntegrityError:
            # A distribution created the mirror meanwhile; localize that row.
            local = await self._store.get_local_content(node_id, content.id)
            if local is None:
                raise
            return local, False

    @staticmethod
    def _new_draft(content: GlobalContent, node_id: str) -> LocalContent:
        return LocalContent(
            node_id=node_id,
            global_content_id=content.id,
            title=content.title,
            description=content.description,
            content_type=content.content_type,
            payload=dict(content.payload or {}),
            customization={},
            publish_status=PublishStatus.DRAFT.value,
            source_version=content.current_version,
            last_synced_at=utc_now(),
        )
