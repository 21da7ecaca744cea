# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Translation request state machine.

States move strictly forward, one step at a time:

    not_started -> in_progress -> review -> completed

A request is claimed on creation, so it is stored already in_progress.
Submitting moves it to review and approval to completed; the owning
LocalContent row follows along, and approval publishes it.

Requests waiting in review past the alert threshold are reported through
logs and a gauge. Nothing is enforced on them.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config.settings import get_settings
from src.core.exceptions import NotFoundError, ValidationFailedError
from src.domains.content.store import ContentStore
from src.infrastructure.database.models import TranslationRequest
from src.infrastructure.metrics import OVERDUE_TRANSLATION_REVIEWS, TRANSLATION_TRANSITIONS
from src.models.common import PublishStatus, TranslationStatus
from src.models.localization import TranslationCreateRequest, TranslationQuality
from src.utils.datetime import ensure_utc, hours_ago, utc_now

logger = logging.getLogger(__name__)

_ORDER: list[TranslationStatus] = [
    TranslationStatus.NOT_STARTED,
    TranslationStatus.IN_PROGRESS,
    TranslationStatus.REVIEW,
    TranslationStatus.COMPLETED,
]


class TranslationRequestNotFoundError(NotFoundError):
    """Raised when a translation request does not exist."""

    def __init__(self, request_id: str) -> None:
        super().__init__(
            f"Translation request '{request_id}' not found",
            {"request_id": request_id},
        )


class InvalidTranslationTransitionError(ValidationFailedError):
    """Raised when a status change skips a state or moves backward."""


class EmptyTranslationError(ValidationFailedError):
    """Raised when a translation is submitted without text."""


def validate_transition(
    current: str | TranslationStatus,
    target: str | TranslationStatus,
) -> TranslationStatus:
    """Check that ``target`` is the state directly after ``current``.

    Returns:
        The target status.

    Raises:
        InvalidTranslationTransitionError: If either value is not a known
            status, or the move is not exactly one step forward.
    """
    try:
        current_status = TranslationStatus(current)
        target_status = TranslationStatus(target)
    except ValueError as e:
        raise InvalidTranslationTransitionError(
            f"Unknown translation status in transition {current!r} -> {target!r}"
        ) from e

    if _ORDER.index(target_status) != _ORDER.index(current_status) + 1:
        raise InvalidTranslationTransitionError(
            f"Cannot move translation from {current_status.value} to {target_status.value}",
            {"current": current_status.value, "requested": target_status.value},
        )
    return target_status


class TranslationService:
    """Service for translation requests.

    Attributes:
        _db: Async database session.
        _store: Catalog data access.
        _review_alert_hours: Hours in review before a request is overdue.
    """

    def __init__(self, db: AsyncSession, review_alert_hours: int | None = None) -> None:
        """Initialize the translation service.

        Args:
            db: Async database session.
            review_alert_hours: Overdue threshold. Defaults to the
                configured localization setting.
        """
        self._db = db
        self._store = ContentStore(db)
        self._review_alert_hours = (
            review_alert_hours or get_settings().localization.review_alert_hours
        )

    async def create_translation_request(
        self,
        request: TranslationCreateRequest,
        translator_id: str,
    ) -> TranslationRequest:
        """Open a translation request claimed by ``translator_id``.

        The local content moves to translation status ``in_progress``.

        Raises:
            LocalContentNotFoundError: If the local content does not exist.
        """
        local = await self._store.get_local_content_or_raise(request.local_content_id)

        translation = TranslationRequest(
            local_content_id=request.local_content_id,
            translator_id=translator_id,
            source_language=request.source_language,
            target_language=request.target_language,
            source_text=request.source_text,
            translated_text="",
            mode=request.mode.value,
            status=TranslationStatus.NOT_STARTED.value,
            quality={},
            priority=request.priority.value,
        )
        self._transition(translation, TranslationStatus.IN_PROGRESS)
        translation.started_at = utc_now()
        local.translation_status = TranslationStatus.IN_PROGRESS.value

        self._db.add(translation)
        await self._db.commit()

        logger.info(
            "Created translation request: id=%s, local_content=%s, %s -> %s",
            translation.id,
            translation.local_content_id,
            translation.source_language,
            translation.target_language,
        )
        return translation

    async def submit_translation(
        self,
        request_id: str,
        translated_text: str,
        quality: TranslationQuality | None = None,
    ) -> TranslationRequest:
        """Hand in translated text for review.

        Raises:
            TranslationRequestNotFoundError: If the request does not exist.
            InvalidTranslationTransitionError: If the request is not in_progress.
            EmptyTranslationError: If translated_text is blank.
        """
        translation = await self._get_or_raise(request_id)
        validate_transition(translation.status, TranslationStatus.REVIEW)
        if not translated_text or not translated_text.strip():
            raise EmptyTranslationError(
                "Translated text must not be empty",
                {"request_id": request_id},
            )

        translation.translated_text = translated_text
        if quality is not None:
            translation.quality = quality.model_dump(exclude_none=True)
        translation.submitted_at = utc_now()
        self._transition(translation, TranslationStatus.REVIEW)

        local = await self._store.get_local_content_or_raise(translation.local_content_id)
        local.translation_status = TranslationStatus.REVIEW.value

        await self._db.commit()
        logger.info("Translation submitted for review: id=%s", request_id)
        return translation

    async def approve_translation(
        self,
        request_id: str,
        reviewer_id: str,
        notes: str | None = None,
    ) -> TranslationRequest:
        """Approve a reviewed translation and publish the local content.

        Raises:
            TranslationRequestNotFoundError: If the request does not exist.
            InvalidTranslationTransitionError: If the request is not in review.
        """
        translation = await self._get_or_raise(request_id)
        self._transition(translation, TranslationStatus.COMPLETED)
        translation.reviewer_id = reviewer_id
        translation.review_notes = notes
        translation.completed_at = utc_now()

        local = await self._store.get_local_content_or_raise(translation.local_content_id)
        local.translation_status = TranslationStatus.COMPLETED.value
        local.publish_status = PublishStatus.PUBLISHED.value

        await self._db.commit()
        logger.info(
            "Translation approved: id=%s, reviewer=%s, local_content=%s",
            request_id,
            reviewer_id,
            local.id,
        )
        return translation

    async def find_overdue_reviews(
        self,
        threshold_hours: int | None = None,
    ) -> list[TranslationRequest]:
        """List requests waiting in review longer than the threshold.

        Each one is logged as a warning and the overdue gauge is set to the
        count. No state is changed.
        """
        hours = threshold_hours or self._review_alert_hours
        cutoff = hours_ago(hours)

        result = await self._db.execute(
            select(TranslationRequest)
            .where(TranslationRequest.status == TranslationStatus.REVIEW.value)
            .order_by(TranslationRequest.submitted_at)
        )
        overdue = [
            t
            for t in result.scalars().all()
            if t.submitted_at is not None and ensure_utc(t.submitted_at) < cutoff
        ]

        for translation in overdue:
            logger.warning(
                "Translation review overdue: id=%s, submitted_at=%s, threshold_hours=%d",
                translation.id,
                translation.submitted_at,
                hours,
            )
        OVERDUE_TRANSLATION_REVIEWS.set(len(overdue))
        return overdue

    async def list_translation_requests(
        self,
        local_content_id: str | None = None,
        status: TranslationStatus | None = None,
    ) -> tuple[list[TranslationRequest], dict[str, int]]:
        """List requests, newest first, with a count per status.

        Status counts respect the local_content_id filter only.
        """
        query = select(TranslationRequest)
        count_query = select(TranslationRequest.status, func.count()).group_by(
            TranslationRequest.status
        )
        if local_content_id is not None:
            query = query.where(TranslationRequest.local_content_id == local_content_id)
            count_query = count_query.where(
                TranslationRequest.local_content_id == local_content_id
            )
        if status is not None:
            query = query.where(TranslationRequest.status == status.value)

        result = await self._db.execute(
            query.order_by(TranslationRequest.created_at.desc(), TranslationRequest.id)
        )
        items = list(result.scalars().all())

        counts = {s.value: 0 for s in TranslationStatus}
        for request_status, count in (await self._db.execute(count_query)).all():
            counts[request_status] = count

        return items, counts

    async def _get_or_raise(self, request_id: str) -> TranslationRequest:
        result = await self._db.execute(
            select(TranslationRequest).where(TranslationRequest.id == request_id)
        )
        translation = result.scalar_one_or_none()
        if translation is None:
            raise TranslationRequestNotFoundError(request_id)
        return translation

    @staticmethod
    def _transition(translation: TranslationRequest, target: TranslationStatus) -> None:
        translation.status = validate_transition(translation.status, target).value
        TRANSLATION_TRANSITIONS.labels(status=target.value).inc()
