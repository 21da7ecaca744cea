# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Distribution of global content to node mirrors.

This module provides the DistributionCoordinator that handles:
- Resolving the target node set (explicit list or all active nodes)
- Fan-out upsert of the current stable version into each node's mirror
- Per-node outcome tracking with fail-soft semantics
- Distribution job bookkeeping and queries

Each node is synced in its own session and transaction, bounded by a
per-node timeout and a concurrency semaphore. A node's failure becomes a
NodeSyncOutcome and is recorded on the job; it never aborts the other
nodes. Only the coordinator task itself writes the job row.

The coordinator never retries. Callers re-run distribute() for the job's
failed_node_ids; the upsert makes that safe.

Example:
    >>> coordinator = DistributionCoordinator(sessionmaker)
    >>> job = await coordinator.distribute(content_id, DistributionOptions())
    >>> job.status, job.successful_nodes, job.failed_nodes
    ('completed', 3, 0)
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.config.settings import get_settings
from src.core.exceptions import NotFoundError, ValidationFailedError
from src.domains.content.store import ContentStore
from src.domains.distribution.locks import MirrorLockRegistry, mirror_locks
from src.domains.distribution.outcomes import NodeSyncOutcome, summarize_outcomes
from src.domains.network.registry import NodeNotFoundError, NodeRegistry
from src.infrastructure.database.connection import is_sqlite_sessionmaker, session_scope
from src.infrastructure.database.models import (
    DistributionJob,
    GlobalContent,
    LocalContent,
    Node,
)
from src.infrastructure.metrics import DISTRIBUTION_JOBS, NODE_SYNC_DURATION, NODE_SYNCS
from src.models.common import (
    DistributionMode,
    DistributionStatus,
    NodeStatus,
    PublishStatus,
    TranslationStatus,
)
from src.models.distribution import DistributionOptions
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)

# Job statuses only move to a higher rank.
_STATUS_RANK: dict[DistributionStatus, int] = {
    DistributionStatus.PENDING: 0,
    DistributionStatus.IN_PROGRESS: 1,
    DistributionStatus.COMPLETED: 2,
    DistributionStatus.PARTIAL_FAILURE: 2,
}


class ContentNotDistributableError(ValidationFailedError):
    """Raised when content has no current stable version to distribute."""


class DistributionJobNotFoundError(NotFoundError):
    """Raised when a distribution job does not exist."""

    def __init__(self, job_id: str) -> None:
        super().__init__(f"Distribution job '{job_id}' not found", {"job_id": job_id})


class InvalidDistributionTransitionError(ValidationFailedError):
    """Raised when a job status change would move backward."""


class NodeSuspendedError(ValidationFailedError):
    """Raised for a target node that is suspended."""


@dataclass(frozen=True)
class ContentSnapshot:
    """Source-derived fields copied into node mirrors."""

    content_id: str
    version: str
    title: str
    description: str
    content_type: str
    payload: dict[str, Any]


class DistributionCoordinator:
    """Fans a content version out to node mirrors and records the job.

    Attributes:
        _sessionmaker: Factory for the per-step sessions.
        _max_concurrency: Upper bound on nodes synced at once.
        _node_timeout: Seconds allowed for one node's sync.
        _default_language: Language of freshly created mirrors.
        _locks: Advisory (node, content) locks shared with localization.
    """

    def __init__(
        self,
        sessionmaker: async_sessionmaker[AsyncSession],
        *,
        max_concurrency: int | None = None,
        node_timeout_seconds: float | None = None,
        default_language: str | None = None,
        locks: MirrorLockRegistry | None = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            sessionmaker: Async sessionmaker; every step opens its own session.
            max_concurrency: Nodes synced at once. 1 means sequential, which
                is always the case on SQLite.
            node_timeout_seconds: Timeout for one node's sync.
            default_language: Language of newly created mirrors.
            locks: Mirror lock registry. Defaults to the process-wide one.
        """
        settings = get_settings().distribution
        self._sessionmaker = sessionmaker
        self._max_concurrency = max_concurrency or settings.max_concurrency
        if self._max_concurrency > 1 and is_sqlite_sessionmaker(sessionmaker):
            # One shared SQLite connection: concurrent node sessions would
            # interleave savepoints inside a single transaction.
            logger.debug(
                "SQLite engine: distributing sequentially instead of %d at once",
                self._max_concurrency,
            )
            self._max_concurrency = 1
        self._node_timeout = node_timeout_seconds or settings.node_timeout_seconds
        self._default_language = default_language or settings.default_language
        self._locks = locks or mirror_locks

    @property
    def max_concurrency(self) -> int:
        """Nodes synced at once."""
        return self._max_concurrency

    async def distribute(
        self,
        content_id: str,
        options: DistributionOptions | None = None,
        requested_by: str | None = None,
    ) -> DistributionJob:
        """Push the current version of a content item to the target nodes.

        Args:
            content_id: Global content ID.
            options: Targets, mode, priority and schedule.
            requested_by: ID of the user triggering the distribution.

        Returns:
            The finished job. Per-node failures live in job.failures.

        Raises:
            ContentNotFoundError: If the content does not exist.
            ContentNotDistributableError: If there is no current stable version.
        """
        options = options or DistributionOptions()

        async with session_scope(self._sessionmaker) as db:
            store = ContentStore(db)
            content = await store.get_content_or_raise(content_id)
            snapshot = await self._current_snapshot(store, content)

            if options.target_nodes is None:
                targets = await NodeRegistry(db).list_active_node_ids()
            else:
                targets = list(dict.fromkeys(options.target_nodes))

            job = DistributionJob(
                global_content_id=content_id,
                version=snapshot.version,
                target_nodes=targets,
                mode=options.mode.value,
                status=DistributionStatus.PENDING.value,
                failures=[],
                successful_nodes=0,
                failed_nodes=0,
                priority=options.priority.value,
                scheduled_at=options.scheduled_at,
                requested_by=requested_by,
            )
            db.add(job)
            await db.flush()

            self._advance(job, DistributionStatus.IN_PROGRESS)
            job.started_at = utc_now()
            job_id = job.id

        logger.info(
            "Distribution started: job=%s, content=%s, version=%s, nodes=%d, mode=%s",
            job_id,
            content_id,
            snapshot.version,
            len(targets),
            options.mode.value,
        )

        outcomes = await self._fan_out(snapshot, targets)
        summary = summarize_outcomes(outcomes)

        async with session_scope(self._sessionmaker) as db:
            job = await self._load_job(db, job_id)
            self._advance(job, summary.status)
            job.successful_nodes = summary.successful_nodes
            job.failed_nodes = summary.failed_nodes
            job.failures = summary.failures
            job.completed_at = utc_now()

        DISTRIBUTION_JOBS.labels(status=summary.status.value).inc()
        log = logger.warning if summary.failed_nodes else logger.info
        log(
            "Distribution finished: job=%s, status=%s, succeeded=%d, failed=%d",
            job_id,
            summary.status.value,
            summary.successful_nodes,
            summary.failed_nodes,
        )
        return job

    async def retry_failures(
        self,
        job_id: str,
        requested_by: str | None = None,
    ) -> DistributionJob:
        """Re-distribute to the nodes that failed in an earlier job.

        This starts a new selective job; the earlier job is left untouched.

        Raises:
            DistributionJobNotFoundError: If the job does not exist.
        """
        previous = await self.get_job(job_id)
        options = DistributionOptions(
            target_nodes=previous.failed_node_ids,
            mode=DistributionMode.SELECTIVE,
            priority=previous.priority,
        )
        return await self.distribute(
            previous.global_content_id,
            options,
            requested_by=requested_by,
        )

    async def get_job(self, job_id: str) -> DistributionJob:
        """Get a distribution job.

        Raises:
            DistributionJobNotFoundError: If the job does not exist.
        """
        async with session_scope(self._sessionmaker) as db:
            return await self._load_job(db, job_id)

    async def list_jobs(
        self,
        status: DistributionStatus | None = None,
        content_id: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[DistributionJob], int, dict[str, int]]:
        """List jobs, newest first.

        Returns:
            Tuple of (page of jobs, total matching, job count per status).
        """
        conditions = []
        if status is not None:
            conditions.append(DistributionJob.status == status.value)
        if content_id is not None:
            conditions.append(DistributionJob.global_content_id == content_id)

        async with session_scope(self._sessionmaker) as db:
            total = (
                await db.execute(
                    select(func.count()).select_from(DistributionJob).where(*conditions)
                )
            ).scalar() or 0

            result = await db.execute(
                select(DistributionJob)
                .where(*conditions)
                .order_by(DistributionJob.created_at.desc(), DistributionJob.id)
                .offset(offset)
                .limit(limit)
            )
            jobs = list(result.scalars().all())

            counts_result = await db.execute(
                select(DistributionJob.status, func.count()).group_by(DistributionJob.status)
            )
            status_counts = {s.value: 0 for s in DistributionStatus}
            for job_status, count in counts_result.all():
                status_counts[job_status] = count

        return jobs, total, status_counts

    async def _current_snapshot(
        self,
        store: ContentStore,
        content: GlobalContent,
    ) -> ContentSnapshot:
        version = None
        if content.current_version_id:
            version = await store.get_version_by_id(content.current_version_id)

        if version is None or not version.is_stable:
            raise ContentNotDistributableError(
                f"Content '{content.id}' has no current stable version",
                {"content_id": content.id},
            )

        return ContentSnapshot(
            content_id=content.id,
            version=version.version,
            title=version.title,
            description=version.description,
            content_type=content.content_type,
            payload=dict(version.payload),
        )

    async def _fan_out(
        self,
        snapshot: ContentSnapshot,
        targets: list[str],
    ) -> list[NodeSyncOutcome]:
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def bounded(node_id: str) -> NodeSyncOutcome:
            async with semaphore:
                return await self._run_node(node_id, snapshot)

        return list(await asyncio.gather(*(bounded(node_id) for node_id in targets)))

    async def _run_node(self, node_id: str, snapshot: ContentSnapshot) -> NodeSyncOutcome:
        """Sync one node and turn any error into a failure outcome."""
        started = time.perf_counter()
        try:
            created = await asyncio.wait_for(
                self._sync_node(node_id, snapshot),
                timeout=self._node_timeout,
            )
            outcome = NodeSyncOutcome.success(node_id, created=created)
        except asyncio.TimeoutError:
            outcome = NodeSyncOutcome.failure(
                node_id,
                f"Timed out after {self._node_timeout:g}s",
            )
        except Exception as e:
            outcome = NodeSyncOutcome.failure(node_id, str(e) or type(e).__name__)

        NODE_SYNC_DURATION.observe(time.perf_counter() - started)
        NODE_SYNCS.labels(result="success" if outcome.succeeded else "failure").inc()

        if not outcome.succeeded:
            logger.warning(
                "Node sync failed: node=%s, content=%s, error=%s",
                node_id,
                snapshot.content_id,
                outcome.error,
            )
        return outcome

    async def _sync_node(self, node_id: str, snapshot: ContentSnapshot) -> bool:
        async with self._locks.hold(node_id, snapshot.content_id):
            async with session_scope(self._sessionmaker) as db:
                node = await NodeRegistry(db).find_node(node_id)
                if node is None:
                    raise NodeNotFoundError(node_id)
                if node.status == NodeStatus.SUSPENDED.value:
                    raise NodeSuspendedError(f"Node '{node_id}' is suspended")
                return await self._upsert_mirror(db, node, snapshot)

    async def _upsert_mirror(
        self,
        db: AsyncSession,
        node: Node,
        snapshot: ContentSnapshot,
    ) -> bool:
        """Create or refresh a node's mirror row.

        Returns:
            True if the row was created, False if an existing row was updated.
        """
        store = ContentStore(db)
        existing = await store.get_local_content(node.id, snapshot.content_id)

        if existing is None:
            mirror = LocalContent(
                node_id=node.id,
                global_content_id=snapshot.content_id,
                title=snapshot.title,
                description=snapshot.description,
                content_type=snapshot.content_type,
                payload=dict(snapshot.payload),
                language=self._default_language,
                is_customized=False,
                customization={},
                translation_status=TranslationStatus.NOT_STARTED.value,
                publish_status=PublishStatus.PUBLISHED.value,
                source_version=snapshot.version,
                last_synced_at=utc_now(),
            )
            try:
                async with db.begin_nested():
                    await store.add_local_content(mirror)
                return True
            except IntegrityError:
                # Another writer inserted the row first; refresh it instead.
                existing = await store.get_local_content(node.id, snapshot.content_id)
                if existing is None:
                    raise

        self._apply_snapshot(existing, snapshot)
        await db.flush()
        return False

    @staticmethod
    def _apply_snapshot(mirror: LocalContent, snapshot: ContentSnapshot) -> None:
        # Customization, language, translation and publish state belong to the node.
        mirror.title = snapshot.title
        mirror.description = snapshot.description
        mirror.content_type = snapshot.content_type
        mirror.payload = dict(snapshot.payload)
        mirror.source_version = snapshot.version
        mirror.last_synced_at = utc_now()

    async def _load_job(self, db: AsyncSession, job_id: str) -> DistributionJob:
        result = await db.execute(select(DistributionJob).where(DistributionJob.id == job_id))
        job = result.scalar_one_or_none()
        if job is None:
            raise DistributionJobNotFoundError(job_id)
        return job

    @staticmethod
    def _advance(job: DistributionJob, status: DistributionStatus) -> None:
        current = DistributionStatus(job.status)
        if _STATUS_RANK[status] <= _STATUS_RANK[current]:
            raise InvalidDistributionTransitionError(
                f"Distribution job cannot move from {current.value} to {status.value}",
                {"job_id": job.id},
            )
        job.status = status.value
