# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database-backed tests for content distribution."""

import asyncio

import pytest
from sqlalchemy import select

from src.domains.content.store import ContentNotFoundError, ContentStore
from src.domains.content.versioning import VersionManager
from src.domains.distribution.coordinator import (
    DistributionCoordinator,
    DistributionJobNotFoundError,
)
from src.domains.network.registry import NodeRegistry
from src.infrastructure.database.models import LocalContent
from src.models.common import DistributionMode, DistributionStatus, NodeStatus
from src.models.distribution import DistributionOptions

pytestmark = pytest.mark.integration


async def fetch_mirrors(sessionmaker, content_id: str) -> dict[str, LocalContent]:
    """Mirrors of a content item keyed by node id, read in a fresh session."""
    async with sessionmaker() as session:
        result = await session.execute(
            select(LocalContent).where(LocalContent.global_content_id == content_id)
        )
        return {mirror.node_id: mirror for mirror in result.scalars().all()}


def selective(*node_ids: str) -> DistributionOptions:
    return DistributionOptions(target_nodes=list(node_ids), mode=DistributionMode.SELECTIVE)


class TestDistribute:
    """Tests for DistributionCoordinator.distribute."""

    @pytest.mark.asyncio
    async def test_push_all_targets_active_nodes(
        self, coordinator, db_sessionmaker, make_node, make_lesson
    ) -> None:
        node_a = await make_node("node-a")
        node_b = await make_node("node-b")
        await make_node("node-pending", status=NodeStatus.PENDING)
        content = await make_lesson()

        job = await coordinator.distribute(content.id, requested_by="editor-1")

        assert job.status == DistributionStatus.COMPLETED.value
        assert sorted(job.target_nodes) == sorted([node_a.id, node_b.id])
        assert job.successful_nodes == 2
        assert job.failed_nodes == 0
        assert job.version == "1.0.0"
        assert job.requested_by == "editor-1"
        assert job.started_at is not None
        assert job.completed_at is not None

        mirrors = await fetch_mirrors(db_sessionmaker, content.id)
        assert set(mirrors) == {node_a.id, node_b.id}
        mirror = mirrors[node_a.id]
        assert mirror.source_version == "1.0.0"
        assert mirror.publish_status == "published"
        assert mirror.translation_status == "not_started"
        assert mirror.language == "ar"
        assert mirror.is_customized is False
        assert mirror.payload == content.payload

    @pytest.mark.asyncio
    async def test_distribution_is_idempotent(
        self, coordinator, db_sessionmaker, make_node, make_lesson
    ) -> None:
        node_a = await make_node("node-a")
        await make_node("node-b")
        content = await make_lesson()

        await coordinator.distribute(content.id)
        first = await fetch_mirrors(db_sessionmaker, content.id)
        job = await coordinator.distribute(content.id)
        second = await fetch_mirrors(db_sessionmaker, content.id)

        assert job.status == DistributionStatus.COMPLETED.value
        assert job.successful_nodes == 2
        assert len(second) == 2
        assert second[node_a.id].id == first[node_a.id].id
        assert second[node_a.id].payload == first[node_a.id].payload
        assert second[node_a.id].source_version == first[node_a.id].source_version

    @pytest.mark.asyncio
    async def test_missing_node_fails_softly(
        self, coordinator, db_sessionmaker, make_node, make_lesson
    ) -> None:
        node_y = await make_node("node-y")
        node_z = await make_node("node-z")
        content = await make_lesson()

        job = await coordinator.distribute(
            content.id, selective("node-x-missing", node_y.id, node_z.id)
        )

        assert job.status == DistributionStatus.PARTIAL_FAILURE.value
        assert job.successful_nodes == 2
        assert job.failed_nodes == 1
        assert job.failed_node_ids == ["node-x-missing"]
        assert "not found" in job.failures[0]["error"]

        mirrors = await fetch_mirrors(db_sessionmaker, content.id)
        assert set(mirrors) == {node_y.id, node_z.id}

    @pytest.mark.asyncio
    async def test_concurrent_fan_out_on_sqlite(
        self, db_sessionmaker, mirror_lock_registry, make_node, make_lesson
    ) -> None:
        coordinator = DistributionCoordinator(
            db_sessionmaker, max_concurrency=4, locks=mirror_lock_registry
        )
        healthy = [await make_node(f"node-{index}") for index in range(4)]
        content = await make_lesson()

        job = await coordinator.distribute(
            content.id,
            selective(*(node.id for node in healthy), "missing-1", "missing-2"),
        )

        assert coordinator.max_concurrency == 1
        assert job.status == DistributionStatus.PARTIAL_FAILURE.value
        assert (job.successful_nodes, job.failed_nodes) == (4, 2)
        assert sorted(job.failed_node_ids) == ["missing-1", "missing-2"]

        mirrors = await fetch_mirrors(db_sessionmaker, content.id)
        assert set(mirrors) == {node.id for node in healthy}

        again = await coordinator.distribute(content.id)
        assert again.status == DistributionStatus.COMPLETED.value
        assert again.successful_nodes == 4

    @pytest.mark.asyncio
    async def test_suspended_node_fails_softly(
        self, coordinator, db_sessionmaker, make_node, make_lesson
    ) -> None:
        suspended = await make_node("node-x", status=NodeStatus.SUSPENDED)
        node_y = await make_node("node-y")
        node_z = await make_node("node-z")
        content = await make_lesson()

        job = await coordinator.distribute(
            content.id, selective(suspended.id, node_y.id, node_z.id)
        )

        assert job.status == DistributionStatus.PARTIAL_FAILURE.value
        assert (job.successful_nodes, job.failed_nodes) == (2, 1)
        assert job.failed_node_ids == [suspended.id]
        assert suspended.id not in await fetch_mirrors(db_sessionmaker, content.id)

    @pytest.mark.asyncio
    async def test_unexpected_node_error_fails_softly(
        self, coordinator, db_sessionmaker, make_node, make_lesson, monkeypatch
    ) -> None:
        node_x = await make_node("node-x")
        node_y = await make_node("node-y")
        content = await make_lesson()
        original = coordinator._upsert_mirror

        async def flaky_upsert(db, node, snapshot):
            if node.id == node_x.id:
                raise RuntimeError("disk full")
            return await original(db, node, snapshot)

        monkeypatch.setattr(coordinator, "_upsert_mirror", flaky_upsert)

        job = await coordinator.distribute(content.id)

        assert job.status == DistributionStatus.PARTIAL_FAILURE.value
        assert job.failures[0]["node_id"] == node_x.id
        assert job.failures[0]["error"] == "disk full"
        assert set(await fetch_mirrors(db_sessionmaker, content.id)) == {node_y.id}

    @pytest.mark.asyncio
    async def test_slow_node_times_out(
        self, coordinator, db_sessionmaker, make_node, make_lesson, monkeypatch
    ) -> None:
        slow = await make_node("node-slow")
        fast = await make_node("node-fast")
        content = await make_lesson()
        original = coordinator._upsert_mirror

        async def slow_upsert(db, node, snapshot):
            if node.id == slow.id:
                await asyncio.sleep(5)
            return await original(db, node, snapshot)

        monkeypatch.setattr(coordinator, "_upsert_mirror", slow_upsert)
        monkeypatch.setattr(coordinator, "_node_timeout", 0.1)

        job = await coordinator.distribute(content.id)

        assert job.status == DistributionStatus.PARTIAL_FAILURE.value
        assert job.failed_node_ids == [slow.id]
        assert "Timed out" in job.failures[0]["error"]
        assert set(await fetch_mirrors(db_sessionmaker, content.id)) == {fast.id}

    @pytest.mark.asyncio
    async def test_no_targets_completes_empty(self, coordinator, make_lesson) -> None:
        content = await make_lesson()

        job = await coordinator.distribute(content.id, selective())

        assert job.status == DistributionStatus.COMPLETED.value
        assert (job.successful_nodes, job.failed_nodes) == (0, 0)
        assert job.target_nodes == []

    @pytest.mark.asyncio
    async def test_duplicate_targets_synced_once(
        self, coordinator, make_node, make_lesson
    ) -> None:
        node_a = await make_node("node-a")
        content = await make_lesson()

        job = await coordinator.distribute(content.id, selective(node_a.id, node_a.id))

        assert job.target_nodes == [node_a.id]
        assert job.successful_nodes == 1

    @pytest.mark.asyncio
    async def test_draft_versions_are_not_distributed(
        self, coordinator, db_session, db_sessionmaker, make_node, make_lesson
    ) -> None:
        node_a = await make_node("node-a")
        content = await make_lesson()
        await VersionManager(db_session).create_version(
            content.id, "minor", ["Draft"], {"sections": [{"title": "Draft"}]}
        )

        job = await coordinator.distribute(content.id)

        mirrors = await fetch_mirrors(db_sessionmaker, content.id)
        assert job.version == "1.0.0"
        assert mirrors[node_a.id].source_version == "1.0.0"

    @pytest.mark.asyncio
    async def test_unknown_content_creates_no_job(self, coordinator) -> None:
        with pytest.raises(ContentNotFoundError):
            await coordinator.distribute("missing")

        jobs, total, _ = await coordinator.list_jobs()
        assert jobs == []
        assert total == 0


class TestRetryAndQueries:
    """Tests for retry_failures, get_job and list_jobs."""

    @pytest.mark.asyncio
    async def test_retry_targets_failed_nodes_only(
        self, coordinator, db_session, db_sessionmaker, make_node, make_lesson
    ) -> None:
        suspended = await make_node("node-x", status=NodeStatus.SUSPENDED)
        node_y = await make_node("node-y")
        content = await make_lesson()
        first = await coordinator.distribute(content.id, selective(suspended.id, node_y.id))
        await NodeRegistry(db_session).update_status(suspended.id, NodeStatus.ACTIVE)

        retry = await coordinator.retry_failures(first.id, requested_by="ops-1")

        assert retry.id != first.id
        assert retry.mode == DistributionMode.SELECTIVE.value
        assert retry.target_nodes == [suspended.id]
        assert retry.status == DistributionStatus.COMPLETED.value
        assert set(await fetch_mirrors(db_sessionmaker, content.id)) == {
            suspended.id,
            node_y.id,
        }

        unchanged = await coordinator.get_job(first.id)
        assert unchanged.status == DistributionStatus.PARTIAL_FAILURE.value
        assert unchanged.failed_node_ids == [suspended.id]

    @pytest.mark.asyncio
    async def test_get_unknown_job(self, coordinator) -> None:
        with pytest.raises(DistributionJobNotFoundError):
            await coordinator.get_job("missing")

    @pytest.mark.asyncio
    async def test_list_jobs_with_status_counts(
        self, coordinator, make_node, make_lesson
    ) -> None:
        node_a = await make_node("node-a")
        content = await make_lesson()
        await coordinator.distribute(content.id, selective(node_a.id))
        await coordinator.distribute(content.id, selective("missing-node"))

        jobs, total, counts = await coordinator.list_jobs()
        partial, partial_total, _ = await coordinator.list_jobs(
            status=DistributionStatus.PARTIAL_FAILURE
        )

        assert total == 2
        assert len(jobs) == 2
        assert counts["completed"] == 1
        assert counts["partial_failure"] == 1
        assert counts["pending"] == 0
        assert partial_total == 1
        assert partial[0].failed_node_ids == ["missing-node"]


class TestMirrorRefresh:
    """Tests for refreshing mirrors that already exist."""

    @pytest.mark.asyncio
    async def test_patch_title_reaches_mirrors(
        self, coordinator, db_session, db_sessionmaker, make_node, make_lesson
    ) -> None:
        node_a = await make_node("node-a")
        content = await make_lesson(title="Arabic Letters")
        await coordinator.distribute(content.id)
        await VersionManager(db_session).create_version(
            content.id,
            "patch",
            ["Retitle"],
            {"sections": [{"title": "Alif"}]},
            title="Arabic Alphabet",
        )

        job = await coordinator.distribute(content.id)

        mirror = (await fetch_mirrors(db_sessionmaker, content.id))[node_a.id]
        assert job.version == "1.0.1"
        assert mirror.title == "Arabic Alphabet"
        assert mirror.source_version == "1.0.1"

    @pytest.mark.asyncio
    async def test_insert_race_falls_back_to_update(
        self, coordinator, db_session, db_sessionmaker, make_node, make_lesson, monkeypatch
    ) -> None:
        node_a = await make_node("node-a")
        content = await make_lesson()
        await coordinator.distribute(content.id)

        async with db_sessionmaker() as session:
            mirror = await ContentStore(session).get_local_content(node_a.id, content.id)
            mirror.is_customized = True
            mirror.customization = {"greeting": "Marhaba"}
            await session.commit()

        await VersionManager(db_session).create_version(
            content.id, "patch", ["Add Ta"], {"sections": [{"title": "Ta"}]}
        )

        original = ContentStore.get_local_content
        calls = []

        async def miss_first_lookup(self, node_id, content_id):
            calls.append(node_id)
            if len(calls) == 1:
                return None
            return await original(self, node_id, content_id)

        monkeypatch.setattr(ContentStore, "get_local_content", miss_first_lookup)

        job = await coordinator.distribute(content.id)

        assert job.status == DistributionStatus.COMPLETED.value
        assert len(calls) == 2
        mirrors = await fetch_mirrors(db_sessionmaker, content.id)
        assert list(mirrors) == [node_a.id]
        mirror = mirrors[node_a.id]
        assert mirror.source_version == "1.0.1"
        assert mirror.payload == {"sections": [{"title": "Ta"}]}
        assert mirror.customization == {"greeting": "Marhaba"}
        assert mirror.is_customized is True
