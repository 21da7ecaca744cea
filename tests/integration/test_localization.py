# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database-backed tests for localization and redistribution."""

import pytest
from sqlalchemy import select

from src.domains.content.store import ContentNotFoundError
from src.domains.content.versioning import VersionManager
from src.domains.localization.workflow import LocalizationWorkflow
from src.domains.network.registry import NodeNotFoundError
from src.infrastructure.database.models import LocalContent
from src.models.common import DistributionStatus, TranslationStatus
from src.models.localization import CulturalAdaptation

pytestmark = pytest.mark.integration

PATCHED_PAYLOAD = {"sections": [{"title": "Alif"}, {"title": "Ba"}, {"title": "Ta"}]}


def winter_adaptation(section: str = "introduction") -> CulturalAdaptation:
    return CulturalAdaptation(
        section=section,
        original_content="Children build a snowman",
        adapted_content="Children build a sandcastle",
        reason="No snow in the region",
    )


async def fetch_mirror(sessionmaker, node_id: str, content_id: str) -> LocalContent:
    async with sessionmaker() as session:
        result = await session.execute(
            select(LocalContent).where(
                LocalContent.node_id == node_id,
                LocalContent.global_content_id == content_id,
            )
        )
        return result.scalar_one()


@pytest.fixture
def workflow(db_session, mirror_lock_registry) -> LocalizationWorkflow:
    return LocalizationWorkflow(db_session, locks=mirror_lock_registry)


class TestLocalize:
    """Tests for LocalizationWorkflow.localize."""

    @pytest.mark.asyncio
    async def test_creates_draft_mirror_when_missing(
        self, workflow, make_node, make_lesson
    ) -> None:
        node = await make_node("node-fr", language="fr")
        content = await make_lesson()

        local = await workflow.localize(
            content.id,
            node.id,
            "fr",
            "translation",
            cultural_adaptations=[winter_adaptation()],
            actor_id="localizer-1",
        )

        assert local.node_id == node.id
        assert local.language == "fr"
        assert local.is_customized is True
        assert local.publish_status == "draft"
        assert local.translation_status == TranslationStatus.IN_PROGRESS.value
        assert local.source_version == "1.0.0"
        assert local.localized_by == "localizer-1"
        assert local.customization["localization_type"] == "translation"
        assert local.customization["cultural_adaptations"][0]["section"] == "introduction"

    @pytest.mark.asyncio
    async def test_existing_mirror_keeps_publish_status(
        self, workflow, coordinator, db_sessionmaker, make_node, make_lesson
    ) -> None:
        node = await make_node("node-fr")
        content = await make_lesson()
        await coordinator.distribute(content.id)

        local = await workflow.localize(content.id, node.id, "fr", "adaptation")

        mirror = await fetch_mirror(db_sessionmaker, node.id, content.id)
        assert mirror.id == local.id
        assert mirror.publish_status == "published"
        assert mirror.translation_status == TranslationStatus.IN_PROGRESS.value

    @pytest.mark.asyncio
    async def test_mirror_created_concurrently_is_localized(
        self, workflow, coordinator, db_sessionmaker, make_node, make_lesson, monkeypatch
    ) -> None:
        node = await make_node("node-fr")
        content = await make_lesson()
        await coordinator.distribute(content.id)

        original = workflow._store.get_local_content
        calls = []

        async def miss_first_lookup(node_id, content_id):
            calls.append(node_id)
            if len(calls) == 1:
                return None
            return await original(node_id, content_id)

        monkeypatch.setattr(workflow._store, "get_local_content", miss_first_lookup)

        local = await workflow.localize(
            content.id, node.id, "fr", "translation",
            cultural_adaptations=[winter_adaptation()],
        )

        assert len(calls) == 2
        async with db_sessionmaker() as session:
            result = await session.execute(
                select(LocalContent).where(LocalContent.global_content_id == content.id)
            )
            mirrors = result.scalars().all()
        assert [m.id for m in mirrors] == [local.id]
        assert mirrors[0].publish_status == "published"
        assert mirrors[0].translation_status == TranslationStatus.IN_PROGRESS.value
        assert mirrors[0].customization["cultural_adaptations"][0]["section"] == "introduction"

    @pytest.mark.asyncio
    async def test_adaptations_accumulate(self, workflow, make_node, make_lesson) -> None:
        node = await make_node("node-fr")
        content = await make_lesson()

        await workflow.localize(
            content.id, node.id, "fr", "translation",
            cultural_adaptations=[winter_adaptation("introduction")],
        )
        local = await workflow.localize(
            content.id, node.id, "fr", "adaptation",
            cultural_adaptations=[winter_adaptation("examples")],
        )

        sections = [a["section"] for a in local.customization["cultural_adaptations"]]
        assert sections == ["introduction", "examples"]
        assert len(local.customization["passes"]) == 2

    @pytest.mark.asyncio
    async def test_unknown_node(self, workflow, make_lesson) -> None:
        content = await make_lesson()

        with pytest.raises(NodeNotFoundError):
            await workflow.localize(content.id, "missing", "fr", "translation")

    @pytest.mark.asyncio
    async def test_unknown_content(self, workflow, make_node) -> None:
        node = await make_node("node-fr")

        with pytest.raises(ContentNotFoundError):
            await workflow.localize("missing", node.id, "fr", "translation")

    @pytest.mark.asyncio
    async def test_list_local_content_filters(
        self, workflow, coordinator, make_node, make_lesson
    ) -> None:
        node = await make_node("node-fr")
        first = await make_lesson("Alphabet")
        second = await make_lesson("Numbers")
        await coordinator.distribute(first.id)
        await coordinator.distribute(second.id)
        await workflow.localize(second.id, node.id, "fr", "translation")

        everything = await workflow.list_local_content(node.id)
        french = await workflow.list_local_content(node.id, language="fr")
        untouched = await workflow.list_local_content(
            node.id, translation_status=TranslationStatus.NOT_STARTED
        )

        assert len(everything) == 2
        assert [item.global_content_id for item in french] == [second.id]
        assert [item.global_content_id for item in untouched] == [first.id]


class TestRedistributionPreservesLocalization:
    """Patch releases reach localized nodes without losing their work."""

    @pytest.mark.asyncio
    async def test_patch_redistribution_keeps_customization(
        self, workflow, coordinator, db_session, db_sessionmaker, make_node, make_lesson
    ) -> None:
        node_fr = await make_node("node-fr")
        node_ar = await make_node("node-ar")
        content = await make_lesson()

        first_job = await coordinator.distribute(content.id)
        assert first_job.status == DistributionStatus.COMPLETED.value

        await workflow.localize(
            content.id,
            node_fr.id,
            "fr",
            "translation",
            cultural_adaptations=[winter_adaptation()],
            actor_id="localizer-1",
        )
        localized = await fetch_mirror(db_sessionmaker, node_fr.id, content.id)

        patch = await VersionManager(db_session).create_version(
            content.id, "patch", ["Add Ta"], PATCHED_PAYLOAD
        )
        assert patch.version == "1.0.1"

        second_job = await coordinator.distribute(content.id)
        assert second_job.status == DistributionStatus.COMPLETED.value
        assert second_job.version == "1.0.1"

        fr_mirror = await fetch_mirror(db_sessionmaker, node_fr.id, content.id)
        assert fr_mirror.id == localized.id
        assert fr_mirror.source_version == "1.0.1"
        assert fr_mirror.payload == PATCHED_PAYLOAD
        assert fr_mirror.is_customized is True
        assert fr_mirror.customization == localized.customization
        assert fr_mirror.language == "fr"
        assert fr_mirror.translation_status == TranslationStatus.IN_PROGRESS.value
        assert fr_mirror.publish_status == "published"

        ar_mirror = await fetch_mirror(db_sessionmaker, node_ar.id, content.id)
        assert ar_mirror.source_version == "1.0.1"
        assert ar_mirror.is_customized is False
        assert ar_mirror.language == "ar"
