# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database-backed tests for the content catalog service."""

import pytest
from pydantic import ValidationError

from src.domains.content.service import ContentService
from src.domains.content.store import ContentNotFoundError, ContentStore
from src.domains.content.versioning import SchemaValidationFailedError
from src.domains.localization.translation import TranslationService
from src.models.common import ContentCategory, ContentTier, ContentType
from src.models.content import (
    GlobalContentCreateRequest,
    GlobalContentFilters,
    GlobalContentUpdateRequest,
)
from src.models.localization import TranslationCreateRequest

pytestmark = pytest.mark.integration


@pytest.fixture
def service(db_session) -> ContentService:
    return ContentService(db_session)


class TestCreateContent:
    """Tests for ContentService.create_global_content."""

    @pytest.mark.asyncio
    async def test_author_stamped_in_metadata(self, service) -> None:
        content = await service.create_global_content(
            GlobalContentCreateRequest(
                title="Quran Recitation",
                content_type=ContentType.COURSE,
                category=ContentCategory.RELIGIOUS,
                payload={"modules": [{"title": "Tajweed"}]},
                metadata={"source": "central"},
            ),
            author_id="editor-1",
        )

        assert content.is_published is False
        assert content.current_version == "1.0.0"
        assert content.content_metadata["source"] == "central"
        assert content.content_metadata["author"] == "editor-1"
        assert content.content_metadata["last_modified_by"] == "editor-1"

    @pytest.mark.asyncio
    async def test_invalid_payload_creates_nothing(self, service) -> None:
        with pytest.raises(SchemaValidationFailedError) as exc_info:
            await service.create_global_content(
                GlobalContentCreateRequest(
                    title="Empty course",
                    content_type=ContentType.COURSE,
                    payload={"modules": []},
                )
            )

        _, total = await service.list_global_content(GlobalContentFilters())
        assert total == 0
        assert exc_info.value.errors == ["'modules' must not be empty"]


class TestListAndUpdate:
    """Tests for catalog queries and metadata updates."""

    @pytest.mark.asyncio
    async def test_filters_and_search(self, service, make_lesson) -> None:
        await make_lesson("Arabic Alphabet")
        await make_lesson("Counting in Arabic", tier=ContentTier.PREMIUM)
        await make_lesson("Basic Geometry")

        arabic, arabic_total = await service.list_global_content(
            GlobalContentFilters(search="ARABIC")
        )
        premium, _ = await service.list_global_content(
            GlobalContentFilters(tier=ContentTier.PREMIUM)
        )
        page, total = await service.list_global_content(GlobalContentFilters(limit=1))

        assert arabic_total == 2
        assert {c.title for c in arabic} == {"Arabic Alphabet", "Counting in Arabic"}
        assert [c.title for c in premium] == ["Counting in Arabic"]
        assert len(page) == 1
        assert total == 3

    @pytest.mark.asyncio
    async def test_update_metadata(self, service, make_lesson) -> None:
        content = await make_lesson()

        updated = await service.update_global_content(
            content.id,
            GlobalContentUpdateRequest(
                tier=ContentTier.PREMIUM,
                learning_objectives=["Read the alphabet"],
            ),
            actor_id="editor-2",
        )

        assert updated.learning_objectives == ["Read the alphabet"]
        assert updated.tier == "premium"
        assert updated.description == "Letters and sounds"
        assert updated.content_metadata["last_modified_by"] == "editor-2"

    def test_title_not_editable_in_place(self) -> None:
        with pytest.raises(ValidationError):
            GlobalContentUpdateRequest(title="Arabic Letters")

    @pytest.mark.asyncio
    async def test_publish_and_unpublish(self, service, make_lesson) -> None:
        content = await make_lesson()

        published = await service.set_published(content.id, True)
        assert published.is_published is True

        unpublished = await service.set_published(content.id, False)
        assert unpublished.is_published is False

    @pytest.mark.asyncio
    async def test_unknown_content(self, service) -> None:
        with pytest.raises(ContentNotFoundError):
            await service.get_global_content("missing")


class TestContentStatistics:
    """Tests for ContentService.get_content_statistics."""

    @pytest.mark.asyncio
    async def test_statistics(
        self, service, db_session, coordinator, make_node, make_lesson
    ) -> None:
        node_a = await make_node("node-a")
        await make_node("node-b")
        first = await make_lesson("Alphabet")
        second = await make_lesson("Numbers")
        await make_lesson("Draft only")
        await service.set_published(first.id, True)
        await service.set_published(second.id, True)
        await coordinator.distribute(first.id)

        mirrors = await ContentStore(db_session).list_local_content(node_a.id)
        await TranslationService(db_session).create_translation_request(
            TranslationCreateRequest(
                local_content_id=mirrors[0].id,
                source_language="ar",
                target_language="fr",
                source_text="نص",
            ),
            translator_id="translator-1",
        )

        overall = await service.get_content_statistics()
        for_node = await service.get_content_statistics(node_id=node_a.id)

        assert overall.total_global_content == 3
        assert overall.published_global_content == 2
        assert overall.total_local_content == 2
        assert overall.published_local_content == 2
        assert overall.pending_translations == 1
        assert overall.completed_translations == 0
        assert overall.localization_rate == 100.0
        assert for_node.total_local_content == 1
        assert for_node.pending_translations == 1
        assert for_node.localization_rate == 50.0

    @pytest.mark.asyncio
    async def test_empty_catalog_rate_is_zero(self, service) -> None:
        stats = await service.get_content_statistics()

        assert stats.total_global_content == 0
        assert stats.localization_rate == 0.0
