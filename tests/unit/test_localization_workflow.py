# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the customization overlay."""

import pytest

from src.domains.localization.workflow import (
    InvalidLocalizationTypeError,
    LocalizationWorkflow,
    coerce_localization_type,
    merge_customization,
)
from src.models.common import LocalizationType


def adaptation(section: str) -> dict:
    return {
        "section": section,
        "original_content": "Snow in winter",
        "adapted_content": "Sand in summer",
        "reason": "Regional climate",
        "approved_by": None,
    }


class TestCoerceLocalizationType:
    """Tests for localization type input conversion."""

    def test_accepts_known_values(self) -> None:
        assert coerce_localization_type("adaptation") is LocalizationType.ADAPTATION

    def test_rejects_unknown(self) -> None:
        with pytest.raises(InvalidLocalizationTypeError) as exc_info:
            coerce_localization_type("dubbing")

        assert "translation" in exc_info.value.details["allowed"]


class TestMergeCustomization:
    """Tests for merge_customization."""

    def test_first_pass(self) -> None:
        merged = merge_customization(
            None,
            LocalizationType.TRANSLATION,
            "fr",
            [adaptation("intro")],
            [],
            ["https://example.org/glossary"],
            "localizer-1",
        )

        assert merged["localization_type"] == "translation"
        assert merged["localized_by"] == "localizer-1"
        assert len(merged["cultural_adaptations"]) == 1
        assert merged["cultural_adaptations"][0]["section"] == "intro"
        assert "recorded_at" in merged["cultural_adaptations"][0]
        assert merged["additional_resources"] == ["https://example.org/glossary"]
        assert len(merged["passes"]) == 1
        assert merged["passes"][0]["target_language"] == "fr"

    def test_adaptations_are_appended(self) -> None:
        first = merge_customization(
            None, LocalizationType.TRANSLATION, "fr", [adaptation("intro")], [], [], "a"
        )

        second = merge_customization(
            first, LocalizationType.ADAPTATION, "fr", [adaptation("examples")], [], [], "b"
        )

        assert [a["section"] for a in second["cultural_adaptations"]] == ["intro", "examples"]
        assert second["cultural_adaptations"][0] == first["cultural_adaptations"][0]
        assert second["localization_type"] == "adaptation"
        assert [p["localized_by"] for p in second["passes"]] == ["a", "b"]

    def test_examples_and_resources_reflect_latest_pass(self) -> None:
        example = {
            "context": "Counting",
            "original_example": "apples",
            "local_example": "dates",
            "relevance_score": 9,
        }
        first = merge_customization(
            None, LocalizationType.ADAPTATION, "ar", [], [example], ["r1"], "a"
        )

        second = merge_customization(first, LocalizationType.ADAPTATION, "ar", [], [], ["r2"], "a")

        assert second["local_examples"] == []
        assert second["additional_resources"] == ["r2"]

    def test_existing_overlay_not_modified(self) -> None:
        existing = {"cultural_adaptations": [adaptation("intro")], "custom_flag": True}

        merged = merge_customization(
            existing, LocalizationType.RECREATION, "fa", [adaptation("outro")], [], [], None
        )

        assert len(existing["cultural_adaptations"]) == 1
        assert "passes" not in existing
        assert merged["custom_flag"] is True


class TestLocalizeValidation:
    """Tests for input checks that run before any query."""

    @pytest.mark.asyncio
    async def test_invalid_type_rejected_before_lookup(self, mock_db) -> None:
        workflow = LocalizationWorkflow(mock_db)

        with pytest.raises(InvalidLocalizationTypeError):
            await workflow.localize("content-1", "node-1", "fr", "dubbing")

        mock_db.execute.assert_not_called()
