# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Localization and translation API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.models.common import (
    Priority,
    PublishStatus,
    TranslationMode,
    TranslationStatus,
)


class CulturalAdaptation(BaseModel):
    """Audit record of one section altered for a local audience."""

    section: str = Field(min_length=1)
    original_content: str
    adapted_content: str
    reason: str
    approved_by: str | None = None


class LocalExample(BaseModel):
    """A locally relevant replacement for an example in the source."""

    context: str
    original_example: str
    local_example: str
    relevance_score: int = Field(ge=1, le=10)


class LocalizeRequest(BaseModel):
    """Request to localize a node's mirror of a global content item."""

    global_content_id: str
    node_id: str
    target_language: str = Field(min_length=2, max_length=10)
    localization_type: str = Field(description="One of: translation, adaptation, recreation")
    cultural_adaptations: list[CulturalAdaptation] = Field(default_factory=list)
    local_examples: list[LocalExample] = Field(default_factory=list)
    additional_resources: list[Any] = Field(default_factory=list)


class LocalContentResponse(BaseModel):
    """A node's local content row."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    node_id: str
    global_content_id: str | None
    title: str
    description: str
    content_type: str
    payload: dict[str, Any]
    language: str
    is_customized: bool
    customization: dict[str, Any]
    translation_status: TranslationStatus
    publish_status: PublishStatus
    source_version: str | None
    localized_by: str | None
    last_synced_at: datetime | None
    created_at: datetime
    updated_at: datetime


class LocalContentListResponse(BaseModel):
    """Local content rows of one node."""

    items: list[LocalContentResponse]
    total: int


class TranslationQuality(BaseModel):
    """Self-reported or reviewer quality scores."""

    accuracy: int | None = Field(default=None, ge=1, le=10)
    fluency: int | None = Field(default=None, ge=1, le=10)
    cultural_fit: int | None = Field(default=None, ge=1, le=10)
    needs_review: bool | None = None


class TranslationCreateRequest(BaseModel):
    """Request to open a translation work item."""

    local_content_id: str
    source_language: str = Field(min_length=2, max_length=10)
    target_language: str = Field(min_length=2, max_length=10)
    source_text: str = Field(min_length=1)
    mode: TranslationMode = TranslationMode.HUMAN
    priority: Priority = Priority.MEDIUM


class TranslationSubmitRequest(BaseModel):
    """Translator hands in the translated text for review."""

    translated_text: str
    quality: TranslationQuality | None = None


class TranslationApproveRequest(BaseModel):
    """Reviewer approval."""

    notes: str | None = None


class TranslationRequestResponse(BaseModel):
    """Translation work item."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    local_content_id: str
    translator_id: str
    source_language: str
    target_language: str
    source_text: str
    translated_text: str
    mode: TranslationMode
    status: TranslationStatus
    quality: dict[str, Any]
    priority: Priority
    reviewer_id: str | None
    review_notes: str | None
    started_at: datetime | None
    submitted_at: datetime | None
    completed_at: datetime | None
    created_at: datetime


class TranslationRequestListResponse(BaseModel):
    """Translation requests with per-status counts."""

    items: list[TranslationRequestResponse]
    total: int
    status_counts: dict[str, int] = Field(default_factory=dict)
