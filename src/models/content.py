# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Global content and version API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.models.common import (
    AgeGroup,
    ContentCategory,
    ContentLevel,
    ContentTier,
    ContentType,
)


class GlobalContentCreateRequest(BaseModel):
    """Request to create a global content item and its initial version."""

    title: str = Field(min_length=1, max_length=255)
    description: str = Field(default="", max_length=5000)
    content_type: ContentType
    category: ContentCategory = ContentCategory.GENERAL
    level: ContentLevel = ContentLevel.BEGINNER
    age_group: AgeGroup = AgeGroup.ALL_AGES
    tier: ContentTier = ContentTier.FREE
    estimated_duration: int | None = Field(
        default=None,
        ge=1,
        description="Estimated duration in minutes",
    )
    prerequisites: list[str] = Field(default_factory=list)
    learning_objectives: list[str] = Field(default_factory=list)
    payload: dict[str, Any] = Field(
        default_factory=dict,
        description="Content body, validated against the rules of content_type",
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Free-form metadata; author fields are stamped by the service",
    )


class GlobalContentUpdateRequest(BaseModel):
    """Catalog metadata changes.

    Title, description and payload are distributed to nodes and only change
    through a new version.
    """

    model_config = ConfigDict(extra="forbid")

    category: ContentCategory | None = None
    level: ContentLevel | None = None
    age_group: AgeGroup | None = None
    tier: ContentTier | None = None
    estimated_duration: int | None = Field(default=None, ge=1)
    prerequisites: list[str] | None = None
    learning_objectives: list[str] | None = None


class GlobalContentFilters(BaseModel):
    """Catalog query filters."""

    content_type: ContentType | None = None
    category: ContentCategory | None = None
    level: ContentLevel | None = None
    tier: ContentTier | None = None
    is_published: bool | None = None
    search: str | None = Field(
        default=None,
        description="Case-insensitive match against title and description",
    )
    limit: int = Field(default=20, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class GlobalContentResponse(BaseModel):
    """Global content item."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    content_type: ContentType
    category: ContentCategory
    level: ContentLevel
    age_group: AgeGroup
    tier: ContentTier
    estimated_duration: int | None
    prerequisites: list[str]
    learning_objectives: list[str]
    payload: dict[str, Any]
    metadata: dict[str, Any] = Field(validation_alias="content_metadata")
    is_published: bool
    current_version: str | None
    current_version_id: str | None
    created_at: datetime
    updated_at: datetime


class GlobalContentListResponse(BaseModel):
    """Paginated catalog listing."""

    items: list[GlobalContentResponse]
    total: int
    limit: int
    offset: int


class VersionCreateRequest(BaseModel):
    """Request to record a new content version."""

    change_type: str = Field(description="One of: major, minor, patch")
    change_notes: list[str] = Field(default_factory=list)
    payload: dict[str, Any]
    title: str | None = Field(
        default=None,
        min_length=1,
        max_length=255,
        description="New title; unset keeps the current one",
    )
    description: str | None = Field(default=None, max_length=5000)
    force_promote: bool = Field(
        default=False,
        description="Make the new version current even if it is not a patch",
    )


class ContentVersionResponse(BaseModel):
    """Recorded content version."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    global_content_id: str
    version: str
    sequence: int
    change_type: str
    change_notes: list[str]
    title: str
    description: str
    payload: dict[str, Any]
    is_stable: bool
    created_by: str | None
    created_at: datetime
    promoted_at: datetime | None


class ContentStatisticsResponse(BaseModel):
    """Catalog and localization counters."""

    total_global_content: int
    published_global_content: int
    total_local_content: int
    published_local_content: int
    pending_translations: int
    completed_translations: int
    localization_rate: float = Field(
        description="Local content rows per published global item, as a percentage",
    )
