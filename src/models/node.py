# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Regional node API schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.models.common import NodeStatus


class NodeCreateRequest(BaseModel):
    """Onboard a regional node."""

    name: str = Field(min_length=1, max_length=200)
    slug: str = Field(
        min_length=1,
        max_length=100,
        description="Lowercase letters, digits and hyphens",
    )
    region: str = Field(min_length=1, max_length=100)
    country: str = Field(min_length=1, max_length=100)
    language: str = Field(default="ar", min_length=2, max_length=10)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    timezone: str = Field(default="UTC", max_length=50)
    settings: dict[str, Any] = Field(
        default_factory=dict,
        description="Overrides merged on top of the default node settings",
    )


class NodeStatusUpdateRequest(BaseModel):
    """Change a node's operating status."""

    status: NodeStatus


class NodeSettingUpdateRequest(BaseModel):
    """Set one node setting."""

    value: Any


class NodeResponse(BaseModel):
    """Regional node."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    region: str
    country: str
    language: str
    currency: str
    timezone: str
    status: NodeStatus
    settings: dict[str, Any]
    created_at: datetime
    updated_at: datetime


class NodeListResponse(BaseModel):
    """Registered nodes."""

    items: list[NodeResponse]
    total: int
