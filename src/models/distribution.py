# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Distribution API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.models.common import DistributionMode, DistributionStatus, Priority


class DistributionOptions(BaseModel):
    """How a content item is fanned out.

    ``target_nodes`` left unset means every active node.
    """

    target_nodes: list[str] | None = None
    mode: DistributionMode = DistributionMode.PUSH_ALL
    priority: Priority = Priority.MEDIUM
    scheduled_at: datetime | None = None


class DistributionRequest(DistributionOptions):
    """Request to distribute a global content item."""

    content_id: str


class NodeFailure(BaseModel):
    """A node that could not be synced during a distribution."""

    node_id: str
    error: str
    timestamp: datetime


class DistributionJobResponse(BaseModel):
    """Distribution job with per-node failures."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    global_content_id: str
    version: str | None
    target_nodes: list[str]
    mode: DistributionMode
    status: DistributionStatus
    failures: list[NodeFailure]
    failed_node_ids: list[str]
    successful_nodes: int
    failed_nodes: int
    priority: Priority
    scheduled_at: datetime | None
    requested_by: str | None
    started_at: datetime | None
    completed_at: datetime | None
    created_at: datetime


class DistributionJobListResponse(BaseModel):
    """Paginated distribution jobs with per-status counts."""

    items: list[DistributionJobResponse]
    total: int
    status_counts: dict[str, int] = Field(default_factory=dict)
