# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Distribution job model.

Per-node failures are stored inline as a JSON list of
``{"node_id", "error", "timestamp"}`` entries; their volume is bounded by
the node count.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import (
    Base,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)
from src.models.common import DistributionStatus


class DistributionJob(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """One fan-out attempt of a content version to a set of nodes."""

    __tablename__ = "distribution_jobs"

    global_content_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("global_contents.id", ondelete="RESTRICT"),
        nullable=False,
    )
    version: Mapped[str | None] = mapped_column(String(20), nullable=True)
    target_nodes: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    mode: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=DistributionStatus.PENDING.value,
    )
    failures: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    successful_nodes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    failed_nodes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    priority: Mapped[str] = mapped_column(String(10), nullable=False, default="medium")
    scheduled_at: Mapped[datetime | None] = mapped_column(nullable=True)
    requested_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    started_at: Mapped[datetime | None] = mapped_column(nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    __table_args__ = (
        Index("ix_distribution_jobs_content", "global_content_id"),
        Index("ix_distribution_jobs_status", "status"),
    )

    @property
    def failed_node_ids(self) -> list[str]:
        """Node ids recorded as failed, in target order."""
        return [failure["node_id"] for failure in self.failures or []]

    def __repr__(self) -> str:
        return (
            f"<DistributionJob(id={self.id}, status={self.status}, "
            f"ok={self.successful_nodes}, failed={self.failed_nodes})>"
        )
