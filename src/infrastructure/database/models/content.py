# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Catalog and node mirror models.

- GlobalContent: canonical content item owned centrally
- ContentVersion: immutable, append-only snapshot of a content payload
- LocalContent: a node's mirror of a global item, optionally customized
- TranslationRequest: unit of translation work on a LocalContent row

Relationships are deliberately not mapped; services query by foreign key so
that nothing lazy-loads inside an async session.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import (
    Base,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
)
from src.models.common import PublishStatus, TranslationStatus
from src.utils.datetime import utc_now


class GlobalContent(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Canonical educational content item.

    ``payload`` mirrors the snapshot of the current version. The current
    pointer is only moved by the version manager.
    """

    __tablename__ = "global_contents"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content_type: Mapped[str] = mapped_column(String(20), nullable=False)
    category: Mapped[str] = mapped_column(String(30), nullable=False)
    level: Mapped[str] = mapped_column(String(20), nullable=False)
    age_group: Mapped[str] = mapped_column(String(20), nullable=False)
    tier: Mapped[str] = mapped_column(String(20), nullable=False)
    estimated_duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    prerequisites: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    learning_objectives: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    content_metadata: Mapped[dict[str, Any]] = mapped_column(
        "metadata", JSON, nullable=False, default=dict
    )
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    current_version: Mapped[str | None] = mapped_column(String(20), nullable=True)
    # Not a foreign key: content_versions already references this table.
    current_version_id: Mapped[str | None] = mapped_column(String(36), nullable=True)

    __table_args__ = (
        Index("ix_global_contents_type", "content_type"),
        Index("ix_global_contents_category", "category"),
        Index("ix_global_contents_tier", "tier"),
    )

    def __repr__(self) -> str:
        return f"<GlobalContent(id={self.id}, title={self.title!r}, version={self.current_version})>"


class ContentVersion(Base, UUIDPrimaryKeyMixin):
    """Immutable version snapshot of a GlobalContent.

    Title and description are versioned with the payload; they are what
    node mirrors receive.
    """

    __tablename__ = "content_versions"

    global_content_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("global_contents.id", ondelete="RESTRICT"),
        nullable=False,
    )
    version: Mapped[str] = mapped_column(String(20), nullable=False)
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    change_type: Mapped[str] = mapped_column(String(10), nullable=False)
    change_notes: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    is_stable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utc_now, nullable=False)
    promoted_at: Mapped[datetime | None] = mapped_column(nullable=True)

    __table_args__ = (
        UniqueConstraint("global_content_id", "version", name="uq_content_versions_version"),
        UniqueConstraint("global_content_id", "sequence", name="uq_content_versions_sequence"),
    )

    def __repr__(self) -> str:
        return f"<ContentVersion(content={self.global_content_id}, version={self.version})>"


class LocalContent(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A node's mirror of global content, or pure-local content.

    At most one row exists per (node_id, global_content_id); distribution
    relies on that constraint to upsert.
    """

    __tablename__ = "local_contents"

    node_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("nodes.id", ondelete="RESTRICT"),
        nullable=False,
    )
    global_content_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("global_contents.id", ondelete="RESTRICT"),
        nullable=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content_type: Mapped[str] = mapped_column(String(20), nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    language: Mapped[str] = mapped_column(String(10), nullable=False, default="ar")
    is_customized: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    customization: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    translation_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=TranslationStatus.NOT_STARTED.value,
    )
    publish_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=PublishStatus.DRAFT.value,
    )
    source_version: Mapped[str | None] = mapped_column(String(20), nullable=True)
    localized_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    last_synced_at: Mapped[datetime | None] = mapped_column(nullable=True)

    __table_args__ = (
        UniqueConstraint("node_id", "global_content_id", name="uq_local_contents_node_global"),
        Index("ix_local_contents_node", "node_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<LocalContent(node={self.node_id}, content={self.global_content_id}, "
            f"version={self.source_version})>"
        )


class TranslationRequest(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Translation work item attached to a LocalContent row."""

    __tablename__ = "translation_requests"

    local_content_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("local_contents.id", ondelete="CASCADE"),
        nullable=False,
    )
    translator_id: Mapped[str] = mapped_column(String(36), nullable=False)
    source_language: Mapped[str] = mapped_column(String(10), nullable=False)
    target_language: Mapped[str] = mapped_column(String(10), nullable=False)
    source_text: Mapped[str] = mapped_column(Text, nullable=False)
    translated_text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    mode: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=TranslationStatus.NOT_STARTED.value,
    )
    quality: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    priority: Mapped[str] = mapped_column(String(10), nullable=False, default="medium")
    reviewer_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    review_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    started_at: Mapped[datetime | None] = mapped_column(nullable=True)
    submitted_at: Mapped[datetime | None] = mapped_column(nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    __table_args__ = (
        Index("ix_translation_requests_status", "status"),
        Index("ix_translation_requests_local_content", "local_content_id"),
    )

    def __repr__(self) -> str:
        return f"<TranslationRequest(id={self.id}, status={self.status})>"
