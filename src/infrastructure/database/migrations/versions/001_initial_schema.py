# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial content network schema.

Revision ID: 001_initial
Revises: None
Create Date: 2025-06-02

Creates the catalog, node, mirror, distribution, translation and
subscription tables based on the SQLAlchemy models in
src/infrastructure/database/models/.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    """Create content network tables."""
    # ==========================================================================
    # 1. global_contents table
    # ==========================================================================
    op.create_table(
        "global_contents",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("content_type", sa.String(20), nullable=False),
        sa.Column("category", sa.String(30), nullable=False),
        sa.Column("level", sa.String(20), nullable=False),
        sa.Column("age_group", sa.String(20), nullable=False),
        sa.Column("tier", sa.String(20), nullable=False),
        sa.Column("estimated_duration", sa.Integer, nullable=True),
        sa.Column("prerequisites", sa.JSON, nullable=False),
        sa.Column("learning_objectives", sa.JSON, nullable=False),
        sa.Column("payload", sa.JSON, nullable=False),
        sa.Column("metadata", sa.JSON, nullable=False),
        sa.Column("is_published", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("current_version", sa.String(20), nullable=True),
        sa.Column("current_version_id", sa.String(36), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "tier IN ('free', 'premium', 'enterprise')",
            name="valid_global_content_tier",
        ),
    )
    op.create_index("ix_global_contents_type", "global_contents", ["content_type"])
    op.create_index("ix_global_contents_category", "global_contents", ["category"])
    op.create_index("ix_global_contents_tier", "global_contents", ["tier"])

    # ==========================================================================
    # 2. content_versions table
    # ==========================================================================
    op.create_table(
        "content_versions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "global_content_id",
            sa.String(36),
            sa.ForeignKey("global_contents.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("version", sa.String(20), nullable=False),
        sa.Column("sequence", sa.Integer, nullable=False),
        sa.Column("change_type", sa.String(10), nullable=False),
        sa.Column("change_notes", sa.JSON, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("payload", sa.JSON, nullable=False),
        sa.Column("is_stable", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_by", sa.String(36), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("promoted_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("global_content_id", "version", name="uq_content_versions_version"),
        sa.UniqueConstraint("global_content_id", "sequence", name="uq_content_versions_sequence"),
        sa.CheckConstraint(
            "change_type IN ('major', 'minor', 'patch')",
            name="valid_change_type",
        ),
    )

    # ==========================================================================
    # 3. nodes table
    # ==========================================================================
    op.create_table(
        "nodes",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("slug", sa.String(100), unique=True, nullable=False),
        sa.Column("region", sa.String(100), nullable=False),
        sa.Column("country", sa.String(100), nullable=False),
        sa.Column("language", sa.String(10), nullable=False, server_default="ar"),
        sa.Column("currency", sa.String(3), nullable=False, server_default="USD"),
        sa.Column("timezone", sa.String(50), nullable=False, server_default="UTC"),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("settings", sa.JSON, nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('pending', 'active', 'suspended')",
            name="valid_node_status",
        ),
    )
    op.create_index("ix_nodes_status", "nodes", ["status"])

    # ==========================================================================
    # 4. local_contents table
    # ==========================================================================
    op.create_table(
        "local_contents",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "node_id",
            sa.String(36),
            sa.ForeignKey("nodes.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "global_content_id",
            sa.String(36),
            sa.ForeignKey("global_contents.id", ondelete="RESTRICT"),
            nullable=True,
        ),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("content_type", sa.String(20), nullable=False),
        sa.Column("payload", sa.JSON, nullable=False),
        sa.Column("language", sa.String(10), nullable=False, server_default="ar"),
        sa.Column("is_customized", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("customization", sa.JSON, nullable=False),
        sa.Column(
            "translation_status",
            sa.String(20),
            nullable=False,
            server_default="not_started",
        ),
        sa.Column("publish_status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("source_version", sa.String(20), nullable=True),
        sa.Column("localized_by", sa.String(36), nullable=True),
        sa.Column("last_synced_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint(
            "node_id",
            "global_content_id",
            name="uq_local_contents_node_global",
        ),
    )
    op.create_index("ix_local_contents_node", "local_contents", ["node_id"])

    # ==========================================================================
    # 5. translation_requests table
    # ==========================================================================
    op.create_table(
        "translation_requests",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "local_content_id",
            sa.String(36),
            sa.ForeignKey("local_contents.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("translator_id", sa.String(36), nullable=False),
        sa.Column("source_language", sa.String(10), nullable=False),
        sa.Column("target_language", sa.String(10), nullable=False),
        sa.Column("source_text", sa.Text, nullable=False),
        sa.Column("translated_text", sa.Text, nullable=False, server_default=""),
        sa.Column("mode", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="not_started"),
        sa.Column("quality", sa.JSON, nullable=False),
        sa.Column("priority", sa.String(10), nullable=False, server_default="medium"),
        sa.Column("reviewer_id", sa.String(36), nullable=True),
        sa.Column("review_notes", sa.Text, nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('not_started', 'in_progress', 'review', 'completed')",
            name="valid_translation_status",
        ),
    )
    op.create_index("ix_translation_requests_status", "translation_requests", ["status"])
    op.create_index(
        "ix_translation_requests_local_content",
        "translation_requests",
        ["local_content_id"],
    )

    # ==========================================================================
    # 6. distribution_jobs table
    # ==========================================================================
    op.create_table(
        "distribution_jobs",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "global_content_id",
            sa.String(36),
            sa.ForeignKey("global_contents.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("version", sa.String(20), nullable=True),
        sa.Column("target_nodes", sa.JSON, nullable=False),
        sa.Column("mode", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("failures", sa.JSON, nullable=False),
        sa.Column("successful_nodes", sa.Integer, nullable=False, server_default="0"),
        sa.Column("failed_nodes", sa.Integer, nullable=False, server_default="0"),
        sa.Column("priority", sa.String(10), nullable=False, server_default="medium"),
        sa.Column("scheduled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("requested_by", sa.String(36), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('pending', 'in_progress', 'completed', 'partial_failure')",
            name="valid_distribution_status",
        ),
    )
    op.create_index("ix_distribution_jobs_content", "distribution_jobs", ["global_content_id"])
    op.create_index("ix_distribution_jobs_status", "distribution_jobs", ["status"])

    # ==========================================================================
    # 7. node_subscriptions table
    # ==========================================================================
    op.create_table(
        "node_subscriptions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column(
            "node_id",
            sa.String(36),
            sa.ForeignKey("nodes.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("subscription_type", sa.String(20), nullable=False),
        sa.Column("tier", sa.String(20), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(3), nullable=False, server_default="USD"),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("auto_renew", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index(
        "ix_node_subscriptions_user_node",
        "node_subscriptions",
        ["user_id", "node_id"],
    )


def downgrade() -> None:
    """Drop content network tables."""
    op.drop_table("node_subscriptions")
    op.drop_table("distribution_jobs")
    op.drop_table("translation_requests")
    op.drop_table("local_contents")
    op.drop_table("nodes")
    op.drop_table("content_versions")
    op.drop_table("global_contents")
