# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for database models.

Tests model definitions, constraints, and helper methods.
"""

from sqlalchemy import UniqueConstraint

from src.infrastructure.database.models import (
    Base,
    ContentVersion,
    DistributionJob,
    GlobalContent,
    LocalContent,
    Node,
    NodeSubscription,
    TranslationRequest,
)
from src.infrastructure.database.models.base import TimestampMixin, new_id


def unique_constraint_names(model) -> set[str]:
    return {
        c.name for c in model.__table__.constraints if isinstance(c, UniqueConstraint)
    }


class TestBase:
    """Test base model functionality."""

    def test_base_inherits_declarative_base(self):
        """Verify Base is a declarative base."""
        assert hasattr(Base, "metadata")
        assert hasattr(Base, "registry")

    def test_timestamp_mixin_has_created_at(self):
        assert hasattr(TimestampMixin, "created_at")
        assert hasattr(TimestampMixin, "updated_at")

    def test_new_id_is_uuid_string(self):
        value = new_id()

        assert isinstance(value, str)
        assert len(value) == 36
        assert value != new_id()

    def test_all_tables_registered(self):
        assert set(Base.metadata.tables) == {
            "global_contents",
            "content_versions",
            "local_contents",
            "translation_requests",
            "distribution_jobs",
            "nodes",
            "node_subscriptions",
        }


class TestContentModels:
    """Test content models."""

    def test_global_content_metadata_column_name(self):
        """The metadata attribute is stored in a column named metadata."""
        assert "metadata" in GlobalContent.__table__.columns
        assert GlobalContent.content_metadata.property.columns[0].name == "metadata"

    def test_versions_unique_per_content(self):
        assert unique_constraint_names(ContentVersion) >= {
            "uq_content_versions_version",
            "uq_content_versions_sequence",
        }

    def test_versions_snapshot_title_and_description(self):
        columns = ContentVersion.__table__.columns
        assert columns["title"].nullable is False
        assert columns["description"].nullable is False

    def test_one_mirror_per_node_and_content(self):
        assert "uq_local_contents_node_global" in unique_constraint_names(LocalContent)

    def test_translation_request_table(self):
        assert TranslationRequest.__tablename__ == "translation_requests"
        assert "local_content_id" in TranslationRequest.__table__.columns


class TestNetworkModels:
    """Test node and subscription models."""

    def test_node_slug_unique(self):
        assert Node.__table__.columns["slug"].unique is True

    def test_subscription_amount_is_numeric(self):
        column = NodeSubscription.__table__.columns["amount"]

        assert column.type.precision == 10
        assert column.type.scale == 2


class TestDistributionJob:
    """Test DistributionJob helpers."""

    def test_failed_node_ids_follow_failures(self):
        job = DistributionJob(
            failures=[
                {"node_id": "node-x", "error": "not found", "timestamp": "2025-01-01T00:00:00+00:00"},
                {"node_id": "node-z", "error": "timeout", "timestamp": "2025-01-01T00:00:01+00:00"},
            ]
        )

        assert job.failed_node_ids == ["node-x", "node-z"]

    def test_failed_node_ids_empty_without_failures(self):
        assert DistributionJob().failed_node_ids == []
