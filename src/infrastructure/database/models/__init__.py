# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy ORM models for the content network database."""

from src.infrastructure.database.models.base import (
    Base,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
    new_id,
)
from src.infrastructure.database.models.content import (
    ContentVersion,
    GlobalContent,
    LocalContent,
    TranslationRequest,
)
from src.infrastructure.database.models.distribution import DistributionJob
from src.infrastructure.database.models.network import Node, NodeSubscription

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "new_id",
    "GlobalContent",
    "ContentVersion",
    "LocalContent",
    "TranslationRequest",
    "DistributionJob",
    "Node",
    "NodeSubscription",
]
