# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enumerations shared by the ORM models, services and API schemas.

Columns store the ``.value`` strings; services compare against the enums.
"""

from enum import Enum


class ContentType(str, Enum):
    """Kind of global content item."""

    COURSE = "course"
    LESSON = "lesson"
    ASSESSMENT = "assessment"
    EXERCISE = "exercise"
    RESOURCE = "resource"
    VIDEO = "video"


class ContentCategory(str, Enum):
    """Subject area of a content item."""

    RELIGIOUS = "religious"
    LANGUAGE = "language"
    SCIENCE = "science"
    MATHEMATICS = "mathematics"
    LIFE_SKILLS = "life_skills"
    TECHNOLOGY = "technology"
    GENERAL = "general"


class ContentLevel(str, Enum):
    """Difficulty level."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class AgeGroup(str, Enum):
    """Target audience age group."""

    CHILDREN = "children"
    TEENS = "teens"
    ADULTS = "adults"
    ALL_AGES = "all_ages"


class ContentTier(str, Enum):
    """Access class for content and subscriptions.

    ENTERPRISE contains PREMIUM which contains FREE.
    """

    FREE = "free"
    PREMIUM = "premium"
    ENTERPRISE = "enterprise"


class ChangeType(str, Enum):
    """Semantic version bump classification."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


class NodeStatus(str, Enum):
    """Operating status of a regional node."""

    PENDING = "pending"
    ACTIVE = "active"
    SUSPENDED = "suspended"


class PublishStatus(str, Enum):
    """Publish state of a node's local content."""

    DRAFT = "draft"
    PUBLISHED = "published"


class TranslationStatus(str, Enum):
    """Translation lifecycle.

    not_started -> in_progress -> review -> completed, no skips, no way back.
    """

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    COMPLETED = "completed"


class TranslationMode(str, Enum):
    """How a translation is produced."""

    AUTOMATIC = "automatic"
    HUMAN = "human"
    HYBRID = "hybrid"


class LocalizationType(str, Enum):
    """Depth of a localization pass."""

    TRANSLATION = "translation"
    ADAPTATION = "adaptation"
    RECREATION = "recreation"


class DistributionMode(str, Enum):
    """How the target node set of a distribution was chosen."""

    PUSH_ALL = "push_all"
    SELECTIVE = "selective"
    ON_DEMAND = "on_demand"


class DistributionStatus(str, Enum):
    """Distribution job status.

    pending -> in_progress -> completed | partial_failure
    """

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    PARTIAL_FAILURE = "partial_failure"


class Priority(str, Enum):
    """Work priority for distributions and translations."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class SubscriptionType(str, Enum):
    """Commercial plan of a node subscription."""

    BASIC = "basic"
    ADVANCED = "advanced"
    PREMIUM = "premium"
