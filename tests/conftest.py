# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests (mocked sessions)
- Database-backed tests (in-memory async SQLite)
- API tests (TestClient)
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from src.domains.content.service import ContentService
from src.domains.distribution.coordinator import DistributionCoordinator
from src.domains.distribution.locks import MirrorLockRegistry
from src.domains.network.registry import NodeRegistry
from src.infrastructure.database.connection import build_engine
from src.infrastructure.database.models import Base, GlobalContent, Node
from src.models.common import ContentTier, ContentType, NodeStatus
from src.models.content import GlobalContentCreateRequest
from src.models.node import NodeCreateRequest

SQLITE_URL = "sqlite+aiosqlite:///:memory:"


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (uses a database)"
    )


# =============================================================================
# Mock Session Fixtures
# =============================================================================


@pytest.fixture
def mock_db() -> AsyncMock:
    """Create mock database session."""
    db = AsyncMock()
    db.add = MagicMock()
    db.flush = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.execute = AsyncMock()
    return db


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
async def db_engine() -> AsyncIterator[AsyncEngine]:
    """In-memory SQLite engine with all tables created."""
    engine = build_engine(SQLITE_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def db_sessionmaker(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Sessionmaker configured like the application's."""
    return async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db_session(
    db_sessionmaker: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """Session for arranging data and calling services."""
    async with db_sessionmaker() as session:
        yield session


@pytest.fixture
def mirror_lock_registry() -> MirrorLockRegistry:
    """Fresh lock registry, isolated from the process-wide one."""
    return MirrorLockRegistry()


@pytest.fixture
def coordinator(
    db_sessionmaker: async_sessionmaker[AsyncSession],
    mirror_lock_registry: MirrorLockRegistry,
) -> DistributionCoordinator:
    """Coordinator creating Arabic mirrors; SQLite makes it sequential."""
    return DistributionCoordinator(
        db_sessionmaker,
        max_concurrency=4,
        node_timeout_seconds=5,
        default_language="ar",
        locks=mirror_lock_registry,
    )


# =============================================================================
# Data Factories
# =============================================================================


LESSON_PAYLOAD: dict[str, Any] = {"sections": [{"title": "Alif"}, {"title": "Ba"}]}


@pytest.fixture
def make_node(
    db_session: AsyncSession,
) -> Callable[..., Awaitable[Node]]:
    """Factory registering a node and moving it to the requested status."""

    async def _make_node(
        slug: str,
        status: NodeStatus = NodeStatus.ACTIVE,
        language: str = "ar",
    ) -> Node:
        registry = NodeRegistry(db_session)
        node = await registry.create_node(
            NodeCreateRequest(
                name=f"Fateh {slug.title()}",
                slug=slug,
                region="mena",
                country="XX",
                language=language,
            )
        )
        if status != NodeStatus.PENDING:
            node = await registry.update_status(node.id, status)
        return node

    return _make_node


@pytest.fixture
def make_lesson(
    db_session: AsyncSession,
) -> Callable[..., Awaitable[GlobalContent]]:
    """Factory creating a lesson with version 1.0.0 current."""

    async def _make_lesson(
        title: str = "Arabic Alphabet",
        author_id: str | None = "editor-1",
        tier: ContentTier = ContentTier.FREE,
    ) -> GlobalContent:
        return await ContentService(db_session).create_global_content(
            GlobalContentCreateRequest(
                title=title,
                description="Letters and sounds",
                content_type=ContentType.LESSON,
                tier=tier,
                payload=dict(LESSON_PAYLOAD),
            ),
            author_id=author_id,
        )

    return _make_lesson


@pytest.fixture
def sample_user_id() -> str:
    """Provide a sample user ID for testing."""
    return "550e8400-e29b-41d4-a716-446655440001"
