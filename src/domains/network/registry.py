# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Registry of regional nodes.

This module provides the NodeRegistry that handles:
- Node onboarding with default settings
- Status transitions (pending, active, suspended)
- Per-node settings
- The active-node query used by distribution

Nodes are never deleted; a node leaves the network by being suspended.

Example:
    >>> registry = NodeRegistry(db)
    >>> node = await registry.create_node(request)
    >>> await registry.update_status(node.id, NodeStatus.ACTIVE)
"""

import logging
import re
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import NotFoundError, ValidationFailedError
from src.core.config.yaml_loader import deep_merge
from src.infrastructure.database.models import Node
from src.models.common import NodeStatus
from src.models.node import NodeCreateRequest

logger = logging.getLogger(__name__)

SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")

DEFAULT_NODE_SETTINGS: dict[str, Any] = {
    "platform_fee_percentage": 0.20,
    "max_users": 1000,
    "features": ["basic_content", "ai_assistant", "analytics"],
}

# Allowed status changes; re-applying the current status is always allowed.
_STATUS_TRANSITIONS: dict[NodeStatus, set[NodeStatus]] = {
    NodeStatus.PENDING: {NodeStatus.ACTIVE, NodeStatus.SUSPENDED},
    NodeStatus.ACTIVE: {NodeStatus.SUSPENDED},
    NodeStatus.SUSPENDED: {NodeStatus.ACTIVE},
}


class NodeNotFoundError(NotFoundError):
    """Raised when a node does not exist."""

    def __init__(self, node_id: str) -> None:
        super().__init__(f"Node '{node_id}' not found", {"node_id": node_id})


class NodeSlugExistsError(ValidationFailedError):
    """Raised when creating a node with a slug already in use."""


class InvalidNodeSlugError(ValidationFailedError):
    """Raised when a slug is not lowercase letters, digits and hyphens."""


class InvalidNodeStatusTransitionError(ValidationFailedError):
    """Raised when a node status change is not allowed."""


class NodeRegistry:
    """Service for registered regional nodes.

    Attributes:
        _db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def create_node(self, request: NodeCreateRequest) -> Node:
        """Register a node in pending status.

        Args:
            request: Node creation request.

        Returns:
            Created node.

        Raises:
            InvalidNodeSlugError: If the slug has disallowed characters.
            NodeSlugExistsError: If the slug is already registered.
        """
        if not SLUG_PATTERN.match(request.slug):
            raise InvalidNodeSlugError(
                f"Invalid node slug '{request.slug}'",
                {"pattern": SLUG_PATTERN.pattern},
            )

        if await self._get_by_slug(request.slug) is not None:
            raise NodeSlugExistsError(f"Node slug '{request.slug}' already exists")

        node = Node(
            name=request.name,
            slug=request.slug,
            region=request.region,
            country=request.country,
            language=request.language,
            currency=request.currency.upper(),
            timezone=request.timezone,
            status=NodeStatus.PENDING.value,
            settings=deep_merge(DEFAULT_NODE_SETTINGS, request.settings),
        )
        self._db.add(node)
        try:
            await self._db.commit()
        except IntegrityError as e:
            await self._db.rollback()
            raise NodeSlugExistsError(f"Node slug '{request.slug}' already exists") from e

        logger.info("Created node: id=%s, slug=%s, region=%s", node.id, node.slug, node.region)
        return node

    async def get_node(self, node_id: str) -> Node:
        """Get a node by ID.

        Raises:
            NodeNotFoundError: If the node does not exist.
        """
        result = await self._db.execute(select(Node).where(Node.id == node_id))
        node = result.scalar_one_or_none()
        if node is None:
            raise NodeNotFoundError(node_id)
        return node

    async def find_node(self, node_id: str) -> Node | None:
        result = await self._db.execute(select(Node).where(Node.id == node_id))
        return result.scalar_one_or_none()

    async def list_nodes(self, status: NodeStatus | None = None) -> list[Node]:
        query = select(Node).order_by(Node.created_at, Node.slug)
        if status is not None:
            query = query.where(Node.status == status.value)
        result = await self._db.execute(query)
        return list(result.scalars().all())

    async def list_active_node_ids(self) -> list[str]:
        """IDs of all active nodes in onboarding order."""
        result = await self._db.execute(
            select(Node.id)
            .where(Node.status == NodeStatus.ACTIVE.value)
            .order_by(Node.created_at, Node.slug)
        )
        return list(result.scalars().all())

    async def update_status(self, node_id: str, status: NodeStatus) -> Node:
        """Change a node's operating status.

        Raises:
            NodeNotFoundError: If the node does not exist.
            InvalidNodeStatusTransitionError: If the change is not allowed.
        """
        node = await self.get_node(node_id)
        current = NodeStatus(node.status)
        if current == status:
            return node

        if status not in _STATUS_TRANSITIONS[current]:
            raise InvalidNodeStatusTransitionError(
                f"Cannot change node status from {current.value} to {status.value}",
                {"node_id": node_id, "current": current.value, "requested": status.value},
            )

        node.status = status.value
        await self._db.commit()

        logger.info(
            "Node status changed: id=%s, %s -> %s",
            node_id,
            current.value,
            status.value,
        )
        return node

    async def update_setting(self, node_id: str, key: str, value: Any) -> Node:
        """Set one entry of a node's settings map.

        Raises:
            NodeNotFoundError: If the node does not exist.
        """
        node = await self.get_node(node_id)
        node.settings = {**(node.settings or {}), key: value}
        await self._db.commit()

        logger.info("Node setting updated: id=%s, key=%s", node_id, key)
        return node

    async def get_settings(self, node_id: str) -> dict[str, Any]:
        node = await self.get_node(node_id)
        return dict(node.settings or {})

    async def _get_by_slug(self, slug: str) -> Node | None:
        result = await self._db.execute(select(Node).where(Node.slug == slug))
        return result.scalar_one_or_none()
