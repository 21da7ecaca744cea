# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tier-based access control from node subscriptions.

This module provides the AccessController that handles:
- Access checks for a user, a node and a content tier
- Subscription creation, renewal and cancellation
- Listing a user's subscriptions

Containment between tiers is asymmetric: enterprise covers premium and
free, premium covers free only. A premium subscription never opens
enterprise content. Every check reads current subscription state; nothing
is cached.
"""

import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.exceptions import NotFoundError
from src.domains.network.registry import NodeRegistry
from src.infrastructure.database.models import NodeSubscription
from src.infrastructure.metrics import ACCESS_CHECKS
from src.models.access import AccessDecision, SubscriptionCreateRequest
from src.models.common import ContentTier
from src.utils.datetime import add_months, ensure_utc, utc_now

logger = logging.getLogger(__name__)


class SubscriptionNotFoundError(NotFoundError):
    """Raised when a subscription does not exist."""

    def __init__(self, subscription_id: str) -> None:
        super().__init__(
            f"Subscription '{subscription_id}' not found",
            {"subscription_id": subscription_id},
        )


def grants_access(subscription_tier: ContentTier, requested_tier: ContentTier) -> bool:
    """Whether a subscription tier opens content of the requested tier.

    Example:
        >>> grants_access(ContentTier.ENTERPRISE, ContentTier.PREMIUM)
        True
        >>> grants_access(ContentTier.PREMIUM, ContentTier.ENTERPRISE)
        False
    """
    return subscription_tier == requested_tier or subscription_tier == ContentTier.ENTERPRISE


class AccessController:
    """Decides content access from a user's node subscriptions.

    Attributes:
        _db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def check_access(
        self,
        user_id: str,
        node_id: str,
        content_tier: ContentTier,
    ) -> AccessDecision:
        """Decide whether a user may open content of a tier on a node.

        Free content is open to everyone without a lookup. Otherwise the
        latest active, unexpired subscription for (user, node) decides.

        Args:
            user_id: Acting user.
            node_id: Node serving the content.
            content_tier: Tier of the requested content.

        Returns:
            Access decision.
        """
        tier = ContentTier(content_tier)
        if tier == ContentTier.FREE:
            ACCESS_CHECKS.labels(tier=tier.value, granted="true").inc()
            return AccessDecision(has_free_access=True, has_premium_access=False)

        subscription = await self._active_subscription(user_id, node_id)
        if subscription is None:
            ACCESS_CHECKS.labels(tier=tier.value, granted="false").inc()
            return AccessDecision(has_free_access=True, has_premium_access=False)

        subscription_tier = ContentTier(subscription.tier)
        granted = grants_access(subscription_tier, tier)
        ACCESS_CHECKS.labels(tier=tier.value, granted=str(granted).lower()).inc()

        logger.debug(
            "Access check: user=%s, node=%s, requested=%s, subscription=%s, granted=%s",
            user_id,
            node_id,
            tier.value,
            subscription_tier.value,
            granted,
        )
        return AccessDecision(
            has_free_access=True,
            has_premium_access=granted,
            subscription_level=subscription_tier,
            expiry=ensure_utc(subscription.end_date),
        )

    async def create_subscription(
        self,
        user_id: str,
        request: SubscriptionCreateRequest,
    ) -> NodeSubscription:
        """Subscribe a user to a node starting now.

        Raises:
            NodeNotFoundError: If the node does not exist.
        """
        await NodeRegistry(self._db).get_node(request.node_id)

        start = utc_now()
        subscription = NodeSubscription(
            user_id=user_id,
            node_id=request.node_id,
            subscription_type=request.subscription_type.value,
            tier=request.tier.value,
            amount=Decimal(request.amount),
            currency=request.currency.upper(),
            start_date=start,
            end_date=add_months(start, request.duration_months),
            is_active=True,
            auto_renew=request.auto_renew,
        )
        self._db.add(subscription)
        await self._db.commit()

        logger.info(
            "Created subscription: id=%s, user=%s, node=%s, tier=%s",
            subscription.id,
            user_id,
            request.node_id,
            subscription.tier,
        )
        return subscription

    async def renew_subscription(self, subscription_id: str, months: int) -> NodeSubscription:
        """Extend a subscription from its current end date and reactivate it.

        Raises:
            SubscriptionNotFoundError: If the subscription does not exist.
        """
        subscription = await self._get_or_raise(subscription_id)
        subscription.end_date = add_months(ensure_utc(subscription.end_date), months)
        subscription.is_active = True
        await self._db.commit()

        logger.info("Renewed subscription: id=%s, months=%d", subscription_id, months)
        return subscription

    async def cancel_subscription(self, subscription_id: str) -> NodeSubscription:
        """Deactivate a subscription and stop auto-renewal.

        Raises:
            SubscriptionNotFoundError: If the subscription does not exist.
        """
        subscription = await self._get_or_raise(subscription_id)
        subscription.is_active = False
        subscription.auto_renew = False
        await self._db.commit()

        logger.info("Cancelled subscription: id=%s", subscription_id)
        return subscription

    async def list_user_subscriptions(
        self,
        user_id: str,
        node_id: str | None = None,
    ) -> list[NodeSubscription]:
        query = select(NodeSubscription).where(NodeSubscription.user_id == user_id)
        if node_id is not None:
            query = query.where(NodeSubscription.node_id == node_id)
        result = await self._db.execute(query.order_by(NodeSubscription.created_at.desc()))
        return list(result.scalars().all())

    async def get_subscription(self, subscription_id: str) -> NodeSubscription:
        return await self._get_or_raise(subscription_id)

    async def _active_subscription(self, user_id: str, node_id: str) -> NodeSubscription | None:
        result = await self._db.execute(
            select(NodeSubscription)
            .where(
                NodeSubscription.user_id == user_id,
                NodeSubscription.node_id == node_id,
                NodeSubscription.is_active.is_(True),
                NodeSubscription.end_date >= utc_now(),
            )
            .order_by(NodeSubscription.created_at.desc())
            .limit(1)
        )
        return result.scalars().first()

    async def _get_or_raise(self, subscription_id: str) -> NodeSubscription:
        result = await self._db.execute(
            select(NodeSubscription).where(NodeSubscription.id == subscription_id)
        )
        subscription = result.scalar_one_or_none()
        if subscription is None:
            raise SubscriptionNotFoundError(subscription_id)
        return subscription
