# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for tiered access decisions."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from src.domains.access.service import AccessController, grants_access
from src.models.common import ContentTier


def create_subscription_result(subscription):
    """Mock result for the active subscription lookup."""
    result = MagicMock()
    result.scalars.return_value.first.return_value = subscription
    return result


@pytest.fixture
def premium_subscription():
    subscription = MagicMock()
    subscription.tier = ContentTier.PREMIUM.value
    subscription.end_date = datetime.now(timezone.utc) + timedelta(days=30)
    return subscription


class TestGrantsAccess:
    """Tests for tier containment."""

    @pytest.mark.parametrize(
        ("subscription", "requested", "expected"),
        [
            (ContentTier.PREMIUM, ContentTier.PREMIUM, True),
            (ContentTier.ENTERPRISE, ContentTier.PREMIUM, True),
            (ContentTier.ENTERPRISE, ContentTier.ENTERPRISE, True),
            (ContentTier.PREMIUM, ContentTier.ENTERPRISE, False),
            (ContentTier.FREE, ContentTier.PREMIUM, False),
        ],
    )
    def test_containment(self, subscription, requested, expected) -> None:
        assert grants_access(subscription, requested) is expected


class TestCheckAccess:
    """Tests for AccessController.check_access."""

    @pytest.mark.asyncio
    async def test_free_content_needs_no_lookup(self, mock_db) -> None:
        controller = AccessController(mock_db)

        decision = await controller.check_access("user-1", "node-1", ContentTier.FREE)

        assert decision.has_free_access is True
        assert decision.has_premium_access is False
        assert decision.subscription_level == ContentTier.FREE
        mock_db.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_subscription_means_free_only(self, mock_db) -> None:
        mock_db.execute.return_value = create_subscription_result(None)
        controller = AccessController(mock_db)

        decision = await controller.check_access("user-1", "node-1", ContentTier.PREMIUM)

        assert decision.has_free_access is True
        assert decision.has_premium_access is False
        assert decision.expiry is None

    @pytest.mark.asyncio
    async def test_premium_subscription_opens_premium(
        self, mock_db, premium_subscription
    ) -> None:
        mock_db.execute.return_value = create_subscription_result(premium_subscription)
        controller = AccessController(mock_db)

        decision = await controller.check_access("user-1", "node-1", ContentTier.PREMIUM)

        assert decision.has_premium_access is True
        assert decision.subscription_level == ContentTier.PREMIUM
        assert decision.expiry == premium_subscription.end_date

    @pytest.mark.asyncio
    async def test_premium_subscription_does_not_open_enterprise(
        self, mock_db, premium_subscription
    ) -> None:
        mock_db.execute.return_value = create_subscription_result(premium_subscription)
        controller = AccessController(mock_db)

        decision = await controller.check_access("user-1", "node-1", ContentTier.ENTERPRISE)

        assert decision.has_free_access is True
        assert decision.has_premium_access is False
        assert decision.subscription_level == ContentTier.PREMIUM

    @pytest.mark.asyncio
    async def test_enterprise_subscription_opens_premium(self, mock_db) -> None:
        subscription = MagicMock()
        subscription.tier = ContentTier.ENTERPRISE.value
        subscription.end_date = datetime.now(timezone.utc) + timedelta(days=5)
        mock_db.execute.return_value = create_subscription_result(subscription)
        controller = AccessController(mock_db)

        decision = await controller.check_access("user-1", "node-1", ContentTier.PREMIUM)

        assert decision.has_premium_access is True
        assert decision.subscription_level == ContentTier.ENTERPRISE
