# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Access check and node subscription API schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from src.models.common import ContentTier, SubscriptionType


class AccessCheckRequest(BaseModel):
    """Access question for the acting user."""

    node_id: str
    content_tier: ContentTier


class AccessDecision(BaseModel):
    """Outcome of an access check.

    ``subscription_level`` is the tier of the subscription consulted, or
    free when there is none. ``expiry`` is only set with a subscription.
    """

    has_free_access: bool = True
    has_premium_access: bool = False
    subscription_level: ContentTier = ContentTier.FREE
    expiry: datetime | None = None


class SubscriptionCreateRequest(BaseModel):
    """Subscribe the acting user to a node."""

    node_id: str
    subscription_type: SubscriptionType = SubscriptionType.BASIC
    tier: ContentTier = ContentTier.PREMIUM
    amount: Decimal = Field(default=Decimal("0"), ge=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    duration_months: int = Field(default=1, ge=1, le=36)
    auto_renew: bool = True


class SubscriptionRenewRequest(BaseModel):
    """Extend a subscription."""

    months: int = Field(default=1, ge=1, le=36)


class SubscriptionResponse(BaseModel):
    """Node subscription."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    node_id: str
    subscription_type: SubscriptionType
    tier: ContentTier
    amount: Decimal
    currency: str
    start_date: datetime
    end_date: datetime
    is_active: bool
    auto_renew: bool
    days_remaining: int = 0


class SubscriptionListResponse(BaseModel):
    """Subscriptions of one user."""

    items: list[SubscriptionResponse]
    total: int
