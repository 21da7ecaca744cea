# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Access and subscription API endpoints.

- POST /check - Decide access to a content tier on a node
- POST /subscriptions - Subscribe the caller to a node
- GET /subscriptions - List the caller's subscriptions
- POST /subscriptions/{subscription_id}/renew - Extend a subscription
- POST /subscriptions/{subscription_id}/cancel - Cancel a subscription

All endpoints act for the user named in the X-User-Id header.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import get_access_controller, get_node_registry, require_actor
from src.domains.access.service import AccessController, SubscriptionNotFoundError
from src.domains.network.registry import NodeRegistry
from src.infrastructure.database.models import NodeSubscription
from src.models.access import (
    AccessCheckRequest,
    AccessDecision,
    SubscriptionCreateRequest,
    SubscriptionListResponse,
    SubscriptionRenewRequest,
    SubscriptionResponse,
)
from src.utils.datetime import days_until

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_response(subscription: NodeSubscription) -> SubscriptionResponse:
    response = SubscriptionResponse.model_validate(subscription)
    response.days_remaining = days_until(subscription.end_date) if subscription.is_active else 0
    return response


async def _owned_subscription(
    controller: AccessController,
    subscription_id: str,
    user_id: str,
) -> NodeSubscription:
    """Get a subscription belonging to the caller.

    Another user's subscription is reported as not found.
    """
    subscription = await controller.get_subscription(subscription_id)
    if subscription.user_id != user_id:
        raise SubscriptionNotFoundError(subscription_id)
    return subscription


@router.post(
    "/check",
    response_model=AccessDecision,
    summary="Check access",
    description="Whether the caller may open content of a tier on a node.",
)
async def check_access(
    data: AccessCheckRequest,
    user_id: str = Depends(require_actor),
    controller: AccessController = Depends(get_access_controller),
    registry: NodeRegistry = Depends(get_node_registry),
) -> AccessDecision:
    await registry.get_node(data.node_id)
    return await controller.check_access(user_id, data.node_id, data.content_tier)


@router.post(
    "/subscriptions",
    response_model=SubscriptionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create subscription",
)
async def create_subscription(
    data: SubscriptionCreateRequest,
    user_id: str = Depends(require_actor),
    controller: AccessController = Depends(get_access_controller),
) -> SubscriptionResponse:
    subscription = await controller.create_subscription(user_id, data)
    return _to_response(subscription)


@router.get(
    "/subscriptions",
    response_model=SubscriptionListResponse,
    summary="List subscriptions",
)
async def list_subscriptions(
    node_id: Annotated[str | None, Query(description="Filter by node")] = None,
    user_id: str = Depends(require_actor),
    controller: AccessController = Depends(get_access_controller),
) -> SubscriptionListResponse:
    subscriptions = await controller.list_user_subscriptions(user_id, node_id)
    return SubscriptionListResponse(
        items=[_to_response(s) for s in subscriptions],
        total=len(subscriptions),
    )


@router.post(
    "/subscriptions/{subscription_id}/renew",
    response_model=SubscriptionResponse,
    summary="Renew subscription",
)
async def renew_subscription(
    subscription_id: str,
    data: SubscriptionRenewRequest,
    user_id: str = Depends(require_actor),
    controller: AccessController = Depends(get_access_controller),
) -> SubscriptionResponse:
    await _owned_subscription(controller, subscription_id, user_id)
    subscription = await controller.renew_subscription(subscription_id, data.months)
    return _to_response(subscription)


@router.post(
    "/subscriptions/{subscription_id}/cancel",
    response_model=SubscriptionResponse,
    summary="Cancel subscription",
)
async def cancel_subscription(
    subscription_id: str,
    user_id: str = Depends(require_actor),
    controller: AccessController = Depends(get_access_controller),
) -> SubscriptionResponse:
    await _owned_subscription(controller, subscription_id, user_id)
    subscription = await controller.cancel_subscription(subscription_id)
    return _to_response(subscription)
