# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Regional node API endpoints.

- POST / - Register a node (starts pending)
- GET / - List nodes
- GET /{node_id} - Get node details
- POST /{node_id}/status - Activate or suspend a node
- PUT /{node_id}/settings/{key} - Set one node setting

Only active nodes receive push-all distributions.

Example:
    POST /api/v1/nodes
    {
        "name": "Fateh Morocco",
        "slug": "morocco",
        "region": "north_africa",
        "country": "MA",
        "language": "ar"
    }
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import get_node_registry
from src.domains.network.registry import NodeRegistry
from src.models.common import NodeStatus
from src.models.node import (
    NodeCreateRequest,
    NodeListResponse,
    NodeResponse,
    NodeSettingUpdateRequest,
    NodeStatusUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=NodeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register node",
)
async def create_node(
    data: NodeCreateRequest,
    registry: NodeRegistry = Depends(get_node_registry),
) -> NodeResponse:
    """Register a regional node in pending status.

    Args:
        data: Node creation request.
        registry: Node registry.

    Returns:
        Created node.
    """
    node = await registry.create_node(data)
    return NodeResponse.model_validate(node)


@router.get(
    "",
    response_model=NodeListResponse,
    summary="List nodes",
)
async def list_nodes(
    node_status: Annotated[
        NodeStatus | None,
        Query(alias="status", description="Filter by node status"),
    ] = None,
    registry: NodeRegistry = Depends(get_node_registry),
) -> NodeListResponse:
    nodes = await registry.list_nodes(node_status)
    return NodeListResponse(
        items=[NodeResponse.model_validate(node) for node in nodes],
        total=len(nodes),
    )


@router.get(
    "/{node_id}",
    response_model=NodeResponse,
    summary="Get node",
)
async def get_node(
    node_id: str,
    registry: NodeRegistry = Depends(get_node_registry),
) -> NodeResponse:
    node = await registry.get_node(node_id)
    return NodeResponse.model_validate(node)


@router.post(
    "/{node_id}/status",
    response_model=NodeResponse,
    summary="Change node status",
    description="pending -> active | suspended, active <-> suspended.",
)
async def update_node_status(
    node_id: str,
    data: NodeStatusUpdateRequest,
    registry: NodeRegistry = Depends(get_node_registry),
) -> NodeResponse:
    node = await registry.update_status(node_id, data.status)
    return NodeResponse.model_validate(node)


@router.put(
    "/{node_id}/settings/{key}",
    response_model=NodeResponse,
    summary="Set node setting",
)
async def update_node_setting(
    node_id: str,
    key: str,
    data: NodeSettingUpdateRequest,
    registry: NodeRegistry = Depends(get_node_registry),
) -> NodeResponse:
    node = await registry.update_setting(node_id, key, data.value)
    return NodeResponse.model_validate(node)
