# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Regional node network domain package."""

from src.domains.network.registry import (
    DEFAULT_NODE_SETTINGS,
    InvalidNodeSlugError,
    InvalidNodeStatusTransitionError,
    NodeNotFoundError,
    NodeRegistry,
    NodeSlugExistsError,
)

__all__ = [
    "DEFAULT_NODE_SETTINGS",
    "NodeRegistry",
    "NodeNotFoundError",
    "NodeSlugExistsError",
    "InvalidNodeSlugError",
    "InvalidNodeStatusTransitionError",
]
