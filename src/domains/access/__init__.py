# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Access control domain package."""

from src.domains.access.service import (
    AccessController,
    SubscriptionNotFoundError,
    grants_access,
)

__all__ = [
    "AccessController",
    "SubscriptionNotFoundError",
    "grants_access",
]
