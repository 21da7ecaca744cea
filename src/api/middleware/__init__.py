# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API middleware components.

- RequestContextMiddleware: acting user and request id for each request.
"""

from src.api.middleware.request_context import RequestContextMiddleware, get_user_id

__all__ = [
    "RequestContextMiddleware",
    "get_user_id",
]
