# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Request context middleware.

Authentication happens upstream; callers pass the acting user's id in the
``X-User-Id`` header. This middleware stores it on request.state, assigns a
request id and binds both to the structured log context for the duration
of the request.

Example:
    POST /api/v1/distributions
    X-User-Id: 4d1c0c1e-...
    X-Request-ID: 9b2f...
"""

import logging
from typing import Callable
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from src.utils.logging import bind_context, clear_context

logger = logging.getLogger(__name__)

USER_ID_HEADER = "X-User-Id"
REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Populates request.state.user_id and request.state.request_id."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Response],
    ) -> Response:
        """Bind request context, run the handler and echo the request id.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware/handler.

        Returns:
            HTTP response.
        """
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        user_id = request.headers.get(USER_ID_HEADER) or None

        request.state.request_id = request_id
        request.state.user_id = user_id

        clear_context()
        bind_context(request_id=request_id, user_id=user_id)
        try:
            response = await call_next(request)
        finally:
            clear_context()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def get_user_id(request: Request) -> str | None:
    """Get the acting user id from request state."""
    return getattr(request.state, "user_id", None)
