# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    content: Global content catalog endpoints (CRUD, publish, statistics).
    versions: Content version endpoints (create, list, promote).
    distributions: Distribution job endpoints (distribute, list, retry).
    localization: Node localization endpoints.
    translations: Translation request workflow endpoints.
    access: Access checks and node subscriptions.
    nodes: Regional node registry endpoints.
"""

from fastapi import APIRouter

from src.api.v1 import access, content, distributions, localization, nodes, translations, versions

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

# Include domain routers
router.include_router(content.router, prefix="/content", tags=["Content"])
router.include_router(versions.router, prefix="/content", tags=["Content Versions"])
router.include_router(distributions.router, prefix="/distributions", tags=["Distributions"])
router.include_router(localization.router, prefix="/localization", tags=["Localization"])
router.include_router(translations.router, prefix="/translations", tags=["Translations"])
router.include_router(access.router, prefix="/access", tags=["Access"])
router.include_router(nodes.router, prefix="/nodes", tags=["Nodes"])

__all__ = ["router"]
