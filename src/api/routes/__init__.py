# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API Routes package.

This module exports the unversioned route modules for the API.
"""

from src.api.routes import health, metrics

__all__ = ["health", "metrics"]
