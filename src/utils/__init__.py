# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Cross-cutting utilities.

- logging: Structured logging with structlog
- datetime: Timezone-aware datetime operations
"""

from src.utils.datetime import (
    add_months,
    days_from_now,
    days_until,
    ensure_utc,
    format_iso,
    hours_ago,
    utc_now,
)
from src.utils.logging import bind_context, clear_context, setup_logging

__all__ = [
    # Logging
    "setup_logging",
    "bind_context",
    "clear_context",
    # Datetime
    "utc_now",
    "ensure_utc",
    "days_from_now",
    "hours_ago",
    "add_months",
    "days_until",
    "format_iso",
]
