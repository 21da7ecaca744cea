# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Global content domain package.

This package provides the canonical catalog:
- ContentStore: data access for content, versions and node mirrors
- VersionManager: semantic versioning and the current-version pointer
- ContentService: catalog create/read/filter/publish and statistics
- Payload validation per content type
"""

from src.domains.content.service import ContentService
from src.domains.content.store import (
    ContentNotFoundError,
    ContentStore,
    LocalContentNotFoundError,
)
from src.domains.content.validation import (
    ContentTypeRulesValidator,
    PayloadValidator,
    get_default_validator,
)
from src.domains.content.versioning import (
    InvalidChangeTypeError,
    SchemaValidationFailedError,
    VersionConflictError,
    VersionManager,
    VersionNotFoundError,
    bump_version,
)

__all__ = [
    "ContentService",
    "ContentStore",
    "ContentNotFoundError",
    "LocalContentNotFoundError",
    "ContentTypeRulesValidator",
    "PayloadValidator",
    "get_default_validator",
    "VersionManager",
    "InvalidChangeTypeError",
    "SchemaValidationFailedError",
    "VersionConflictError",
    "VersionNotFoundError",
    "bump_version",
]
