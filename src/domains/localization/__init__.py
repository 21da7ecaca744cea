# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Localization domain package.

This package provides the per-node localization lifecycle:
- LocalizationWorkflow: customization overlays on node mirrors
- TranslationService: translation request state machine
"""

from src.domains.localization.translation import (
    EmptyTranslationError,
    InvalidTranslationTransitionError,
    TranslationRequestNotFoundError,
    TranslationService,
    validate_transition,
)
from src.domains.localization.workflow import (
    InvalidLocalizationTypeError,
    LocalizationWorkflow,
    merge_customization,
)

__all__ = [
    "LocalizationWorkflow",
    "InvalidLocalizationTypeError",
    "merge_customization",
    "TranslationService",
    "TranslationRequestNotFoundError",
    "InvalidTranslationTransitionError",
    "EmptyTranslationError",
    "validate_transition",
]
