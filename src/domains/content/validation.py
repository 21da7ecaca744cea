# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Payload validation per content type.

Any object with a ``validate(content_type, payload) -> list[str]`` method can
be injected into the version manager. The default implementation applies the
rules from ``config/content_types.yaml``.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Protocol

from src.core.config.settings import get_settings
from src.core.config.yaml_loader import deep_merge, load_yaml

logger = logging.getLogger(__name__)


class PayloadValidator(Protocol):
    """Structural check of a content payload."""

    def validate(self, content_type: str, payload: dict[str, Any]) -> list[str]:
        """Return a list of error messages; empty means valid."""
        ...


class ContentTypeRulesValidator:
    """Validates payloads against per-content-type rules.

    Each rule set may declare:
        required: keys that must be present.
        list_fields: keys that, when present, must hold a list.
        non_empty: keys that, when present, must not be empty.

    Content types without rules only need a mapping payload.
    """

    def __init__(self, rules: dict[str, dict[str, list[str]]]) -> None:
        self._rules = rules

    @classmethod
    def from_yaml(cls, path: Path) -> "ContentTypeRulesValidator":
        """Load rules from a YAML file with ``defaults`` and ``content_types``."""
        raw = load_yaml(path)
        defaults = raw.get("defaults") or {}
        rules = {
            content_type: deep_merge(defaults, overrides or {})
            for content_type, overrides in (raw.get("content_types") or {}).items()
        }
        logger.debug("Loaded payload rules for %d content types from %s", len(rules), path)
        return cls(rules)

    @property
    def content_types(self) -> list[str]:
        return sorted(self._rules)

    def validate(self, content_type: str, payload: dict[str, Any]) -> list[str]:
        if not isinstance(payload, dict):
            return ["payload must be an object"]

        rules = self._rules.get(content_type)
        if rules is None:
            return []

        errors: list[str] = []
        for key in rules.get("required", []):
            if key not in payload:
                errors.append(f"'{key}' is required for {content_type} content")
        for key in rules.get("list_fields", []):
            if key in payload and not isinstance(payload[key], list):
                errors.append(f"'{key}' must be a list")
        for key in rules.get("non_empty", []):
            if key in payload and not payload[key]:
                errors.append(f"'{key}' must not be empty")
        return errors


@lru_cache
def get_default_validator() -> ContentTypeRulesValidator:
    """Rules validator built from the configured content types file."""
    return ContentTypeRulesValidator.from_yaml(get_settings().localization.content_types_path)
