# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""YAML configuration file helpers.

Used to load the per-content-type payload rules consumed by the payload
validator. Rule files have a ``defaults`` mapping that is deep merged into
every entry of ``content_types``.

Example:
    >>> from pathlib import Path
    >>> from src.core.config.yaml_loader import load_yaml
    >>> rules = load_yaml(Path("config/content_types.yaml"))
"""

from pathlib import Path
from typing import Any

import yaml


class YAMLLoadError(Exception):
    """Raised when YAML file cannot be loaded or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        """Initialize YAMLLoadError.

        Args:
            path: Path to the YAML file that failed to load.
            reason: Description of why the file failed to load.
        """
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load YAML file '{path}': {reason}")


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML mapping from disk.

    Args:
        path: Path to the YAML file to load.

    Returns:
        Parsed mapping, or an empty dict for an empty file.

    Raises:
        YAMLLoadError: If the file is missing, unreadable, malformed,
            or its root is not a mapping.
    """
    if not path.is_file():
        raise YAMLLoadError(path, "File does not exist")

    try:
        parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise YAMLLoadError(path, f"Cannot read file: {e}") from e
    except yaml.YAMLError as e:
        raise YAMLLoadError(path, f"Invalid YAML syntax: {e}") from e

    if parsed is None:
        return {}

    if not isinstance(parsed, dict):
        raise YAMLLoadError(
            path, f"YAML root must be a mapping, got {type(parsed).__name__}"
        )

    return parsed


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``, recursing into dicts.

    Example:
        >>> deep_merge({"required": ["a"], "limits": {"x": 1}}, {"limits": {"y": 2}})
        {'required': ['a'], 'limits': {'x': 1, 'y': 2}}
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged
