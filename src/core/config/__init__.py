# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for the content network.

This package provides centralized configuration management:
- Settings: Pydantic-based settings loaded from environment variables
- YAML loader: Utilities for loading YAML configuration files

Example:
    >>> from src.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.distribution.max_concurrency)
    4

    >>> from src.core.config import load_yaml
    >>> rules = load_yaml(Path("config/content_types.yaml"))
"""

from src.core.config.settings import (
    APISettings,
    CORSSettings,
    DatabaseSettings,
    DistributionSettings,
    LocalizationSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from src.core.config.yaml_loader import (
    YAMLLoadError,
    deep_merge,
    load_yaml,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "DatabaseSettings",
    "DistributionSettings",
    "LocalizationSettings",
    "CORSSettings",
    "APISettings",
    # YAML utilities
    "load_yaml",
    "deep_merge",
    "YAMLLoadError",
]
