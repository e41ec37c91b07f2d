# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for quickfeed.

This package provides centralized configuration management:
- Settings: Pydantic-based settings loaded from environment variables
- YAML loader: Parsing of YAML mappings such as assignment descriptors

Example:
    >>> from quickfeed.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from quickfeed.core.config.settings import (
    APISettings,
    CORSSettings,
    DatabaseSettings,
    JWTSettings,
    SCMSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from quickfeed.core.config.yaml_loader import (
    YAMLLoadError,
    parse_yaml_mapping,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "DatabaseSettings",
    "SCMSettings",
    "JWTSettings",
    "CORSSettings",
    "APISettings",
    # YAML utilities
    "parse_yaml_mapping",
    "YAMLLoadError",
]
