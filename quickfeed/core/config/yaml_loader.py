# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""YAML document loading utilities.

Assignment descriptors are small YAML mappings that may come from a local
checkout or straight from the SCM API, so parsing works on text and the
source is only used for error reporting.

Example:
    >>> from quickfeed.core.config.yaml_loader import parse_yaml_mapping
    >>> parse_yaml_mapping("name: Lab 1\\n", source="lab1/assignment.yml")
    {'name': 'Lab 1'}
"""

from typing import Any

import yaml


class YAMLLoadError(Exception):
    """Raised when a YAML document cannot be parsed."""

    def __init__(self, source: str, reason: str) -> None:
        """Initialize YAMLLoadError.

        Args:
            source: Path or name of the document that failed to load.
            reason: Description of why the document failed to load.
        """
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load YAML document '{source}': {reason}")


def parse_yaml_mapping(content: str, source: str) -> dict[str, Any]:
    """Parse YAML text whose root must be a mapping.

    Args:
        content: Raw YAML text.
        source: Path or name of the document, used in error messages.

    Returns:
        Dictionary containing the parsed YAML contents.
        Empty dict if the document is empty.

    Raises:
        YAMLLoadError: If the text is not valid YAML or the root is not
            a mapping.
    """
    try:
        parsed = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise YAMLLoadError(source, f"Invalid YAML syntax: {e}") from e

    # Handle empty documents
    if parsed is None:
        return {}

    if not isinstance(parsed, dict):
        raise YAMLLoadError(
            source, f"YAML root must be a mapping, got {type(parsed).__name__}"
        )

    return parsed
