# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grading rubric file decoding.

Each assignment folder of the tests repository may contain a
``criteria.json`` file holding the rubric as a list of benchmarks:

    [
        {
            "heading": "Code quality",
            "comment": "",
            "criteria": [
                {"description": "Functions are documented", "points": 5}
            ]
        }
    ]
"""

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from quickfeed.core.errors import InvalidArgumentError

CRITERIA_FILENAME = "criteria.json"


class CriteriaParseError(InvalidArgumentError):
    """Raised when a rubric file cannot be decoded."""

    pass


class CriterionSpec(BaseModel):
    """A criterion as written in the rubric file."""

    model_config = ConfigDict(extra="ignore")

    description: str
    points: int = Field(default=0, ge=0)
    comment: str = ""


class BenchmarkSpec(BaseModel):
    """A benchmark as written in the rubric file."""

    model_config = ConfigDict(extra="ignore")

    heading: str
    comment: str = ""
    criteria: list[CriterionSpec] = []


_RUBRIC_ADAPTER = TypeAdapter(list[BenchmarkSpec])


def criteria_path(directory: str) -> str:
    """Path of the rubric file for an assignment folder."""
    return f"{directory}/{CRITERIA_FILENAME}" if directory else CRITERIA_FILENAME


def parse_criteria(text: str, source: str = CRITERIA_FILENAME) -> list[BenchmarkSpec]:
    """Decode a rubric file.

    Args:
        text: JSON text of the rubric file.
        source: Path of the file, used in error messages.

    Returns:
        Benchmarks with their criteria, in file order.

    Raises:
        CriteriaParseError: If the text is not a valid rubric.
    """
    try:
        return _RUBRIC_ADAPTER.validate_json(text)
    except ValidationError as e:
        raise CriteriaParseError(
            f"Invalid grading criteria in '{source}'",
            {"path": source, "errors": e.error_count()},
        ) from e
