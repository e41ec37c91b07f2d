# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for rubric file decoding."""

import pytest

from quickfeed.domains.assignment.criteria import CriteriaParseError, criteria_path, parse_criteria

RUBRIC = """
[
    {
        "heading": "Code quality",
        "criteria": [
            {"description": "Functions are documented", "points": 5},
            {"description": "No global state"}
        ]
    },
    {"heading": "Report", "comment": "PDF only"}
]
"""


class TestParseCriteria:
    """Tests for parse_criteria."""

    def test_valid_rubric(self) -> None:
        benchmarks = parse_criteria(RUBRIC)

        assert [b.heading for b in benchmarks] == ["Code quality", "Report"]
        assert [(c.description, c.points) for c in benchmarks[0].criteria] == [
            ("Functions are documented", 5),
            ("No global state", 0),
        ]
        assert benchmarks[1].comment == "PDF only"
        assert benchmarks[1].criteria == []

    def test_empty_list(self) -> None:
        assert parse_criteria("[]") == []

    @pytest.mark.parametrize(
        "text",
        [
            "not json",
            '{"heading": "not a list"}',
            '[{"comment": "missing heading"}]',
            '[{"heading": "h", "criteria": [{"description": "d", "points": -1}]}]',
        ],
    )
    def test_invalid_rubric(self, text: str) -> None:
        with pytest.raises(CriteriaParseError) as exc_info:
            parse_criteria(text, source="lab1/criteria.json")

        assert exc_info.value.details["path"] == "lab1/criteria.json"


class TestCriteriaPath:
    """Tests for criteria_path."""

    def test_in_folder(self) -> None:
        assert criteria_path("lab1") == "lab1/criteria.json"

    def test_root(self) -> None:
        assert criteria_path("") == "criteria.json"
