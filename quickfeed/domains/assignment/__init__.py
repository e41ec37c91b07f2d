# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assignment domain: descriptor parsing, rubric files and synchronization."""

from quickfeed.domains.assignment.criteria import CriteriaParseError, parse_criteria
from quickfeed.domains.assignment.deadline import fix_deadline, parse_deadline
from quickfeed.domains.assignment.parser import (
    AssignmentParseError,
    FileTree,
    InMemoryFileTree,
    LocalFileTree,
    ParsedAssignment,
    parse_assignment_dir,
    parse_assignments,
)
from quickfeed.domains.assignment.service import AssignmentNotFoundError, AssignmentService

__all__ = [
    # Parser
    "FileTree",
    "InMemoryFileTree",
    "LocalFileTree",
    "ParsedAssignment",
    "AssignmentParseError",
    "parse_assignments",
    "parse_assignment_dir",
    # Deadlines
    "parse_deadline",
    "fix_deadline",
    # Rubric files
    "CriteriaParseError",
    "parse_criteria",
    # Service
    "AssignmentService",
    "AssignmentNotFoundError",
]
