# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assignment descriptor parser.

Every assignment lives in its own folder of the course ``tests`` repository
and declares its metadata in an ``assignment.yml`` file:

    assignmentid: 1
    name: "Lab 1"
    language: "Go"
    deadline: "01-09-2024 23:59"
    autoapprove: true
    IsGroupLab: false

Parsing works over the FileTree protocol, so the same code handles a local
checkout (LocalFileTree) and files fetched through the SCM API
(InMemoryFileTree). Parsing is all-or-nothing: one bad descriptor fails the
whole tree.

Example:
    >>> tree = InMemoryFileTree({"lab1/assignment.yml": descriptor_text})
    >>> [a.name for a in parse_assignments(tree, course_id=1)]
    ['Lab 1']
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from quickfeed.core.config.yaml_loader import YAMLLoadError, parse_yaml_mapping
from quickfeed.core.errors import InvalidArgumentError, NotFoundError
from quickfeed.domains.assignment.deadline import parse_deadline

logger = logging.getLogger(__name__)

DESCRIPTOR_FILENAMES = ("assignment.yml", "assignment.yaml")


class AssignmentParseError(InvalidArgumentError):
    """Raised when an assignment descriptor cannot be parsed."""

    pass


class FileTree(Protocol):
    """Read-only view of a repository's files."""

    def paths(self) -> Iterable[str]:
        """Return the POSIX paths of all regular files, relative to the root."""
        ...

    def read_text(self, path: str) -> str:
        """Return the text of the file at a path returned by paths()."""
        ...


class InMemoryFileTree:
    """FileTree backed by a mapping of path to file text."""

    def __init__(self, files: Mapping[str, str]) -> None:
        self._files = dict(files)

    def paths(self) -> Iterable[str]:
        return list(self._files)

    def read_text(self, path: str) -> str:
        return self._files[path]


class LocalFileTree:
    """FileTree backed by a directory on disk."""

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root)

    def paths(self) -> Iterable[str]:
        return [
            path.relative_to(self._root).as_posix()
            for path in self._root.rglob("*")
            if path.is_file()
        ]

    def read_text(self, path: str) -> str:
        return (self._root / path).read_text(encoding="utf-8")


class AssignmentDescriptor(BaseModel):
    """Raw contents of an assignment descriptor."""

    model_config = ConfigDict(extra="ignore")

    assignment_id: int = Field(alias="assignmentid", gt=0)
    name: str = ""
    language: str = ""
    deadline: str
    auto_approve: bool = Field(default=False, alias="autoapprove")
    is_group_lab: bool = Field(default=False, alias="IsGroupLab")
    reviewers: int = Field(default=1, ge=1)

    @field_validator("name", "language", mode="before")
    @classmethod
    def _coerce_text(cls, value: object) -> object:
        # YAML turns unquoted numbers and booleans into non-strings.
        if value is None:
            return ""
        if isinstance(value, (int, float, bool)):
            return str(value)
        return value


@dataclass
class ParsedAssignment:
    """An assignment read from a descriptor.

    Attributes:
        assignment_id: ID declared in the descriptor.
        course_id: Course the descriptor belongs to.
        name: Assignment name.
        language: Lowercase language tag.
        deadline: UTC-aware deadline.
        order: Ordering index, equal to assignment_id.
        auto_approve: Whether passing submissions are approved automatically.
        is_group_lab: Whether the assignment is solved in groups.
        directory: Folder of the descriptor within the tests repository.
        reviewers: Number of manual reviews required.
    """

    assignment_id: int
    course_id: int
    name: str
    language: str
    deadline: datetime
    order: int
    auto_approve: bool
    is_group_lab: bool
    directory: str
    reviewers: int = 1


def is_descriptor(path: str) -> bool:
    """Check whether a path names an assignment descriptor."""
    return PurePosixPath(path).name in DESCRIPTOR_FILENAMES


def parse_descriptor(text: str, path: str, course_id: int) -> ParsedAssignment:
    """Parse a single descriptor.

    Args:
        text: YAML text of the descriptor.
        path: Path of the descriptor, relative to the repository root.
        course_id: Course the descriptor belongs to.

    Returns:
        The parsed assignment.

    Raises:
        AssignmentParseError: If the YAML, any field or the deadline is invalid.
    """
    try:
        raw = parse_yaml_mapping(text, source=path)
    except YAMLLoadError as e:
        raise AssignmentParseError(str(e), {"path": path}) from e

    try:
        descriptor = AssignmentDescriptor.model_validate(raw)
    except ValidationError as e:
        raise AssignmentParseError(
            f"Invalid assignment descriptor '{path}'",
            {"path": path, "errors": e.errors(include_url=False)},
        ) from e

    try:
        deadline = parse_deadline(descriptor.deadline)
    except ValueError as e:
        raise AssignmentParseError(
            f"Invalid deadline '{descriptor.deadline}' in '{path}', expected DD-MM-YYYY HH:MM",
            {"path": path},
        ) from e

    parent = PurePosixPath(path).parent
    return ParsedAssignment(
        assignment_id=descriptor.assignment_id,
        course_id=course_id,
        name=descriptor.name,
        language=descriptor.language.lower(),
        deadline=deadline,
        order=descriptor.assignment_id,
        auto_approve=descriptor.auto_approve,
        is_group_lab=descriptor.is_group_lab,
        directory="" if str(parent) == "." else parent.as_posix(),
        reviewers=descriptor.reviewers,
    )


def parse_assignments(tree: FileTree, course_id: int) -> list[ParsedAssignment]:
    """Parse every assignment descriptor in a file tree.

    Args:
        tree: Files of the tests repository.
        course_id: Course the descriptors belong to.

    Returns:
        One assignment per descriptor, in path order.

    Raises:
        AssignmentParseError: If any descriptor is invalid. No partial
            result is returned.
    """
    assignments = [
        parse_descriptor(tree.read_text(path), path, course_id)
        for path in sorted(tree.paths())
        if is_descriptor(path)
    ]

    seen: dict[int, str] = {}
    for assignment in assignments:
        if assignment.assignment_id in seen:
            raise AssignmentParseError(
                f"Duplicate assignment ID {assignment.assignment_id} in "
                f"'{seen[assignment.assignment_id]}' and '{assignment.directory}'",
            )
        seen[assignment.assignment_id] = assignment.directory

    logger.debug("Parsed %d assignments for course %s", len(assignments), course_id)
    return assignments


def parse_assignment_dir(root: Path | str, course_id: int) -> list[ParsedAssignment]:
    """Parse the assignment descriptors of a local checkout.

    Args:
        root: Root folder of the checkout.
        course_id: Course the descriptors belong to.

    Returns:
        One assignment per descriptor, in path order.

    Raises:
        NotFoundError: If root does not exist.
        AssignmentParseError: If any descriptor is invalid.
    """
    root_path = Path(root)
    if not root_path.is_dir():
        raise NotFoundError(f"Assignment directory '{root_path}' does not exist")
    return parse_assignments(LocalFileTree(root_path), course_id)
