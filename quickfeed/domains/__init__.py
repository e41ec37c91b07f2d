# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for quickfeed.

This package contains domain services that encapsulate business logic.
Each domain module provides services that orchestrate storage and SCM
calls for one area of the system.

Domains:
    assignment: Descriptor parsing, assignment sync and rubric import.
    auth: Access token handling.
    course: Course creation and lookup.
    enrollment: Enrollment requests and student repository provisioning.
    grading: Rubric edits and reviews.
    group: Student groups and group repository provisioning.
    provisioning: Remote resource creation with compensating rollback.
    user: User lookup and profile updates.
"""
