"""quickfeed backend.

Course management service that provisions GitHub/GitLab directories and
repositories for programming courses and keeps assignment metadata in sync
with the course tests repository.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
