# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Remote provisioning with compensating rollback."""

from quickfeed.domains.provisioning.saga import CompensationSaga
from quickfeed.domains.provisioning.service import RemoteProvisioner, repository_record

__all__ = [
    "CompensationSaga",
    "RemoteProvisioner",
    "repository_record",
]
