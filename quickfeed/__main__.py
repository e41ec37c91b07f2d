# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Run the quickfeed API with uvicorn using APISettings."""

import uvicorn

from quickfeed.core.config import get_settings


def main() -> None:
    """Start the API server."""
    settings = get_settings()
    uvicorn.run(
        "quickfeed.api.app:create_app",
        factory=True,
        host=settings.api.host,
        port=settings.api.port,
        workers=settings.api.workers,
        reload=settings.api.reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
