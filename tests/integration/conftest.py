# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fixtures for API tests.

The application is built with the real routers, middleware and error
handlers, while storage and SCM are the in-memory fakes from the root
conftest. The client is not used as a context manager, so the lifespan
(and with it the database pool) never starts.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from quickfeed.api.app import create_app
from quickfeed.api.dependencies import get_storage
from quickfeed.core.config import get_settings
from quickfeed.domains.auth import JWTManager


@pytest.fixture
def app(storage, scm_factory) -> FastAPI:
    """Create the application over the in-memory fakes."""
    app = create_app(scm_factory=scm_factory)
    app.dependency_overrides[get_storage] = lambda: storage
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def auth():
    """Provide a helper building Authorization headers for a user ID."""
    manager = JWTManager(get_settings().jwt)

    def _auth(user_id: int) -> dict[str, str]:
        return {"Authorization": f"Bearer {manager.create_access_token(user_id)}"}

    return _auth
