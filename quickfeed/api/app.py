# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI Application Factory.

This module provides the main application factory for the quickfeed API.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quickfeed.api.errors import register_exception_handlers
from quickfeed.api.middleware.auth import AuthMiddleware
from quickfeed.api.routes import health
from quickfeed.api.v1 import router as v1_router
from quickfeed.core.config import get_settings
from quickfeed.infrastructure.database.connection import close_database, init_database
from quickfeed.services.scm import ScmFactory
from quickfeed.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Initializes the database connection pool at startup and releases it
    at shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings = get_settings()
    logger.info("Starting quickfeed API (environment=%s)", settings.environment)

    await init_database(settings)
    logger.info("Database connection pool initialized")

    yield

    await close_database()
    logger.info("Shutting down quickfeed API")


def create_app(scm_factory: ScmFactory | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a new FastAPI instance with all
    middleware, routes, and configurations applied.

    Args:
        scm_factory: SCM client factory; built from settings if omitted.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="quickfeed API",
        description="Course management with SCM provisioning and assignment sync",
        version="1.0.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        # Disable automatic redirects from /path to /path/
        # This prevents 307 redirects that lose Authorization headers
        redirect_slashes=False,
    )

    # =========================================================================
    # State
    # =========================================================================
    app.state.scm_factory = scm_factory or ScmFactory(settings.scm)

    # =========================================================================
    # Exception handlers
    # =========================================================================
    register_exception_handlers(app)

    # =========================================================================
    # Middleware (order matters - last added is first executed)
    # =========================================================================
    app.add_middleware(AuthMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )

    # =========================================================================
    # Routes
    # =========================================================================
    app.include_router(health.router, tags=["Health"])
    app.include_router(v1_router)

    return app
