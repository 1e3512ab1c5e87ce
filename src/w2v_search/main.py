"""
Query Service Entry Point

This module defines the FastAPI application instance, registers all routers,
configures exception handling, and provides a test-friendly application
factory.

Design Goals
------------
- Deterministic startup
- Model loaded once per process
- Centralized router registration
- Query errors mapped to client errors, everything else to a 500
- Test-friendly via create_app()
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from .config import settings
from .core.errors import (
    empty_query_handler,
    unhandled_exception_handler,
    unknown_word_handler,
)
from .vectors.errors import EmptyQueryError, UnknownWordError

from .api import (
    health_routes,
    query_routes,
)
from .api.dependencies import get_word_vectors


logger = logging.getLogger("w2v.app")


# ---------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------

@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Fail-fast model load at application startup.

    A malformed or missing model file stops the server before the first
    request is ever served. Dependency overrides are honoured so tests can
    inject an in-memory store.
    """
    logger.info("Starting w2v-search")

    if settings.preload_vectors:
        provider = app.dependency_overrides.get(get_word_vectors, get_word_vectors)
        store = provider()
        logger.info(
            "Model ready: %d words, %d dimensions",
            len(store),
            store.vector_size,
        )
    else:
        logger.info("Model preload disabled; loading on first request")

    yield

    logger.info("Shutting down w2v-search")


# ---------------------------------------------------------------------
# Application Factory (Test-Friendly)
# ---------------------------------------------------------------------

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns
    -------
    FastAPI
        Fully configured FastAPI application.
    """
    app = FastAPI(
        title="w2v-search",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=_lifespan,
    )

    # --------------------------------------------------------------
    # Exception Handling
    # --------------------------------------------------------------

    app.add_exception_handler(UnknownWordError, unknown_word_handler)
    app.add_exception_handler(EmptyQueryError, empty_query_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # --------------------------------------------------------------
    # Router Registration
    # --------------------------------------------------------------

    app.include_router(health_routes.router)
    app.include_router(query_routes.router)

    return app


# ---------------------------------------------------------------------
# Default Application Instance (for Uvicorn/Gunicorn)
# ---------------------------------------------------------------------

app = create_app()
