"""
Global Error Handling

This module defines application-wide exception handlers for the query
service.

Design Goals
------------
- Never leak internal exception details to clients
- Always return deterministic, machine-readable error responses
- Map query errors to client errors, everything else to a generic 500
- Log full stack traces internally for debugging
"""

from __future__ import annotations

import logging
from typing import Dict, Any

from fastapi import Request, status
from fastapi.responses import JSONResponse

from ..vectors.errors import EmptyQueryError, UnknownWordError

logger = logging.getLogger("w2v.errors")


# ---------------------------------------------------------------------
# Public Exception Handlers
# ---------------------------------------------------------------------

async def unknown_word_handler(
    request: Request,
    exc: UnknownWordError,
) -> JSONResponse:
    """
    Translate a query against an out-of-vocabulary word into a 404.
    """
    logger.info(
        "Unknown word in request %s %s: %r",
        request.method,
        request.url.path,
        exc.word,
    )

    payload: Dict[str, Any] = {
        "error": "unknown_word",
        "detail": str(exc),
        "word": exc.word,
    }

    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=payload,
    )


async def empty_query_handler(
    request: Request,
    exc: EmptyQueryError,
) -> JSONResponse:
    """
    Translate an analogy query without terms into a 422.
    """
    payload: Dict[str, Any] = {
        "error": "empty_query",
        "detail": str(exc),
    }

    return JSONResponse(
        status_code=422,
        content=payload,
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Catch-all handler for uncaught exceptions.

    Behavior
    --------
    - Logs the full exception stack trace for internal diagnostics.
    - Returns a generic 500 error to the client with no internal details.

    Parameters
    ----------
    request : Request
        The incoming HTTP request that triggered the exception.

    exc : Exception
        The uncaught exception instance.

    Returns
    -------
    JSONResponse
        A JSON 500 response with a minimal error payload.
    """

    # Log full traceback internally (never returned to client)
    logger.exception(
        "Unhandled exception during request: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )

    payload: Dict[str, Any] = {
        "error": "internal_server_error",
        "detail": "Internal server error",
    }

    return JSONResponse(
        status_code=500,
        content=payload,
    )
