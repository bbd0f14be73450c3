"""Global exception handlers — map SDK exceptions to HTTP status codes.

The SDK raises a small typed taxonomy; rather than catching it in every
route, global handlers translate it once:

    ValidationError  -> 422 with the offending field and expected constraint
    NotFound         -> 404
    PersistenceError -> 503
    anything else    -> 500

Validation details (question id, expected values) are safe to return and
let the client show an actionable message.  Storage failures and unexpected
errors only ever return a generic message; the detail stays in the log.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from riskcheck_rulesets.errors import NotFound, PersistenceError, ValidationError

logger = logging.getLogger(__name__)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Map ``ValidationError`` to 422 with field/constraint detail."""
    logger.warning("ValidationError at %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "field": exc.field, "constraint": exc.constraint},
    )


async def not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
    """Map ``NotFound`` to 404 without echoing ownership details."""
    logger.warning("NotFound at %s: %s", request.url.path, exc)
    return JSONResponse(status_code=404, content={"detail": "Resource not found"})


async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    """Map ``PersistenceError`` to 503; the chained driver error is logged only."""
    logger.error("PersistenceError at %s: %s", request.url.path, exc, exc_info=exc)
    return JSONResponse(
        status_code=503,
        content={"detail": "Session store unavailable, please retry"},
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions — log full traceback, return 500."""
    logger.exception("Unhandled exception at %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )
