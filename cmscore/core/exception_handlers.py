"""Exception handlers for Starlette applications embedding cmscore.

Register with register_exception_handlers(app). Maps CmsCoreException
error codes to HTTP statuses; response_for_exception() builds the same
mapping as an HTTPResponse for code paths that render through cmscore.control.
"""

import json
import logging
from typing import Any

from starlette.applications import Starlette
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse

from cmscore.control.http_response import HTTPResponse
from cmscore.core.config import get_settings
from cmscore.domain.exceptions import CmsCoreException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status
_ERROR_CODE_STATUS: dict[str, int] = {
    "INVALID_ARGUMENT": 400,
    "INVALID_FILTER": 400,
    "INVALID_FIELD": 400,
    "INVALID_RELATION": 400,
    "UNKNOWN_MODEL": 404,
    "NOT_IMPLEMENTED": 501,
}


def status_for_exception(exc: CmsCoreException) -> int:
    """HTTP status for exc's error_code (400 when unmapped)."""
    return _ERROR_CODE_STATUS.get(exc.error_code, 400)


def response_for_exception(exc: CmsCoreException) -> HTTPResponse:
    """Build a JSON HTTPResponse from exc.to_dict()."""
    response = HTTPResponse(json.dumps(exc.to_dict()), status_for_exception(exc))
    response.add_header("Content-Type", "application/json")
    return response


def _cmscore_exception_handler(request: Request, exc: CmsCoreException) -> JSONResponse:
    """Return JSON from CmsCoreException.to_dict() with the mapped status code."""
    status = status_for_exception(exc)
    logger.info("%s on %s: %s", exc.error_code, request.url.path, exc.message)
    return JSONResponse(status_code=status, content=exc.to_dict())


def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    detail: Any = str(exc) if get_settings().debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: Starlette) -> None:
    """Register all exception handlers on a Starlette app.

    Handlers: CmsCoreException (and subclasses), StarletteHTTPException,
    generic Exception.
    """
    app.add_exception_handler(CmsCoreException, _cmscore_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
