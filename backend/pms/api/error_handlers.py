"""Error Handlers — global exception handlers rendering the {code, message} envelope.

Invariants:
    - PmsError → its own envelope and HTTP status, logged exactly once here
    - RequestValidationError → 400 {code: 400, message: "Invalid request"}
    - Starlette HTTPException (404/405 routing) → {code: status, message: detail}
    - No handler leaks causes, upstream bodies or stack traces to the caller

Design Decisions:
    - Three handler layers: domain (PmsError), validation (Pydantic), routing (HTTPException);
      the catch-all lives in middleware.recovery_guard so it runs inside CORS
    - Log level follows error severity: 400-level kinds are warnings, upstream faults errors
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pms.core.domain_types import ErrorSeverity
from pms.core.errors import PmsError

logger = logging.getLogger(__name__)

_SEVERITY_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_pms_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)


def _register_pms_error_handler(app: FastAPI) -> None:
    """Register relay domain/upstream error handler."""

    @app.exception_handler(PmsError)
    async def pms_error_handler(request: Request, exc: PmsError):
        """Handle all relay errors."""
        logger.log(
            _SEVERITY_LEVELS[exc.severity],
            f"{exc.kind.value}: {exc.message}",
            extra={**exc.log_extra(), "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"code": 400, "message": "Invalid request"},
        )


def _register_http_error_handler(app: FastAPI) -> None:
    """Register routing-level error handler (unknown path, wrong method)."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException,
    ):
        return JSONResponse(
            status_code=exc.status_code,
            content={"code": exc.status_code, "message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )
