"""HTTP Middleware — access log, permissive CORS, recovery guard.

Invariants:
    - Every response carries the CORS headers, including 500s from the recovery guard
    - OPTIONS on any path short-circuits with 204 and an empty body
    - An unexpected exception in a handler becomes 500 {code: 500}; the server keeps serving
    - One access-log line per request, OPTIONS included

Design Decisions:
    - Hand-set headers over CORSMiddleware: preflight must answer 204 on any path,
      with or without Origin / Access-Control-Request-Method
    - Registration order matters: the last registered middleware is the outermost,
      so the stack runs access_log → cors → recovery_guard → routes
"""

import logging
import time

from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("pms.access")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Allow-Headers": (
        "Content-Type, Content-Length, Accept-Encoding, X-CSRF-Token, "
        "Authorization, accept, origin, Cache-Control, X-Requested-With"
    ),
    "Access-Control-Allow-Methods": "POST, OPTIONS, GET, PUT, DELETE",
}


def register_middleware(app: FastAPI) -> None:
    """Install middleware innermost-first."""
    app.middleware("http")(recovery_guard)
    app.middleware("http")(cors)
    app.middleware("http")(access_log)


async def recovery_guard(request: Request, call_next) -> Response:
    try:
        return await call_next(request)
    except Exception as e:
        logger.error(
            f"Unhandled exception on {request.url.path}: {e}",
            exc_info=True,
            extra={"path": request.url.path, "method": request.method},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"code": 500, "message": "Internal server error"},
        )


async def cors(request: Request, call_next) -> Response:
    if request.method == "OPTIONS":
        response = Response(status_code=status.HTTP_204_NO_CONTENT)
    else:
        response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


async def access_log(request: Request, call_next) -> Response:
    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = round((time.perf_counter() - started) * 1000, 2)
    access_logger.info(
        f"{request.method} {request.url.path} {response.status_code}",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response
