"""Error Hierarchy — typed exceptions for every relay failure mode.

Invariants:
    - Every error has a numeric code, an ErrorKind and an ErrorSeverity
    - to_response() produces the {code, message} envelope and nothing else
    - Causes and upstream bodies live in ErrorContext (logs only, never the response)

Design Decisions:
    - Single hierarchy with PmsError base: FastAPI global handler catches all
    - Caller-visible messages are fixed strings per kind (no interpolation of causes)
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from pms.core.domain_types import ErrorKind, ErrorSeverity


@dataclass
class ErrorContext:
    """Context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    song_id: int | None = None
    upstream_code: int | None = None
    debug_info: dict[str, Any] | None = None


class PmsError(Exception):
    """Base exception for all PublicMusicService errors."""

    def __init__(
        self,
        message: str,
        code: int,
        kind: ErrorKind,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.kind = kind
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the caller-facing error envelope."""
        return {"code": self.code, "message": self.message}

    def log_extra(self) -> dict:
        """Fields attached to the single server-side log line for this error."""
        extra: dict[str, Any] = {"error_code": self.kind.value}
        if self.context.song_id is not None:
            extra["song_id"] = self.context.song_id
        if self.context.upstream_code is not None:
            extra["upstream_code"] = self.context.upstream_code
        if self.context.debug_info:
            extra["debug_info"] = self.context.debug_info
        return extra


# ─── Request Errors (400-level) ─────────────────────────────────

class InvalidRequestError(PmsError):
    """Inbound query parameters failed validation."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, 400, ErrorKind.INVALID_REQUEST,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field = field


class UpstreamRejectedError(PmsError):
    """Upstream answered with a non-200 internal code."""
    def __init__(self, upstream_code: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.upstream_code = upstream_code
        super().__init__(
            "Music service returned error", upstream_code,
            ErrorKind.UPSTREAM_REJECTED, ErrorSeverity.WARNING, ctx, 400,
        )


# ─── Upstream Errors (500-level) ────────────────────────────────

class UpstreamUnreachableError(PmsError):
    """Transport-level failure (connect, DNS, timeout) calling upstream."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Failed to request music service", 500,
            ErrorKind.UPSTREAM_UNREACHABLE, ErrorSeverity.ERROR, context, 500,
        )


class UpstreamReadError(PmsError):
    """Upstream response body could not be read to the end."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Failed to read response from music service", 500,
            ErrorKind.UPSTREAM_READ, ErrorSeverity.ERROR, context, 500,
        )


class UpstreamDecodeError(PmsError):
    """Upstream body is not JSON or does not match the expected shape."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Failed to parse response from music service", 500,
            ErrorKind.UPSTREAM_DECODE, ErrorSeverity.ERROR, context, 500,
        )


# ─── Startup Errors ─────────────────────────────────────────────

class ConfigMissingError(PmsError):
    """Required configuration value absent at startup. Never served."""
    def __init__(self, variable: str):
        super().__init__(
            f"{variable} is required in environment variables or .env file",
            500, ErrorKind.CONFIG_MISSING, ErrorSeverity.CRITICAL, None, 500,
        )
        self.variable = variable
