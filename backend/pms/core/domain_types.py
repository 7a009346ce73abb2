"""Domain Types — rich types that replace bare primitives across the relay.

Invariants:
    - SongId wraps the parsed integer id — never pass the raw query string downstream
    - EpochMillis is always computed at dispatch time, never cached
    - Every failure mode is an ErrorKind member — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON log fields without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

SongId = NewType("SongId", int)


# ─── Value Types ─────────────────────────────────────────────────

EpochMillis = NewType("EpochMillis", int)


# ─── Enums ───────────────────────────────────────────────────────

class ErrorKind(str, Enum):
    """Failure taxonomy. Every kind is terminal for its request."""
    INVALID_REQUEST = "INVALID_REQUEST"
    UPSTREAM_UNREACHABLE = "UPSTREAM_UNREACHABLE"
    UPSTREAM_READ = "UPSTREAM_READ"
    UPSTREAM_DECODE = "UPSTREAM_DECODE"
    UPSTREAM_REJECTED = "UPSTREAM_REJECTED"
    CONFIG_MISSING = "CONFIG_MISSING"


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"
