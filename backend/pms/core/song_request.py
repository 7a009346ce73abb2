"""Song Request — pure parsing and upstream query construction.

Invariants:
    - Song id accepts an optional sign and ASCII digits only, within signed 64-bit range
    - Outbound id is the canonical decimal string of the parsed integer ("+007" → "7")
    - A query parameter that is present but empty overrides the default (only absence falls back)
    - Outbound parameters are form-encoded with sorted keys: same inputs → same URL

Design Decisions:
    - Timestamp passed in by the caller: functions stay pure and testable
    - Regex over int(): int() also accepts whitespace, underscores and non-ASCII digits
"""

import re
from dataclasses import dataclass
from urllib.parse import urlencode

from pms.core.domain_types import EpochMillis, SongId
from pms.core.errors import InvalidRequestError

SONG_URL_PATH = "/song/url/v1"

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


@dataclass(frozen=True)
class SongRequest:
    """Validated inbound request with defaults applied."""
    song_id: SongId
    level: str
    real_ip: str


@dataclass(frozen=True)
class UpstreamQuery:
    """Everything that determines the outbound request URL."""
    base_url: str
    song_id: SongId
    level: str
    timestamp_ms: EpochMillis
    cookie: str
    real_ip: str

    def params(self) -> dict[str, str]:
        return {
            "id": str(self.song_id),
            "level": self.level,
            "timestamp": str(self.timestamp_ms),
            "cookie": self.cookie,
            "realIP": self.real_ip,
        }

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{SONG_URL_PATH}"

    @property
    def url(self) -> str:
        return f"{self.endpoint}?{urlencode(sorted(self.params().items()))}"


def parse_song_id(raw: str | None) -> SongId:
    """Parse the `id` query parameter or raise InvalidRequestError."""
    if raw is None or raw == "":
        raise InvalidRequestError("Missing required parameter: id", field="id")
    if not _INT_PATTERN.fullmatch(raw):
        raise InvalidRequestError("Invalid song id format", field="id")
    value = int(raw)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise InvalidRequestError("Invalid song id format", field="id")
    return SongId(value)


def resolve_song_request(
    raw_id: str | None,
    level: str | None,
    real_ip: str | None,
    *,
    default_level: str,
    default_real_ip: str,
) -> SongRequest:
    """Validate the id and fill absent optional parameters from defaults."""
    return SongRequest(
        song_id=parse_song_id(raw_id),
        level=default_level if level is None else level,
        real_ip=default_real_ip if real_ip is None else real_ip,
    )


def build_upstream_query(
    request: SongRequest,
    *,
    base_url: str,
    cookie: str,
    timestamp_ms: EpochMillis,
) -> UpstreamQuery:
    return UpstreamQuery(
        base_url=base_url,
        song_id=request.song_id,
        level=request.level,
        timestamp_ms=timestamp_ms,
        cookie=cookie,
        real_ip=request.real_ip,
    )
