"""Song-URL Relay — validate, build, dispatch, decode, check.

Invariants:
    - Timestamp computed per call, right before dispatch
    - Upstream code != 200 → UpstreamRejectedError carrying the upstream code
    - Success returns the decoded upstream JSON verbatim (unknown/opaque fields kept)
    - Failures are raised, never logged here: the API error handler logs each once

Design Decisions:
    - Settings and client injected via constructor: no module-level config
    - Shape check through pydantic, passthrough of the raw dict: validation without
      re-serialization drift
"""

import json
import time
from typing import Any

from pydantic import ValidationError

from pms.config import Settings
from pms.core.domain_types import EpochMillis
from pms.core.errors import (
    ErrorContext,
    UpstreamDecodeError,
    UpstreamRejectedError,
)
from pms.core.song_request import build_upstream_query, resolve_song_request
from pms.infrastructure.music_client import MusicServiceClient
from pms.schemas.song import SongURLResponse

UPSTREAM_OK = 200


def now_epoch_millis() -> EpochMillis:
    return EpochMillis(time.time_ns() // 1_000_000)


class SongRelay:
    """Relays one GetSongURL call to the upstream music service."""

    def __init__(self, settings: Settings, client: MusicServiceClient):
        self.settings = settings
        self.client = client

    async def get_song_url(
        self,
        raw_id: str | None,
        level: str | None = None,
        real_ip: str | None = None,
    ) -> dict[str, Any]:
        request = resolve_song_request(
            raw_id, level, real_ip,
            default_level=self.settings.level,
            default_real_ip=self.settings.real_ip,
        )
        ctx = ErrorContext(song_id=request.song_id)
        query = build_upstream_query(
            request,
            base_url=self.settings.netease_music_api,
            cookie=self.settings.netease_cookie,
            timestamp_ms=now_epoch_millis(),
        )
        body = await self.client.fetch_song_url(query, ctx)
        code, payload = decode_song_url_response(body, ctx)
        if code != UPSTREAM_OK:
            raise UpstreamRejectedError(code, ctx)
        return payload


def decode_song_url_response(
    body: bytes, ctx: ErrorContext,
) -> tuple[int, dict[str, Any]]:
    """Parse and shape-check the upstream body.

    Returns the upstream code and the decoded JSON object. Raises
    UpstreamDecodeError on malformed JSON or a shape mismatch. Invalid
    UTF-8 is replaced with U+FFFD; a `null` body decodes as an empty
    object (code 0).
    """
    try:
        raw = json.loads(
            body.decode("utf-8", "replace"), parse_constant=_reject_constant,
        )
        if raw is None:
            raw = {}
        parsed = SongURLResponse.model_validate(raw)
    except (ValueError, ValidationError) as e:
        ctx.debug_info = {"cause": f"{type(e).__name__}: {e}"}
        raise UpstreamDecodeError(ctx) from e
    return parsed.code, raw


def _reject_constant(token: str):
    """NaN / Infinity are not JSON and cannot be re-encoded for the caller."""
    raise ValueError(f"Invalid JSON constant: {token}")
