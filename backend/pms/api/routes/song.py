"""Song Route — GET /song relays a song-URL lookup to the music service.

Invariants:
    - Query parameters arrive as raw strings; validation lives in core/song_request
    - Success body is the upstream JSON unchanged
    - Failures surface as PmsError and are rendered by the global handler
    - A repeated parameter binds its first value (?id=1&id=2 → "1")
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from pms.api.deps import get_song_relay
from pms.services.song_relay import SongRelay

router = APIRouter(tags=["song"])


def _first(request: Request, name: str) -> str | None:
    values = request.query_params.getlist(name)
    return values[0] if values else None


@router.get("/song")
async def get_song_url(
    request: Request,
    relay: SongRelay = Depends(get_song_relay),
):
    """Resolve playable URLs for one song id."""
    payload = await relay.get_song_url(
        _first(request, "id"), _first(request, "level"), _first(request, "realip"),
    )
    return JSONResponse(content=payload)
