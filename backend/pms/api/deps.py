"""Request Dependencies — expose app-scoped settings and client to routes.

Invariants:
    - Settings and MusicServiceClient are created once per app (create_app) and
      read from app.state; routes never touch module-level globals
"""

from fastapi import Depends, Request

from pms.config import Settings
from pms.infrastructure.music_client import MusicServiceClient
from pms.services.song_relay import SongRelay


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_music_client(request: Request) -> MusicServiceClient:
    return request.app.state.music_client


def get_song_relay(
    settings: Settings = Depends(get_app_settings),
    client: MusicServiceClient = Depends(get_music_client),
) -> SongRelay:
    return SongRelay(settings, client)
