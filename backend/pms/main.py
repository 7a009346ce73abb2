"""PublicMusicService API — FastAPI application factory and process entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Settings are loaded before any listener is bound; a missing cookie exits with status 1
    - Settings and the upstream client are injected through app.state, never module globals
    - The shared upstream client is closed on shutdown

Design Decisions:
    - create_app() factory over a module-level app: tests build apps with fake settings
      and a MockTransport-backed client
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - uvicorn access log disabled: middleware.access_log emits the structured line instead
"""

import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from pms.api.error_handlers import register_error_handlers
from pms.api.middleware import register_middleware
from pms.api.routes import health, song
from pms.config import Settings, get_settings
from pms.core.errors import ConfigMissingError
from pms.infrastructure.music_client import MusicServiceClient
from pms.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    logger.info("PublicMusicService started")
    yield
    await app.state.music_client.aclose()
    logger.info("PublicMusicService shutting down")


def create_app(
    settings: Settings, music_client: MusicServiceClient | None = None,
) -> FastAPI:
    """Build the relay application around an immutable Settings value."""
    app = FastAPI(
        title=health.SERVICE_NAME,
        version=health.SERVICE_VERSION,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.music_client = music_client or MusicServiceClient(
        timeout_seconds=settings.upstream_timeout_seconds,
    )

    register_middleware(app)
    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(song.router)
    return app


def main() -> None:
    """Console entry point: load settings, then serve until interrupted."""
    setup_logging()
    try:
        settings = get_settings()
    except ConfigMissingError as e:
        logger.critical(e.message, extra={"error_code": e.kind.value})
        sys.exit(1)

    setup_logging(settings.log_level, settings.log_format)
    try:
        port = int(settings.port)
    except ValueError:
        logger.critical(f"Failed to start server: invalid port {settings.port!r}")
        sys.exit(1)

    logger.info(f"PublicMusicService (PMS) starting on port {settings.port}")
    logger.info(f"Netease Music API: {settings.netease_music_api}")
    logger.info(f"Default Level: {settings.level}")

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=port,
        log_config=None,
        access_log=False,
    )


if __name__ == "__main__":
    main()
