"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables or .env (never hardcoded)
    - Settings are frozen: built once at startup, read-only afterwards
    - An empty NETEASE_COOKIE is fatal (ConfigMissingError), never served
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: type coercion, .env file support
    - env_ignore_empty: an empty variable falls back to its default, like an unset one
    - Process environment wins over .env values
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from pms.core.errors import ConfigMissingError

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = ".env"


class Settings(BaseSettings):
    """Relay settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=DEFAULT_ENV_FILE,
        case_sensitive=False,
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    # Listener
    port: str = "8080"
    host: str = "0.0.0.0"

    # Upstream music API
    netease_music_api: str = "https://example.com"
    netease_cookie: str = ""
    real_ip: str = "116.25.146.177"
    level: str = "exhigh"

    # Upper bound on connect + read of the upstream call. 0 disables it.
    upstream_timeout_seconds: float = 10.0

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


def load_settings(env_file: str | None = DEFAULT_ENV_FILE) -> Settings:
    """Build Settings from the environment (and env_file, when present)."""
    if env_file is not None and not Path(env_file).is_file():
        logger.warning(
            f"{env_file} file not found, using environment variables",
        )
        env_file = None
    settings = Settings(_env_file=env_file)
    if not settings.netease_cookie:
        raise ConfigMissingError("NETEASE_COOKIE")
    return settings


@lru_cache
def get_settings() -> Settings:
    return load_settings()
