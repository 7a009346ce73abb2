"""Root conftest — shared test configuration."""

import os

import pytest

from pms.config import Settings

# Ensure tests never pick up a real account cookie
os.environ.setdefault("NETEASE_COOKIE", "MUSIC_U=test-cookie")

TEST_COOKIE = "MUSIC_U=test-cookie"
TEST_UPSTREAM = "https://music.test"


@pytest.fixture
def settings() -> Settings:
    """Deterministic settings, independent of the process environment."""
    return Settings(
        _env_file=None,
        port="8080",
        netease_music_api=TEST_UPSTREAM,
        netease_cookie=TEST_COOKIE,
        real_ip="116.25.146.177",
        level="exhigh",
        upstream_timeout_seconds=5.0,
    )
