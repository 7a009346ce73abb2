"""Music Service Client — wraps httpx.AsyncClient for the upstream song-URL API.

Invariants:
    - Exactly one GET per call: no retries, no custom headers, no request body
    - Transport failures and timeouts (connect or read) → UpstreamUnreachableError
    - Any other failure while reading the body → UpstreamReadError
    - The upstream HTTP status is not interpreted here; only the JSON body matters

Design Decisions:
    - Single shared AsyncClient: connection pooling across requests, closed on shutdown
    - Transport injectable: tests plug in httpx.MockTransport instead of patching
    - Bounded timeout is an addition over the original relay, which had none;
      timeout_seconds=0 restores the unbounded behavior
"""

import logging

import httpx

from pms.core.errors import (
    ErrorContext,
    UpstreamReadError,
    UpstreamUnreachableError,
)
from pms.core.song_request import UpstreamQuery

logger = logging.getLogger(__name__)

# httpx logs every request URL at INFO; ours carry the account cookie in the query string
logging.getLogger("httpx").setLevel(logging.WARNING)


class MusicServiceClient:
    """Issues the outbound /song/url/v1 call and maps failures to PmsError."""

    def __init__(
        self,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        timeout = httpx.Timeout(timeout_seconds) if timeout_seconds > 0 else httpx.Timeout(None)
        self.client = httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    async def fetch_song_url(
        self, query: UpstreamQuery, context: ErrorContext | None = None,
    ) -> bytes:
        """GET the song URL endpoint and return the raw response body."""
        ctx = context or ErrorContext()
        try:
            async with self.client.stream("GET", query.url) as response:
                body = await self._read_body(response, ctx)
        except (httpx.RequestError, httpx.InvalidURL) as e:
            ctx.debug_info = {"cause": f"{type(e).__name__}: {e}"}
            raise UpstreamUnreachableError(ctx) from e

        logger.debug(
            "Music service responded",
            extra={"status_code": response.status_code, "song_id": query.song_id},
        )
        return body

    async def _read_body(self, response: httpx.Response, ctx: ErrorContext) -> bytes:
        try:
            return await response.aread()
        except httpx.TimeoutException:
            raise
        except httpx.HTTPError as e:
            ctx.debug_info = {
                "cause": f"{type(e).__name__}: {e}",
                "upstream_status": response.status_code,
            }
            raise UpstreamReadError(ctx) from e

    async def aclose(self) -> None:
        await self.client.aclose()
