"""ThingSpeak channel client with bounded retry.

One call fetches the channel's latest entry. The URL names field 1 but
ThingSpeak returns the whole channel record, so a single fetch serves any of
the eight fields.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable
from urllib.parse import quote

import httpx

from errors import UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.thingspeak.com"
USER_AGENT = "ThingSpeak-Proxy/1.0"

ATTEMPT_TIMEOUT_SECONDS = 5.0
RETRY_DELAY_SECONDS = 1.0
DEFAULT_MAX_ATTEMPTS = 3


class ThingSpeakFetcher:
    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = DEFAULT_BASE_URL,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        timeout: float = ATTEMPT_TIMEOUT_SECONDS,
        retry_delay: float = RETRY_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.max_attempts = max_attempts
        self.timeout = timeout
        self.retry_delay = retry_delay
        self._sleep = sleep

    def channel_url(self, channel: str) -> str:
        return f"{self.base_url}/channels/{quote(channel, safe='')}/fields/1.json"

    async def fetch(self, channel: str, api_key: str) -> dict[str, Any]:
        """Fetch the latest record for a channel.

        Connection errors and timeouts are retried after a fixed delay until
        ``max_attempts`` is used up. A non-200 status or an unparseable body
        fails immediately, as does a channel that cannot form a valid URL.

        ``timeout`` is httpx's per-phase limit: connect, write and read each
        get the full budget, so it bounds idle time rather than the total
        time to response headers.

        Raises:
            UpstreamError: with the reason of the last failed attempt.
        """
        attempt = 1
        while True:
            try:
                return await self._attempt(channel, api_key)
            except UpstreamError as e:
                if not e.retriable or attempt >= self.max_attempts:
                    raise
                logger.warning(
                    "Retry attempt %d/%d for channel %s after %s: %s",
                    attempt, self.max_attempts - 1, channel, e.reason, e,
                )
            attempt += 1
            await self._sleep(self.retry_delay)

    async def _attempt(self, channel: str, api_key: str) -> dict[str, Any]:
        try:
            resp = await self.client.get(
                self.channel_url(channel),
                params={"results": 1, "api_key": api_key},
                headers={"User-Agent": USER_AGENT},
                timeout=self.timeout,
            )
        except httpx.InvalidURL as e:
            raise UpstreamError(UpstreamError.INVALID_URL, f"Invalid upstream URL: {e}") from e
        except httpx.TimeoutException as e:
            raise UpstreamError(UpstreamError.TIMEOUT, "Request timeout") from e
        except httpx.TransportError as e:
            raise UpstreamError(UpstreamError.NETWORK_ERROR, str(e) or type(e).__name__) from e

        if resp.status_code != 200:
            raise UpstreamError(
                UpstreamError.HTTP_STATUS, f"HTTP {resp.status_code}", upstream_status=resp.status_code
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamError(UpstreamError.PARSE_ERROR, "Failed to parse JSON response") from e

        if not isinstance(data, dict) or not isinstance(data.get("channel"), dict):
            raise UpstreamError(UpstreamError.PARSE_ERROR, "Response has no channel object")
        return data
