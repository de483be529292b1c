"""Resolve one field of a channel's latest reading through the record cache."""

import logging
from typing import Any

from errors import ResolutionError, UpstreamError
from services.cache import LookupKey, RecordCache
from services.thingspeak import ThingSpeakFetcher

logger = logging.getLogger(__name__)

FIELD_MIN = 1
FIELD_MAX = 8
MISSING_FIELD_VALUE = "0"


def extract_field(record: dict[str, Any], field: int) -> str:
    """Return ``field{N}`` of the record's channel, or "0" when absent or empty."""
    value = record.get("channel", {}).get(f"field{field}")
    if value is None or value == "":
        return MISSING_FIELD_VALUE
    return str(value)


class FieldResolver:
    def __init__(self, cache: RecordCache, fetcher: ThingSpeakFetcher):
        self.cache = cache
        self.fetcher = fetcher

    async def resolve(self, channel: str, api_key: str, field: int) -> str:
        """Return the latest value of ``field`` for a channel.

        Serves a fresh cache entry without contacting ThingSpeak. Otherwise
        fetches and caches the record; if that fails, any cached record for
        the key is used however old it is.

        Raises:
            ResolutionError: the fetch failed and nothing is cached for the key.
        """
        if not FIELD_MIN <= field <= FIELD_MAX:
            raise ValueError(f"field must be between {FIELD_MIN} and {FIELD_MAX}, got {field}")

        key = LookupKey(channel=channel, api_key=api_key)

        entry = self.cache.get_fresh(key)
        if entry is not None:
            value = extract_field(entry.record, field)
            logger.info("[CACHED] channel:%s field%d = %s", channel, field, value)
            return value

        try:
            record = await self.fetcher.fetch(channel, api_key)
        except UpstreamError as e:
            logger.error("ThingSpeak request error for channel %s (%s): %s", channel, e.reason, e)
            entry = self.cache.get(key)
            if entry is None:
                raise ResolutionError(channel) from e
            value = extract_field(entry.record, field)
            logger.info("[STALE CACHE] channel:%s field%d = %s", channel, field, value)
            return value

        self.cache.set(key, record)
        value = extract_field(record, field)
        logger.info("channel:%s field%d = %s", channel, field, value)
        return value
