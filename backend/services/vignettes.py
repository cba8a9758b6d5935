"""Vignette lookups: cache first, Prophetic backend on miss.

A cache hit never touches the backend, not even the configuration check.
Concurrent misses for the same category may both reach the backend; the
later set() wins.
"""

import logging
from typing import Any, AsyncIterator

import httpx

from config import Settings
from errors import ClientInputError
from services.cache import TTLCache
from services.prophetic_client import client_from_settings, relay

logger = logging.getLogger(__name__)


class VignetteService:
    def __init__(
        self,
        settings: Settings,
        cache: TTLCache,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.cache = cache
        self._transport = transport

    async def get_vignettes(self, category: str | None) -> Any:
        if not category:
            raise ClientInputError("Category parameter is required")
        key = category.upper()

        entry = self.cache.get(key)
        if entry is not None:
            logger.debug("Vignette cache hit for %s", key)
            return entry.payload
        logger.debug("Vignette cache miss for %s", key)

        async with client_from_settings(self.settings, self._transport) as client:
            data = await client.get_vignettes(key)

        count = _vignette_count(data)
        self.cache.set(key, data)
        logger.info("Fetched %d vignettes for %s", count, key)
        return data

    async def stream_markdown(self, markdown: str | None) -> AsyncIterator[bytes]:
        """Open the backend SSE stream and return an iterator relaying its bytes."""
        if not markdown:
            raise ClientInputError("Markdown parameter is required")

        client = client_from_settings(self.settings, self._transport)
        try:
            response = await client.open_markdown_stream(markdown)
        except BaseException:
            await client.close()
            raise
        return relay(client, response)


def _vignette_count(data: Any) -> int:
    vignettes = data.get("vignettes") if isinstance(data, dict) else None
    return len(vignettes) if isinstance(vignettes, list) else 0
