"""Unified proxy for the tiered markdown documents of the Prophetic backend.

The backend answers either with an SSE stream or with a plain JSON/text
body; both are passed through untouched. Query parameters other than
``type`` are forwarded as given.
"""

import logging
from dataclasses import dataclass
from typing import AsyncIterator

import httpx

from config import Settings
from errors import ClientInputError, ConfigurationError
from services.prophetic_client import client_from_settings, relay

logger = logging.getLogger(__name__)

MARKDOWN_PATHS = {
    "independant": "/prophetic/markdown/tiers-independant",
    "dependant-without-sub": "/prophetic/markdown/tiers-dependant/without-sub-category",
    "dependant-with-sub": "/prophetic/markdown/tiers-dependant/with-sub-category",
}
DEFAULT_TIERS_LEVEL = "DISCOVER"


@dataclass
class MarkdownResult:
    """Either ``stream`` (SSE) or ``body`` is set."""

    content_type: str
    stream: AsyncIterator[bytes] | None = None
    body: bytes | None = None


class MarkdownService:
    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self._transport = transport

    async def fetch(self, markdown_type: str | None, params: list[tuple[str, str]]) -> MarkdownResult:
        missing = self.settings.validate()
        if missing:
            logger.error("API configuration missing: %s", ", ".join(missing))
            raise ConfigurationError("API configuration missing")
        if not markdown_type:
            raise ClientInputError(
                "Markdown type (independant, dependant-without-sub, dependant-with-sub) is required"
            )
        path = MARKDOWN_PATHS.get(markdown_type)
        if path is None:
            raise ClientInputError("Invalid markdown type")

        query = [(k, v) for k, v in params if k != "type"]
        if markdown_type.startswith("dependant") and not any(k == "tiers_level" for k, _ in query):
            query.append(("tiers_level", DEFAULT_TIERS_LEVEL))

        client = client_from_settings(self.settings, self._transport)
        try:
            response = await client.open_tiered_markdown(path, query)
            content_type = response.headers.get("content-type")
            if content_type and "text/event-stream" in content_type:
                logger.info("Forwarding %s markdown SSE stream", markdown_type)
                return MarkdownResult(content_type="text/event-stream", stream=relay(client, response))

            await response.aread()
            await response.aclose()
        except BaseException:
            await client.close()
            raise
        await client.close()
        return MarkdownResult(content_type=content_type or "application/json", body=response.content)
