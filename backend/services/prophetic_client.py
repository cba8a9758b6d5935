"""Async httpx client for the Prophetic backend.

Auth is a static bearer token sent on every request. The client performs
no retries: a non-success status is raised as UpstreamError with the
upstream status code attached, so routes can forward it verbatim.
"""

import logging
from typing import Any, AsyncIterator

import httpx

from config import Settings
from errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

VIGNETTES_PATH = "/prophetic/vignettes"
MARKDOWN_PATH = "/prophetic/vignettes/markdown"


class PropheticClient:
    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        kwargs: dict[str, Any] = {
            "base_url": base_url,
            "timeout": timeout,
            "headers": {"Authorization": f"Bearer {token}"},
        }
        if transport is not None:
            kwargs["transport"] = transport
        self._client = httpx.AsyncClient(**kwargs)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "PropheticClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def get_vignettes(self, category: str) -> Any:
        """Fetch the vignette list for one category and return the parsed JSON body."""
        logger.info("Fetching vignettes from %s%s?category=%s", self._client.base_url, VIGNETTES_PATH, category)
        response = await self._client.get(
            VIGNETTES_PATH,
            params={"category": category},
            headers={"Content-Type": "application/json"},
        )
        if not response.is_success:
            logger.error("Vignettes backend error %d: %s", response.status_code, response.text)
            raise UpstreamError("Failed to fetch vignettes from backend", response.status_code)
        return response.json()

    async def open_markdown_stream(self, markdown: str) -> httpx.Response:
        """Open the SSE stream for a vignette markdown document.

        The returned response has not been read; the caller owns it and must
        close it once the stream is drained.
        """
        response = await self.open_stream(MARKDOWN_PATH, {"markdown": markdown})
        if not response.is_success:
            await _discard(response)
            logger.error("Markdown backend error %d: %s", response.status_code, response.text)
            raise UpstreamError("Failed to fetch markdown from backend", response.status_code)
        return response

    async def open_tiered_markdown(self, path: str, params: list[tuple[str, str]]) -> httpx.Response:
        """Open a tiered markdown document, SSE or plain body depending on the backend.

        On failure the backend's own error body is forwarded: its JSON when it
        parses, otherwise ``{"error": <text>}``.
        """
        response = await self.open_stream(path, params)
        if not response.is_success:
            await _discard(response)
            logger.error("Markdown proxy backend error %d: %s", response.status_code, response.text)
            try:
                body = response.json()
            except ValueError:
                body = {"error": response.text or "Failed to fetch content"}
            raise UpstreamError("Failed to fetch content", response.status_code, body=body)
        return response

    async def open_stream(self, path: str, params) -> httpx.Response:
        logger.info("Opening stream %s%s", self._client.base_url, path)
        request = self._client.build_request(
            "GET",
            path,
            params=params,
            headers={"Accept": "text/event-stream"},
        )
        return await self._client.send(request, stream=True)


def client_from_settings(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> PropheticClient:
    """Build a client, or raise ConfigurationError naming the missing setting."""
    if not settings.prophetic_api_url:
        logger.error("PROPHETIC_API_URL not configured")
        raise ConfigurationError("API URL not configured")
    if not settings.prophetic_api_token:
        logger.error("PROPHETIC_API_TOKEN not configured")
        raise ConfigurationError("API token not configured")
    return PropheticClient(
        base_url=settings.prophetic_api_url,
        token=settings.prophetic_api_token,
        timeout=settings.upstream_timeout,
        transport=transport,
    )


async def relay(client: PropheticClient, response: httpx.Response) -> AsyncIterator[bytes]:
    """Yield the decoded body of an open response, then close it and its client.

    Bytes are content-decoded: the downstream response carries no
    Content-Encoding of its own.
    """
    try:
        async for chunk in response.aiter_bytes():
            yield chunk
    finally:
        await response.aclose()
        await client.close()


async def _discard(response: httpx.Response) -> None:
    await response.aread()
    await response.aclose()
