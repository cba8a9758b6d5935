"""Vignette routes — cached category lookups and markdown SSE passthrough."""

import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse

from services.vignettes import VignetteService

logger = logging.getLogger(__name__)

router = APIRouter()

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def get_vignette_service(request: Request) -> VignetteService:
    return request.app.state.vignette_service


@router.get("/vignettes")
async def vignettes(
    category: str | None = Query(None),
    service: VignetteService = Depends(get_vignette_service),
):
    """Vignettes for one category, e.g. GET /vignettes?category=WINE."""
    return await service.get_vignettes(category)


@router.get("/vignettes/markdown")
async def vignette_markdown(
    markdown: str | None = Query(None),
    service: VignetteService = Depends(get_vignette_service),
) -> StreamingResponse:
    """Forward the backend's SSE stream (document, questions_chunk, done events) as it arrives."""
    stream = await service.stream_markdown(markdown)
    logger.info("Forwarding markdown SSE stream for %s", markdown)
    return StreamingResponse(stream, media_type="text/event-stream", headers=SSE_HEADERS)
