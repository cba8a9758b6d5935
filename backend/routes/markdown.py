"""Tiered markdown route — unified proxy for all backend markdown endpoints.

Query parameters:
    type: independant | dependant-without-sub | dependant-with-sub (required)
    tiers_level: DISCOVER | INTELLIGENCE | ORACLE (defaults to DISCOVER for dependant types)
    category, sub_category, root_folder, markdown_name: forwarded as given
"""

from fastapi import APIRouter, Request, Response
from fastapi.responses import StreamingResponse

from routes.vignettes import SSE_HEADERS

router = APIRouter()


@router.get("/markdown")
async def markdown(request: Request) -> Response:
    service = request.app.state.markdown_service
    result = await service.fetch(
        request.query_params.get("type"),
        request.query_params.multi_items(),
    )
    if result.stream is not None:
        return StreamingResponse(result.stream, media_type=result.content_type, headers=SSE_HEADERS)
    return Response(content=result.body, media_type=result.content_type)
