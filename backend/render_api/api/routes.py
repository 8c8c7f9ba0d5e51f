import logging

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response

from ..core.errors import (
    InvalidRequestError,
    RenderApiError,
    RetryExhaustedError,
    error_response,
)
from ..services.render_request import parse_render_request
from ..services.results import Fatal, Rendered, TimedOut

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
def root():
    return "OK"


@router.get("/healthz")
def healthz():
    return {"ok": True}


@router.get("/render")
async def render(request: Request) -> Response:
    """
    Render a page in a headless browser and return its HTML.

    Query parameters:
      url       absolute http(s) URL (required)
      wait      extra settle time in ms, 0..15000
      selector  CSS selector to wait for
      timeout   navigation timeout in ms, 10000..90000
      mode      "fast" (default) blocks images/media/fonts, "full" loads everything
    """
    try:
        render_request = parse_render_request(request.query_params)
    except InvalidRequestError as e:
        logger.info(f"Rejected render request: {e.message}", extra=e.details)
        return error_response(e)

    result = await request.app.state.render_pipeline.run(render_request)

    if isinstance(result, Rendered):
        return HTMLResponse(content=result.html, status_code=200)
    if isinstance(result, TimedOut):
        return error_response(result.error or RetryExhaustedError(), detail=result.detail)
    if isinstance(result, Fatal):
        return error_response(result.error or RenderApiError(result.detail, "INTERNAL_SERVER_ERROR"))
    raise TypeError(f"Unexpected render result: {result!r}")
