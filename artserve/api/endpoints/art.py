import html

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response

from artserve.config import settings
from artserve.services import art_pipeline, client_classifier
from artserve.services.client_classifier import ClientKind

logger = structlog.get_logger()

router = APIRouter()

TERMINAL_ONLY_MESSAGE = "This service only supports terminal clients such as curl or wget.\n"


def _embedded_url(request: Request, url: str) -> str:
    query = request.url.query
    return f"{url}?{query}" if query else url


@router.get("/{url:path}")
async def render_art(request: Request, url: str) -> Response:
    classify = client_classifier.get_classifier(settings.client_classifier)
    kind = classify(request.headers)

    if settings.terminal_only and kind is not ClientKind.TERMINAL:
        logger.info("non_terminal_client_rejected", client=kind.value)
        return PlainTextResponse(TERMINAL_ONLY_MESSAGE, status_code=403)

    target = _embedded_url(request, url)
    colored = client_classifier.wants_color(kind)
    art = await art_pipeline.url_to_art(target, colored=colored)

    if colored:
        logger.info("art_served", url=target, format="text")
        return PlainTextResponse(art)
    logger.info("art_served", url=target, format="html")
    return HTMLResponse(f"<pre>{html.escape(art)}</pre>")
