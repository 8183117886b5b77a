from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from artserve.api.router import router
from artserve.config import settings
from artserve.core.exceptions import AppError
from artserve.core.logging import configure_logging
from artserve.services import image_fetcher, image_storage

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging(settings.log_level)
    if settings.save_images:
        images_dir = image_storage.get_image_store().ensure_dir()
        logger.info("images_dir_ready", path=str(images_dir))
    logger.info("service_started", host=settings.host, port=settings.port)
    yield
    await image_fetcher.close_client()
    logger.info("service_stopped")


async def app_error_handler(request: Request, exc: AppError) -> PlainTextResponse:
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, status=exc.status_code, error=exc.detail)
    else:
        logger.warning("request_rejected", path=request.url.path, status=exc.status_code, error=exc.detail)
    return PlainTextResponse(exc.detail, status_code=exc.status_code)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore[arg-type]
    app.include_router(router)
    return app


app = create_app()


def run() -> None:
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level)


if __name__ == "__main__":
    run()
