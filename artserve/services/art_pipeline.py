import structlog
from fastapi.concurrency import run_in_threadpool

from artserve.config import settings
from artserve.services import image_fetcher, image_storage, renderer, url_validator

logger = structlog.get_logger()


async def url_to_art(url: str, *, colored: bool) -> str:
    """Validate, download and render the image behind ``url``.

    When ``settings.save_images`` is on the download is also written to the
    image store. Rendering always works from the downloaded bytes, so a saved
    file being replaced or pruned by another request does not affect this one.
    """
    url_validator.validate_image_url(url)

    if settings.save_images:
        filename = url_validator.extract_filename(url)
        image_bytes = await image_fetcher.fetch_image(url)
        store = image_storage.get_image_store()
        await run_in_threadpool(store.save, filename, image_bytes)
    else:
        image_bytes = await image_fetcher.fetch_image(url)

    logger.info("image_render_started", url=url, colored=colored)
    return await run_in_threadpool(renderer.render, image_bytes, colored=colored)
