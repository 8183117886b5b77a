import re

import structlog

from artserve.core.exceptions import FetchError, ValidationError

logger = structlog.get_logger()

IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "bmp", "webp", "tiff")

IMAGE_URL_RE = re.compile(rf"\.({'|'.join(IMAGE_EXTENSIONS)})(\?.*)?$", re.IGNORECASE)


def is_image_url(url: str) -> bool:
    return IMAGE_URL_RE.search(url) is not None


def validate_image_url(url: str) -> None:
    if not is_image_url(url):
        logger.warning("url_validation_failed", url=url)
        raise ValidationError("Provided URL is not an image file.")


def extract_filename(url: str) -> str:
    """Return the last path segment of ``url`` without its query string.

    Only a plain file-name token is accepted: empty names, ``.``/``..`` and
    anything containing a separator or NUL byte are rejected.
    """
    name = url.rsplit("/", 1)[-1].split("?", 1)[0]
    if not name or name in (".", "..") or "\\" in name or "\x00" in name:
        raise FetchError(f"Failed to extract a valid filename from URL: {url}")
    return name
