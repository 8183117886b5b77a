import httpx
import structlog

from artserve.config import settings
from artserve.core.exceptions import FetchError

logger = structlog.get_logger()

_client: httpx.AsyncClient | None = None


def get_http_client() -> httpx.AsyncClient:
    global _client
    if _client is None:
        _client = httpx.AsyncClient(
            timeout=settings.fetch_timeout,
            follow_redirects=True,
        )
    return _client


def _check_content_length(response: httpx.Response, max_bytes: int) -> None:
    content_length = response.headers.get("Content-Length")
    if content_length is None:
        return
    try:
        declared = int(content_length)
    except ValueError:
        return
    if declared > max_bytes:
        raise FetchError(f"Failed to download image: body of {declared} bytes exceeds limit of {max_bytes} bytes")


async def fetch_image(url: str) -> bytes:
    """Download ``url`` in a single attempt and return the body bytes.

    Raises :class:`FetchError` on connection failures, non-2xx responses and
    bodies larger than ``settings.max_fetch_bytes``.
    """
    client = get_http_client()
    max_bytes = settings.max_fetch_bytes
    try:
        async with client.stream("GET", url) as response:
            if not response.is_success:
                raise FetchError(
                    f"Failed to download image: HTTP {response.status_code} {response.reason_phrase}".rstrip(),
                    upstream_status=response.status_code,
                )
            _check_content_length(response, max_bytes)
            buffer = bytearray()
            async for chunk in response.aiter_bytes():
                buffer.extend(chunk)
                if len(buffer) > max_bytes:
                    raise FetchError(f"Failed to download image: body exceeds limit of {max_bytes} bytes")
    except FetchError as e:
        logger.error("image_fetch_failed", url=url, error=e.detail)
        raise
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.error("image_fetch_failed", url=url, error=str(e))
        raise FetchError(f"Failed to send HTTP request: {e}") from e

    logger.info("image_downloaded", url=url, size=len(buffer))
    return bytes(buffer)


async def close_client() -> None:
    global _client
    if _client:
        await _client.aclose()
        _client = None
