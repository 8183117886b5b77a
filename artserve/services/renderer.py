from io import BytesIO
from pathlib import Path

import structlog
from PIL import Image

from artserve.config import settings
from artserve.core.exceptions import RenderError

logger = structlog.get_logger()

BLOCK_CHARSET = (" ", "░", "▒", "▓", "█")

# Terminal cells are roughly twice as tall as they are wide.
CHAR_ASPECT = 2.0

ANSI_RESET = "\x1b[0m"


def decode_image(source: bytes | Path) -> Image.Image:
    try:
        img = Image.open(BytesIO(source) if isinstance(source, bytes) else source)
        img.load()
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        logger.error("image_decode_failed", error=str(e))
        raise RenderError(f"Failed to load image: {e}") from e
    return img


def _target_size(width: int, height: int, rows: int, max_columns: int | None = None) -> tuple[int, int]:
    columns = max(1, round(width / height * rows * CHAR_ASPECT))
    if max_columns is not None:
        columns = min(columns, max_columns)
    return columns, rows


def _glyph(r: int, g: int, b: int, a: int, charset: tuple[str, ...]) -> str:
    luminance = (0.2126 * r + 0.7152 * g + 0.0722 * b) * a / 255
    index = round(luminance / 255 * (len(charset) - 1))
    return charset[index]


def render_image(
    image: Image.Image,
    *,
    height: int = 30,
    colored: bool = True,
    max_width: int | None = None,
    charset: tuple[str, ...] = BLOCK_CHARSET,
) -> str:
    """Render ``image`` as ``height`` rows of block characters.

    With ``colored`` every glyph is wrapped in a 24-bit ANSI foreground
    escape. Every row, including the last, ends with a newline. Very wide
    images are squeezed to ``max_width`` columns.
    """
    rgba = image.convert("RGBA")
    size = _target_size(rgba.width, rgba.height, height, max_width)
    resized = rgba.resize(size, Image.Resampling.BILINEAR)
    pixels = resized.load()

    lines = []
    for y in range(resized.height):
        row = []
        for x in range(resized.width):
            r, g, b, a = pixels[x, y]
            glyph = _glyph(r, g, b, a, charset)
            if colored:
                row.append(f"\x1b[38;2;{r};{g};{b}m{glyph}{ANSI_RESET}")
            else:
                row.append(glyph)
        lines.append("".join(row) + "\n")
    return "".join(lines)


def render(source: bytes | Path, *, colored: bool, height: int | None = None) -> str:
    image = decode_image(source)
    try:
        art = render_image(
            image,
            height=height or settings.render_height,
            colored=colored,
            max_width=settings.max_render_width,
        )
    except (OSError, ValueError) as e:
        logger.error("image_render_failed", error=str(e))
        raise RenderError(f"Failed to render image: {e}") from e
    logger.debug("image_rendered", width=image.width, height=image.height, colored=colored)
    return art
