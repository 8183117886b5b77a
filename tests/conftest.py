import random
import struct
import zlib
from collections.abc import AsyncIterator
from io import BytesIO

import pytest
from httpx import ASGITransport, AsyncClient
from PIL import Image

from artserve.main import app


@pytest.fixture
async def client() -> AsyncIterator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def _png_chunk(cid: bytes, data: bytes) -> bytes:
    return struct.pack(">I", len(data)) + cid + data + struct.pack(">I", zlib.crc32(cid + data) & 0xFFFFFFFF)


@pytest.fixture
def corrupt_png() -> bytes:
    """A PNG with a valid header whose second data chunk has a broken type."""
    width, height = 64, 64
    rng = random.Random(0)
    raw = b"".join(b"\x00" + rng.randbytes(width * 3) for _ in range(height))
    compressed = zlib.compress(raw)
    half = len(compressed) // 2
    return (
        b"\x89PNG\r\n\x1a\n"
        + _png_chunk(b"IHDR", struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0))
        + _png_chunk(b"IDAT", compressed[:half])
        + _png_chunk(b"\x01\x02\x03\x04", compressed[half:])
        + _png_chunk(b"IEND", b"")
    )


@pytest.fixture
def truncated_jpeg() -> bytes:
    rng = random.Random(0)
    img = Image.frombytes("RGB", (128, 128), rng.randbytes(128 * 128 * 3))
    buffer = BytesIO()
    img.save(buffer, format="JPEG", quality=90)
    data = buffer.getvalue()
    return data[: len(data) // 2]
