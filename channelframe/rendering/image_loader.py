"""
Image loading for frame rendering.

The template comes from a local file; artwork and the placeholder are fetched
over HTTP with a bounded timeout and body size. SVG payloads are rasterized
with cairosvg before decoding. All failures surface as ImageLoadError so the
request handler can fall back to the placeholder or to template-only output.
"""

import asyncio
import io
import logging
from pathlib import Path
from typing import Optional, Tuple, Union

import httpx
from PIL import Image

from channelframe.exceptions import ImageLoadError

logger = logging.getLogger(__name__)

SVG_CONTENT_TYPE = "image/svg+xml"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024


def _decode_image(data: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(data))
    img.load()
    return img.convert("RGBA")


def _rasterize_svg(data: bytes) -> bytes:
    # Imported lazily: cairosvg needs the native cairo library at import time
    import cairosvg

    return cairosvg.svg2png(bytestring=data)


def _is_svg(url: str, content_type: str) -> bool:
    return content_type.split(";")[0].strip().lower() == SVG_CONTENT_TYPE or url.lower().split("?")[0].endswith(".svg")


class ImageLoader:
    """Loads template and remote images as RGBA Pillow images."""

    def __init__(
        self,
        timeout: float = 10.0,
        max_bytes: int = DEFAULT_MAX_BYTES,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.max_bytes = max_bytes
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            headers={"User-Agent": "channelframe/0.1"},
            transport=transport,
        )

    def load_template(self, path: Union[str, Path]) -> Image.Image:
        """Load the frame template from disk."""
        try:
            with Image.open(path) as img:
                img.load()
                return img.convert("RGBA")
        except (OSError, ValueError) as e:
            raise ImageLoadError(str(path), original_error=e) from e

    async def load_remote(self, url: str) -> Image.Image:
        """Fetch and decode an image from a URL."""
        if not url:
            raise ImageLoadError("<empty url>")

        try:
            data, content_type = await self._fetch(url)
            # Rasterizing and decoding are CPU-bound
            return await asyncio.to_thread(self._decode_payload, url, content_type, data)
        except Exception as e:
            raise ImageLoadError(url, original_error=e) from e

    async def _fetch(self, url: str) -> Tuple[bytes, str]:
        async with self._client.stream("GET", url) as response:
            response.raise_for_status()

            declared = response.headers.get("content-length")
            if declared and declared.isdigit() and int(declared) > self.max_bytes:
                raise ValueError(f"Image is {declared} bytes, limit is {self.max_bytes}")

            chunks = []
            received = 0
            async for chunk in response.aiter_bytes():
                received += len(chunk)
                if received > self.max_bytes:
                    raise ValueError(f"Image exceeds {self.max_bytes} bytes")
                chunks.append(chunk)

            return b"".join(chunks), response.headers.get("content-type", "")

    @staticmethod
    def _decode_payload(url: str, content_type: str, data: bytes) -> Image.Image:
        if _is_svg(url, content_type):
            data = _rasterize_svg(data)
        return _decode_image(data)

    async def close(self):
        """Close the HTTP client connection."""
        await self._client.aclose()
