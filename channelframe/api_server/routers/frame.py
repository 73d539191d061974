"""
Frame router - renders the most active channel frame for an address.

GET /?address=0x... returns image/png on success, or a JSON error body:
400 (missing/invalid address), 429 (upstream rate limit), 503 (upstream
unavailable) or 500 (anything unexpected).
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, Response
from PIL import Image

from channelframe.config import AppConfig
from channelframe.core.channel_resolver import ChannelActivityResolver
from channelframe.core.models import MostActiveChannelImage
from channelframe.exceptions import (
    ChannelLookupError,
    ImageLoadError,
    InvalidAddressError,
    NeynarRateLimitError,
)
from channelframe.rendering import FrameRenderer, ImageLoader
from channelframe.utils.logging_config import get_logger
from ..dependencies import get_image_loader, get_renderer, get_resolver, get_settings

logger = logging.getLogger(__name__)
request_log = get_logger("channelframe.requests")

router = APIRouter(tags=["frame"])

RATE_LIMIT_RETRY_AFTER = 60
UNAVAILABLE_RETRY_AFTER = 30


def _iso_in(seconds: int) -> str:
    """UTC ISO-8601 timestamp `seconds` from now, millisecond precision with 'Z'."""
    reset_at = datetime.now(timezone.utc) + timedelta(seconds=seconds)
    return reset_at.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def rate_limited_response() -> JSONResponse:
    return JSONResponse(
        status_code=429,
        headers={
            "Retry-After": str(RATE_LIMIT_RETRY_AFTER),
            "X-RateLimit-Reset": _iso_in(RATE_LIMIT_RETRY_AFTER),
        },
        content={
            "error": "Rate limit exceeded. Please try again later.",
            "retryAfter": RATE_LIMIT_RETRY_AFTER,
            "message": "Too many requests to external API. Please wait before retrying.",
        },
    )


def invalid_address_response() -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid Ethereum address provided",
            "message": "Please provide a valid Ethereum address in 0x format.",
        },
    )


def upstream_unavailable_response() -> JSONResponse:
    return JSONResponse(
        status_code=503,
        headers={"Retry-After": str(UNAVAILABLE_RETRY_AFTER)},
        content={
            "error": "External API service temporarily unavailable. Please try again later.",
            "message": "The external API is currently experiencing issues. Please retry in 30 seconds.",
        },
    )


def internal_error_response() -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": "An unexpected error occurred while processing your request.",
        },
    )


async def load_artwork(
    loader: ImageLoader,
    result: Optional[MostActiveChannelImage],
    placeholder_url: str,
) -> Optional[Image.Image]:
    """
    Pick the artwork for the frame.

    Channel image first, then the placeholder. Returns None when neither loads,
    in which case the frame is rendered from the template alone.
    """
    if result is not None and result.channel_image_url:
        try:
            return await loader.load_remote(result.channel_image_url)
        except ImageLoadError as e:
            logger.error(f"Error loading artwork image: {e}")

    try:
        return await loader.load_remote(placeholder_url)
    except ImageLoadError as e:
        logger.error(f"Error loading placeholder image: {e}")
        return None


@router.get("/", response_model=None)
async def render_frame(
    address: Optional[str] = Query(None, description="0x-prefixed Ethereum address"),
    settings: AppConfig = Depends(get_settings),
    resolver: ChannelActivityResolver = Depends(get_resolver),
    loader: ImageLoader = Depends(get_image_loader),
    renderer: FrameRenderer = Depends(get_renderer),
):
    """Render the frame PNG for the address's most active Farcaster channel."""
    try:
        if not address:
            return JSONResponse(
                status_code=400, content={"error": "Valid Ethereum address is required"}
            )

        template = await asyncio.to_thread(loader.load_template, settings.render.template_path)

        try:
            result = await resolver.resolve(address)
        except NeynarRateLimitError as e:
            logger.warning(f"Rate limited while resolving channel: {e}")
            return rate_limited_response()
        except InvalidAddressError:
            return invalid_address_response()
        except ChannelLookupError as e:
            logger.error(f"API Error ({e.kind.value}): {e}")
            return upstream_unavailable_response()

        artwork = await load_artwork(loader, result, settings.render.placeholder_url)
        png = await asyncio.to_thread(renderer.render, template, artwork)

        request_log.info(
            "frame_rendered",
            address=address,
            channel_id=result.channel_id if result else None,
            has_artwork=artwork is not None,
            size_bytes=len(png),
        )
        return Response(
            content=png,
            media_type="image/png",
            headers={
                "Cache-Control": f"public, max-age={settings.render.cache_max_age}",
                "X-Content-Type-Options": "nosniff",
                "X-Frame-Options": "DENY",
            },
        )
    except Exception as e:
        logger.error(f"Error processing request: {e}", exc_info=True)
        return internal_error_response()
