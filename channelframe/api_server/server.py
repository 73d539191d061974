"""
API Server Implementation

Builds the FastAPI application: wires the Neynar client, resolver, image loader
and renderer into the dependency container, registers routers and a last-resort
error handler, and closes HTTP clients on shutdown.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request

from channelframe import __version__
from channelframe.config import AppConfig, get_settings
from channelframe.core.channel_resolver import ChannelActivityResolver
from channelframe.integrations.neynar import NeynarAPIClient
from channelframe.rendering import FrameRenderer, ImageLoader
from .dependencies import get_dependency_container
from .routers import frame, system

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[AppConfig] = None,
    neynar_client: Optional[NeynarAPIClient] = None,
    image_loader: Optional[ImageLoader] = None,
) -> FastAPI:
    """Create the FastAPI application with its collaborators."""
    settings = settings or get_settings()

    if not settings.neynar.api_key:
        logger.warning("NEYNAR_API_KEY is not set; channel lookups will fail upstream")

    template_path = Path(settings.render.template_path)
    if not template_path.is_file():
        logger.warning(
            f"Frame template not found at {template_path.resolve()}; every render will fail "
            "until RENDER_TEMPLATE_PATH points at a PNG"
        )

    neynar_client = neynar_client or NeynarAPIClient(
        api_key=settings.neynar.api_key,
        base_url=settings.neynar.base_url,
        timeout=settings.neynar.timeout,
    )
    image_loader = image_loader or ImageLoader(
        timeout=settings.render.image_timeout,
        max_bytes=settings.render.max_image_bytes,
    )
    renderer = FrameRenderer(
        max_artwork_size=settings.render.max_artwork_size,
        shift_up=settings.render.shift_up,
        shift_right=settings.render.shift_right,
    )

    get_dependency_container().initialize(
        settings=settings,
        resolver=ChannelActivityResolver(neynar_client),
        image_loader=image_loader,
        renderer=renderer,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting channelframe API v{__version__}")
        yield
        logger.info("Shutting down...")
        await neynar_client.close()
        await image_loader.close()

    app = FastAPI(
        title="Channelframe API",
        description="Renders a frame showing the Farcaster channel an address posts in most",
        version=__version__,
        lifespan=lifespan,
    )

    app.include_router(system.router)
    app.include_router(frame.router)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return frame.internal_error_response()

    return app
