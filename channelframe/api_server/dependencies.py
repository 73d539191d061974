"""
Centralized dependency injection for the API server.

The container is filled once by create_app(); routes pull collaborators through
the get_* functions so tests can swap them with app.dependency_overrides.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException

from channelframe.config import AppConfig
from channelframe.core.channel_resolver import ChannelActivityResolver
from channelframe.rendering import FrameRenderer, ImageLoader

logger = logging.getLogger(__name__)


class DependencyContainer:
    """Container for managing application dependencies."""

    def __init__(self):
        self._settings: Optional[AppConfig] = None
        self._resolver: Optional[ChannelActivityResolver] = None
        self._image_loader: Optional[ImageLoader] = None
        self._renderer: Optional[FrameRenderer] = None
        self._initialized = False

    def initialize(
        self,
        settings: AppConfig,
        resolver: ChannelActivityResolver,
        image_loader: ImageLoader,
        renderer: FrameRenderer,
    ):
        """Initialize the container with concrete instances."""
        self._settings = settings
        self._resolver = resolver
        self._image_loader = image_loader
        self._renderer = renderer
        self._initialized = True
        logger.info("Dependency container initialized")

    @property
    def settings(self) -> AppConfig:
        if not self._initialized or not self._settings:
            raise HTTPException(status_code=500, detail="Settings not configured")
        return self._settings

    @property
    def resolver(self) -> ChannelActivityResolver:
        if not self._initialized or not self._resolver:
            raise HTTPException(status_code=500, detail="Resolver not configured")
        return self._resolver

    @property
    def image_loader(self) -> ImageLoader:
        if not self._initialized or not self._image_loader:
            raise HTTPException(status_code=500, detail="Image loader not configured")
        return self._image_loader

    @property
    def renderer(self) -> FrameRenderer:
        if not self._initialized or not self._renderer:
            raise HTTPException(status_code=500, detail="Renderer not configured")
        return self._renderer

    def get_health_status(self) -> Dict[str, Any]:
        """Get health status of all dependencies."""
        return {
            "initialized": self._initialized,
            "resolver_ready": self._resolver is not None,
            "image_loader_ready": self._image_loader is not None,
            "renderer_ready": self._renderer is not None,
        }


# Global dependency container
_container = DependencyContainer()


def get_dependency_container() -> DependencyContainer:
    """Get the global dependency container."""
    return _container


def get_settings(
    container: DependencyContainer = Depends(get_dependency_container)
) -> AppConfig:
    return container.settings


def get_resolver(
    container: DependencyContainer = Depends(get_dependency_container)
) -> ChannelActivityResolver:
    return container.resolver


def get_image_loader(
    container: DependencyContainer = Depends(get_dependency_container)
) -> ImageLoader:
    return container.image_loader


def get_renderer(
    container: DependencyContainer = Depends(get_dependency_container)
) -> FrameRenderer:
    return container.renderer
