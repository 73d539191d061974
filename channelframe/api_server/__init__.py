"""
API Server package for the channelframe endpoint.

This package provides the FastAPI application that renders channel frames, with
routers for the frame endpoint and health checks.
"""

from .server import create_app

__all__ = ["create_app"]
