"""
API routers for the channelframe server.
"""

from . import frame, system

__all__ = ["frame", "system"]
