"""
Frame rendering: image loading and Pillow compositing.
"""

from .frame_renderer import ArtworkPlacement, FrameRenderer, compute_artwork_placement
from .image_loader import ImageLoader

__all__ = ["ArtworkPlacement", "FrameRenderer", "compute_artwork_placement", "ImageLoader"]
