"""
Frame compositing with Pillow.

The canvas takes the template's size. Artwork, when present, is fitted into a
square box, centred, nudged up and right, and outlined with a faint white border.
"""

import io
from dataclasses import dataclass
from typing import Optional

from PIL import Image, ImageDraw

BORDER_COLOR = (255, 255, 255, round(255 * 0.3))
BORDER_WIDTH = 2
BORDER_OFFSET = 2


@dataclass(frozen=True)
class ArtworkPlacement:
    """Where the artwork is drawn on the canvas, in canvas units."""
    x: float
    y: float
    width: float
    height: float

    def rounded_box(self) -> tuple:
        left = round(self.x)
        top = round(self.y)
        return left, top, max(1, round(self.width)), max(1, round(self.height))


def compute_artwork_placement(
    art_width: int,
    art_height: int,
    canvas_width: int,
    canvas_height: int,
    max_size: int = 670,
    shift_up: float = 28.5,
    shift_right: float = 0.1,
) -> ArtworkPlacement:
    """
    Fit artwork inside a max_size square keeping its aspect ratio.

    Width is tried first; if the resulting height overflows, height is clamped
    and width recomputed. The box is centred on the canvas, then shifted.
    """
    if art_width <= 0 or art_height <= 0:
        raise ValueError(f"Invalid artwork dimensions {art_width}x{art_height}")

    aspect_ratio = art_width / art_height
    display_width = float(max_size)
    display_height = max_size / aspect_ratio
    if display_height > max_size:
        display_height = float(max_size)
        display_width = max_size * aspect_ratio

    x = (canvas_width - display_width) / 2 + shift_right
    y = (canvas_height - display_height) / 2 - shift_up
    return ArtworkPlacement(x=x, y=y, width=display_width, height=display_height)


class FrameRenderer:
    """Composites artwork onto the frame template and encodes PNG."""

    def __init__(self, max_artwork_size: int = 670, shift_up: float = 28.5, shift_right: float = 0.1):
        self.max_artwork_size = max_artwork_size
        self.shift_up = shift_up
        self.shift_right = shift_right

    def placement_for(self, artwork: Image.Image, canvas_size: tuple) -> ArtworkPlacement:
        return compute_artwork_placement(
            artwork.width,
            artwork.height,
            canvas_size[0],
            canvas_size[1],
            max_size=self.max_artwork_size,
            shift_up=self.shift_up,
            shift_right=self.shift_right,
        )

    def compose(self, template: Image.Image, artwork: Optional[Image.Image] = None) -> Image.Image:
        canvas = Image.new("RGBA", template.size, (0, 0, 0, 0))
        canvas.alpha_composite(template.convert("RGBA"))

        if artwork is None:
            return canvas

        placement = self.placement_for(artwork, canvas.size)
        left, top, width, height = placement.rounded_box()
        resized = artwork.convert("RGBA").resize((width, height), Image.Resampling.LANCZOS)
        # Source-over: partly transparent artwork blends into the template
        layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        layer.paste(resized, (left, top))
        canvas = Image.alpha_composite(canvas, layer)

        # Outline the stroke rect (x-2, y-2, w+4, h+4) with a 2px line centred on it
        overlay = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        ImageDraw.Draw(overlay).rectangle(
            [
                left - BORDER_OFFSET - BORDER_WIDTH // 2,
                top - BORDER_OFFSET - BORDER_WIDTH // 2,
                left + width + BORDER_OFFSET + BORDER_WIDTH // 2 - 1,
                top + height + BORDER_OFFSET + BORDER_WIDTH // 2 - 1,
            ],
            outline=BORDER_COLOR,
            width=BORDER_WIDTH,
        )
        return Image.alpha_composite(canvas, overlay)

    def render(self, template: Image.Image, artwork: Optional[Image.Image] = None) -> bytes:
        """Compose the frame and return PNG bytes."""
        buffer = io.BytesIO()
        self.compose(template, artwork).save(buffer, format="PNG")
        return buffer.getvalue()
