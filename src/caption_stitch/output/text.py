"""
Module: output.text

Purpose:
    Draw a single caption line with a shadow onto an RGBA surface.
    Shadow and fill are rendered on a small transparent tile which is
    blurred/faded as needed and alpha-composited in place.

Key Functions:
    - draw_caption_line(): Draw one styled text line
    - load_font(): Resolve a font from candidate files

Dependencies:
    - PIL: Text drawing, blur and compositing

Used By:
    - output.compositor: Caption layers
"""

from __future__ import annotations

import functools
import logging
import math
from typing import Sequence, Tuple

from PIL import Image, ImageDraw, ImageFilter, ImageFont

from .styles import TextLayerStyle

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=32)
def load_font(candidates: Tuple[str, ...], size: int) -> ImageFont.FreeTypeFont:
    """
    Load the first available font among candidates.

    Falls back to Pillow's built-in scalable font if none load.

    Args:
        candidates: Font file names or paths, tried in order
        size: Font size in pixels

    Returns:
        Font object
    """
    for font_name in candidates:
        try:
            return ImageFont.truetype(font_name, size)
        except (IOError, OSError):
            continue

    logger.warning(f"Could not load any of {len(candidates)} TrueType fonts, using default")
    return ImageFont.load_default(size=size)


def draw_caption_line(
    surface: Image.Image,
    text: str,
    x: float,
    y: float,
    style: TextLayerStyle,
    *,
    fonts: Sequence[str],
    anchor: str = "ma",
) -> None:
    """
    Draw one caption line onto an RGBA surface in place.

    The shadow (if any) is drawn first at the style's offset and blurred;
    the fill is drawn on top; the whole layer is then faded by the
    style's opacity and composited. Parts falling outside the surface are
    clipped.

    Args:
        surface: RGBA image to draw on (modified)
        text: Text to draw; empty text draws nothing
        x: Anchor x on the surface
        y: Anchor y on the surface
        style: Layer style
        fonts: Font candidates for this layer
        anchor: Pillow text anchor at (x, y)

    Example:
        >>> draw_caption_line(img, "测试", 400, 865, CaptionStyle().primary_fill,
        ...                   fonts=CaptionStyle().bold_fonts)
    """
    if not text:
        return
    if surface.mode != "RGBA":
        raise ValueError(f"Surface must be RGBA, got {surface.mode}")

    font = load_font(tuple(fonts), style.font_size)

    # Text extent relative to the anchor point
    left, top, right, bottom = font.getbbox(text, anchor=anchor)
    shadow = style.shadow
    margin = 0
    if shadow is not None:
        margin = math.ceil(shadow.blur * 3) + max(abs(shadow.offset_x), abs(shadow.offset_y))

    tile_left = math.floor(x + left) - margin
    tile_top = math.floor(y + top) - margin
    tile_width = math.ceil(x + right) - tile_left + margin + 1
    tile_height = math.ceil(y + bottom) - tile_top + margin + 1
    if tile_width <= 0 or tile_height <= 0:
        return

    origin = (x - tile_left, y - tile_top)
    tile = Image.new("RGBA", (tile_width, tile_height), (0, 0, 0, 0))

    if shadow is not None:
        shadow_tile = Image.new("RGBA", tile.size, (0, 0, 0, 0))
        ImageDraw.Draw(shadow_tile).text(
            (origin[0] + shadow.offset_x, origin[1] + shadow.offset_y),
            text,
            fill=shadow.color,
            font=font,
            anchor=anchor,
        )
        if shadow.blur > 0:
            shadow_tile = shadow_tile.filter(ImageFilter.GaussianBlur(shadow.blur))
        tile.alpha_composite(shadow_tile)

    fill_tile = Image.new("RGBA", tile.size, (0, 0, 0, 0))
    ImageDraw.Draw(fill_tile).text(origin, text, fill=style.fill, font=font, anchor=anchor)
    tile.alpha_composite(fill_tile)

    if style.opacity < 1.0:
        alpha = tile.getchannel("A").point(lambda a: round(a * style.opacity))
        tile.putalpha(alpha)

    composite_clipped(surface, tile, tile_left, tile_top)


def composite_clipped(surface: Image.Image, layer: Image.Image, left: int, top: int) -> None:
    """
    Alpha-composite ``layer`` onto ``surface`` at (left, top), clipping
    any part that falls outside the surface.
    """
    src_left = max(0, -left)
    src_top = max(0, -top)
    src_right = min(layer.width, surface.width - left)
    src_bottom = min(layer.height, surface.height - top)
    if src_right <= src_left or src_bottom <= src_top:
        return

    surface.alpha_composite(
        layer,
        dest=(left + src_left, top + src_top),
        source=(src_left, src_top, src_right, src_bottom),
    )
