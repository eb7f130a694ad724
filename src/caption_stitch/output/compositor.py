"""
Module: output.compositor

Purpose:
    Execute a LayoutPlan onto a raster surface.
    Draws every band's image (whole or clipped to its caption band),
    then its caption layers, strictly in plan order.

Key Functions:
    - render(): Main rendering function

Key Classes:
    - RasterSurface: Owned drawing surface returned by render()
    - DrawRecord: One executed draw operation
    - RenderError: Exception for compositing failures

Dependencies:
    - PIL: Resampling and compositing
    - layout.models: LayoutPlan, Band, PlanItem
    - output.text: Caption line drawing

Used By:
    - controller: Render pipeline
    - output.exporter: PNG encoding
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from PIL import Image

from caption_stitch.layout.models import Band, LayoutPlan, PlanItem, to_px

from .styles import CaptionStyle
from .text import composite_clipped, draw_caption_line

logger = logging.getLogger(__name__)

BACKGROUND_COLOR = (255, 255, 255, 255)

# Draw record kinds, in per-band draw order
DRAW_IMAGE = "image"
DRAW_PRIMARY_GLOW = "primary_glow"
DRAW_PRIMARY_FILL = "primary_fill"
DRAW_SECONDARY = "secondary"


class RenderError(Exception):
    """Error while compositing a layout onto a surface."""
    pass


@dataclass(frozen=True)
class DrawRecord:
    """
    One executed draw operation.

    Attributes:
        band_index: Band the operation belongs to
        kind: One of "image", "primary_glow", "primary_fill", "secondary"
    """

    band_index: int
    kind: str


class RasterSurface:
    """
    Composited output surface.

    Returned fully drawn by render(); the caller owns it and must close
    it (directly or via ``with``) once exported or displayed.

    Example:
        >>> with render(layout, items) as surface:
        ...     surface.size
        (800, 920)
    """

    def __init__(self, image: Image.Image, operations: Sequence[DrawRecord] = ()) -> None:
        self._image: Optional[Image.Image] = image
        self._size = image.size
        self._operations = tuple(operations)

    @property
    def image(self) -> Image.Image:
        """The RGBA image; raises once the surface is closed."""
        if self._image is None:
            raise RenderError("Surface has been released")
        return self._image

    @property
    def size(self) -> tuple[int, int]:
        return self._size

    @property
    def width(self) -> int:
        return self._size[0]

    @property
    def height(self) -> int:
        return self._size[1]

    @property
    def operations(self) -> tuple[DrawRecord, ...]:
        """Draw operations in execution order."""
        return self._operations

    @property
    def closed(self) -> bool:
        return self._image is None

    def count(self, kind: str, band_index: Optional[int] = None) -> int:
        """Number of recorded draws of a kind, optionally for one band."""
        return sum(
            1 for op in self._operations
            if op.kind == kind and (band_index is None or op.band_index == band_index)
        )

    def close(self) -> None:
        """Release the image and free resources."""
        if self._image is not None:
            self._image.close()
            self._image = None

    def __enter__(self) -> "RasterSurface":
        return self

    def __exit__(self, *args) -> None:
        self.close()


def render(
    layout: LayoutPlan,
    items: Sequence[PlanItem],
    style: Optional[CaptionStyle] = None,
) -> RasterSurface:
    """
    Composite a layout plan onto a new white surface.

    Per band: image, then primary glow and primary fill (if the primary
    caption is set), then secondary (if set). Later draws cover earlier
    ones. Drawing is complete when this returns.

    Args:
        layout: Plan from layout.planner.plan()
        items: The items the plan was computed from, same order
        style: Caption style (default CaptionStyle())

    Returns:
        RasterSurface of ``layout.pixel_size``

    Raises:
        RenderError: On any failure; no partial surface is returned

    Example:
        >>> surface = render(plan(items), items)
        >>> surface.count("primary_fill")
        1
    """
    style = style or CaptionStyle()
    if len(items) != layout.band_count:
        raise RenderError(
            f"Plan has {layout.band_count} bands but {len(items)} items were given"
        )

    surface_image: Optional[Image.Image] = None
    operations: List[DrawRecord] = []
    try:
        surface_image = Image.new("RGBA", layout.pixel_size, BACKGROUND_COLOR)
        for band in layout.bands:
            item = items[band.draw.item_index]
            _draw_band_image(surface_image, band, item)
            operations.append(DrawRecord(band.index, DRAW_IMAGE))
            operations.extend(_draw_band_captions(surface_image, band, item, style))
    except Exception as e:
        if surface_image is not None:
            surface_image.close()
        logger.error(f"Render failed after {len(operations)} draw operations: {e}")
        raise RenderError(f"Failed to render layout: {e}") from e

    logger.info(
        f"Rendered {layout.band_count} bands onto "
        f"{layout.pixel_size[0]}x{layout.pixel_size[1]} surface "
        f"({len(operations)} draw operations)"
    )
    return RasterSurface(surface_image, operations)


def _draw_band_image(surface: Image.Image, band: Band, item: PlanItem) -> None:
    """
    Draw the band's image, limited to its clip rectangle if any.

    Only the visible source region is resampled, into a new image, so the
    shared source pixels are never touched.
    """
    draw = band.draw
    source = item.image.pixels
    if source.mode != "RGBA":
        # Custom providers may hand back RGB, L or P rasters
        source = source.convert("RGBA")

    image_top = draw.dest_y
    image_bottom = draw.dest_y + draw.scaled_height
    image_left = draw.dest_x
    image_right = draw.dest_x + draw.scaled_width

    visible_top, visible_bottom = image_top, image_bottom
    visible_left, visible_right = image_left, image_right
    if draw.clip is not None:
        visible_top = max(visible_top, draw.clip.top)
        visible_bottom = min(visible_bottom, draw.clip.bottom)
        visible_left = max(visible_left, draw.clip.left)
        visible_right = min(visible_right, draw.clip.right)

    dest_top = max(0, to_px(visible_top))
    dest_bottom = min(surface.height, to_px(visible_bottom))
    dest_left = max(0, to_px(visible_left))
    dest_right = min(surface.width, to_px(visible_right))
    if dest_bottom <= dest_top or dest_right <= dest_left:
        logger.debug(f"Band {band.index}: image not visible, skipped")
        return

    # Destination pixel rectangle mapped back into source coordinates
    box = (
        (dest_left - draw.dest_x) / draw.scale_x,
        (dest_top - draw.dest_y) / draw.scale_y,
        (dest_right - draw.dest_x) / draw.scale_x,
        (dest_bottom - draw.dest_y) / draw.scale_y,
    )
    box = (
        max(0.0, box[0]),
        max(0.0, box[1]),
        min(float(source.width), box[2]),
        min(float(source.height), box[3]),
    )
    tile = source.resize(
        (dest_right - dest_left, dest_bottom - dest_top),
        Image.Resampling.LANCZOS,
        box=box,
    )
    composite_clipped(surface, tile, dest_left, dest_top)
    logger.debug(
        f"Band {band.index}: drew rows {dest_top}-{dest_bottom} "
        f"from source rows {box[1]:.1f}-{box[3]:.1f}"
    )


def _draw_band_captions(
    surface: Image.Image,
    band: Band,
    item: PlanItem,
    style: CaptionStyle,
) -> List[DrawRecord]:
    """Draw caption layers for a band; returns the records of draws made."""
    records: List[DrawRecord] = []
    caption = band.caption
    if caption is None:
        return records

    if item.caption_primary:
        for kind, layer in (
            (DRAW_PRIMARY_GLOW, style.primary_glow),
            (DRAW_PRIMARY_FILL, style.primary_fill),
        ):
            draw_caption_line(
                surface,
                item.caption_primary,
                caption.center_x,
                caption.primary_baseline_y,
                layer,
                fonts=style.fonts_for(layer),
                anchor=style.anchor,
            )
            records.append(DrawRecord(band.index, kind))

    if item.caption_secondary:
        draw_caption_line(
            surface,
            item.caption_secondary,
            caption.center_x,
            caption.secondary_baseline_y,
            style.secondary,
            fonts=style.fonts_for(style.secondary),
            anchor=style.anchor,
        )
        records.append(DrawRecord(band.index, DRAW_SECONDARY))

    return records
