"""
Module: layout.models

Purpose:
    Data models for the stacked caption layout.
    Immutable dataclasses describing input items, bands and the full plan.

Key Classes:
    - SourceItem: Caller-supplied item (image reference + captions)
    - PlanItem: Decoded item ready for planning
    - ClipRect: Clip rectangle in canvas coordinates
    - DrawRect: Per-band image transform descriptor
    - CaptionLayout: Caption line positions for a band
    - Band: One horizontal strip of the canvas
    - LayoutPlan: Complete layout output

Dependencies:
    - dataclasses (std)
    - images.provider: DecodedImage

Used By:
    - layout.planner: Creates LayoutPlans
    - output.compositor: Draws LayoutPlans
    - controller: Pipeline orchestration
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional

from caption_stitch.images.provider import DecodedImage


def to_px(value: float) -> int:
    """Round a canvas coordinate to the nearest pixel row/column (half up)."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class SourceItem:
    """
    Item supplied by the caller (immutable).

    Attributes:
        order: Position in the output; unique within one render
        image_ref: Opaque reference resolved by an ImageProvider
        caption_primary: Large caption line (may be empty)
        caption_secondary: Small caption line (may be empty)

    Example:
        >>> item = SourceItem(0, Path("a.jpg"), "你好", "こんにちは")
    """

    order: int
    image_ref: Any
    caption_primary: str = ""
    caption_secondary: str = ""


@dataclass(frozen=True)
class PlanItem:
    """
    Decoded item handed to the planner and compositor (immutable).

    Attributes:
        image: Decoded source image (may be shared with other items)
        caption_primary: Large caption line (may be empty)
        caption_secondary: Small caption line (may be empty)
    """

    image: DecodedImage
    caption_primary: str = ""
    caption_secondary: str = ""

    @property
    def has_caption(self) -> bool:
        """True when at least one caption line is non-empty."""
        return bool(self.caption_primary or self.caption_secondary)


@dataclass(frozen=True)
class ClipRect:
    """
    Clip rectangle in absolute canvas coordinates.

    Example:
        >>> ClipRect(0, 800, 800, 120).bottom
        920
    """

    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass(frozen=True)
class DrawRect:
    """
    How one band draws its image (immutable).

    The source image is referenced by item index and never modified;
    scaling, positioning and clipping are applied at draw time.

    Attributes:
        item_index: Index of the PlanItem whose image is drawn
        source_width: Width of the source image in pixels
        source_height: Height of the source image in pixels
        dest_x: Left edge of the scaled image on the canvas
        dest_y: Top edge of the scaled image on the canvas (may be negative)
        scale_x: Horizontal scale factor
        scale_y: Vertical scale factor
        clip: Visible region, or None to draw the whole image
    """

    item_index: int
    source_width: int
    source_height: int
    dest_x: float
    dest_y: float
    scale_x: float
    scale_y: float
    clip: Optional[ClipRect] = None

    @property
    def scaled_width(self) -> float:
        return self.source_width * self.scale_x

    @property
    def scaled_height(self) -> float:
        return self.source_height * self.scale_y


@dataclass(frozen=True)
class CaptionLayout:
    """
    Caption line positions within a band.

    Attributes:
        primary_baseline_y: Reference y of the primary line
        secondary_baseline_y: Reference y of the secondary line
        center_x: Horizontal centre of both lines
    """

    primary_baseline_y: float
    secondary_baseline_y: float
    center_x: float


@dataclass(frozen=True)
class Band:
    """
    One horizontal strip of the output canvas.

    Attributes:
        index: Position of the band (and its item) in the plan
        top_y: Top edge on the canvas
        height_px: Band height (fractional pixels allowed)
        draw: Image draw descriptor
        caption: Caption placement, or None when both captions are empty
    """

    index: int
    top_y: float
    height_px: float
    draw: DrawRect
    caption: Optional[CaptionLayout] = None

    @property
    def bottom_y(self) -> float:
        """Bottom edge (top_y + height_px)."""
        return self.top_y + self.height_px


@dataclass(frozen=True)
class LayoutPlan:
    """
    Fully resolved layout for one render (immutable).

    Attributes:
        canvas_width: Output width in pixels
        canvas_height: Exact output height (sum of band heights)
        caption_band_height: Shared height of bands 1..n-1
        bands: Bands in top-to-bottom order

    Example:
        >>> plan.pixel_size
        (800, 920)
    """

    canvas_width: int
    canvas_height: float
    caption_band_height: float
    bands: tuple[Band, ...]

    @property
    def band_count(self) -> int:
        return len(self.bands)

    @property
    def pixel_size(self) -> tuple[int, int]:
        """Integer (width, height) of the raster surface."""
        return self.canvas_width, max(1, to_px(self.canvas_height))

    @property
    def has_clips(self) -> bool:
        """True when any band draws a clipped image."""
        return any(band.draw.clip is not None for band in self.bands)
