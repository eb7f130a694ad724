"""
Module: layout.planner

Purpose:
    Compute the stacked caption layout for an ordered list of items.
    The first image is shown in full; every following image contributes
    only a caption band cut from its bottom edge.

Key Functions:
    - plan(): Main planning function
    - caption_band_height(): Shared caption band height

Algorithm:
    1. Scale the first image to the canvas width; its height is band 0
    2. Caption band height = 15% of band 0, clamped to [80, 120]
    3. Every later image is scaled to the canvas width, bottom-aligned
       with its band and clipped to the band rectangle
    4. Caption lines sit at fixed offsets above each band's bottom

Dependencies:
    - layout.models: PlanItem, Band, LayoutPlan
    - layout.config: LayoutConfig

Used By:
    - controller: Render pipeline
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from .config import LayoutConfig
from .models import Band, CaptionLayout, ClipRect, DrawRect, LayoutPlan, PlanItem

logger = logging.getLogger(__name__)


class EmptyInputError(Exception):
    """No items were given to lay out."""
    pass


def caption_band_height(first_full_height: float, config: LayoutConfig) -> float:
    """
    Height shared by every caption band.

    Args:
        first_full_height: Rescaled full height of the first image
        config: Layout configuration

    Returns:
        ``first_full_height * ratio`` clamped to [min, max]

    Example:
        >>> caption_band_height(800.0, LayoutConfig())
        120
    """
    return min(
        max(first_full_height * config.caption_band_ratio, config.caption_band_min),
        config.caption_band_max,
    )


def plan(
    items: Sequence[PlanItem],
    config: LayoutConfig = LayoutConfig(),
) -> LayoutPlan:
    """
    Lay out items as a vertical stack of bands.

    Pure function: identical items and config give an equal plan.

    Args:
        items: Decoded items in output order
        config: Layout configuration

    Returns:
        LayoutPlan with one band per item

    Raises:
        EmptyInputError: If items is empty

    Example:
        >>> layout = plan([PlanItem(img_1000x1000), PlanItem(img_any, "测试")])
        >>> layout.pixel_size
        (800, 920)
    """
    if not items:
        raise EmptyInputError("Cannot plan a layout without items")

    width = config.canvas_width
    first = items[0].image
    scale0 = width / first.width_px
    full_height0 = first.height_px * scale0
    band_height = caption_band_height(full_height0, config)

    if len(items) == 1:
        canvas_height = full_height0
    else:
        canvas_height = full_height0 + (len(items) - 1) * band_height

    bands: List[Band] = []
    current_y = 0.0

    for index, item in enumerate(items):
        image = item.image
        if index == 0:
            height = full_height0
            draw = DrawRect(
                item_index=0,
                source_width=image.width_px,
                source_height=image.height_px,
                dest_x=0,
                dest_y=0,
                scale_x=scale0,
                scale_y=scale0,
                clip=None,
            )
        else:
            height = band_height
            scale = width / image.width_px
            full_height = image.height_px * scale
            # Bottom of the scaled image sits on the bottom of the band
            draw = DrawRect(
                item_index=index,
                source_width=image.width_px,
                source_height=image.height_px,
                dest_x=0,
                dest_y=current_y + band_height - full_height,
                scale_x=scale,
                scale_y=scale,
                clip=ClipRect(0, current_y, width, band_height),
            )

        band = Band(
            index=index,
            top_y=current_y,
            height_px=height,
            draw=draw,
            caption=_caption_layout(item, current_y + height, config),
        )
        bands.append(band)
        logger.debug(
            f"Band {index}: top={band.top_y:.2f} height={band.height_px:.2f} "
            f"dest_y={draw.dest_y:.2f} scale={draw.scale_x:.4f} "
            f"clipped={draw.clip is not None} caption={band.caption is not None}"
        )
        current_y += height

    layout = LayoutPlan(
        canvas_width=width,
        canvas_height=canvas_height,
        caption_band_height=band_height,
        bands=tuple(bands),
    )
    logger.debug(
        f"Planned {layout.band_count} bands on {width}x{canvas_height:.2f} canvas "
        f"(caption band {band_height:.2f}px)"
    )
    return layout


def _caption_layout(item: PlanItem, band_bottom: float, config: LayoutConfig):
    """Caption positions for a band, or None when it has no caption text."""
    if not item.has_caption:
        return None

    # Short bands can make the two lines overlap; offsets stay fixed
    if item.caption_secondary:
        primary_y = band_bottom - config.primary_offset_with_secondary
    else:
        primary_y = band_bottom - config.primary_offset_alone

    return CaptionLayout(
        primary_baseline_y=primary_y,
        secondary_baseline_y=band_bottom - config.secondary_offset,
        center_x=config.center_x,
    )
