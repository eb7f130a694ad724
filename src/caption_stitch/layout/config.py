"""
Module: layout.config

Purpose:
    Design constants for the stacked caption layout.
    Defines canvas width, caption band sizing and caption offsets.

Key Classes:
    - LayoutConfig: Immutable layout configuration

Dependencies:
    - dataclasses (std)

Used By:
    - layout.planner: Band and caption placement
"""

from __future__ import annotations

from dataclasses import dataclass


DEFAULT_CANVAS_WIDTH_PX = 800


@dataclass(frozen=True)
class LayoutConfig:
    """
    Configuration for the stacked layout (immutable).

    Attributes:
        canvas_width: Output width; every image is rescaled to it
        caption_band_ratio: Caption band height as a fraction of the
            first image's rescaled height
        caption_band_min: Lower clamp for the caption band height (px)
        caption_band_max: Upper clamp for the caption band height (px)
        primary_offset_with_secondary: Primary line distance above the
            band bottom when a secondary caption is present
        primary_offset_alone: Primary line distance above the band bottom
            when there is no secondary caption
        secondary_offset: Secondary line distance above the band bottom

    Example:
        >>> config = LayoutConfig()
        >>> config.center_x
        400.0
    """

    canvas_width: int = DEFAULT_CANVAS_WIDTH_PX
    caption_band_ratio: float = 0.15
    caption_band_min: float = 80
    caption_band_max: float = 120

    primary_offset_with_secondary: float = 65
    primary_offset_alone: float = 55
    secondary_offset: float = 25

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.canvas_width <= 0:
            raise ValueError(f"canvas_width must be positive: {self.canvas_width}")
        if self.caption_band_ratio <= 0:
            raise ValueError(f"caption_band_ratio must be positive: {self.caption_band_ratio}")
        if self.caption_band_min <= 0:
            raise ValueError(f"caption_band_min must be positive: {self.caption_band_min}")
        if self.caption_band_min > self.caption_band_max:
            raise ValueError(
                f"caption_band_min {self.caption_band_min} exceeds "
                f"caption_band_max {self.caption_band_max}"
            )
        for name in ("primary_offset_with_secondary", "primary_offset_alone", "secondary_offset"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative: {getattr(self, name)}")

    @property
    def center_x(self) -> float:
        """Horizontal centre shared by every caption line."""
        return self.canvas_width / 2
