"""
Module: config

Purpose:
    Top-level configuration for the stitching pipeline. Immutable
    configuration with validation on construction.

Key Classes:
    - StitchConfig: Main configuration for rendering

Dependencies:
    - dataclasses (std)
    - layout.config: LayoutConfig
    - output.styles: CaptionStyle

Used By:
    - controller: Pipeline orchestration
"""

from __future__ import annotations

from dataclasses import dataclass, field

from caption_stitch.layout.config import LayoutConfig
from caption_stitch.output.styles import CaptionStyle


@dataclass(frozen=True)
class StitchConfig:
    """
    Configuration for one stitching pipeline (immutable).

    Attributes:
        layout: Band sizing and caption offsets
        caption_style: Caption fonts and text effects
        max_workers: Threads used to decode source images
        png_quality: Advisory export quality in [0, 1]
        png_compress_level: zlib compression level for the PNG (0-9)

    Example:
        >>> config = StitchConfig(max_workers=8)
        >>> config.layout.canvas_width
        800
    """

    layout: LayoutConfig = field(default_factory=LayoutConfig)
    caption_style: CaptionStyle = field(default_factory=CaptionStyle)
    max_workers: int = 4
    png_quality: float = 0.92
    png_compress_level: int = 6

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1: {self.max_workers}")
        if not 0.0 <= self.png_quality <= 1.0:
            raise ValueError(f"png_quality must be in [0, 1]: {self.png_quality}")
        if not 0 <= self.png_compress_level <= 9:
            raise ValueError(f"png_compress_level must be in [0, 9]: {self.png_compress_level}")
