"""
Module: layout

Purpose:
    Layout planning for stacked caption images.
    Converts decoded items into a declarative LayoutPlan.

Key Functions:
    - plan(): Main entry point for layout
    - caption_band_height(): Shared caption band height

Key Classes:
    - LayoutConfig: Layout design constants
    - SourceItem / PlanItem: Input items
    - Band / LayoutPlan: Planned output

Dependencies:
    - images.provider: DecodedImage

Used By:
    - controller: Render pipeline
    - output.compositor: Drawing
"""

from .config import LayoutConfig
from .models import (
    Band,
    CaptionLayout,
    ClipRect,
    DrawRect,
    LayoutPlan,
    PlanItem,
    SourceItem,
)
from .planner import EmptyInputError, caption_band_height, plan

__all__ = [
    # Config
    "LayoutConfig",
    # Models
    "SourceItem",
    "PlanItem",
    "ClipRect",
    "DrawRect",
    "CaptionLayout",
    "Band",
    "LayoutPlan",
    # Functions
    "plan",
    "caption_band_height",
    # Errors
    "EmptyInputError",
]
