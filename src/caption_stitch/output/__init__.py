"""
Module: output

Purpose:
    Compositing and encoding of planned layouts.

Key Functions:
    - render(): Draw a LayoutPlan onto a RasterSurface
    - export(): Encode a RasterSurface as PNG
    - draw_caption_line(): Draw one shadowed caption line

Key Classes:
    - RasterSurface: Owned output surface
    - CaptionStyle: Caption appearance

Dependencies:
    - PIL: Drawing and encoding

Used By:
    - controller: Render pipeline
"""

from .styles import CaptionStyle, TextLayerStyle, TextShadow
from .text import draw_caption_line, load_font
from .compositor import DrawRecord, RasterSurface, RenderError, render
from .exporter import ExportError, ExportResult, export, to_data_uri

__all__ = [
    # Styles
    "CaptionStyle",
    "TextLayerStyle",
    "TextShadow",
    # Text
    "draw_caption_line",
    "load_font",
    # Compositor
    "render",
    "RasterSurface",
    "DrawRecord",
    "RenderError",
    # Exporter
    "export",
    "to_data_uri",
    "ExportResult",
    "ExportError",
]
