"""
Module: output.styles

Purpose:
    Visual styling for caption text layers.
    The defaults give white caption text with a deep blue glow for the
    primary line and a hard black drop shadow for the secondary line.

Key Classes:
    - TextShadow: Shadow beneath a text layer
    - TextLayerStyle: Font size, weight, fill and opacity of one layer
    - CaptionStyle: The three layers drawn per captioned band

Dependencies:
    - dataclasses (std)

Used By:
    - output.text: Caption line drawing
    - output.compositor: Band drawing
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

# Prussian blue used for the primary caption glow
CAPTION_BLUE = "#003153"

# CJK-capable faces first so both caption languages render
DEFAULT_BOLD_FONTS: Tuple[str, ...] = (
    "NotoSansCJK-Bold.ttc",
    "NotoSansCJKsc-Bold.otf",
    "NotoSansSC-Bold.otf",
    "NotoSansTC-Bold.otf",
    "NotoSansJP-Bold.otf",
    "/usr/share/fonts/opentype/noto/NotoSansCJK-Bold.ttc",
    "/usr/share/fonts/noto-cjk/NotoSansCJK-Bold.ttc",
    "/System/Library/Fonts/PingFang.ttc",
    "msyhbd.ttc",       # Microsoft YaHei Bold (Windows)
    "YuGothB.ttc",      # Yu Gothic Bold (Windows)
    "DejaVuSans-Bold.ttf",
    "arialbd.ttf",
)
DEFAULT_REGULAR_FONTS: Tuple[str, ...] = (
    "NotoSansCJK-Regular.ttc",
    "NotoSansCJKjp-Regular.otf",
    "NotoSansJP-Regular.otf",
    "NotoSansSC-Regular.otf",
    "/usr/share/fonts/opentype/noto/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/noto-cjk/NotoSansCJK-Regular.ttc",
    "/System/Library/Fonts/Hiragino Sans GB.ttc",
    "msyh.ttc",
    "YuGothM.ttc",
    "DejaVuSans.ttf",
    "arial.ttf",
)


@dataclass(frozen=True)
class TextShadow:
    """
    Shadow drawn beneath a text layer.

    Attributes:
        color: Shadow colour (any Pillow colour spec)
        blur: Gaussian blur radius in pixels (0 = hard shadow)
        offset_x: Horizontal shadow offset in pixels
        offset_y: Vertical shadow offset in pixels
    """

    color: str = "black"
    blur: float = 0
    offset_x: int = 0
    offset_y: int = 0

    def __post_init__(self) -> None:
        if self.blur < 0:
            raise ValueError(f"blur must be non-negative: {self.blur}")


@dataclass(frozen=True)
class TextLayerStyle:
    """
    Style of one text layer (immutable).

    Attributes:
        font_size: Font size in pixels
        bold: Use the bold font candidates
        fill: Text colour
        opacity: Layer opacity in [0, 1], applied to fill and shadow
        shadow: Optional shadow beneath the text
    """

    font_size: int
    bold: bool = False
    fill: str = "white"
    opacity: float = 1.0
    shadow: Optional[TextShadow] = None

    def __post_init__(self) -> None:
        if self.font_size <= 0:
            raise ValueError(f"font_size must be positive: {self.font_size}")
        if not 0.0 <= self.opacity <= 1.0:
            raise ValueError(f"opacity must be in [0, 1]: {self.opacity}")


@dataclass(frozen=True)
class CaptionStyle:
    """
    Caption appearance (immutable).

    The primary line is drawn twice: ``primary_glow`` first, then
    ``primary_fill`` at the same position, giving a coloured halo around
    solid text. The secondary line is drawn once.

    Attributes:
        primary_glow: Background layer of the primary line
        primary_fill: Foreground layer of the primary line
        secondary: Secondary line layer
        bold_fonts: Font files tried in order for bold layers
        regular_fonts: Font files tried in order for regular layers
        anchor: Pillow text anchor applied at (center_x, y)
    """

    # Canvas shadowBlur 2 is roughly a Gaussian sigma of 1
    primary_glow: TextLayerStyle = field(default_factory=lambda: TextLayerStyle(
        font_size=36,
        bold=True,
        fill=CAPTION_BLUE,
        opacity=0.8,
        shadow=TextShadow(color=CAPTION_BLUE, blur=1, offset_x=-1, offset_y=-1),
    ))
    primary_fill: TextLayerStyle = field(default_factory=lambda: TextLayerStyle(
        font_size=36,
        bold=True,
        fill="white",
        shadow=TextShadow(color=CAPTION_BLUE, blur=1, offset_x=2, offset_y=2),
    ))
    secondary: TextLayerStyle = field(default_factory=lambda: TextLayerStyle(
        font_size=20,
        bold=False,
        fill="white",
        shadow=TextShadow(color="black", blur=0, offset_x=1, offset_y=1),
    ))
    bold_fonts: Tuple[str, ...] = DEFAULT_BOLD_FONTS
    regular_fonts: Tuple[str, ...] = DEFAULT_REGULAR_FONTS
    anchor: str = "ma"

    def __post_init__(self) -> None:
        if len(self.anchor) != 2:
            raise ValueError(f"anchor must be a two-character Pillow anchor: {self.anchor!r}")

    def fonts_for(self, layer: TextLayerStyle) -> Tuple[str, ...]:
        """Font candidates matching a layer's weight."""
        return self.bold_fonts if layer.bold else self.regular_fonts
