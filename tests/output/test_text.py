"""
Tests for output.text and output.styles

Test Coverage:
- draw_caption_line(): drawing, opacity, clipping at surface edges
- composite_clipped(): partial and fully-outside layers
- load_font(): fallback to the default font
- Style validation
"""
import pytest
from PIL import Image, ImageChops

from caption_stitch.output.styles import CaptionStyle, TextLayerStyle, TextShadow
from caption_stitch.output.text import composite_clipped, draw_caption_line, load_font


@pytest.fixture
def white_surface():
    return Image.new("RGBA", (300, 120), (255, 255, 255, 255))


@pytest.fixture
def caption_style():
    return CaptionStyle()


def _changed(before: Image.Image, after: Image.Image) -> bool:
    return ImageChops.difference(before, after).getbbox(alpha_only=False) is not None


class TestDrawCaptionLine:
    """Tests for draw_caption_line()."""

    def test_draw_when_text_then_pixels_change_near_anchor(self, white_surface, caption_style):
        # Arrange
        before = white_surface.copy()
        layer = caption_style.primary_glow

        # Act
        draw_caption_line(
            white_surface, "Hello", 150, 40, layer,
            fonts=caption_style.fonts_for(layer), anchor="ma",
        )

        # Assert
        bbox = ImageChops.difference(before, white_surface).getbbox(alpha_only=False)
        assert bbox is not None
        left, top, right, bottom = bbox
        assert left < 150 < right
        assert top >= 40 - 10

    def test_draw_when_empty_text_then_nothing_drawn(self, white_surface, caption_style):
        before = white_surface.copy()

        draw_caption_line(white_surface, "", 150, 40, caption_style.primary_fill, fonts=())

        assert not _changed(before, white_surface)

    def test_draw_when_zero_opacity_then_nothing_drawn(self, white_surface):
        before = white_surface.copy()
        layer = TextLayerStyle(font_size=30, fill="black", opacity=0.0,
                               shadow=TextShadow("black", blur=2, offset_x=2, offset_y=2))

        draw_caption_line(white_surface, "Hidden", 150, 40, layer, fonts=())

        assert not _changed(before, white_surface)

    def test_draw_when_hard_shadow_then_shadow_colour_present(self):
        # Arrange
        surface = Image.new("RGBA", (400, 100), (0, 0, 255, 255))
        layer = TextLayerStyle(
            font_size=48, fill="white",
            shadow=TextShadow("black", blur=0, offset_x=4, offset_y=4),
        )

        # Act
        draw_caption_line(surface, "HOLD", 200, 20, layer, fonts=())

        # Assert
        colors = {rgba[:3] for _, rgba in surface.getcolors(maxcolors=400 * 100)}
        assert (255, 255, 255) in colors
        assert (0, 0, 0) in colors

    def test_draw_when_text_crosses_edges_then_clipped_without_error(self, white_surface, caption_style):
        before = white_surface.copy()
        layer = caption_style.primary_fill

        draw_caption_line(white_surface, "Edge case text", -20, -15, layer, fonts=())
        draw_caption_line(white_surface, "Edge case text", 310, 110, layer, fonts=())

        assert white_surface.size == (300, 120)
        assert _changed(before, white_surface)

    def test_draw_when_completely_outside_then_unchanged(self, white_surface, caption_style):
        before = white_surface.copy()

        draw_caption_line(white_surface, "Far", 5000, 5000, caption_style.primary_fill, fonts=())

        assert not _changed(before, white_surface)

    def test_draw_when_surface_not_rgba_then_raises(self, caption_style):
        with pytest.raises(ValueError, match="RGBA"):
            draw_caption_line(Image.new("RGB", (10, 10)), "x", 5, 5, caption_style.secondary, fonts=())


class TestCompositeClipped:
    """Tests for composite_clipped()."""

    def test_composite_when_negative_offset_then_visible_part_pasted(self):
        # Arrange
        surface = Image.new("RGBA", (10, 10), (255, 255, 255, 255))
        layer = Image.new("RGBA", (6, 6), (255, 0, 0, 255))

        # Act
        composite_clipped(surface, layer, -3, -3)

        # Assert
        assert surface.getpixel((0, 0)) == (255, 0, 0, 255)
        assert surface.getpixel((2, 2)) == (255, 0, 0, 255)
        assert surface.getpixel((3, 3)) == (255, 255, 255, 255)

    def test_composite_when_past_bottom_right_then_clipped(self):
        surface = Image.new("RGBA", (10, 10), (255, 255, 255, 255))
        layer = Image.new("RGBA", (6, 6), (0, 255, 0, 255))

        composite_clipped(surface, layer, 7, 8)

        assert surface.getpixel((9, 9)) == (0, 255, 0, 255)
        assert surface.getpixel((6, 9)) == (255, 255, 255, 255)


class TestFontsAndStyles:
    """Tests for font loading and style validation."""

    def test_load_font_when_no_candidates_load_then_default_font(self):
        font = load_font(("no-such-font-anywhere.ttf",), 24)

        assert font is not None
        assert font.getbbox("A")[3] > 0

    def test_caption_style_defaults_match_caption_look(self):
        style = CaptionStyle()

        assert style.primary_glow.font_size == style.primary_fill.font_size == 36
        assert style.primary_glow.bold and style.primary_fill.bold
        assert style.primary_glow.fill == "#003153"
        assert style.primary_glow.opacity == 0.8
        assert (style.primary_glow.shadow.offset_x, style.primary_glow.shadow.offset_y) == (-1, -1)
        assert (style.primary_fill.shadow.offset_x, style.primary_fill.shadow.offset_y) == (2, 2)
        assert style.primary_glow.shadow.blur == style.primary_fill.shadow.blur == 1
        assert style.secondary.font_size == 20
        assert not style.secondary.bold
        assert style.secondary.shadow.blur == 0
        assert style.secondary.shadow.color == "black"

    def test_fonts_for_when_bold_then_bold_candidates(self):
        style = CaptionStyle(bold_fonts=("b.ttf",), regular_fonts=("r.ttf",))

        assert style.fonts_for(style.primary_fill) == ("b.ttf",)
        assert style.fonts_for(style.secondary) == ("r.ttf",)

    def test_text_layer_style_when_opacity_out_of_range_then_raises(self):
        with pytest.raises(ValueError, match="opacity"):
            TextLayerStyle(font_size=10, opacity=1.5)

    def test_text_shadow_when_negative_blur_then_raises(self):
        with pytest.raises(ValueError, match="blur"):
            TextShadow(blur=-1)

    def test_caption_style_when_bad_anchor_then_raises(self):
        with pytest.raises(ValueError, match="anchor"):
            CaptionStyle(anchor="middle")
