"""
Tests for controller

Test Coverage:
- stitch(): end-to-end pipeline from references to PNG
- Input validation (empty input, duplicate orders, ordering)
- Error propagation
- StitchSession surface lifecycle
"""
import io

import pytest
from PIL import Image

from caption_stitch import (
    DecodedImage,
    EmptyInputError,
    ExportError,
    ImageDecodeError,
    ImageProvider,
    PillowImageProvider,
    SourceItem,
    StitchConfig,
    StitchSession,
    stitch,
)
from caption_stitch.output.compositor import DRAW_PRIMARY_FILL, DRAW_PRIMARY_GLOW


class RecordingProvider(PillowImageProvider):
    """Pillow provider that records every decoded reference."""

    def __init__(self):
        self.decoded = []

    def decode(self, ref):
        self.decoded.append(ref)
        return super().decode(ref)


class RgbProvider(ImageProvider):
    """Provider returning raw RGB rasters for "WxH" references."""

    def decode(self, ref):
        width, height = (int(v) for v in ref.split("x"))
        return DecodedImage(width, height, Image.new("RGB", (width, height), "blue"))

    def key_for(self, ref):
        return ref


class TestStitch:
    """Tests for stitch()."""

    def test_stitch_when_single_image_then_800x480_png(self, sample_image):
        """Scenario A end to end."""
        # Act
        result = stitch([SourceItem(0, sample_image)])

        # Assert
        assert result.size == (800, 480)
        decoded = Image.open(io.BytesIO(result.png))
        assert decoded.size == (800, 480)
        assert result.plan.band_count == 1
        assert not result.plan.has_clips

    def test_stitch_when_two_images_with_caption_then_800x920(self, png_bytes_factory):
        """Scenario B end to end."""
        # Arrange
        items = [
            SourceItem(0, png_bytes_factory(1000, 1000, "green")),
            SourceItem(1, png_bytes_factory(640, 480, "blue"), "测试", ""),
        ]

        # Act
        result = stitch(items)

        # Assert
        assert result.size == (800, 920)
        band = result.plan.bands[1]
        assert band.caption.primary_baseline_y == 865
        assert set(result.timings.phases) == {"load", "plan", "render", "export"}

    def test_stitch_when_items_out_of_order_then_sorted_by_order(self, png_bytes_factory):
        # Arrange
        first = png_bytes_factory(400, 200)
        second = png_bytes_factory(1000, 1000)
        items = [SourceItem(5, second, "later"), SourceItem(1, first)]

        # Act
        result = stitch(items)

        # Assert - 400x200 rescales to 800x400 and leads
        assert result.plan.bands[0].height_px == 400
        assert result.plan.bands[1].caption is not None
        assert result.size == (800, 400 + 80)

    def test_stitch_when_same_ref_twice_then_decoded_once(self, sample_image):
        provider = RecordingProvider()

        result = stitch(
            [SourceItem(0, sample_image), SourceItem(1, sample_image, "copy")],
            provider=provider,
        )

        assert len(provider.decoded) == 1
        assert result.plan.band_count == 2

    def test_stitch_when_provider_returns_rgb_then_png_rendered(self):
        # Act
        result = stitch(
            [SourceItem(0, "400x300"), SourceItem(1, "400x400", "Caption")],
            provider=RgbProvider(),
        )

        # Assert - 400x300 scales to 800x600, band is 90px
        assert result.size == (800, 690)
        decoded = Image.open(io.BytesIO(result.png)).convert("RGB")
        assert decoded.getpixel((10, 10)) == (0, 0, 255)
        assert decoded.getpixel((10, 685)) == (0, 0, 255)

    def test_stitch_when_custom_config_then_applied(self, png_bytes_factory):
        from caption_stitch import LayoutConfig

        config = StitchConfig(layout=LayoutConfig(canvas_width=400), max_workers=1)

        result = stitch([SourceItem(0, png_bytes_factory(200, 100))], config)

        assert result.size == (400, 200)


class TestStitchErrors:
    """Tests for error propagation from stitch()."""

    def test_stitch_when_empty_then_raises_before_decoding(self):
        """Scenario C: no decode, no surface."""
        provider = RecordingProvider()

        with pytest.raises(EmptyInputError):
            stitch([], provider=provider)

        assert provider.decoded == []

    def test_stitch_when_duplicate_order_then_raises_value_error(self, sample_image):
        items = [SourceItem(0, sample_image), SourceItem(0, sample_image)]

        with pytest.raises(ValueError, match=r"\[0\]"):
            stitch(items)

    def test_stitch_when_image_undecodable_then_raises_decode_error(self, sample_image):
        items = [SourceItem(0, sample_image), SourceItem(1, b"not an image")]

        with pytest.raises(ImageDecodeError):
            stitch(items)

    def test_stitch_when_export_fails_then_surface_released(self, sample_image, monkeypatch):
        # Arrange
        import caption_stitch.controller as controller

        rendered = []
        real_render = controller.render

        def capturing_render(*args, **kwargs):
            surface = real_render(*args, **kwargs)
            rendered.append(surface)
            return surface

        def failing_export(*args, **kwargs):
            raise ExportError("encoder unavailable")

        monkeypatch.setattr(controller, "render", capturing_render)
        monkeypatch.setattr(controller, "export", failing_export)

        # Act
        with pytest.raises(ExportError):
            stitch([SourceItem(0, sample_image)])

        # Assert
        assert rendered and rendered[0].closed


class TestStitchSession:
    """Tests for StitchSession surface ownership."""

    def test_render_when_called_twice_then_previous_surface_released(self, sample_image):
        # Arrange
        session = StitchSession()

        # Act
        session.render([SourceItem(0, sample_image)])
        first_surface = session.surface
        session.render([SourceItem(0, sample_image), SourceItem(1, sample_image, "x")])

        # Assert
        assert first_surface.closed
        assert not session.surface.closed
        assert session.surface.size == (800, 560)
        assert session.result.size == (800, 560)
        session.close()

    def test_render_when_captioned_then_surface_records_draws(self, sample_image):
        with StitchSession() as session:
            session.render([SourceItem(0, sample_image, "Hello")])

            assert session.surface.count(DRAW_PRIMARY_GLOW) == 1
            assert session.surface.count(DRAW_PRIMARY_FILL) == 1

    def test_close_when_context_exits_then_surface_released(self, sample_image):
        with StitchSession() as session:
            session.render([SourceItem(0, sample_image)])
            surface = session.surface

        assert surface.closed
        assert session.surface is None
        assert session.result is None

    def test_render_when_failure_then_no_surface_kept(self, sample_image):
        # Arrange
        session = StitchSession()
        session.render([SourceItem(0, sample_image)])
        previous = session.surface

        # Act
        with pytest.raises(EmptyInputError):
            session.render([])

        # Assert
        assert previous.closed
        assert session.surface is None
        assert session.result is None
