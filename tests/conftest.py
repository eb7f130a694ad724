import pytest
import sys
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import caption_stitch
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from caption_stitch.images.provider import DecodedImage  # noqa: E402


# Common test fixtures
@pytest.fixture
def decoded_factory():
    """Factory for solid-colour DecodedImages of a given size."""
    def _create(width: int, height: int, color="gray") -> DecodedImage:
        return DecodedImage.from_pil(Image.new("RGB", (width, height), color=color))
    return _create


@pytest.fixture
def two_tone_factory():
    """
    Factory for images whose top half is one colour and bottom half another.

    Caption bands show only the bottom of an image, so the colour seen in
    a band tells which part of the source was drawn.
    """
    def _create(width: int, height: int, top="red", bottom="blue") -> Image.Image:
        img = Image.new("RGB", (width, height), color=top)
        img.paste(Image.new("RGB", (width, height - height // 2), color=bottom), (0, height // 2))
        return img
    return _create


@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple 1000x600 test image on disk."""
    img = Image.new("RGB", (1000, 600), color="green")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path


@pytest.fixture
def png_bytes_factory():
    """Factory for PNG-encoded solid images."""
    import io

    def _create(width: int, height: int, color="gray") -> bytes:
        buf = io.BytesIO()
        Image.new("RGB", (width, height), color=color).save(buf, format="PNG")
        return buf.getvalue()
    return _create
