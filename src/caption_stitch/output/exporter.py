"""
Module: output.exporter

Purpose:
    Encode a composited surface as PNG bytes.

Key Functions:
    - export(): Encode a RasterSurface to PNG
    - to_data_uri(): Wrap encoded bytes as a data URI

Key Classes:
    - ExportResult: Encoded image with its dimensions
    - ExportError: Exception for encoding failures

Dependencies:
    - PIL: PNG encoding

Used By:
    - controller: Render pipeline
"""

from __future__ import annotations

import base64
import io
import logging
from dataclasses import dataclass

from .compositor import RasterSurface

logger = logging.getLogger(__name__)

PNG_MIME = "image/png"
DEFAULT_QUALITY = 0.92
DEFAULT_COMPRESS_LEVEL = 6


class ExportError(Exception):
    """Error encoding a surface."""
    pass


@dataclass(frozen=True)
class ExportResult:
    """
    Encoded output image (immutable).

    Attributes:
        data: PNG-encoded bytes
        width: Image width in pixels
        height: Image height in pixels
    """

    data: bytes
    width: int
    height: int

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def data_uri(self) -> str:
        """The image as a ``data:image/png;base64,...`` URI."""
        return to_data_uri(self.data)


def to_data_uri(data: bytes, mime: str = PNG_MIME) -> str:
    """Base64 data URI for encoded image bytes."""
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def export(
    surface: RasterSurface,
    *,
    quality: float = DEFAULT_QUALITY,
    compress_level: int = DEFAULT_COMPRESS_LEVEL,
) -> ExportResult:
    """
    Encode a surface as PNG.

    PNG is lossless, so ``quality`` only has to be a valid fraction; it
    does not affect pixels. ``compress_level`` trades size for speed.

    Args:
        surface: Fully rendered surface (not closed)
        quality: Advisory quality in [0, 1]
        compress_level: zlib level 0-9

    Returns:
        ExportResult with PNG bytes and dimensions

    Raises:
        ExportError: Closed or zero-sized surface, or encoder failure
        ValueError: If quality or compress_level is out of range

    Example:
        >>> result = export(surface)
        >>> result.data[:8]
        b'\\x89PNG\\r\\n\\x1a\\n'
    """
    if not 0.0 <= quality <= 1.0:
        raise ValueError(f"quality must be in [0, 1]: {quality}")
    if not 0 <= compress_level <= 9:
        raise ValueError(f"compress_level must be in [0, 9]: {compress_level}")
    if surface.closed:
        raise ExportError("Cannot export a released surface")

    width, height = surface.size
    if width <= 0 or height <= 0:
        raise ExportError(f"Cannot export zero-sized surface: {width}x{height}")

    buf = io.BytesIO()
    try:
        surface.image.save(buf, format="PNG", compress_level=compress_level)
    except (OSError, ValueError) as e:
        logger.error(f"PNG encoding failed: {e}")
        raise ExportError(f"Failed to encode PNG: {e}") from e

    data = buf.getvalue()
    logger.info(f"Exported {width}x{height} PNG ({len(data)} bytes)")
    return ExportResult(data=data, width=width, height=height)
