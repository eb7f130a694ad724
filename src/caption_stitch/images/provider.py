"""
Module: images.provider

Purpose:
    Resolve caller-supplied image references into decoded raster images.
    Provides clean abstraction over where the bytes come from (file path,
    in-memory buffer, data URI, open binary stream).

Key Classes:
    - ImageProvider: Abstract interface for image decoding
    - PillowImageProvider: Standard provider backed by Pillow
    - DecodedImage: Immutable decoded raster with known dimensions
    - ImageDecodeError: Exception for undecodable references

Dependencies:
    - PIL: Image decoding

Used By:
    - images.loader: Concurrent loading
    - controller: Render pipeline
"""

from __future__ import annotations

import base64
import binascii
import io
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Hashable

from PIL import Image, ImageOps


class ImageDecodeError(Exception):
    """Source image could not be decoded."""
    pass


@dataclass(frozen=True)
class DecodedImage:
    """
    Decoded raster image (immutable).

    The engine only ever reads ``pixels``; cropping and scaling happen on
    copies at draw time, so one instance can safely back several items.

    Attributes:
        width_px: Width in pixels (> 0)
        height_px: Height in pixels (> 0)
        pixels: Pillow image holding the decoded data (RGBA when built by
            from_pil or PillowImageProvider; other modes are converted
            at draw time)

    Example:
        >>> img = DecodedImage.from_pil(Image.new("RGB", (40, 30)))
        >>> img.size
        (40, 30)
    """

    width_px: int
    height_px: int
    pixels: Image.Image

    def __post_init__(self) -> None:
        """Validate dimensions on construction."""
        if self.width_px <= 0:
            raise ValueError(f"width_px must be positive: {self.width_px}")
        if self.height_px <= 0:
            raise ValueError(f"height_px must be positive: {self.height_px}")
        if self.pixels.size != (self.width_px, self.height_px):
            raise ValueError(
                f"pixels size {self.pixels.size} does not match "
                f"({self.width_px}, {self.height_px})"
            )

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) in pixels."""
        return self.width_px, self.height_px

    @classmethod
    def from_pil(cls, image: Image.Image) -> "DecodedImage":
        """Wrap a Pillow image, converting to RGBA (the input is not modified)."""
        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        if rgba is image:
            rgba = image.copy()
        return cls(rgba.width, rgba.height, rgba)


class ImageProvider(ABC):
    """
    Abstract interface for decoding image references.

    Implementations decide which reference types they understand.
    """

    @abstractmethod
    def decode(self, ref: Any) -> DecodedImage:
        """
        Decode a reference into a DecodedImage.

        Args:
            ref: Opaque image reference

        Returns:
            Fully decoded image

        Raises:
            ImageDecodeError: If the reference cannot be decoded
        """

    def key_for(self, ref: Any) -> Hashable:
        """
        Key identifying the underlying image data of a reference.

        References with equal keys are decoded once and share one
        DecodedImage. Defaults to object identity.
        """
        return ("id", id(ref))


class PillowImageProvider(ImageProvider):
    """
    Provider that decodes references with Pillow.

    Understands file paths (str / os.PathLike), raw encoded buffers
    (bytes, bytearray, memoryview), ``data:`` URIs and binary file-like
    objects. Images are fully loaded, EXIF-oriented and converted to RGBA.

    Example:
        >>> provider = PillowImageProvider()
        >>> img = provider.decode(Path("photo.jpg"))
        >>> img.width_px
        1000
    """

    def decode(self, ref: Any) -> DecodedImage:
        try:
            with self._open(ref) as opened:
                opened.load()
                oriented = ImageOps.exif_transpose(opened)
                rgba = oriented.convert("RGBA")
        except ImageDecodeError:
            raise
        except (OSError, SyntaxError, EOFError, ValueError, Image.DecompressionBombError) as e:
            raise ImageDecodeError(f"Could not decode image {_describe(ref)}: {e}") from e

        if rgba.width <= 0 or rgba.height <= 0:
            raise ImageDecodeError(f"Image {_describe(ref)} has no pixels: {rgba.size}")

        return DecodedImage(rgba.width, rgba.height, rgba)

    def key_for(self, ref: Any) -> Hashable:
        if isinstance(ref, (str, os.PathLike)):
            text = os.fspath(ref)
            if isinstance(text, str) and text.startswith("data:"):
                return ("data", text)
            return ("path", str(Path(text).expanduser().resolve()))
        if isinstance(ref, (bytes, bytearray, memoryview)):
            return ("bytes", bytes(ref))
        return super().key_for(ref)

    def _open(self, ref: Any) -> Image.Image:
        """Open (lazily) a Pillow image for any supported reference type."""
        if isinstance(ref, (str, os.PathLike)):
            text = os.fspath(ref)
            if isinstance(text, str) and text.startswith("data:"):
                return Image.open(io.BytesIO(_decode_data_uri(text)))
            path = Path(text).expanduser()
            if not path.is_file():
                raise ImageDecodeError(f"Image file not found: {path}")
            return Image.open(path)
        if isinstance(ref, (bytes, bytearray, memoryview)):
            if len(ref) == 0:
                raise ImageDecodeError("Image buffer is empty")
            return Image.open(io.BytesIO(bytes(ref)))
        if hasattr(ref, "read"):
            return Image.open(ref)
        raise ImageDecodeError(f"Unsupported image reference type: {type(ref).__name__}")


def _decode_data_uri(uri: str) -> bytes:
    """Extract the payload of a base64 ``data:`` URI."""
    header, sep, payload = uri.partition(",")
    if not sep or not header.endswith(";base64"):
        raise ImageDecodeError("Only base64 data URIs are supported")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"Malformed data URI payload: {e}") from e


def _describe(ref: Any) -> str:
    """Short human-readable description of a reference for error messages."""
    if isinstance(ref, (str, os.PathLike)):
        text = os.fspath(ref)
        if isinstance(text, str) and text.startswith("data:"):
            return f"<data uri, {len(text)} chars>"
        return repr(str(text))
    if isinstance(ref, (bytes, bytearray, memoryview)):
        return f"<{len(ref)} byte buffer>"
    return f"<{type(ref).__name__}>"
