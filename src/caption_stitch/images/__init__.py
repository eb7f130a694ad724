"""
Module: images

Purpose:
    Image access abstractions for the stitching pipeline.
    Resolves caller references into decoded rasters, concurrently.

Key Classes:
    - ImageProvider: Abstract interface for image decoding
    - PillowImageProvider: Standard Pillow-backed provider
    - DecodedImage: Immutable decoded raster

Key Functions:
    - load_images(): Concurrent decode preserving order

Dependencies:
    - PIL: Image decoding

Used By:
    - controller: Render pipeline
"""

from .provider import DecodedImage, ImageDecodeError, ImageProvider, PillowImageProvider
from .loader import load_images

__all__ = [
    "DecodedImage",
    "ImageDecodeError",
    "ImageProvider",
    "PillowImageProvider",
    "load_images",
]
