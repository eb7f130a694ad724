"""
Module: images.loader

Purpose:
    Fetch and decode all source images for a render concurrently.
    Duplicate references are decoded once and share a DecodedImage.

Key Functions:
    - load_images(): Decode references in parallel, preserving order

Dependencies:
    - concurrent.futures: Thread pool execution
    - images.provider: ImageProvider, DecodedImage

Used By:
    - controller: Render pipeline
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Dict, Hashable, List, Optional, Sequence

from .provider import DecodedImage, ImageDecodeError, ImageProvider, PillowImageProvider

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


def load_images(
    refs: Sequence[Any],
    provider: Optional[ImageProvider] = None,
    *,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> List[DecodedImage]:
    """
    Decode image references concurrently.

    Each distinct reference (by ``provider.key_for``) is decoded once on a
    thread pool; positions holding the same reference get the same
    DecodedImage instance.

    Args:
        refs: Image references in render order
        provider: Provider used to decode (default PillowImageProvider)
        max_workers: Maximum decode threads

    Returns:
        One DecodedImage per reference, in input order

    Raises:
        ImageDecodeError: First failing reference in input order
        ValueError: If max_workers < 1

    Example:
        >>> images = load_images([Path("a.png"), Path("b.png"), Path("a.png")])
        >>> images[0] is images[2]
        True
    """
    if max_workers < 1:
        raise ValueError(f"max_workers must be >= 1: {max_workers}")
    if not refs:
        return []

    provider = provider or PillowImageProvider()
    keys = [provider.key_for(ref) for ref in refs]

    # First occurrence of each key, in order
    unique: Dict[Hashable, Any] = {}
    for key, ref in zip(keys, refs):
        unique.setdefault(key, ref)

    workers = min(max_workers, len(unique))
    futures: Dict[Hashable, Future] = {}
    with ThreadPoolExecutor(max_workers=workers) as executor:
        for key, ref in unique.items():
            futures[key] = executor.submit(provider.decode, ref)

    decoded: Dict[Hashable, DecodedImage] = {}
    for key in unique:
        try:
            decoded[key] = futures[key].result()
        except ImageDecodeError as e:
            logger.error(f"Image decode failed: {e}")
            raise
        except Exception as e:
            logger.error(f"Image decode failed unexpectedly: {e}")
            raise ImageDecodeError(f"Could not decode image: {e}") from e

    logger.info(
        f"Loaded {len(refs)} images "
        f"({len(unique)} distinct, {workers} worker(s))"
    )
    return [decoded[key] for key in keys]
