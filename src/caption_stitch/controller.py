"""
Module: controller

Purpose:
    Orchestrate the complete stitching pipeline.
    Validate → Load → Plan → Render → Export

Key Functions:
    - stitch(): Main entry point, items in, PNG out

Key Classes:
    - StitchSession: Keeps the latest surface alive for preview
    - StitchResult: Complete render result

Dependencies:
    - images: Concurrent decoding
    - layout: Planning
    - output: Compositing and PNG export

Used By:
    - Host applications (upload UI, preview, download)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .config import StitchConfig
from .images import ImageProvider, load_images
from .layout import EmptyInputError, LayoutPlan, PlanItem, SourceItem, plan
from .output import RasterSurface, export, render
from .timing import RenderTimings, timed_phase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StitchResult:
    """
    Complete render result (immutable).

    Attributes:
        png: PNG-encoded output
        width: Output width in pixels
        height: Output height in pixels
        plan: Layout the output was drawn from
        timings: Per-phase durations

    Example:
        >>> result = stitch(items)
        >>> print(f"{result.width}x{result.height}, {len(result.png)} bytes")
    """
    png: bytes
    width: int
    height: int
    plan: LayoutPlan
    timings: RenderTimings

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height


def stitch(
    items: Sequence[SourceItem],
    config: Optional[StitchConfig] = None,
    *,
    provider: Optional[ImageProvider] = None,
) -> StitchResult:
    """
    Stitch items into one PNG.

    The surface is released before returning.

    Args:
        items: Items to stack, ordered by their ``order`` field
        config: Pipeline configuration (default StitchConfig())
        provider: Image provider (default PillowImageProvider)

    Returns:
        StitchResult with PNG bytes, size and plan

    Raises:
        EmptyInputError: If items is empty
        ValueError: If two items share an ``order``
        ImageDecodeError: If any image cannot be decoded
        RenderError: If compositing fails
        ExportError: If PNG encoding fails

    Example:
        >>> result = stitch([
        ...     SourceItem(0, Path("first.jpg")),
        ...     SourceItem(1, Path("second.jpg"), "测试", "テスト"),
        ... ])
        >>> result.size
        (800, 920)
    """
    config = config or StitchConfig()
    surface, result = _run_pipeline(items, config, provider)
    surface.close()
    return result


class StitchSession:
    """
    Render session holding at most one live surface.

    Each render releases the previous surface before drawing a new one,
    so repeated previews never accumulate surfaces. The latest surface
    stays available as ``surface`` until the next render or close().

    Example:
        >>> with StitchSession() as session:
        ...     result = session.render(items)
        ...     preview = session.surface.image
    """

    def __init__(
        self,
        config: Optional[StitchConfig] = None,
        *,
        provider: Optional[ImageProvider] = None,
    ) -> None:
        self._config = config or StitchConfig()
        self._provider = provider
        self._surface: Optional[RasterSurface] = None
        self._result: Optional[StitchResult] = None

    @property
    def config(self) -> StitchConfig:
        return self._config

    @property
    def surface(self) -> Optional[RasterSurface]:
        """Surface of the latest successful render, if any."""
        return self._surface

    @property
    def result(self) -> Optional[StitchResult]:
        """Result of the latest successful render, if any."""
        return self._result

    def render(self, items: Sequence[SourceItem]) -> StitchResult:
        """
        Render items, replacing the previous surface.

        On failure the session is left without a surface or result.
        """
        self.release()
        surface, result = _run_pipeline(items, self._config, self._provider)
        self._surface = surface
        self._result = result
        return result

    def release(self) -> None:
        """Release the current surface and result."""
        if self._surface is not None:
            self._surface.close()
            logger.debug("Released previous surface")
        self._surface = None
        self._result = None

    def close(self) -> None:
        self.release()

    def __enter__(self) -> "StitchSession":
        return self

    def __exit__(self, *args) -> None:
        self.close()


def _run_pipeline(
    items: Sequence[SourceItem],
    config: StitchConfig,
    provider: Optional[ImageProvider],
) -> Tuple[RasterSurface, StitchResult]:
    """Run all phases; returns the live surface and the result."""
    ordered = _order_items(items)
    timings = RenderTimings()

    logger.info(f"Starting stitch of {len(ordered)} items")

    with timed_phase(timings, "load"):
        images = load_images(
            [item.image_ref for item in ordered],
            provider,
            max_workers=config.max_workers,
        )

    plan_items = [
        PlanItem(image, item.caption_primary, item.caption_secondary)
        for image, item in zip(images, ordered)
    ]

    with timed_phase(timings, "plan"):
        layout = plan(plan_items, config.layout)

    with timed_phase(timings, "render"):
        surface = render(layout, plan_items, config.caption_style)

    try:
        with timed_phase(timings, "export"):
            exported = export(
                surface,
                quality=config.png_quality,
                compress_level=config.png_compress_level,
            )
    except Exception:
        surface.close()
        raise

    result = StitchResult(
        png=exported.data,
        width=exported.width,
        height=exported.height,
        plan=layout,
        timings=timings,
    )
    logger.info(f"Stitched {result.width}x{result.height} image ({timings.summary()})")
    return surface, result


def _order_items(items: Sequence[SourceItem]) -> List[SourceItem]:
    """Sort items by ``order``, rejecting empty input and duplicate orders."""
    if not items:
        raise EmptyInputError("No items to stitch")

    seen = set()
    duplicates = set()
    for item in items:
        if item.order in seen:
            duplicates.add(item.order)
        seen.add(item.order)
    if duplicates:
        raise ValueError(f"Items share order values: {sorted(duplicates)}")

    return sorted(items, key=lambda item: item.order)
