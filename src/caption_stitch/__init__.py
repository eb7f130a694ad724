"""Top-level package for caption_stitch.

Stacks an ordered list of images into one PNG: the first image in full,
every following image as a caption band cut from its bottom edge, each
with an optional two-line caption.

Provides subpackages:
- caption_stitch.images – image references to decoded rasters
- caption_stitch.layout – band and caption planning
- caption_stitch.output – compositing and PNG export
"""

def _get_version() -> str:
    """Get version from installed metadata, falling back to pyproject.toml in dev."""
    from pathlib import Path

    try:
        from importlib.metadata import PackageNotFoundError, version as pkg_version
        return pkg_version("caption-stitch")
    except PackageNotFoundError:
        pass

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        for line in pyproject.read_text(encoding="utf-8").splitlines():
            if line.strip().startswith("version"):
                # Parse: version = "0.1.0"
                return line.split("=")[1].strip().strip('"').strip("'")
    return "0.0.0"

__version__ = _get_version()
__copyright__ = "Copyright 2026 caption-stitch contributors"

from .config import StitchConfig
from .controller import StitchResult, StitchSession, stitch
from .images import DecodedImage, ImageDecodeError, ImageProvider, PillowImageProvider, load_images
from .layout import EmptyInputError, LayoutConfig, LayoutPlan, PlanItem, SourceItem, plan
from .output import (
    CaptionStyle,
    ExportError,
    ExportResult,
    RasterSurface,
    RenderError,
    export,
    render,
)

__all__: list[str] = [
    "__version__",
    # Pipeline
    "stitch",
    "StitchSession",
    "StitchResult",
    "StitchConfig",
    # Components
    "load_images",
    "plan",
    "render",
    "export",
    # Models
    "SourceItem",
    "PlanItem",
    "DecodedImage",
    "LayoutConfig",
    "LayoutPlan",
    "CaptionStyle",
    "RasterSurface",
    "ExportResult",
    "ImageProvider",
    "PillowImageProvider",
    # Errors
    "EmptyInputError",
    "ImageDecodeError",
    "RenderError",
    "ExportError",
]
