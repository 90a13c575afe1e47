"""Image manipulation operations for PowerPoint slides."""

import logging
from pathlib import Path
from urllib.parse import unquote, urlparse

from pptx.util import Inches

logger = logging.getLogger(__name__)


def resolve_image_path(src: str | None, base_dir: str | Path | None = None) -> Path | None:
    """Resolve an image reference to a local file path.

    Accepts plain paths (relative ones are tried against *base_dir* first)
    and ``file://`` URIs.  Remote URIs and empty references resolve to None.
    The file is not required to exist.
    """
    if not src:
        return None

    parsed = urlparse(src)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    # Single-letter schemes are Windows drive letters, not URIs
    if parsed.scheme and len(parsed.scheme) > 1:
        return None

    path = Path(src)
    if not path.is_absolute() and base_dir is not None:
        candidate = Path(base_dir) / path
        if candidate.exists():
            return candidate
    return path


def add_image(
    slide,
    image_path: str | Path,
    left: float,
    top: float,
    width: float | None = None,
    height: float | None = None,
) -> object | None:
    """Add an image to a slide.

    Args:
        slide: The slide to add the image to.
        image_path: Path to the image file.
        left, top: Position in inches.
        width: Width in inches (None for original).
        height: Height in inches (None for original).

    Returns:
        The created picture shape, or None if the image couldn't be added.
    """
    image_path = Path(image_path)
    if not image_path.exists():
        logger.warning(f"Image not found: {image_path}")
        return None

    kwargs = {
        "image_file": str(image_path),
        "left": Inches(left),
        "top": Inches(top),
    }

    if width is not None:
        kwargs["width"] = Inches(width)
    if height is not None:
        kwargs["height"] = Inches(height)

    try:
        return slide.shapes.add_picture(**kwargs)
    except Exception as e:
        logger.warning(f"Could not add image {image_path}: {e}")
        return None


def add_background_image(
    slide,
    image_path: str | Path,
    slide_width: float,
    slide_height: float,
) -> object | None:
    """Add an image stretched over the whole canvas, behind later shapes."""
    picture = add_image(slide, image_path, 0, 0, slide_width, slide_height)
    if picture is not None:
        picture.name = "Background Image"
    return picture
