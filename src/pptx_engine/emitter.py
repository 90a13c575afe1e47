"""Element emission: normalized deck model -> python-pptx shapes.

One dispatch table keyed by element kind.  Geometry and style are already
resolved on the model; each emitter only maps fields onto the engine
primitives.  A failure inside one element's emission is logged and that
element skipped, so one bad element never costs the slide.
"""

import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from types import MappingProxyType
from urllib.parse import unquote, urlparse

from src.schemas.deck_schema import (
    ImageElement,
    LineElement,
    ShapeElement,
    Slide,
    TextElement,
)
from src.pptx_engine.image_operations import (
    add_background_image,
    add_image,
    resolve_image_path,
)
from src.pptx_engine.shape_operations import (
    add_image_placeholder,
    add_line,
    add_rectangle,
)
from src.pptx_engine.slide_operations import (
    add_blank_slide,
    add_speaker_notes,
    set_slide_bg_color,
)
from src.pptx_engine.text_operations import add_multi_format_textbox

logger = logging.getLogger(__name__)


def emit_text(slide, element: TextElement, base_dir: Path | None = None) -> object:
    g = element.geometry
    runs = [
        {
            "text": run.text,
            "font_name": run.font_face,
            "font_size": run.font_size_pt,
            "font_color": run.color.hex,
            "transparency": run.color.opacity_pct,
            "bold": run.bold,
            "italic": run.italic,
            "char_spacing": run.letter_spacing,
            "break_line": run.break_line,
            "align": run.align,
        }
        for run in element.runs
    ]
    fill = element.fill
    return add_multi_format_textbox(
        slide,
        runs,
        left=g.x,
        top=g.y,
        width=g.w,
        height=g.h,
        alignment=element.horizontal_align,
        vertical_anchor=element.vertical_align,
        zero_margins=element.inset_zero,
        fill_color=fill.color.hex if fill else None,
        fill_transparency=fill.color.opacity_pct if fill else 0.0,
    )


def emit_shape(slide, element: ShapeElement, base_dir: Path | None = None) -> object:
    g = element.geometry
    border = element.border

    if element.shape_kind == "line":
        return add_line(
            slide,
            g.x, g.y, g.x + g.w, g.y + g.h,
            color=border.color.hex if border else "000000",
            width=border.width_pt if border else 1.0,
            transparency=border.color.opacity_pct if border else 0.0,
        )

    fill = element.fill
    radius = None
    if element.shape_kind == "rounded_rect":
        radius = element.corner_radius or 0.2
    return add_rectangle(
        slide,
        g.x, g.y, g.w, g.h,
        fill_color=fill.color.hex if fill else None,
        fill_transparency=fill.color.opacity_pct if fill else 0.0,
        border_color=border.color.hex if border else None,
        border_width=border.width_pt if border else 1.0,
        border_transparency=border.color.opacity_pct if border else 0.0,
        corner_radius=radius,
    )


def emit_image(slide, element: ImageElement, base_dir: Path | None = None) -> object:
    """Embed the image if it exists now; otherwise a captioned gray placeholder."""
    g = element.geometry
    path = resolve_image_path(element.src, base_dir)
    if path is not None and path.exists():
        picture = add_image(slide, path, g.x, g.y, g.w, g.h)
        if picture is not None:
            return picture

    name = image_basename(element.src)
    logger.warning(f"Image unavailable, using placeholder: {element.src or '(empty src)'}")
    return add_image_placeholder(
        slide, g.x, g.y, g.w, g.h,
        caption=f"Image not found: {name}",
    )


def emit_line(slide, element: LineElement, base_dir: Path | None = None) -> object:
    border = element.border
    return add_line(
        slide,
        element.start.x, element.start.y,
        element.end.x, element.end.y,
        color=border.color.hex,
        width=border.width_pt,
        transparency=border.color.opacity_pct,
    )


EMITTERS: Mapping[str, Callable] = MappingProxyType({
    "text": emit_text,
    "shape": emit_shape,
    "image": emit_image,
    "line": emit_line,
})


def emit_element(slide, element, base_dir: Path | None = None) -> object | None:
    """Emit one element through the dispatch table.

    Returns the created shape, or None if the element was skipped.  Shapes a
    failed emitter already added to the slide are removed again.
    """
    emitter = EMITTERS.get(element.kind)
    if emitter is None:
        logger.warning(f"No emitter for element kind '{element.kind}', skipping")
        return None
    shapes_before = len(slide.shapes)
    try:
        return emitter(slide, element, base_dir)
    except Exception as e:
        _discard_shapes_from(slide, shapes_before)
        logger.warning(f"Skipping {element.kind} element at {element.geometry}: {e}")
        return None


def _discard_shapes_from(slide, index: int) -> None:
    for shape in list(slide.shapes)[index:]:
        sp = shape._element
        sp.getparent().remove(sp)


def emit_slide(
    prs,
    slide_model: Slide,
    canvas_width: float,
    canvas_height: float,
    base_dir: Path | None = None,
) -> object:
    """Create one output slide: background, elements in z-order, then notes."""
    slide = add_blank_slide(prs)

    background = slide_model.background
    if background is not None:
        if background.color is not None:
            set_slide_bg_color(slide, background.color.hex)
        if background.image_path:
            picture = add_background_image(
                slide, background.image_path, canvas_width, canvas_height
            )
            if picture is None:
                logger.warning(f"Background image missing: {background.image_path}")

    ordered = sorted(
        enumerate(slide_model.elements),
        key=lambda pair: pair[1].z_order if pair[1].z_order is not None else pair[0],
    )
    for _, element in ordered:
        emit_element(slide, element, base_dir)

    if slide_model.notes:
        add_speaker_notes(slide, slide_model.notes)

    return slide


def image_basename(src: str | None) -> str:
    """File name of an image reference, for captions."""
    if not src:
        return "(no source)"
    name = Path(unquote(urlparse(src).path)).name
    return name or src
