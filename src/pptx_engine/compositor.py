"""Slide composition for the rendered-page path.

Two strategies turn an ExtractedSlide into a deck Slide:

    hybrid      the container screenshot becomes a full-canvas background
                picture and every text node is laid over it as a fully
                transparent, correctly placed text box, so the slide looks
                exactly like the page while its text stays selectable and
                searchable.
    structural  no screenshot; painted nodes become shapes, text becomes
                visible text, icons become glyph text, images stay images.

Both map container pixels to canvas inches with the same per-axis scale.
"""

import logging
from collections.abc import Mapping
from pathlib import Path

from src.schemas.deck_schema import (
    Border,
    ColorSpec,
    Fill,
    Geometry,
    ImageElement,
    Run,
    ShapeElement,
    Slide,
    SlideBackground,
    TextElement,
)
from src.schemas.dom_schema import ComputedStyle, DomRect, ExtractedElement, ExtractedSlide
from src.pptx_engine.fallbacks import (
    DEFAULT_FONT_FALLBACKS,
    ICON_FONT_FACE,
    primary_font_family,
    resolve_font,
)
from src.pptx_engine.style_utils import (
    DEFAULT_DPI,
    PX_TO_PT,
    extract_gradient_colors,
    font_size_pt,
    is_bold_weight,
    is_transparent,
    map_text_align,
    parse_float,
    parse_px,
    to_hex_and_opacity,
)

logger = logging.getLogger(__name__)

OVERLAY_OPACITY_PCT = 100.0


def scale_factors(
    measured_width: float,
    measured_height: float,
    canvas_width: float,
    canvas_height: float,
) -> tuple[float, float]:
    """Inches per container pixel on each axis.

    A container that measured zero on an axis falls back to plain 96 DPI
    for that axis.
    """
    scale_x = canvas_width / measured_width if measured_width > 0 else 1 / DEFAULT_DPI
    scale_y = canvas_height / measured_height if measured_height > 0 else 1 / DEFAULT_DPI
    return scale_x, scale_y


def scaled_geometry(rect: DomRect, scale_x: float, scale_y: float) -> Geometry:
    return Geometry(x=rect.x, y=rect.y, w=rect.width, h=rect.height).scaled(scale_x, scale_y)


# ---------------------------------------------------------------------------
# Hybrid
# ---------------------------------------------------------------------------

def composite_slide(
    extracted: ExtractedSlide,
    screenshot_path: str | Path,
    canvas_width: float,
    canvas_height: float,
    font_table: Mapping[str, str] = DEFAULT_FONT_FALLBACKS,
) -> Slide:
    """Screenshot background plus an invisible, selectable text layer."""
    scale_x, scale_y = scale_factors(
        extracted.measured_width, extracted.measured_height, canvas_width, canvas_height
    )
    slide = Slide(background=SlideBackground(image_path=str(screenshot_path)))

    for element in extracted.elements:
        if element.category != "text" or not element.text.strip():
            continue
        overlay = _text_element(
            element, scale_x, scale_y, font_table,
            color=ColorSpec(
                hex=to_hex_and_opacity(element.style.color).hex,
                opacity_pct=OVERLAY_OPACITY_PCT,
            ),
        )
        slide.add_element(overlay)

    logger.debug(
        f"Slide {extracted.index + 1}: {len(slide.elements)} overlay text boxes "
        f"(scale {scale_x:.4f} x {scale_y:.4f} in/px)"
    )
    return slide


# ---------------------------------------------------------------------------
# Structural
# ---------------------------------------------------------------------------

def structural_slide(
    extracted: ExtractedSlide,
    canvas_width: float,
    canvas_height: float,
    font_table: Mapping[str, str] = DEFAULT_FONT_FALLBACKS,
) -> Slide:
    """Rebuild the container as native shapes, text, icons and images."""
    scale_x, scale_y = scale_factors(
        extracted.measured_width, extracted.measured_height, canvas_width, canvas_height
    )
    slide = Slide(background=_container_background(extracted))

    for element in extracted.elements:
        if element.paints and element.category != "image":
            slide.add_element(_shape_element(element, scale_x, scale_y))

        if element.category == "text" and element.text.strip():
            slide.add_element(_text_element(
                element, scale_x, scale_y, font_table,
                color=to_hex_and_opacity(element.style.color),
            ))
        elif element.category == "icon":
            glyph = element.icon_glyph
            if glyph:
                icon = _text_element(
                    element, scale_x, scale_y, font_table,
                    color=to_hex_and_opacity(element.style.color),
                    text=glyph,
                )
                icon.horizontal_align = "center"
                icon.runs[-1].align = "center"
                icon.runs[-1].font_face = ICON_FONT_FACE
                slide.add_element(icon)
            else:
                logger.debug(f"Icon without glyph skipped ({element.tag})")
        elif element.category == "image":
            slide.add_element(ImageElement(
                geometry=scaled_geometry(element.rect, scale_x, scale_y),
                src=element.src or "",
            ))

    return slide


def _container_background(extracted: ExtractedSlide) -> SlideBackground | None:
    if not is_transparent(extracted.background_color):
        return SlideBackground(color=to_hex_and_opacity(extracted.background_color))
    if extracted.gradient and extracted.gradient.colors:
        return SlideBackground(color=to_hex_and_opacity(extracted.gradient.colors[0]))
    return None


def _shape_element(element: ExtractedElement, scale_x: float, scale_y: float) -> ShapeElement:
    style = element.style
    geometry = scaled_geometry(element.rect, scale_x, scale_y)

    fill = None
    gradient_colors = extract_gradient_colors(style.background_image)
    if not is_transparent(style.background_color):
        fill = Fill(color=_with_element_opacity(to_hex_and_opacity(style.background_color), style))
    elif gradient_colors:
        fill = Fill(color=_with_element_opacity(to_hex_and_opacity(gradient_colors[0]), style))

    border = None
    border_px = parse_px(style.border_width)
    if border_px > 0 and style.border_style not in ("none", "hidden") and not is_transparent(style.border_color):
        border = Border(
            color=_with_element_opacity(to_hex_and_opacity(style.border_color), style),
            width_pt=round(border_px * PX_TO_PT, 2),
        )

    radius_px = parse_px(style.border_radius)
    if radius_px > 0:
        return ShapeElement(
            geometry=geometry,
            shape_kind="rounded_rect",
            fill=fill,
            border=border,
            corner_radius=radius_px * min(scale_x, scale_y),
        )
    return ShapeElement(geometry=geometry, fill=fill, border=border)


def _with_element_opacity(color: ColorSpec, style: ComputedStyle) -> ColorSpec:
    """Fold the node's own CSS opacity into a color's transparency."""
    node_opacity = min(1.0, max(0.0, parse_float(style.opacity, 1.0)))
    if node_opacity >= 1.0:
        return color
    visible = (1 - color.opacity_pct / 100) * node_opacity
    return ColorSpec(hex=color.hex, opacity_pct=round((1 - visible) * 100, 2))


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------

def _text_element(
    element: ExtractedElement,
    scale_x: float,
    scale_y: float,
    font_table: Mapping[str, str],
    color: ColorSpec,
    text: str | None = None,
) -> TextElement:
    style = element.style
    align = map_text_align(style.text_align)
    run = Run(
        text=element.text.strip() if text is None else text,
        font_face=resolve_font(primary_font_family(style.font_family), font_table),
        font_size_pt=font_size_pt(style.font_size),
        color=color,
        bold=is_bold_weight(style.font_weight),
        italic=style.font_style in ("italic", "oblique"),
        letter_spacing=round(parse_px(style.letter_spacing) * PX_TO_PT, 2),
        break_line=True,
        align=align,
    )
    return TextElement(
        geometry=scaled_geometry(element.rect, scale_x, scale_y),
        runs=[run],
        horizontal_align=align,
        vertical_align="middle",
        inset_zero=True,
    )
