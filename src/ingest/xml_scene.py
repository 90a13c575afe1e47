"""Declarative XML scene ingestion.

Parses a ``<presentation>`` scene document into a SlideDocument.  Geometry is
declared in pixels (topLeftX/topLeftY/width/height) and converted to inches
at the document DPI; colors are rgb()/rgba() strings.

    <presentation width="960" height="540">
      <slide>
        <style><fill><fillColor color="rgb(20,20,20)"/></fill></style>
        <data> shape | img | line ... </data>
        <note><content><p>Speaker notes</p></content></note>
      </slide>
    </presentation>

Image sources are passed through unresolved; nothing here touches the
filesystem except reading the scene itself.
"""

import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from types import MappingProxyType

from lxml import etree

from src.exceptions import SceneParseError
from src.schemas.deck_schema import (
    Border,
    ColorSpec,
    Fill,
    Geometry,
    ImageElement,
    LineElement,
    Point,
    Run,
    ShapeElement,
    Slide,
    SlideBackground,
    SlideDocument,
    TextElement,
)
from src.pptx_engine.fallbacks import DEFAULT_FONT_FALLBACKS, resolve_font
from src.pptx_engine.style_utils import (
    DEFAULT_DPI,
    DEFAULT_FONT_SIZE_PT,
    map_text_align,
    map_vertical_align,
    parse_float,
    px_to_inch,
    to_hex_and_opacity,
)

logger = logging.getLogger(__name__)

DEFAULT_WIDTH_PX = 960
DEFAULT_HEIGHT_PX = 540
ROUNDED_RADIUS_IN = 0.2


def parse_scene(
    source: str | Path | bytes,
    dpi: float = DEFAULT_DPI,
    font_table: Mapping[str, str] = DEFAULT_FONT_FALLBACKS,
) -> SlideDocument:
    """Parse a scene document (path, XML text, or bytes) into a SlideDocument.

    Raises:
        SceneParseError: the document cannot be read or is not a scene.
    """
    root = _load_root(source)
    if root.tag != "presentation":
        raise SceneParseError(
            f"Expected <presentation> root, found <{root.tag}>",
            context={"source": _describe(source)},
        )

    width_px = parse_float(root.get("width"), DEFAULT_WIDTH_PX) or DEFAULT_WIDTH_PX
    height_px = parse_float(root.get("height"), DEFAULT_HEIGHT_PX) or DEFAULT_HEIGHT_PX
    document = SlideDocument(
        canvas_width_in=px_to_inch(width_px, dpi),
        canvas_height_in=px_to_inch(height_px, dpi),
    )

    for i, slide_node in enumerate(root.findall("slide"), 1):
        slide = parse_slide(slide_node, dpi, font_table)
        document.add_slide(slide)
        logger.info(f"Slide {i}: {len(slide.elements)} elements")

    if not document.slides:
        logger.warning("Scene contains no <slide> elements")
    return document


def parse_slide(
    slide_node: etree._Element,
    dpi: float = DEFAULT_DPI,
    font_table: Mapping[str, str] = DEFAULT_FONT_FALLBACKS,
) -> Slide:
    slide = Slide()

    bg_color = slide_node.find("style/fill/fillColor")
    if bg_color is not None and bg_color.get("color"):
        slide.background = SlideBackground(color=to_hex_and_opacity(bg_color.get("color")))

    for node in normalize_elements(slide_node.find("data")):
        handler = ELEMENT_PARSERS.get(node.tag)
        try:
            element = handler(node, dpi, font_table)
        except ValueError as e:
            logger.warning(f"Skipping malformed <{node.tag}> element: {e}")
            continue
        if element is not None:
            slide.add_element(element)

    slide.notes = parse_notes(slide_node.find("note/content"))
    return slide


def normalize_elements(data: etree._Element | None) -> list[etree._Element]:
    """Flatten <data> children into document order, keeping known kinds only."""
    if data is None:
        return []
    elements = []
    for child in data:
        if not isinstance(child.tag, str):
            continue  # comments, processing instructions
        if child.tag not in ELEMENT_PARSERS:
            logger.debug(f"Ignoring unknown scene element <{child.tag}>")
            continue
        elements.append(child)
    return elements


# ---------------------------------------------------------------------------
# Per-kind parsers
# ---------------------------------------------------------------------------

def _geometry(node: etree._Element, dpi: float) -> Geometry:
    return Geometry(
        x=px_to_inch(node.get("topLeftX"), dpi),
        y=px_to_inch(node.get("topLeftY"), dpi),
        w=px_to_inch(node.get("width"), dpi),
        h=px_to_inch(node.get("height"), dpi),
    )


def parse_shape(node, dpi, font_table) -> TextElement | ShapeElement | None:
    if node.get("type") == "text":
        return parse_text(node, dpi, font_table)

    shape_type = node.get("type")
    fill_color = node.find("fill/fillColor")
    fill_value = fill_color.get("color") if fill_color is not None else None
    border_node = node.find("border")
    border_value = border_node.get("color") if border_node is not None else None

    fill = Fill(color=to_hex_and_opacity(fill_value)) if fill_value else None
    border = None
    if border_value:
        border = Border(
            color=to_hex_and_opacity(border_value),
            width_pt=_border_width(border_node.get("width"), 1.0),
        )
    if fill is None and border is None:
        fill = Fill(color=ColorSpec(hex="FFFFFF", opacity_pct=100))

    if shape_type == "round-rect":
        return ShapeElement(
            geometry=_geometry(node, dpi),
            shape_kind="rounded_rect",
            fill=fill,
            border=border,
            corner_radius=ROUNDED_RADIUS_IN,
        )
    if shape_type == "line":
        return ShapeElement(geometry=_geometry(node, dpi), shape_kind="line", border=border)
    return ShapeElement(geometry=_geometry(node, dpi), fill=fill, border=border)


def parse_text(node, dpi, font_table) -> TextElement | None:
    """Text shape: paragraphs of spans, one Run per span.

    The last run of each non-empty paragraph closes it (break_line) and
    carries the paragraph alignment: content@textAlign, else p@align,
    else left.
    """
    content = node.find("content")
    if content is None:
        logger.debug("Text shape without <content> skipped")
        return None

    box_align = map_text_align(content.get("textAlign")) if content.get("textAlign") else None
    runs: list[Run] = []
    for p in content.findall("p"):
        spans = p.findall("span")
        if not spans:
            continue
        for span in spans:
            runs.append(_parse_run(span, font_table))
        runs[-1].break_line = True
        runs[-1].align = box_align or map_text_align(p.get("align"))

    return TextElement(
        geometry=_geometry(node, dpi),
        runs=runs,
        horizontal_align=box_align or "left",
        vertical_align=map_vertical_align(content.get("verticalAlign")),
    )


def _parse_run(span: etree._Element, font_table: Mapping[str, str]) -> Run:
    raw_size = span.get("fontSize")
    font_size = parse_float(raw_size, -1.0) if raw_size else DEFAULT_FONT_SIZE_PT
    if font_size <= 0:
        logger.warning(f"Invalid fontSize '{span.get('fontSize')}', using {DEFAULT_FONT_SIZE_PT}")
        font_size = DEFAULT_FONT_SIZE_PT
    return Run(
        text=span.text or "",
        font_face=resolve_font(span.get("fontFamily") or "Arial", font_table),
        font_size_pt=font_size,
        color=to_hex_and_opacity(span.get("color")),
        bold=span.get("bold") == "true",
        italic=span.get("italic") == "true",
        letter_spacing=parse_float(span.get("letterSpacing"), 0.0),
    )


def parse_image(node, dpi, font_table) -> ImageElement:
    return ImageElement(geometry=_geometry(node, dpi), src=node.get("src") or "")


def parse_line(node, dpi, font_table) -> LineElement:
    start = Point(
        x=px_to_inch(node.get("startX") or node.get("topLeftX"), dpi),
        y=px_to_inch(node.get("startY") or node.get("topLeftY"), dpi),
    )
    end = Point(
        x=px_to_inch(node.get("endX") or 0, dpi),
        y=px_to_inch(node.get("endY") or 0, dpi),
    )
    border_node = node.find("border")
    if border_node is None:
        return LineElement.between(start, end)
    border = Border(
        color=to_hex_and_opacity(border_node.get("color")),
        width_pt=_border_width(border_node.get("width"), 2.0),
    )
    return LineElement.between(start, end, border)


def _border_width(value, default: float) -> float:
    width = parse_float(value, default)
    if width < 0:
        logger.warning(f"Invalid border width '{value}', using {default}")
        return default
    return width


ELEMENT_PARSERS: Mapping[str, Callable] = MappingProxyType({
    "shape": parse_shape,
    "img": parse_image,
    "line": parse_line,
})


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------

def parse_notes(content: etree._Element | None) -> str | None:
    """Speaker notes from note/content/p, one line per paragraph."""
    if content is None:
        return None
    lines = [_note_paragraph_text(p) for p in content.findall("p")]
    lines = [line for line in lines if line]
    return "\n".join(lines) or None


def _note_paragraph_text(p: etree._Element) -> str:
    # Plain paragraph, or a structured one with its own leading text
    direct = (p.text or "").strip()
    if direct:
        return direct
    span = p.find("span")
    if span is not None and (span.text or "").strip():
        return span.text.strip()
    if len(p) == 0:
        return ""
    logger.warning("Structured note paragraph without text; keeping raw markup")
    return etree.tostring(p, encoding="unicode", with_tail=False)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _load_root(source: str | Path | bytes) -> etree._Element:
    parser = etree.XMLParser(remove_blank_text=True, resolve_entities=False)
    try:
        if isinstance(source, bytes):
            return etree.fromstring(source, parser)
        if isinstance(source, str) and source.lstrip().startswith("<"):
            return etree.fromstring(source.encode("utf-8"), parser)
        path = Path(source)
        logger.info(f"Reading scene: {path}")
        return etree.parse(str(path), parser).getroot()
    except (OSError, etree.XMLSyntaxError) as e:
        raise SceneParseError(
            f"Could not parse scene document: {_describe(source)}",
            cause=e,
        ) from e


def _describe(source) -> str:
    if isinstance(source, bytes) or (isinstance(source, str) and source.lstrip().startswith("<")):
        return "<inline XML>"
    return str(source)
