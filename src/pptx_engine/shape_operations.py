"""Shape manipulation operations for PowerPoint slides.

Provides primitives for rectangles (sharp or rounded), straight lines, and
the labelled placeholder box that stands in for a missing image.  Colors are
6-digit hex strings; transparency is a percentage written into the DrawingML
<a:alpha> element, which python-pptx does not expose directly.
"""

from lxml import etree
from pptx.dml.color import RGBColor
from pptx.enum.shapes import MSO_CONNECTOR, MSO_SHAPE
from pptx.enum.text import MSO_ANCHOR, PP_ALIGN
from pptx.util import Inches, Pt

# Namespace for DrawingML elements
_NS_A = "http://schemas.openxmlformats.org/drawingml/2006/main"

PLACEHOLDER_FILL = "CCCCCC"
PLACEHOLDER_BORDER = "999999"
PLACEHOLDER_TEXT = "404040"


def add_rectangle(
    slide,
    left: float,
    top: float,
    width: float,
    height: float,
    fill_color: str | None = None,
    fill_transparency: float = 0.0,
    border_color: str | None = None,
    border_width: float = 1.0,
    border_transparency: float = 0.0,
    corner_radius: float | None = None,
) -> object:
    """Add a rectangle shape to a slide.

    Args:
        slide: The slide to add the shape to.
        left, top, width, height: Position and size in inches.
        fill_color: Fill color as hex string (e.g., "1A73E8"). None for no fill.
        fill_transparency: Fill transparency percent (100 = invisible).
        border_color: Border color as hex string. None for no border.
        border_width: Border width in points.
        border_transparency: Border transparency percent.
        corner_radius: Corner radius in inches; makes a rounded rectangle.

    Returns:
        The created shape.
    """
    shape_type = MSO_SHAPE.ROUNDED_RECTANGLE if corner_radius else MSO_SHAPE.RECTANGLE

    shape = slide.shapes.add_shape(
        shape_type,
        Inches(left),
        Inches(top),
        Inches(max(width, 0)),
        Inches(max(height, 0)),
    )

    if corner_radius:
        shortest = min(width, height)
        if shortest > 0:
            shape.adjustments[0] = min(0.5, corner_radius / shortest)

    if fill_color:
        set_shape_fill(shape, fill_color, fill_transparency)
    else:
        shape.fill.background()

    if border_color:
        set_shape_border(shape, border_color, border_width, border_transparency)
    else:
        shape.line.fill.background()

    return shape


def add_line(
    slide,
    start_x: float,
    start_y: float,
    end_x: float,
    end_y: float,
    color: str = "000000",
    width: float = 2.0,
    transparency: float = 0.0,
) -> object:
    """Add a straight line to a slide.

    Args:
        slide: The slide to add the line to.
        start_x, start_y: Start position in inches.
        end_x, end_y: End position in inches.
        color: Line color as hex string.
        width: Line width in points.
        transparency: Line transparency percent.

    Returns:
        The created connector shape.
    """
    connector = slide.shapes.add_connector(
        MSO_CONNECTOR.STRAIGHT,
        Inches(start_x),
        Inches(start_y),
        Inches(end_x),
        Inches(end_y),
    )
    connector.line.color.rgb = _hex_to_rgb(color)
    connector.line.width = Pt(width)
    set_color_transparency(connector.line.color, transparency)

    return connector


def add_image_placeholder(
    slide,
    left: float,
    top: float,
    width: float,
    height: float,
    caption: str,
    fill_color: str = PLACEHOLDER_FILL,
    border_color: str = PLACEHOLDER_BORDER,
    text_color: str = PLACEHOLDER_TEXT,
    font_size: int = 10,
) -> object:
    """Add a neutral-gray box with a centered caption where an image was expected.

    Args:
        slide: Target slide.
        left, top, width, height: Position and size in inches.
        caption: Label naming the missing asset.
        fill_color: Background fill for the placeholder area.
        border_color: Outline color.
        text_color: Caption color.
        font_size: Caption size in points.

    Returns:
        The created shape.
    """
    shape = add_rectangle(
        slide, left, top, width, height,
        fill_color=fill_color,
        border_color=border_color,
        border_width=1.0,
    )

    tf = shape.text_frame
    tf.word_wrap = True
    tf.vertical_anchor = MSO_ANCHOR.MIDDLE

    p = tf.paragraphs[0]
    p.text = caption
    p.alignment = PP_ALIGN.CENTER
    for run in p.runs:
        run.font.size = Pt(font_size)
        run.font.color.rgb = _hex_to_rgb(text_color)

    return shape


# ---------------------------------------------------------------------------
# Shape modification helpers
# ---------------------------------------------------------------------------


def set_shape_fill(shape, color: str, transparency: float = 0.0) -> None:
    """Set a solid fill, with optional transparency, on an existing shape."""
    shape.fill.solid()
    shape.fill.fore_color.rgb = _hex_to_rgb(color)
    set_color_transparency(shape.fill.fore_color, transparency)


def set_shape_border(shape, color: str, width: float = 1.0, transparency: float = 0.0) -> None:
    """Set the border of an existing shape."""
    shape.line.color.rgb = _hex_to_rgb(color)
    shape.line.width = Pt(width)
    set_color_transparency(shape.line.color, transparency)


def set_color_transparency(color_format, transparency: float) -> None:
    """Write <a:alpha> under the sRGB color of a python-pptx ColorFormat.

    The color must already have been set via ``.rgb``.  Transparency 0 leaves
    the color fully opaque and writes nothing.
    """
    if transparency <= 0:
        return
    srgb = color_format._color._xClr
    for existing in srgb.findall(f"{{{_NS_A}}}alpha"):
        srgb.remove(existing)
    alpha = etree.SubElement(srgb, f"{{{_NS_A}}}alpha")
    alpha.set("val", str(alpha_value(transparency)))


def alpha_value(transparency: float) -> int:
    """DrawingML alpha in thousandths of a percent (100000 = opaque)."""
    transparency = min(100.0, max(0.0, transparency))
    return int(round((100.0 - transparency) * 1000))


def _hex_to_rgb(hex_color: str) -> RGBColor:
    """Convert hex color string to RGBColor."""
    hex_color = hex_color.lstrip("#")
    if len(hex_color) > 6:
        hex_color = hex_color[:6]
    return RGBColor(
        int(hex_color[0:2], 16),
        int(hex_color[2:4], 16),
        int(hex_color[4:6], 16),
    )
