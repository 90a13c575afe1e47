"""Text manipulation operations for PowerPoint slides.

Provides the multi-run text box used by every ingestion path: runs carry
their own font, size, color, transparency and character spacing, and a run
flagged ``break_line`` closes its paragraph.
"""

import logging
from typing import Any

from pptx.dml.color import RGBColor
from pptx.enum.text import MSO_ANCHOR, MSO_AUTO_SIZE, PP_ALIGN
from pptx.util import Inches, Pt

from src.pptx_engine.shape_operations import set_color_transparency, set_shape_fill

logger = logging.getLogger(__name__)


def add_multi_format_textbox(
    slide,
    runs: list[dict[str, Any]],
    left: float,
    top: float,
    width: float,
    height: float,
    alignment: str = "left",
    vertical_anchor: str = "top",
    word_wrap: bool = True,
    zero_margins: bool = False,
    fill_color: str | None = None,
    fill_transparency: float = 0.0,
) -> object:
    """Add a text box with multiple independently formatted runs.

    Args:
        slide: Target slide.
        runs: List of run specifications, each a dict with:
            - text (str): The text content.
            - font_name (str, optional): Font family.
            - font_size (float, optional): Size in points.
            - font_color (str, optional): Hex color.
            - transparency (float, optional): Text transparency percent.
            - bold (bool, optional): Bold flag.
            - italic (bool, optional): Italic flag.
            - char_spacing (float, optional): Letter spacing in points.
            - break_line (bool, optional): This run ends its paragraph.
            - align (str, optional): Alignment of the paragraph this run ends.
        left, top, width, height: Position and size in inches.
        alignment: Default paragraph alignment ("left", "center", "right").
        vertical_anchor: Vertical text position ("top", "middle", "bottom").
        word_wrap: Whether to enable word wrapping.
        zero_margins: Remove the frame's internal margins.
        fill_color: Optional hex background fill for the box.
        fill_transparency: Background fill transparency percent.

    Returns:
        The created text box shape.
    """
    txBox = slide.shapes.add_textbox(
        Inches(left), Inches(top), Inches(max(width, 0)), Inches(max(height, 0))
    )
    tf = txBox.text_frame
    tf.word_wrap = word_wrap
    tf.auto_size = MSO_AUTO_SIZE.NONE
    tf.vertical_anchor = _get_anchor(vertical_anchor)

    if zero_margins:
        tf.margin_left = Inches(0)
        tf.margin_top = Inches(0)
        tf.margin_right = Inches(0)
        tf.margin_bottom = Inches(0)

    if fill_color:
        set_shape_fill(txBox, fill_color, fill_transparency)

    p = tf.paragraphs[0]
    p.alignment = _get_alignment(alignment)

    for i, run_spec in enumerate(runs):
        run = p.add_run()
        run.text = run_spec.get("text", "")
        _format_run(run, run_spec)

        if run_spec.get("break_line"):
            p.alignment = _get_alignment(run_spec.get("align") or alignment)
            if i < len(runs) - 1:
                p = tf.add_paragraph()
                p.alignment = _get_alignment(alignment)

    return txBox


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _format_run(run, run_spec: dict[str, Any]) -> None:
    """Apply one run specification's formatting to a python-pptx run."""
    font = run.font
    if "font_name" in run_spec:
        font.name = run_spec["font_name"]
    if "font_size" in run_spec:
        font.size = Pt(run_spec["font_size"])
    if "bold" in run_spec:
        font.bold = run_spec["bold"]
    if "italic" in run_spec:
        font.italic = run_spec["italic"]
    if "font_color" in run_spec:
        font.color.rgb = _hex_to_rgb(run_spec["font_color"])
        set_color_transparency(font.color, run_spec.get("transparency", 0.0))

    spacing = run_spec.get("char_spacing") or 0
    if spacing:
        # DrawingML spc is in hundredths of a point
        run._r.get_or_add_rPr().set("spc", str(int(round(spacing * 100))))


def _get_alignment(alignment: str) -> int:
    """Convert alignment string to PP_ALIGN constant."""
    align_map = {
        "left": PP_ALIGN.LEFT,
        "center": PP_ALIGN.CENTER,
        "right": PP_ALIGN.RIGHT,
        "justify": PP_ALIGN.JUSTIFY,
    }
    return align_map.get((alignment or "left").lower(), PP_ALIGN.LEFT)


def _get_anchor(vertical_anchor: str) -> int:
    """Convert vertical anchor string to MSO_ANCHOR constant."""
    anchor_map = {
        "top": MSO_ANCHOR.TOP,
        "middle": MSO_ANCHOR.MIDDLE,
        "bottom": MSO_ANCHOR.BOTTOM,
    }
    return anchor_map.get((vertical_anchor or "top").lower(), MSO_ANCHOR.TOP)


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
