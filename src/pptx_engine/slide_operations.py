"""Core slide operations using python-pptx.

Creates the presentation at the document's canvas size, adds blank slides,
applies backgrounds and speaker notes, and persists the finished deck in one
step (saved beside the target, patched, then moved into place).
"""

import logging
import os
import re
import shutil
import tempfile
import zipfile
from pathlib import Path

from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.util import Inches

logger = logging.getLogger(__name__)

BLANK_LAYOUT_NAME = "Blank"
BLANK_LAYOUT_INDEX = 6  # BLANK in the default python-pptx template


# ---------------------------------------------------------------------------
# Presentation creation
# ---------------------------------------------------------------------------

def create_presentation(
    width_inches: float = 13.33,
    height_inches: float = 7.5,
) -> Presentation:
    """Create a new blank presentation with the given canvas size."""
    prs = Presentation()
    prs.slide_width = Inches(width_inches)
    prs.slide_height = Inches(height_inches)
    return prs


def add_blank_slide(prs: Presentation) -> object:
    """Add a blank slide (no placeholders)."""
    layouts = prs.slide_layouts
    for layout in layouts:
        if layout.name == BLANK_LAYOUT_NAME:
            return prs.slides.add_slide(layout)
    blank_idx = BLANK_LAYOUT_INDEX
    if blank_idx >= len(layouts):
        blank_idx = len(layouts) - 1
    return prs.slides.add_slide(layouts[blank_idx])


# ---------------------------------------------------------------------------
# Slide-level decoration
# ---------------------------------------------------------------------------

def set_slide_bg_color(slide, hex_color: str) -> None:
    """Set a solid background color on a slide."""
    try:
        fill = slide.background.fill
        fill.solid()
        fill.fore_color.rgb = RGBColor.from_string(hex_color.lstrip("#")[:6].upper())
    except Exception as e:
        logger.warning(f"Could not set background color {hex_color}: {e}")


def add_speaker_notes(slide, notes_text: str) -> None:
    """Add speaker notes to a slide."""
    try:
        slide.notes_slide.notes_text_frame.text = notes_text
    except Exception as e:
        logger.warning(f"Could not add speaker notes: {e}")


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------

def save_presentation(prs: Presentation, output_path: str | Path) -> Path:
    """Write the deck to *output_path* as a single all-or-nothing step.

    The deck is saved to a temp file in the target directory, patched, and
    only then moved over the target, so a failure never leaves a partial file.
    Errors propagate to the caller.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    tmp_fd, tmp_name = tempfile.mkstemp(suffix=".pptx", dir=output_path.parent)
    os.close(tmp_fd)
    tmp_path = Path(tmp_name)
    try:
        prs.save(str(tmp_path))
        fix_notes_master_id(tmp_path)
        shutil.move(str(tmp_path), str(output_path))
    finally:
        tmp_path.unlink(missing_ok=True)
    return output_path


def fix_notes_master_id(pptx_path: Path) -> bool:
    """Inject notesMasterIdLst into presentation.xml if missing.

    python-pptx creates a notesMaster relationship when speaker notes are
    added but omits the required <p:notesMasterIdLst> element in
    presentation.xml.  Keynote and Google Slides reject files without it.

    Returns True when the file was patched.
    """
    with zipfile.ZipFile(pptx_path, "r") as zf:
        pres_rels = zf.read("ppt/_rels/presentation.xml.rels").decode("utf-8")
        pres_xml = zf.read("ppt/presentation.xml").decode("utf-8")
        entries = {name: zf.read(name) for name in zf.namelist()}

    nm_match = re.search(r'Id="([^"]+)"[^>]*notesMaster', pres_rels)
    if not nm_match or "notesMasterIdLst" in pres_xml:
        return False

    rid = nm_match.group(1)
    notes_element = (
        "<p:notesMasterIdLst>"
        f'<p:notesMasterId r:id="{rid}"/>'
        "</p:notesMasterIdLst>"
    )
    patched_xml = pres_xml.replace(
        "</p:sldMasterIdLst>",
        f"</p:sldMasterIdLst>{notes_element}",
    )
    if patched_xml == pres_xml:
        logger.warning("Could not find insertion point for notesMasterIdLst")
        return False

    entries["ppt/presentation.xml"] = patched_xml.encode("utf-8")
    with zipfile.ZipFile(pptx_path, "w", zipfile.ZIP_DEFLATED) as zf_out:
        for name, data in entries.items():
            zf_out.writestr(name, data)
    logger.debug(f"Fixed notesMasterIdLst (r:id={rid})")
    return True
