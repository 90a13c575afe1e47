"""Static HTML ingestion (no browser).

Without a layout engine there are no real coordinates, so content is placed
on a fixed grid and styled from a small set of Tailwind utility classes:

    titles      h1, .text-6xl, .text-4xl          stacked from y=1in, centered
    paragraphs  p, .text-gray-600, .text-gray-700 stacked from y=3in, left
    images      img                               side by side at y=4in

Use the rendered-page path whenever layout fidelity matters.
"""

import logging
from collections.abc import Mapping
from pathlib import Path

from bs4 import BeautifulSoup, Tag

from src.exceptions import SceneParseError
from src.schemas.config_schema import CANVAS_HEIGHT_IN, CANVAS_WIDTH_IN, CONTAINER_SELECTOR
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
    SlideDocument,
    TextElement,
)
from src.pptx_engine.fallbacks import (
    TAILWIND_BG_COLORS,
    TAILWIND_BOLD_CLASSES,
    TAILWIND_FONT_SIZES,
    TAILWIND_TEXT_COLORS,
)
from src.pptx_engine.style_utils import DEFAULT_FONT_SIZE_PT

logger = logging.getLogger(__name__)

TITLE_SELECTOR = "h1, .text-6xl, .text-4xl"
PARAGRAPH_SELECTOR = "p, .text-gray-600, .text-gray-700"
DEFAULT_BG = "FFFFFF"
DEFAULT_TEXT = "000000"
BOLD_TAGS = ("h1", "h2")


def parse_static_html(
    source: str | Path,
    canvas_width: float = CANVAS_WIDTH_IN,
    canvas_height: float = CANVAS_HEIGHT_IN,
    container_selector: str = CONTAINER_SELECTOR,
) -> SlideDocument:
    """Parse an HTML file (or markup) into a SlideDocument, one slide per container."""
    soup = BeautifulSoup(_read_html(source), "html.parser")
    document = SlideDocument(canvas_width_in=canvas_width, canvas_height_in=canvas_height)

    pages = soup.select(container_selector)
    logger.info(f"Found {len(pages)} slide containers ({container_selector})")
    for page in pages:
        document.add_slide(parse_page(page, canvas_width))
    return document


def parse_page(page: Tag, canvas_width: float = CANVAS_WIDTH_IN) -> Slide:
    slide = Slide(background=SlideBackground(color=ColorSpec(hex=background_color(page))))
    text_width = canvas_width * 0.8

    for i, el in enumerate(page.select(TITLE_SELECTOR)):
        slide.add_element(_text(
            el, Geometry(x=1, y=1 + i * 1.5, w=text_width, h=1),
            align="center", bold=is_bold(el),
        ))

    for i, el in enumerate(page.select(PARAGRAPH_SELECTOR)):
        slide.add_element(_text(
            el, Geometry(x=1, y=3 + i * 0.5, w=text_width, h=0.5),
            align="left", bold=False,
        ))

    for i, img in enumerate(page.select("img")):
        src = img.get("src") or ""
        geometry = Geometry(x=2 + i * 4, y=4, w=3, h=2)
        if "placeholder" in src:
            slide.add_element(ShapeElement(
                geometry=geometry,
                fill=Fill(color=ColorSpec(hex="CCCCCC")),
                border=Border(color=ColorSpec(hex="999999"), width_pt=1),
            ))
            slide.add_element(TextElement(
                geometry=geometry,
                runs=[Run(text="Image Placeholder", font_size_pt=10, break_line=True, align="center")],
                horizontal_align="center",
                vertical_align="middle",
            ))
        elif src.startswith("http"):
            slide.add_element(ImageElement(geometry=geometry, src=src))
        else:
            logger.debug(f"Skipping image with unsupported src: {src or '(empty)'}")

    return slide


# ---------------------------------------------------------------------------
# Tailwind lookups
# ---------------------------------------------------------------------------

def _classes(el: Tag) -> list[str]:
    return el.get("class") or []


def background_color(el: Tag, table: Mapping[str, str] = TAILWIND_BG_COLORS) -> str:
    color = DEFAULT_BG
    classes = _classes(el)
    for name, hex_color in table.items():
        if name in classes:
            color = hex_color
    return color


def text_color(el: Tag, table: Mapping[str, str] = TAILWIND_TEXT_COLORS) -> str:
    color = DEFAULT_TEXT
    classes = _classes(el)
    for name, hex_color in table.items():
        if name in classes:
            color = hex_color
    return color


def font_size(el: Tag) -> float:
    classes = _classes(el)
    for name, size in TAILWIND_FONT_SIZES:
        if name in classes:
            return float(size)
    return DEFAULT_FONT_SIZE_PT


def is_bold(el: Tag) -> bool:
    return el.name in BOLD_TAGS or not TAILWIND_BOLD_CLASSES.isdisjoint(_classes(el))


def _text(el: Tag, geometry: Geometry, align: str, bold: bool) -> TextElement:
    run = Run(
        text=el.get_text().strip(),
        font_size_pt=font_size(el),
        color=ColorSpec(hex=text_color(el)),
        bold=bold,
        break_line=True,
        align=align,
    )
    return TextElement(geometry=geometry, runs=[run], horizontal_align=align)


def _read_html(source: str | Path) -> str:
    if isinstance(source, str) and source.lstrip().startswith("<"):
        return source
    path = Path(source)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SceneParseError(f"Could not read HTML document: {path}", cause=e) from e
