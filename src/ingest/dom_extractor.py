"""Rendered-page extraction.

A headless Chromium page (Playwright async API) renders the HTML document.
For every slide container the browser returns one nested snapshot tree of
bounding boxes and computed styles; everything after that is plain Python:

    flatten_tree      pre-order walk with an explicit stack
    is_visible        zero-size / display:none / visibility:hidden / opacity 0
    classify_node     text > image > icon > decorative, else dropped
    extract_slide     container-relative coordinates, stable z-index sort

The page is shared by every step and is only ever used sequentially.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from src.exceptions import NavigationError
from src.schemas.config_schema import (
    CONTAINER_SELECTOR,
    VIEWPORT_HEIGHT_PX,
    VIEWPORT_WIDTH_PX,
)
from src.schemas.dom_schema import (
    ContainerSnapshot,
    DomNode,
    ExtractedElement,
    ExtractedSlide,
    GradientSpec,
)
from src.pptx_engine.fallbacks import ICON_FALLBACKS, is_icon_node, resolve_icon_glyph
from src.pptx_engine.style_utils import extract_gradient_colors, is_transparent, parse_float, parse_px

logger = logging.getLogger(__name__)

RENDER_FIXUP_CSS = (
    ".ppt-page-wrapper { margin: 0 !important; padding: 0 !important; }\n"
    "* { -webkit-print-color-adjust: exact !important; }"
)

# Serializes every container and its descendants as a nested tree.  Rects are
# page-global; Python makes them container-relative.
SNAPSHOT_SCRIPT = """
(selector) => {
    const STYLE_KEYS = [
        'color', 'backgroundColor', 'backgroundImage', 'fontSize', 'fontWeight',
        'fontStyle', 'fontFamily', 'letterSpacing', 'textAlign', 'borderRadius',
        'borderWidth', 'borderStyle', 'borderColor', 'boxShadow', 'opacity',
        'zIndex', 'display', 'visibility'
    ];
    const ICON_CLASSES = ['fa', 'fas', 'far', 'fab'];

    const styleOf = (el) => {
        const computed = window.getComputedStyle(el);
        const out = {};
        for (const key of STYLE_KEYS) out[key] = computed[key] || '';
        return out;
    };
    const rectOf = (el) => {
        const r = el.getBoundingClientRect();
        return { x: r.left, y: r.top, width: r.width, height: r.height };
    };
    const snapshot = (el) => {
        const hasDirectText = Array.from(el.childNodes).some(
            (n) => n.nodeType === Node.TEXT_NODE && n.textContent.trim().length > 0
        );
        const classes = Array.from(el.classList);
        const isIcon = classes.some((c) => ICON_CLASSES.includes(c));
        return {
            tag: el.tagName,
            classes: classes,
            rect: rectOf(el),
            style: styleOf(el),
            hasDirectText: hasDirectText,
            text: hasDirectText ? (el.innerText || el.textContent || '').trim() : '',
            src: el.tagName === 'IMG' ? el.src : null,
            iconContent: isIcon
                ? window.getComputedStyle(el, '::before').getPropertyValue('content')
                : null,
            children: Array.from(el.children).map(snapshot),
        };
    };

    return Array.from(document.querySelectorAll(selector)).map((el, index) => ({
        index: index,
        rect: rectOf(el),
        style: styleOf(el),
        children: Array.from(el.children).map(snapshot),
    }));
}
"""


# ---------------------------------------------------------------------------
# Browser collaborator
# ---------------------------------------------------------------------------

class BrowserSession:
    """One headless Chromium page, used strictly sequentially.

    Usage::

        async with BrowserSession() as session:
            await session.navigate(url)
            snapshots = await session.snapshot_containers(".ppt-page-wrapper")
            await session.screenshot_container(".ppt-page-wrapper", 0, "slide_0.png")
    """

    def __init__(
        self,
        viewport_width: int = VIEWPORT_WIDTH_PX,
        viewport_height: int = VIEWPORT_HEIGHT_PX,
        navigation_timeout_ms: int = 60000,
        settle_ms: int = 1000,
        fixup_css: str = RENDER_FIXUP_CSS,
    ):
        self.viewport_width = viewport_width
        self.viewport_height = viewport_height
        self.navigation_timeout_ms = navigation_timeout_ms
        self.settle_ms = settle_ms
        self.fixup_css = fixup_css
        self._playwright = None
        self._browser = None
        self.page = None

    async def __aenter__(self) -> "BrowserSession":
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch()
            self.page = await self._browser.new_page(
                viewport={"width": self.viewport_width, "height": self.viewport_height}
            )
        except PlaywrightError as e:
            await self.close()
            raise NavigationError("Could not launch headless browser", cause=e) from e
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
        self.page = None

    async def navigate(self, url: str) -> None:
        """Load *url*, wait for the network to go idle, then let styles settle."""
        logger.info(f"Rendering: {url}")
        try:
            await self.page.goto(url, wait_until="networkidle", timeout=self.navigation_timeout_ms)
            if self.fixup_css:
                await self.page.add_style_tag(content=self.fixup_css)
            await self.page.wait_for_timeout(self.settle_ms)
        except PlaywrightError as e:
            raise NavigationError(
                f"Navigation failed: {url}",
                cause=e,
                context={"timeout_ms": self.navigation_timeout_ms},
            ) from e

    async def snapshot_containers(self, selector: str = CONTAINER_SELECTOR) -> list[ContainerSnapshot]:
        try:
            raw = await self.page.evaluate(SNAPSHOT_SCRIPT, selector)
        except PlaywrightError as e:
            raise NavigationError(f"DOM snapshot failed for '{selector}'", cause=e) from e
        return [ContainerSnapshot.model_validate(item) for item in raw]

    async def screenshot_container(self, selector: str, index: int, path: str | Path) -> Path:
        path = Path(path)
        try:
            handles = await self.page.query_selector_all(selector)
            await handles[index].screenshot(path=str(path))
        except (PlaywrightError, IndexError) as e:
            raise NavigationError(
                f"Screenshot failed for slide {index + 1}",
                cause=e,
                context={"selector": selector, "path": str(path)},
            ) from e
        return path


PAGE_URL_SCHEMES = ("http://", "https://", "file://")


def is_page_url(source: str | Path) -> bool:
    return isinstance(source, str) and source.startswith(PAGE_URL_SCHEMES)


def to_page_url(source: str | Path) -> str:
    """URL for the browser: http(s)/file URLs pass through, paths become file:// URIs."""
    text = str(source)
    if is_page_url(text):
        return text
    return Path(text).resolve().as_uri()


# ---------------------------------------------------------------------------
# Pure extraction
# ---------------------------------------------------------------------------

def flatten_tree(roots: list[DomNode]) -> list[DomNode]:
    """All descendants in depth-first pre-order (document order)."""
    ordered = []
    stack = list(reversed(roots))
    while stack:
        node = stack.pop()
        ordered.append(node)
        stack.extend(reversed(node.children))
    return ordered


def is_visible(node: DomNode) -> bool:
    style = node.style
    if node.rect.width <= 0 or node.rect.height <= 0:
        return False
    if style.display == "none" or style.visibility == "hidden":
        return False
    return parse_float(style.opacity, 1.0) != 0


def node_paints(node: DomNode) -> bool:
    """Background, border, shadow or gradient: the node draws something itself."""
    style = node.style
    return (
        _has_background(node)
        or _has_border(node)
        or style.box_shadow not in ("", "none")
        or "gradient" in (style.background_image or "")
    )


def _has_background(node: DomNode) -> bool:
    return not is_transparent(node.style.background_color)


def _has_border(node: DomNode) -> bool:
    style = node.style
    return parse_px(style.border_width) > 0 and style.border_style not in ("", "none")


def classify_node(node: DomNode) -> Optional[str]:
    """Category of a visible node, or None when it contributes nothing."""
    if node.has_direct_text and node.text.strip():
        return "text"
    if node.tag.upper() == "IMG":
        return "image"
    if is_icon_node(node.classes):
        return "icon"
    if node_paints(node) and (not node.children or _has_background(node) or _has_border(node)):
        return "decorative"
    return None


def extract_slide(
    snapshot: ContainerSnapshot,
    icon_table: Mapping[str, str] = ICON_FALLBACKS,
) -> ExtractedSlide:
    """Flatten, filter, classify and z-sort one container's tree."""
    origin_x, origin_y = snapshot.rect.x, snapshot.rect.y
    elements: list[ExtractedElement] = []

    for dom_index, node in enumerate(flatten_tree(snapshot.children)):
        if not is_visible(node):
            continue
        category = classify_node(node)
        if category is None:
            logger.debug(f"Dropped <{node.tag.lower()}>: no text, image, icon or paint")
            continue
        rect = node.rect.model_copy(update={"x": node.rect.x - origin_x, "y": node.rect.y - origin_y})
        elements.append(ExtractedElement(
            category=category,
            tag=node.tag,
            rect=rect,
            style=node.style,
            text=node.text.strip() if category == "text" else "",
            src=node.src if category == "image" else None,
            icon_glyph=resolve_icon_glyph(node.icon_content, icon_table) if category == "icon" else None,
            paints=node_paints(node),
            dom_index=dom_index,
        ))

    # sorted() is stable: equal z-index keeps document order
    elements = sorted(elements, key=lambda el: el.z_index)

    gradient = None
    colors = extract_gradient_colors(snapshot.style.background_image)
    if len(colors) >= 2:
        gradient = GradientSpec(colors=colors)

    return ExtractedSlide(
        index=snapshot.index,
        measured_width=snapshot.rect.width,
        measured_height=snapshot.rect.height,
        background_color=snapshot.style.background_color,
        background_image=snapshot.style.background_image,
        gradient=gradient,
        elements=elements,
    )
