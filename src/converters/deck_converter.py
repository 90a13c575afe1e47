"""End-to-end conversion: one source document -> one .pptx file.

Three ingestion paths share the same assembler and terminal write:

  - convert_xml          declarative scene, canvas from the declared size
  - convert_static_html  BeautifulSoup + Tailwind tables, fixed 16:9 canvas
  - convert_dom          headless browser; hybrid or structural composition

The DOM path is async and strictly sequential: navigate, snapshot, one
screenshot per slide, then the write.
"""

import asyncio
import logging
from pathlib import Path

from src.exceptions import ConversionError
from src.ingest import input_kind
from src.ingest.dom_extractor import BrowserSession, extract_slide, is_page_url, to_page_url
from src.ingest.static_html import parse_static_html
from src.ingest.xml_scene import parse_scene
from src.pptx_engine.assembler import DeckAssembler
from src.pptx_engine.compositor import composite_slide, structural_slide
from src.pptx_engine.fallbacks import build_font_table
from src.schemas.config_schema import ConverterConfig
from src.utils.file_utils import (
    ensure_directory,
    get_temp_directory,
    remove_directory,
    timestamped_output_path,
)

logger = logging.getLogger(__name__)


class DeckConverter:
    """Runs one conversion described by a ConverterConfig."""

    def __init__(self, config: ConverterConfig):
        self.config = config
        self.font_table = build_font_table(config.font_fallbacks)

    @property
    def input_path(self) -> Path:
        return Path(self.config.input_path)

    def _default_output(self) -> Path:
        return self.input_path.with_suffix(".pptx")

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def convert_xml(self) -> Path:
        document = parse_scene(self.input_path, dpi=self.config.dpi, font_table=self.font_table)
        assembler = DeckAssembler.from_document(document, base_dir=self.input_path.parent)
        return assembler.write(self.config.output_path or self._default_output())

    def convert_static_html(self) -> Path:
        document = parse_static_html(
            self.input_path,
            canvas_width=self.config.canvas_width_in,
            canvas_height=self.config.canvas_height_in,
            container_selector=self.config.container_selector,
        )
        assembler = DeckAssembler.from_document(document, base_dir=self.input_path.parent)
        return assembler.write(self.config.output_path or self._default_output())

    async def convert_dom(self, session: BrowserSession | None = None) -> Path:
        """Render the page and build one slide per container.

        *session* defaults to a fresh headless BrowserSession; anything with
        the same async interface can stand in for it.
        """
        cfg = self.config
        if session is None:
            session = BrowserSession(
                viewport_width=cfg.viewport_width,
                viewport_height=cfg.viewport_height,
                navigation_timeout_ms=cfg.navigation_timeout_ms,
                settle_ms=cfg.settle_ms,
            )

        created_temp = cfg.temp_dir is None
        temp_dir = get_temp_directory() if created_temp else ensure_directory(cfg.temp_dir)
        screenshots: list[Path] = []
        base_dir = None if is_page_url(cfg.input_path) else self.input_path.parent
        assembler = DeckAssembler(cfg.canvas_width_in, cfg.canvas_height_in, base_dir=base_dir)

        async with session:
            await session.navigate(to_page_url(cfg.input_path))
            snapshots = await session.snapshot_containers(cfg.container_selector)
            if not snapshots:
                logger.warning(f"No slide containers matched '{cfg.container_selector}'")

            for snapshot in snapshots:
                extracted = extract_slide(snapshot)
                if cfg.dom_mode == "hybrid":
                    shot = await session.screenshot_container(
                        cfg.container_selector,
                        snapshot.index,
                        temp_dir / f"slide_{snapshot.index}.png",
                    )
                    screenshots.append(shot)
                    slide = composite_slide(
                        extracted, shot, cfg.canvas_width_in, cfg.canvas_height_in, self.font_table
                    )
                else:
                    slide = structural_slide(
                        extracted, cfg.canvas_width_in, cfg.canvas_height_in, self.font_table
                    )
                assembler.append_slide(slide)
                logger.info(
                    f"Slide {snapshot.index + 1}: {len(extracted.elements)} elements extracted, "
                    f"{len(slide.elements)} emitted ({cfg.dom_mode})"
                )

        saved = assembler.write(cfg.output_path or timestamped_output_path())

        if not cfg.keep_temp_files:
            if created_temp:
                remove_directory(temp_dir)
            else:
                for shot in screenshots:
                    shot.unlink(missing_ok=True)
        return saved

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def convert(self, static_html: bool = False) -> Path:
        """Pick the ingestion path from the input extension and run it.

        Page URLs always go through the browser unless *static_html* is set.
        """
        if is_page_url(self.config.input_path) and not static_html:
            return asyncio.run(self.convert_dom())
        kind = input_kind(self.input_path)
        if kind == "xml":
            return self.convert_xml()
        if static_html:
            return self.convert_static_html()
        return asyncio.run(self.convert_dom())


def convert(config: ConverterConfig, static_html: bool = False) -> Path:
    """Convenience wrapper: build a DeckConverter and run it."""
    try:
        return DeckConverter(config).convert(static_html=static_html)
    except ConversionError:
        logger.error(f"Conversion failed: {config.input_path}")
        raise
