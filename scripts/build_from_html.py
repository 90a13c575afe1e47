#!/usr/bin/env python3
"""Build a PowerPoint presentation from an HTML slide document.

Every element matching the container selector (default .ppt-page-wrapper)
becomes one 13.33" x 7.5" slide.  Three modes:

  1. **hybrid** (default): render in headless Chromium, screenshot each
     container as the slide background, and lay fully transparent text
     boxes over it so the text stays selectable and searchable.

  2. **structural**: render in headless Chromium and rebuild each
     container as native shapes, visible text, icon glyphs and images.

  3. **static**: no browser.  BeautifulSoup plus a handful of Tailwind
     classes on a fixed layout grid.

The browser modes need Chromium installed for Playwright
(``playwright install chromium``).

Usage:
    python scripts/build_from_html.py deck.html -o output/deck.pptx
    python scripts/build_from_html.py deck.html --mode structural --keep-temp
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.converters.deck_converter import DeckConverter
from src.exceptions import ConversionError
from src.ingest.dom_extractor import is_page_url
from src.schemas.config_schema import ConverterConfig

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Build PPTX from an HTML slide document")
    parser.add_argument("html_file", help="Path to HTML file, or an http(s) page URL")
    parser.add_argument("-o", "--output", type=Path, default=None,
                        help="Output PPTX path (default: <epoch_ms>.pptx, or <input>.pptx for static)")
    parser.add_argument("--config", type=Path, default=None,
                        help="Converter config YAML (flags override its values)")
    parser.add_argument("--mode", choices=["hybrid", "structural", "static"], default=None,
                        help="Conversion mode (default: hybrid)")
    parser.add_argument("--canvas-width", type=float, default=None,
                        help="Slide width in inches (default: 13.33)")
    parser.add_argument("--canvas-height", type=float, default=None,
                        help="Slide height in inches (default: 7.5)")
    parser.add_argument("--dpi", type=float, default=None,
                        help="Pixels per inch (default: 96)")
    parser.add_argument("--keep-temp", action="store_true",
                        help="Keep slide screenshots after the deck is written")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    source = args.html_file if is_page_url(args.html_file) else Path(args.html_file)
    if isinstance(source, Path) and not source.exists():
        print(f"Error: HTML file not found: {args.html_file}", file=sys.stderr)
        sys.exit(1)

    static_html = args.mode == "static"
    overrides = {
        "input_path": source,
        "output_path": args.output,
        "dpi": args.dpi,
        "canvas_width_in": args.canvas_width,
        "canvas_height_in": args.canvas_height,
        "dom_mode": None if static_html else args.mode,
        "keep_temp_files": True if args.keep_temp else None,
    }
    try:
        if args.config:
            config = ConverterConfig.from_yaml(args.config, **overrides)
        else:
            config = ConverterConfig(**{k: v for k, v in overrides.items() if v is not None})
        result_path = DeckConverter(config).convert(static_html=static_html)
    except (ConversionError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Presentation generated: {result_path}")


if __name__ == "__main__":
    main()
