#!/usr/bin/env python3
"""Build a PowerPoint presentation from a declarative XML scene.

The scene declares its canvas in pixels (<presentation width height>) and
every element's box in pixels; both are converted at --dpi (default 96).

Usage:
    python scripts/build_from_xml.py scenes/movies_2025.xml -o output/movies.pptx
    python scripts/build_from_xml.py scene.xml --config config/converter.yaml --dpi 72
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.converters.deck_converter import DeckConverter
from src.exceptions import ConversionError
from src.schemas.config_schema import ConverterConfig

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Build PPTX from an XML scene")
    parser.add_argument("xml_file", type=Path, help="Path to the XML scene")
    parser.add_argument("-o", "--output", type=Path, default=None,
                        help="Output PPTX path (default: scene path with .pptx suffix)")
    parser.add_argument("--config", type=Path, default=None,
                        help="Converter config YAML (flags override its values)")
    parser.add_argument("--dpi", type=float, default=None,
                        help="Pixels per inch for scene geometry (default: 96)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    if not args.xml_file.exists():
        print(f"Error: XML file not found: {args.xml_file}", file=sys.stderr)
        sys.exit(1)

    overrides = {"input_path": args.xml_file, "output_path": args.output, "dpi": args.dpi}
    try:
        if args.config:
            config = ConverterConfig.from_yaml(args.config, **overrides)
        else:
            config = ConverterConfig(**{k: v for k, v in overrides.items() if v is not None})
        result_path = DeckConverter(config).convert_xml()
    except (ConversionError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Presentation generated: {result_path}")


if __name__ == "__main__":
    main()
