"""Input ingestion: turn a source document into a SlideDocument.

Dispatches on file extension:
  - .xml                 -> declarative scene (xml_scene)
  - .html / .htm         -> rendered page (dom_extractor, async) or static HTML
"""

from pathlib import Path

from src.exceptions import UnsupportedInputError

XML_EXTENSIONS = (".xml",)
HTML_EXTENSIONS = (".html", ".htm")


def input_kind(path: str | Path) -> str:
    """Return "xml" or "html" for a source path.

    Raises:
        UnsupportedInputError: extension has no ingestion path.
    """
    suffix = Path(path).suffix.lower()
    if suffix in XML_EXTENSIONS:
        return "xml"
    if suffix in HTML_EXTENSIONS:
        return "html"
    raise UnsupportedInputError(
        f"Unsupported input type: {suffix or '(none)'}",
        context={"path": str(path), "supported": list(XML_EXTENSIONS + HTML_EXTENSIONS)},
    )
