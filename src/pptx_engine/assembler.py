"""Deck assembly: owns the deck model and the single terminal write."""

import logging
from pathlib import Path

from src.exceptions import PersistenceError
from src.schemas.deck_schema import Slide, SlideDocument
from src.pptx_engine.emitter import emit_slide
from src.pptx_engine.slide_operations import create_presentation, save_presentation

logger = logging.getLogger(__name__)


class DeckAssembler:
    """Collect slides into a SlideDocument, then render and persist it once.

    The canvas is fixed at construction; SlideDocument refuses a different
    size once a slide has been appended.
    """

    def __init__(
        self,
        canvas_width_in: float,
        canvas_height_in: float,
        base_dir: str | Path | None = None,
    ):
        self.document = SlideDocument(
            canvas_width_in=canvas_width_in,
            canvas_height_in=canvas_height_in,
        )
        self.base_dir = Path(base_dir) if base_dir is not None else None
        self._written = False

    @classmethod
    def from_document(cls, document: SlideDocument, base_dir: str | Path | None = None) -> "DeckAssembler":
        assembler = cls(document.canvas_width_in, document.canvas_height_in, base_dir)
        assembler.document = document
        return assembler

    @property
    def slide_count(self) -> int:
        return len(self.document.slides)

    def append_slide(self, slide: Slide) -> Slide:
        if self._written:
            raise PersistenceError("Deck already written; cannot append slides")
        return self.document.add_slide(slide)

    def render(self):
        """Build the python-pptx Presentation for the whole document."""
        doc = self.document
        prs = create_presentation(doc.canvas_width_in, doc.canvas_height_in)
        for i, slide_model in enumerate(doc.slides, 1):
            emit_slide(
                prs, slide_model,
                doc.canvas_width_in, doc.canvas_height_in,
                self.base_dir,
            )
            logger.debug(f"Slide {i}: emitted {len(slide_model.elements)} elements")
        return prs

    def write(self, output_path: str | Path) -> Path:
        """Render every slide and persist the deck in one call."""
        if self._written:
            raise PersistenceError("Deck already written", context={"output": str(output_path)})
        prs = self.render()
        try:
            saved = save_presentation(prs, output_path)
        except Exception as e:
            raise PersistenceError(
                f"Could not write deck to {output_path}", cause=e,
            ) from e
        self._written = True
        logger.info(
            f"Saved: {saved} ({self.slide_count} slides, "
            f"{self.document.canvas_width_in:.2f}\"x{self.document.canvas_height_in:.2f}\")"
        )
        return saved
