"""Pydantic models for the normalized slide-deck model.

Every ingestion path (declarative XML, rendered DOM, static HTML) produces a
SlideDocument built from these models, and the emitter consumes only these
models.  All spatial values are in inches relative to the slide's top-left
corner; font sizes are typographic points.

Colors are stored as a ColorSpec: a 6-digit hex string plus a *transparency*
percentage (100 = invisible, 0 = opaque), which is what PowerPoint stores.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from src.exceptions import CanvasLockedError


HorizontalAlign = Literal["left", "center", "right"]
VerticalAlign = Literal["top", "middle", "bottom"]


# ---------------------------------------------------------------------------
# Style primitives
# ---------------------------------------------------------------------------

class ColorSpec(BaseModel):
    """Resolved color: hex RGB plus transparency percentage."""

    hex: str = Field(default="000000", pattern=r"^[0-9A-F]{6}$")
    opacity_pct: float = Field(
        default=0.0,
        ge=0,
        le=100,
        description="Transparency percent: 0 = fully opaque, 100 = fully transparent",
    )

    @property
    def is_invisible(self) -> bool:
        return self.opacity_pct >= 100


class Fill(BaseModel):
    color: ColorSpec


class Border(BaseModel):
    color: ColorSpec = Field(default_factory=ColorSpec)
    width_pt: float = Field(default=1.0, ge=0)


class Geometry(BaseModel):
    """Box in inches.  Width/height may be negative for line elements."""

    x: float = 0.0
    y: float = 0.0
    w: float = 0.0
    h: float = 0.0

    def scaled(self, scale_x: float, scale_y: float) -> "Geometry":
        return Geometry(
            x=self.x * scale_x,
            y=self.y * scale_y,
            w=self.w * scale_x,
            h=self.h * scale_y,
        )


class Point(BaseModel):
    x: float = 0.0
    y: float = 0.0


# ---------------------------------------------------------------------------
# Elements
# ---------------------------------------------------------------------------

class Run(BaseModel):
    """One independently formatted span of text."""

    text: str = ""
    font_face: str = "Arial"
    font_size_pt: float = Field(default=12.0, gt=0)
    color: ColorSpec = Field(default_factory=ColorSpec)
    bold: bool = False
    italic: bool = False
    letter_spacing: float = Field(default=0.0, description="Character spacing in points")
    break_line: bool = Field(
        default=False,
        description="True on the last run of each paragraph",
    )
    align: Optional[HorizontalAlign] = Field(
        default=None,
        description="Paragraph alignment, carried by the paragraph's final run",
    )


class TextElement(BaseModel):
    kind: Literal["text"] = "text"
    geometry: Geometry
    z_order: Optional[int] = None
    runs: list[Run] = Field(default_factory=list)
    horizontal_align: HorizontalAlign = "left"
    vertical_align: VerticalAlign = "top"
    fill: Optional[Fill] = None
    inset_zero: bool = Field(
        default=False,
        description="Remove the text frame's internal margins",
    )

    @property
    def text(self) -> str:
        return "".join(run.text + ("\n" if run.break_line else "") for run in self.runs).rstrip("\n")


class ShapeElement(BaseModel):
    kind: Literal["shape"] = "shape"
    geometry: Geometry
    z_order: Optional[int] = None
    shape_kind: Literal["rect", "rounded_rect", "line"] = "rect"
    fill: Optional[Fill] = None
    border: Optional[Border] = None
    corner_radius: Optional[float] = Field(
        default=None,
        description="Corner radius in inches (rounded_rect only)",
    )


class ImageElement(BaseModel):
    kind: Literal["image"] = "image"
    geometry: Geometry
    z_order: Optional[int] = None
    src: str = Field(default="", description="Unresolved path or URI of the image")


class LineElement(BaseModel):
    kind: Literal["line"] = "line"
    geometry: Geometry
    z_order: Optional[int] = None
    start: Point
    end: Point
    border: Border = Field(default_factory=lambda: Border(width_pt=2.0))

    @classmethod
    def between(cls, start: Point, end: Point, border: Border | None = None) -> "LineElement":
        geometry = Geometry(x=start.x, y=start.y, w=end.x - start.x, h=end.y - start.y)
        if border is None:
            return cls(geometry=geometry, start=start, end=end)
        return cls(geometry=geometry, start=start, end=end, border=border)


Element = Annotated[
    Union[TextElement, ShapeElement, ImageElement, LineElement],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Slides and document
# ---------------------------------------------------------------------------

class SlideBackground(BaseModel):
    """Solid color, or (DOM path) a captured raster filling the canvas."""

    color: Optional[ColorSpec] = None
    image_path: Optional[str] = None


class Slide(BaseModel):
    background: Optional[SlideBackground] = None
    elements: list[Element] = Field(default_factory=list)
    notes: Optional[str] = None

    def add_element(self, element) -> None:
        """Append an element; its z_order defaults to source order."""
        if element.z_order is None:
            element.z_order = len(self.elements)
        self.elements.append(element)


class SlideDocument(BaseModel):
    """Complete deck: canvas size plus the ordered slides."""

    canvas_width_in: float = Field(default=13.33, gt=0)
    canvas_height_in: float = Field(default=7.5, gt=0)
    slides: list[Slide] = Field(default_factory=list)

    def __setattr__(self, name, value):
        if (
            name in ("canvas_width_in", "canvas_height_in")
            and self.slides
            and value != getattr(self, name)
        ):
            raise CanvasLockedError(
                "Canvas size cannot change after the first slide is emitted",
                context={"field": name, "current": getattr(self, name), "requested": value},
            )
        super().__setattr__(name, value)

    def set_canvas(self, width_in: float, height_in: float) -> None:
        """Set the canvas size.  Locked once the first slide exists."""
        if self.slides and (width_in, height_in) != (self.canvas_width_in, self.canvas_height_in):
            raise CanvasLockedError(
                "Canvas size cannot change after the first slide is emitted",
                context={
                    "current": (self.canvas_width_in, self.canvas_height_in),
                    "requested": (width_in, height_in),
                },
            )
        self.canvas_width_in = width_in
        self.canvas_height_in = height_in

    def add_slide(self, slide: Slide) -> Slide:
        self.slides.append(slide)
        return slide
