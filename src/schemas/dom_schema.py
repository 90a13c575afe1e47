"""Pydantic models for raw data captured from a rendered page.

The browser snapshot returns a nested node tree with computed-style strings
left exactly as the browser reported them ("rgba(0, 0, 0, 0)", "24px",
"700", ...).  Resolution into ColorSpec / fonts happens later, at emission
time, through the same helpers the declarative path uses.

All pixel values here are browser CSS pixels.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class DomRect(BaseModel):
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0


class ComputedStyle(BaseModel):
    """Subset of getComputedStyle() captured for every node."""

    model_config = ConfigDict(populate_by_name=True)

    color: str = ""
    background_color: str = Field(default="rgba(0, 0, 0, 0)", alias="backgroundColor")
    background_image: str = Field(default="none", alias="backgroundImage")
    font_size: str = Field(default="", alias="fontSize")
    font_weight: str = Field(default="400", alias="fontWeight")
    font_style: str = Field(default="normal", alias="fontStyle")
    font_family: str = Field(default="", alias="fontFamily")
    letter_spacing: str = Field(default="normal", alias="letterSpacing")
    text_align: str = Field(default="left", alias="textAlign")
    border_radius: str = Field(default="0px", alias="borderRadius")
    border_width: str = Field(default="0px", alias="borderWidth")
    border_style: str = Field(default="none", alias="borderStyle")
    border_color: str = Field(default="", alias="borderColor")
    box_shadow: str = Field(default="none", alias="boxShadow")
    opacity: str = "1"
    z_index: str = Field(default="auto", alias="zIndex")
    display: str = "block"
    visibility: str = "visible"


class DomNode(BaseModel):
    """One element of the browser snapshot tree (page-global coordinates)."""

    model_config = ConfigDict(populate_by_name=True)

    tag: str = ""
    classes: list[str] = Field(default_factory=list)
    rect: DomRect = Field(default_factory=DomRect)
    style: ComputedStyle = Field(default_factory=ComputedStyle)
    has_direct_text: bool = Field(default=False, alias="hasDirectText")
    text: str = ""
    src: Optional[str] = None
    icon_content: Optional[str] = Field(default=None, alias="iconContent")
    children: list["DomNode"] = Field(default_factory=list)


DomNode.model_rebuild()


class ContainerSnapshot(BaseModel):
    """A slide container and its descendant tree as captured by the browser."""

    model_config = ConfigDict(populate_by_name=True)

    index: int
    rect: DomRect
    style: ComputedStyle = Field(default_factory=ComputedStyle)
    children: list[DomNode] = Field(default_factory=list)


class GradientSpec(BaseModel):
    type: Literal["linear"] = "linear"
    colors: list[str] = Field(default_factory=list)


class ExtractedElement(BaseModel):
    """A visible, classified node with container-relative geometry."""

    category: Literal["text", "image", "icon", "decorative"]
    tag: str = ""
    rect: DomRect
    style: ComputedStyle
    text: str = ""
    src: Optional[str] = None
    icon_glyph: Optional[str] = None
    paints: bool = Field(default=False, description="Node paints background, border, shadow or gradient")
    dom_index: int = Field(default=0, description="Position in depth-first visitation order")

    @property
    def z_index(self) -> int:
        try:
            return int(self.style.z_index)
        except (TypeError, ValueError):
            return 0


class ExtractedSlide(BaseModel):
    """Everything extracted from one slide container."""

    index: int
    measured_width: float
    measured_height: float
    background_color: str = "rgba(0, 0, 0, 0)"
    background_image: str = "none"
    gradient: Optional[GradientSpec] = None
    elements: list[ExtractedElement] = Field(default_factory=list)
