from .deck_schema import (
    ColorSpec, Fill, Border, Geometry, Point, Run,
    TextElement, ShapeElement, ImageElement, LineElement, Element,
    SlideBackground, Slide, SlideDocument,
)
from .dom_schema import (
    DomRect, ComputedStyle, DomNode, ContainerSnapshot,
    GradientSpec, ExtractedElement, ExtractedSlide,
)
from .config_schema import ConverterConfig

__all__ = [
    "ColorSpec",
    "Fill",
    "Border",
    "Geometry",
    "Point",
    "Run",
    "TextElement",
    "ShapeElement",
    "ImageElement",
    "LineElement",
    "Element",
    "SlideBackground",
    "Slide",
    "SlideDocument",
    "DomRect",
    "ComputedStyle",
    "DomNode",
    "ContainerSnapshot",
    "GradientSpec",
    "ExtractedElement",
    "ExtractedSlide",
    "ConverterConfig",
]
