"""Tests for Pydantic schema models."""

import pytest
from pydantic import ValidationError

from src.exceptions import CanvasLockedError
from src.schemas.config_schema import ConverterConfig
from src.schemas.deck_schema import (
    Border,
    ColorSpec,
    Geometry,
    ImageElement,
    LineElement,
    Point,
    Run,
    ShapeElement,
    Slide,
    SlideDocument,
    TextElement,
)
from src.schemas.dom_schema import ComputedStyle, DomNode, ExtractedElement, DomRect


class TestDeckSchema:
    def test_color_defaults(self):
        color = ColorSpec()
        assert color.hex == "000000"
        assert color.opacity_pct == 0
        assert not color.is_invisible

    def test_color_rejects_lowercase_hex(self):
        with pytest.raises(ValidationError):
            ColorSpec(hex="ff0000")

    def test_color_rejects_out_of_range_opacity(self):
        with pytest.raises(ValidationError):
            ColorSpec(hex="FF0000", opacity_pct=120)

    def test_run_defaults(self):
        run = Run(text="Hi")
        assert run.font_face == "Arial"
        assert run.font_size_pt == 12
        assert run.break_line is False
        assert run.align is None

    def test_text_property_joins_paragraphs(self):
        element = TextElement(
            geometry=Geometry(),
            runs=[
                Run(text="Hello "),
                Run(text="world", break_line=True),
                Run(text="Second", break_line=True),
            ],
        )
        assert element.text == "Hello world\nSecond"

    def test_line_between_computes_extent(self):
        line = LineElement.between(Point(x=1, y=2), Point(x=4, y=1))
        assert line.geometry.x == 1
        assert line.geometry.w == 3
        assert line.geometry.h == -1
        assert line.border.width_pt == 2.0

    def test_line_between_custom_border(self):
        border = Border(color=ColorSpec(hex="FF0000"), width_pt=3)
        line = LineElement.between(Point(), Point(x=1), border)
        assert line.border.width_pt == 3

    def test_geometry_scaled(self):
        g = Geometry(x=100, y=50, w=200, h=100).scaled(0.01, 0.02)
        assert g.x == pytest.approx(1.0)
        assert g.y == pytest.approx(1.0)
        assert g.w == pytest.approx(2.0)
        assert g.h == pytest.approx(2.0)

    def test_add_element_assigns_source_order(self):
        slide = Slide()
        slide.add_element(ShapeElement(geometry=Geometry()))
        slide.add_element(ImageElement(geometry=Geometry(), src="a.png"))
        assert [el.z_order for el in slide.elements] == [0, 1]

    def test_discriminated_union_from_dict(self):
        slide = Slide.model_validate({
            "elements": [
                {"kind": "image", "geometry": {"x": 1}, "src": "a.png"},
                {"kind": "shape", "geometry": {}, "shape_kind": "rounded_rect"},
            ]
        })
        assert isinstance(slide.elements[0], ImageElement)
        assert isinstance(slide.elements[1], ShapeElement)


class TestCanvasLock:
    def test_canvas_change_before_first_slide(self):
        doc = SlideDocument()
        doc.set_canvas(10, 5.625)
        assert doc.canvas_width_in == 10

    def test_canvas_locked_after_first_slide(self):
        doc = SlideDocument(canvas_width_in=10, canvas_height_in=5.625)
        doc.add_slide(Slide())
        with pytest.raises(CanvasLockedError):
            doc.set_canvas(13.33, 7.5)
        assert doc.canvas_width_in == 10

    def test_same_canvas_allowed_after_first_slide(self):
        doc = SlideDocument(canvas_width_in=10, canvas_height_in=5.625)
        doc.add_slide(Slide())
        doc.set_canvas(10, 5.625)

    def test_plain_assignment_locked_after_first_slide(self):
        doc = SlideDocument(canvas_width_in=10, canvas_height_in=5.625)
        doc.add_slide(Slide())
        with pytest.raises(CanvasLockedError):
            doc.canvas_width_in = 5.0
        with pytest.raises(CanvasLockedError):
            doc.canvas_height_in = 5.0
        assert (doc.canvas_width_in, doc.canvas_height_in) == (10, 5.625)

    def test_plain_assignment_before_first_slide(self):
        doc = SlideDocument()
        doc.canvas_width_in = 5.0
        assert doc.canvas_width_in == 5.0


class TestDomSchema:
    def test_camel_case_style_keys(self):
        style = ComputedStyle.model_validate({"backgroundColor": "rgb(1, 2, 3)", "zIndex": "5"})
        assert style.background_color == "rgb(1, 2, 3)"
        assert style.z_index == "5"

    def test_nested_nodes(self):
        node = DomNode.model_validate({
            "tag": "DIV",
            "hasDirectText": False,
            "children": [{"tag": "SPAN", "hasDirectText": True, "text": "x"}],
        })
        assert node.children[0].has_direct_text
        assert node.children[0].text == "x"

    def test_z_index_auto_is_zero(self):
        element = ExtractedElement(
            category="text", rect=DomRect(), style=ComputedStyle(z_index="auto")
        )
        assert element.z_index == 0

    def test_z_index_numeric(self):
        element = ExtractedElement(
            category="text", rect=DomRect(), style=ComputedStyle(z_index="-2")
        )
        assert element.z_index == -2


class TestConverterConfig:
    def test_camel_case_aliases(self):
        config = ConverterConfig(inputPath="deck.html", canvasWidthIn=10, domMode="structural")
        assert str(config.input_path) == "deck.html"
        assert config.canvas_width_in == 10
        assert config.dom_mode == "structural"

    def test_defaults(self):
        config = ConverterConfig(input_path="scene.xml")
        assert config.dpi == 96
        assert config.canvas_width_in == 13.33
        assert config.canvas_height_in == 7.5
        assert config.viewport_width == 1280
        assert config.navigation_timeout_ms == 60000
        assert config.container_selector == ".ppt-page-wrapper"
        assert config.output_path is None
        assert config.keep_temp_files is False

    def test_page_url_kept_verbatim(self):
        config = ConverterConfig(input_path="https://example.com/deck.html")
        assert config.input_path == "https://example.com/deck.html"

    def test_invalid_mode(self):
        with pytest.raises(ValidationError):
            ConverterConfig(input_path="a.html", dom_mode="magic")

    def test_from_yaml_with_overrides(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "inputPath: deck.html\n"
            "domMode: structural\n"
            "settleMs: 0\n"
            "dpi: 120\n"
            "fontFallbacks:\n"
            "  Roboto: Arial\n"
        )
        config = ConverterConfig.from_yaml(path, dpi=72, output_path=None)
        assert config.dom_mode == "structural"
        assert config.settle_ms == 0
        assert config.dpi == 72
        assert config.output_path is None
        assert config.font_fallbacks == {"Roboto": "Arial"}

    def test_from_yaml_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConverterConfig.from_yaml(tmp_path / "nope.yaml")

    def test_to_yaml_roundtrip(self, tmp_path):
        path = tmp_path / "out.yaml"
        ConverterConfig(input_path="deck.html", keep_temp_files=True).to_yaml(path)
        text = path.read_text()
        assert "inputPath: deck.html" in text
        loaded = ConverterConfig.from_yaml(path)
        assert loaded.keep_temp_files is True
