"""Tests for declarative XML scene ingestion."""

import pytest

from src.exceptions import SceneParseError


SCENE = """<?xml version="1.0" encoding="UTF-8"?>
<presentation width="960" height="540">
  <slide>
    <style><fill><fillColor color="rgb(20,20,20)"/></fill></style>
    <data>
      <shape type="text" topLeftX="80" topLeftY="60" width="800" height="120">
        <content textAlign="center" verticalAlign="middle">
          <p align="left">
            <span fontFamily="Montserrat" fontSize="40" color="rgba(255,255,255,1)"
                  bold="true" italic="false" letterSpacing="1">Movies </span>
            <span fontFamily="Bebas Neue" fontSize="40" color="rgba(255,0,0,0.8)">2025</span>
          </p>
          <p><span>Subtitle</span></p>
        </content>
      </shape>
      <shape type="round-rect" topLeftX="96" topLeftY="192" width="192" height="96">
        <fill><fillColor color="rgba(0,0,0,0.5)"/></fill>
        <border color="rgb(255,0,0)" width="2"/>
      </shape>
    </data>
    <note><content><p>Speaker notes</p></content></note>
  </slide>
  <slide>
    <data>
      <img src="poster.png" topLeftX="0" topLeftY="0" width="480" height="270"/>
      <line startX="0" startY="288" endX="960" endY="288"><border color="rgb(0,0,255)" width="3"/></line>
    </data>
  </slide>
</presentation>
"""


class TestParseScene:
    def test_two_slides_with_canvas(self):
        from src.ingest.xml_scene import parse_scene

        doc = parse_scene(SCENE)
        assert len(doc.slides) == 2
        assert doc.canvas_width_in == 10.0
        assert doc.canvas_height_in == 5.625

    def test_element_kinds_in_document_order(self):
        from src.ingest.xml_scene import parse_scene

        doc = parse_scene(SCENE)
        assert [el.kind for el in doc.slides[0].elements] == ["text", "shape"]
        assert [el.kind for el in doc.slides[1].elements] == ["image", "line"]

    def test_default_canvas(self):
        from src.ingest.xml_scene import parse_scene

        doc = parse_scene("<presentation><slide/></presentation>")
        assert doc.canvas_width_in == 10.0
        assert doc.canvas_height_in == 5.625
        assert len(doc.slides) == 1

    def test_custom_dpi(self):
        from src.ingest.xml_scene import parse_scene

        doc = parse_scene(SCENE, dpi=48)
        assert doc.canvas_width_in == 20.0
        assert doc.slides[0].elements[0].geometry.x == pytest.approx(80 / 48)

    def test_background(self):
        from src.ingest.xml_scene import parse_scene

        doc = parse_scene(SCENE)
        assert doc.slides[0].background.color.hex == "141414"
        assert doc.slides[1].background is None

    def test_reads_from_path(self, tmp_path):
        from src.ingest.xml_scene import parse_scene

        path = tmp_path / "scene.xml"
        path.write_text(SCENE, encoding="utf-8")
        assert len(parse_scene(path).slides) == 2


class TestTextShapes:
    def test_two_paragraphs_two_breaks(self):
        from src.ingest.xml_scene import parse_scene

        text = parse_scene(SCENE).slides[0].elements[0]
        assert len(text.runs) == 3
        assert sum(run.break_line for run in text.runs) == 2
        assert [run.break_line for run in text.runs] == [False, True, True]

    def test_run_styles(self):
        from src.ingest.xml_scene import parse_scene

        text = parse_scene(SCENE).slides[0].elements[0]
        first, second, _ = text.runs
        assert first.font_face == "Arial"
        assert first.font_size_pt == 40
        assert first.bold is True
        assert first.italic is False
        assert first.letter_spacing == 1
        assert first.color.hex == "FFFFFF"
        assert second.font_face == "Impact"
        assert second.color.hex == "FF0000"
        assert second.color.opacity_pct == pytest.approx(20)

    def test_run_defaults(self):
        from src.ingest.xml_scene import parse_scene

        subtitle = parse_scene(SCENE).slides[0].elements[0].runs[2]
        assert subtitle.text == "Subtitle"
        assert subtitle.font_face == "Arial"
        assert subtitle.font_size_pt == 12
        assert subtitle.color.hex == "000000"
        assert subtitle.letter_spacing == 0

    def test_content_align_wins_over_paragraph(self):
        from src.ingest.xml_scene import parse_scene

        text = parse_scene(SCENE).slides[0].elements[0]
        assert text.runs[1].align == "center"
        assert text.horizontal_align == "center"
        assert text.vertical_align == "middle"

    def test_paragraph_align_fallback(self):
        from src.ingest.xml_scene import parse_scene

        doc = parse_scene(
            '<presentation><slide><data>'
            '<shape type="text" width="100" height="20"><content>'
            '<p align="right"><span>a</span></p><p><span>b</span></p>'
            '</content></shape>'
            '</data></slide></presentation>'
        )
        text = doc.slides[0].elements[0]
        assert [run.align for run in text.runs] == ["right", "left"]
        assert text.vertical_align == "top"

    def test_geometry_in_inches(self):
        from src.ingest.xml_scene import parse_scene

        g = parse_scene(SCENE).slides[0].elements[0].geometry
        assert g.x == pytest.approx(80 / 96)
        assert g.y == pytest.approx(60 / 96)
        assert g.w == pytest.approx(800 / 96)
        assert g.h == pytest.approx(1.25)

    def test_text_shape_without_content_is_dropped(self):
        from src.ingest.xml_scene import parse_scene

        doc = parse_scene(
            '<presentation><slide><data><shape type="text" width="10" height="10"/>'
            '</data></slide></presentation>'
        )
        assert doc.slides[0].elements == []

    def test_invalid_font_size_uses_default(self):
        from src.ingest.xml_scene import parse_scene

        doc = parse_scene(
            '<presentation><slide><data><shape type="text"><content>'
            '<p><span fontSize="-4">x</span></p></content></shape>'
            '</data></slide></presentation>'
        )
        assert doc.slides[0].elements[0].runs[0].font_size_pt == 12

    def test_non_finite_run_values_use_defaults(self):
        from src.ingest.xml_scene import parse_scene

        doc = parse_scene(
            '<presentation><slide><data><shape type="text"><content>'
            '<p><span fontSize="NaN" letterSpacing="nan">x</span></p>'
            '<p><span fontSize="inf" letterSpacing="-inf">y</span></p></content></shape>'
            '</data></slide></presentation>'
        )
        runs = doc.slides[0].elements[0].runs
        assert [run.font_size_pt for run in runs] == [12, 12]
        assert [run.letter_spacing for run in runs] == [0, 0]


class TestShapesAndLines:
    def test_rounded_rect(self):
        from src.ingest.xml_scene import parse_scene

        shape = parse_scene(SCENE).slides[0].elements[1]
        assert shape.shape_kind == "rounded_rect"
        assert shape.corner_radius == 0.2
        assert shape.fill.color.hex == "000000"
        assert shape.fill.color.opacity_pct == 50
        assert shape.border.color.hex == "FF0000"
        assert shape.border.width_pt == 2

    def test_shape_without_fill_or_border(self):
        from src.ingest.xml_scene import parse_scene

        doc = parse_scene(
            '<presentation><slide><data><shape type="rect" width="10" height="10"/>'
            '</data></slide></presentation>'
        )
        shape = doc.slides[0].elements[0]
        assert shape.shape_kind == "rect"
        assert shape.fill.color.hex == "FFFFFF"
        assert shape.fill.color.opacity_pct == 100
        assert shape.border is None

    def test_border_width_default(self):
        from src.ingest.xml_scene import parse_scene

        doc = parse_scene(
            '<presentation><slide><data><shape type="rect"><border color="rgb(1,1,1)"/></shape>'
            '</data></slide></presentation>'
        )
        assert doc.slides[0].elements[0].border.width_pt == 1.0

    def test_negative_border_width_uses_default(self):
        from src.ingest.xml_scene import parse_scene

        doc = parse_scene(
            '<presentation><slide><data>'
            '<shape type="rect"><border color="rgb(1,1,1)" width="-1"/></shape>'
            '<line endX="96"><border color="rgb(1,1,1)" width="-3"/></line>'
            '</data></slide></presentation>'
        )
        shape, line = doc.slides[0].elements
        assert shape.border.width_pt == 1.0
        assert line.border.width_pt == 2.0

    def test_oversized_color_does_not_abort_scene(self):
        from src.ingest.xml_scene import parse_scene

        huge = "9" * 400
        doc = parse_scene(
            '<presentation><slide><data>'
            f'<shape type="rect"><fill><fillColor color="rgb({huge},0,0)"/></fill></shape>'
            '<shape type="rect"><fill><fillColor color="rgb(0,0,255)"/></fill></shape>'
            '</data></slide></presentation>'
        )
        first, second = doc.slides[0].elements
        assert first.fill.color.hex == "FF0000"
        assert second.fill.color.hex == "0000FF"

    def test_image_passes_src_through(self):
        from src.ingest.xml_scene import parse_scene

        image = parse_scene(SCENE).slides[1].elements[0]
        assert image.src == "poster.png"
        assert image.geometry.w == 5.0

    def test_line(self):
        from src.ingest.xml_scene import parse_scene

        line = parse_scene(SCENE).slides[1].elements[1]
        assert line.start.y == 3.0
        assert line.end.x == 10.0
        assert line.geometry.w == 10.0
        assert line.geometry.h == 0
        assert line.border.color.hex == "0000FF"
        assert line.border.width_pt == 3

    def test_line_defaults(self):
        from src.ingest.xml_scene import parse_scene

        doc = parse_scene(
            '<presentation><slide><data><line topLeftX="96" topLeftY="96"/>'
            '</data></slide></presentation>'
        )
        line = doc.slides[0].elements[0]
        assert line.start.x == 1.0
        assert line.end.x == 0
        assert line.end.y == 0
        assert line.border.width_pt == 2.0

    def test_unknown_tags_skipped(self):
        from src.ingest.xml_scene import parse_scene

        doc = parse_scene(
            '<presentation><slide><data><chart/><!-- c --><img src="a.png"/>'
            '</data></slide></presentation>'
        )
        assert [el.kind for el in doc.slides[0].elements] == ["image"]


class TestNotes:
    def test_plain_note(self):
        from src.ingest.xml_scene import parse_scene

        assert parse_scene(SCENE).slides[0].notes == "Speaker notes"
        assert parse_scene(SCENE).slides[1].notes is None

    def test_structured_note_uses_span(self):
        from src.ingest.xml_scene import parse_notes
        from lxml import etree

        content = etree.fromstring("<content><p><span>From span</span></p></content>")
        assert parse_notes(content) == "From span"

    def test_structured_note_falls_back_to_markup(self):
        from src.ingest.xml_scene import parse_notes
        from lxml import etree

        content = etree.fromstring("<content><p><b/></p></content>")
        assert parse_notes(content) == "<p><b/></p>"

    def test_multiple_paragraphs_joined(self):
        from src.ingest.xml_scene import parse_notes
        from lxml import etree

        content = etree.fromstring("<content><p>One</p><p><span>Two</span></p></content>")
        assert parse_notes(content) == "One\nTwo"


class TestErrors:
    def test_malformed_xml(self):
        from src.ingest.xml_scene import parse_scene

        with pytest.raises(SceneParseError) as exc_info:
            parse_scene("<presentation><slide></presentation>")
        assert exc_info.value.cause is not None

    def test_missing_file(self, tmp_path):
        from src.ingest.xml_scene import parse_scene

        with pytest.raises(SceneParseError):
            parse_scene(tmp_path / "missing.xml")

    def test_wrong_root(self):
        from src.ingest.xml_scene import parse_scene

        with pytest.raises(SceneParseError):
            parse_scene("<deck><slide/></deck>")
