"""End-to-end conversion tests.

The rendered-page path runs against a fake browser session, so no Chromium
is needed.
"""

import asyncio

import pytest
from pptx import Presentation
from pptx.enum.shapes import MSO_SHAPE_TYPE

from src.exceptions import NavigationError, UnsupportedInputError
from src.schemas.config_schema import ConverterConfig
from src.schemas.dom_schema import ContainerSnapshot


SCENE = """<presentation width="960" height="540">
  <slide>
    <style><fill><fillColor color="rgb(20,20,20)"/></fill></style>
    <data>
      <shape type="text" topLeftX="80" topLeftY="60" width="800" height="120">
        <content textAlign="center" verticalAlign="middle">
          <p><span fontFamily="Montserrat" fontSize="40" color="rgba(255,255,255,1)" bold="true">Title</span></p>
        </content>
      </shape>
      <shape type="round-rect" topLeftX="80" topLeftY="240" width="200" height="100">
        <fill><fillColor color="rgba(0,0,0,0.5)"/></fill>
        <border color="rgb(255,0,0)" width="2"/>
      </shape>
    </data>
    <note><content><p>Speaker notes</p></content></note>
  </slide>
  <slide>
    <data>
      <img src="poster.png" topLeftX="0" topLeftY="0" width="480" height="270"/>
      <line startX="0" startY="300" endX="960" endY="300"><border color="rgb(0,0,255)" width="2"/></line>
    </data>
  </slide>
</presentation>
"""


def _snapshot_payload():
    return [{
        "index": 0,
        "rect": {"x": 0, "y": 0, "width": 1280, "height": 720},
        "style": {"backgroundColor": "rgb(30, 58, 138)"},
        "children": [
            {
                "tag": "DIV",
                "rect": {"x": 64, "y": 64, "width": 400, "height": 200},
                "style": {"backgroundColor": "rgb(255, 255, 255)", "borderRadius": "12px"},
                "children": [],
            },
            {
                "tag": "H1",
                "rect": {"x": 100, "y": 300, "width": 600, "height": 60},
                "style": {"color": "rgb(255, 255, 255)", "fontSize": "48px", "fontWeight": "700"},
                "hasDirectText": True,
                "text": "Hello",
            },
        ],
    }]


class FakeSession:
    """Stands in for BrowserSession: same async interface, no browser."""

    def __init__(self, payload=None, fail_navigation=False):
        self.payload = payload if payload is not None else _snapshot_payload()
        self.fail_navigation = fail_navigation
        self.calls = []
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.closed = True

    async def navigate(self, url):
        self.calls.append(("navigate", url))
        if self.fail_navigation:
            raise NavigationError(f"Navigation failed: {url}", cause=TimeoutError("60000ms"))

    async def snapshot_containers(self, selector):
        self.calls.append(("snapshot", selector))
        return [ContainerSnapshot.model_validate(item) for item in self.payload]

    async def screenshot_container(self, selector, index, path):
        from PIL import Image

        self.calls.append(("screenshot", index))
        Image.new("RGB", (1280, 720), "navy").save(path)
        return path


class TestInputKind:
    def test_extensions(self):
        from src.ingest import input_kind

        assert input_kind("deck.XML") == "xml"
        assert input_kind("deck.htm") == "html"
        assert input_kind("deck.html") == "html"

    def test_unsupported(self):
        from src.ingest import input_kind

        with pytest.raises(UnsupportedInputError):
            input_kind("deck.pdf")


class TestXmlConversion:
    def test_two_slide_scene(self, tmp_path):
        from src.converters.deck_converter import DeckConverter

        scene = tmp_path / "scene.xml"
        scene.write_text(SCENE, encoding="utf-8")
        config = ConverterConfig(input_path=scene, output_path=tmp_path / "out.pptx")
        out = DeckConverter(config).convert()

        prs = Presentation(str(out))
        assert len(prs.slides) == 2
        first, second = prs.slides
        assert len(first.shapes) == 2
        assert first.shapes[0].text_frame.text == "Title"
        assert first.shapes[1].shape_type == MSO_SHAPE_TYPE.AUTO_SHAPE
        assert first.notes_slide.notes_text_frame.text == "Speaker notes"

        assert len(second.shapes) == 2
        assert second.shapes[0].text_frame.text == "Image not found: poster.png"

    def test_image_resolved_next_to_scene(self, tmp_path):
        from PIL import Image
        from src.converters.deck_converter import DeckConverter

        scene = tmp_path / "scene.xml"
        scene.write_text(SCENE, encoding="utf-8")
        Image.new("RGB", (48, 27), "red").save(tmp_path / "poster.png")
        out = DeckConverter(ConverterConfig(input_path=scene)).convert()

        assert out == tmp_path / "scene.pptx"
        second = Presentation(str(out)).slides[1]
        assert second.shapes[0].shape_type == MSO_SHAPE_TYPE.PICTURE

    def test_font_fallbacks_from_config(self, tmp_path):
        from src.converters.deck_converter import DeckConverter

        converter = DeckConverter(ConverterConfig(
            input_path=tmp_path / "scene.xml", font_fallbacks={"Montserrat": "Verdana"}
        ))
        assert converter.font_table["Montserrat"] == "Verdana"
        assert converter.font_table["Inter"] == "Arial"


class TestStaticHtmlConversion:
    def test_static_mode(self, tmp_path):
        from src.converters.deck_converter import DeckConverter

        page = tmp_path / "deck.html"
        page.write_text(
            '<div class="ppt-page-wrapper"><h1>Hi</h1>'
            '<img src="https://example.com/cover.png"></div>',
            encoding="utf-8",
        )
        out = DeckConverter(ConverterConfig(input_path=page)).convert(static_html=True)

        slide = Presentation(str(out)).slides[0]
        texts = [s.text_frame.text for s in slide.shapes if s.has_text_frame]
        assert texts == ["Hi", "Image not found: cover.png"]


class TestDomConversion:
    def test_hybrid(self, tmp_path):
        from src.converters.deck_converter import DeckConverter

        session = FakeSession()
        config = ConverterConfig(
            input_path=tmp_path / "deck.html",
            output_path=tmp_path / "deck.pptx",
            temp_dir=tmp_path / "shots",
        )
        out = asyncio.run(DeckConverter(config).convert_dom(session))

        assert session.closed
        assert session.calls[0][0] == "navigate"
        assert session.calls[0][1].startswith("file://")
        assert ("screenshot", 0) in session.calls

        prs = Presentation(str(out))
        slide = prs.slides[0]
        shapes = list(slide.shapes)
        assert len(shapes) == 2
        assert shapes[0].shape_type == MSO_SHAPE_TYPE.PICTURE
        assert shapes[1].text_frame.text == "Hello"
        assert not (tmp_path / "shots" / "slide_0.png").exists()

    def test_keep_temp_files(self, tmp_path):
        from src.converters.deck_converter import DeckConverter

        config = ConverterConfig(
            input_path=tmp_path / "deck.html",
            output_path=tmp_path / "deck.pptx",
            temp_dir=tmp_path / "shots",
            keep_temp_files=True,
        )
        asyncio.run(DeckConverter(config).convert_dom(FakeSession()))
        assert (tmp_path / "shots" / "slide_0.png").exists()

    def test_structural(self, tmp_path):
        from src.converters.deck_converter import DeckConverter

        session = FakeSession()
        config = ConverterConfig(
            input_path=tmp_path / "deck.html",
            output_path=tmp_path / "deck.pptx",
            dom_mode="structural",
        )
        out = asyncio.run(DeckConverter(config).convert_dom(session))

        assert not any(call[0] == "screenshot" for call in session.calls)
        slide = Presentation(str(out)).slides[0]
        shapes = list(slide.shapes)
        assert len(shapes) == 2
        assert shapes[0].shape_type == MSO_SHAPE_TYPE.AUTO_SHAPE
        assert shapes[1].text_frame.text == "Hello"
        assert str(slide.background.fill.fore_color.rgb) == "1E3A8A"

    def test_timestamped_default_output(self, tmp_path, monkeypatch):
        from src.converters.deck_converter import DeckConverter

        monkeypatch.chdir(tmp_path)
        config = ConverterConfig(input_path=tmp_path / "deck.html", dom_mode="structural")
        out = asyncio.run(DeckConverter(config).convert_dom(FakeSession()))
        assert out.suffix == ".pptx"
        assert out.stem.isdigit()
        assert (tmp_path / out).exists()

    def test_page_url_input(self, tmp_path):
        from src.converters.deck_converter import DeckConverter

        session = FakeSession()
        config = ConverterConfig(
            input_path="https://example.com/deck.html",
            output_path=tmp_path / "deck.pptx",
            dom_mode="structural",
        )
        out = asyncio.run(DeckConverter(config).convert_dom(session))

        assert session.calls[0] == ("navigate", "https://example.com/deck.html")
        assert len(Presentation(str(out)).slides) == 1

    def test_navigation_failure_is_fatal(self, tmp_path):
        from src.converters.deck_converter import DeckConverter

        session = FakeSession(fail_navigation=True)
        config = ConverterConfig(
            input_path=tmp_path / "deck.html",
            output_path=tmp_path / "deck.pptx",
            temp_dir=tmp_path / "shots",
        )
        with pytest.raises(NavigationError):
            asyncio.run(DeckConverter(config).convert_dom(session))
        assert session.closed
        assert not (tmp_path / "deck.pptx").exists()

    def test_no_containers_gives_empty_deck(self, tmp_path):
        from src.converters.deck_converter import DeckConverter

        config = ConverterConfig(
            input_path=tmp_path / "deck.html",
            output_path=tmp_path / "deck.pptx",
            dom_mode="structural",
        )
        out = asyncio.run(DeckConverter(config).convert_dom(FakeSession(payload=[])))
        assert len(Presentation(str(out)).slides) == 0
