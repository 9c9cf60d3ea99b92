import xml.etree.ElementTree as ET

import pytest

from asciisvg.ascii.runs import StyledRun
from asciisvg.config import Limits, RenderSettings
from asciisvg.errors import NilInput, OutputTooLarge
from asciisvg.render.buffer import ScratchBufferPool
from asciisvg.render.document import (
    TextPrimitive,
    calculate_dimensions,
    layout_document,
    render_to_svg,
)

SVG_NS = "{http://www.w3.org/2000/svg}"


def _parse(svg_text):
    return ET.fromstring(svg_text.encode("utf-8"))


def test_empty_lines_get_minimal_canvas():
    settings = RenderSettings()
    width, height = calculate_dimensions([], settings)
    assert width == settings.char_width + settings.padding_left + settings.padding_right
    assert height == settings.line_height + settings.padding_top + settings.padding_bottom
    assert width > 0 and height > 0


def test_line_length_counts_characters_not_runs():
    lines = [[StyledRun("ab"), StyledRun("cde")], [StyledRun("x")]]
    width, height = calculate_dimensions(lines)
    assert width == 5 * 16 + 1 - 6
    assert height == 2 * 16 - 2 + 2


def test_blank_line_still_takes_vertical_space():
    width, height = calculate_dimensions([[StyledRun("a")], [], [StyledRun("b")]])
    assert height == 3 * 16


def test_layout_positions_runs_on_grid():
    lines = [
        [StyledRun("ab", "#ff0000"), StyledRun("  "), StyledRun(""), StyledRun("c")],
        [StyledRun("d", "#00ff00")],
    ]
    doc = layout_document(lines, "#000000")
    assert doc.primitives == (
        TextPrimitive(x=1, y=-2, text="ab", color="#ff0000"),
        TextPrimitive(x=1 + 4 * 16, y=-2, text="c", color="#FFFFFF"),
        TextPrimitive(x=1, y=14, text="d", color="#00ff00"),
    )


def test_nil_lines_are_rejected():
    with pytest.raises(NilInput):
        layout_document(None)


def test_background_color_resolution():
    assert layout_document([], "#abc").background == "#aabbcc"
    assert layout_document([], "garbage").background == "#000000"


def test_svg_output_structure():
    lines = [[StyledRun("abc", "#ff0000"), StyledRun(" "), StyledRun("d")]]
    root = _parse(render_to_svg(lines, "#112233"))
    assert root.tag == SVG_NS + "svg"
    assert root.get("width") == str(5 * 16 - 5)
    assert root.get("height") == "16"

    children = list(root)
    assert children[0].tag == SVG_NS + "rect"
    assert "fill:#112233" in children[0].get("style")
    assert children[0].get("width") == root.get("width")

    texts = [c for c in children if c.tag == SVG_NS + "text"]
    assert [t.text for t in texts] == ["abc", "d"]
    assert "fill:#ff0000" in texts[0].get("style")
    assert "font-family:monospace" in texts[0].get("style")
    assert "font-size:16px" in texts[0].get("style")
    assert texts[1].get("x") == str(1 + 4 * 16)


def test_markup_characters_in_runs_are_escaped():
    lines = [[StyledRun("a<b&c", "#ff0000")], [StyledRun("x\x07y>")]]
    root = _parse(render_to_svg(lines))
    texts = [c.text for c in root if c.tag == SVG_NS + "text"]
    assert texts == ["a<b&c", "xy>"]


def test_custom_settings_change_geometry():
    settings = RenderSettings(char_width=8, line_height=10, padding_left=0, padding_right=0, padding_top=0, padding_bottom=0)
    doc = layout_document([[StyledRun("abcd")]] * 3, settings=settings)
    assert (doc.width, doc.height) == (32, 30)
    assert [p.y for p in doc.primitives] == [0, 10, 20]


def test_output_too_large_releases_buffer():
    pool = ScratchBufferPool()
    with pytest.raises(OutputTooLarge) as exc_info:
        render_to_svg([[StyledRun("abc")]], limits=Limits(max_output_bytes=100), pool=pool)
    assert exc_info.value.limit == 100
    assert pool.idle_count == 1


def test_render_is_deterministic():
    lines = [[StyledRun("ab", "#ff0000")], [StyledRun("c")]]
    assert render_to_svg(lines) == render_to_svg(lines)
