"""Layout of styled runs on a monospace grid and SVG serialization.

Uses the ``svg.py`` element model to build the document, then writes it
through a pooled scratch buffer.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
from xml.sax.saxutils import escape

import svg

from asciisvg.ascii.runs import Line
from asciisvg.config import DEFAULT_LIMITS, DEFAULT_RENDER_SETTINGS, Limits, RenderSettings
from asciisvg.errors import NilInput, OutputTooLarge
from asciisvg.options import DEFAULT_BACKGROUND_COLOR, resolve_color, to_hex
from asciisvg.render.buffer import DEFAULT_POOL, ScratchBufferPool

log = logging.getLogger(__name__)

DEFAULT_TEXT_COLOR = "#FFFFFF"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

# Characters XML 1.0 does not allow in text content.
_XML_ILLEGAL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")


def xml_text(text: str) -> str:
    """Escape run text for an XML text node; characters XML cannot carry are dropped."""
    return escape(_XML_ILLEGAL.sub("", text))


@dataclass(frozen=True)
class TextPrimitive:
    x: int
    y: int
    text: str
    color: str


@dataclass(frozen=True)
class VectorDocument:
    width: int
    height: int
    background: str
    primitives: Tuple[TextPrimitive, ...]
    settings: RenderSettings = DEFAULT_RENDER_SETTINGS

    def text_style(self, color: str) -> str:
        s = self.settings
        return (
            f"fill:{color}; font-family:{s.font_family}; font-size:{s.font_size}px; "
            "dominant-baseline:text-before-edge; white-space:pre"
        )

    def elements(self) -> List[svg.Element]:
        elements: List[svg.Element] = [
            svg.Rect(x=0, y=0, width=self.width, height=self.height, style=f"fill:{self.background}"),
        ]
        for primitive in self.primitives:
            elements.append(
                svg.Text(x=primitive.x, y=primitive.y, text=xml_text(primitive.text), style=self.text_style(primitive.color))
            )
        return elements

    def to_svg(self, pool: ScratchBufferPool = DEFAULT_POOL) -> str:
        document = svg.SVG(width=self.width, height=self.height, elements=self.elements())
        with pool.borrow() as buffer:
            buffer.write(XML_DECLARATION)
            buffer.write(document.as_str())
            buffer.write("\n")
            return buffer.getvalue()


def line_length(line: Line) -> int:
    """Glyph count of a line (characters, not runs)."""
    return sum(len(run.text) for run in line)


def calculate_dimensions(lines: Sequence[Line], settings: RenderSettings = DEFAULT_RENDER_SETTINGS) -> Tuple[int, int]:
    """Canvas size for a set of lines, never smaller than one glyph cell plus padding.

    Doxygen:
    - @param lines: Lines of runs; may be empty.
    - @param settings: Cell geometry and paddings.
    - @return: ``(width, height)`` in SVG user units.
    """
    max_line_length = max((line_length(line) for line in lines), default=0)
    horizontal_padding = settings.padding_left + settings.padding_right
    vertical_padding = settings.padding_top + settings.padding_bottom

    width = max_line_length * settings.char_width + horizontal_padding
    height = len(lines) * settings.line_height + vertical_padding
    if width <= 0:
        width = settings.char_width + horizontal_padding
    if height <= 0:
        height = settings.line_height + vertical_padding

    log.info("SVG dimensions: %dx%d (based on %d lines, max length: %d)", width, height, len(lines), max_line_length)
    return width, height


def _layout_line(line: Line, y: int, settings: RenderSettings) -> List[TextPrimitive]:
    primitives: List[TextPrimitive] = []
    x = settings.padding_left
    for run in line:
        if run.text == "":
            continue
        advance = len(run.text) * settings.char_width
        if run.text.strip(" ") == "":
            x += advance
            continue
        primitives.append(TextPrimitive(x=x, y=y, text=run.text, color=run.fg or DEFAULT_TEXT_COLOR))
        x += advance
    return primitives


def layout_document(
    lines: Optional[Sequence[Line]],
    background_color: str = DEFAULT_BACKGROUND_COLOR,
    settings: RenderSettings = DEFAULT_RENDER_SETTINGS,
) -> VectorDocument:
    """Position every run on the glyph grid.

    Doxygen:
    - @param lines: Lines from the run extractor; ``None`` is rejected, ``[]`` is allowed.
    - @param background_color: Canvas fill; black when unparseable.
    - @param settings: Cell geometry, font and paddings.
    - @return: ``VectorDocument`` with one text primitive per visible run.
    - @throws NilInput: If ``lines`` is ``None``.
    """
    if lines is None:
        raise NilInput("styled text lines are None")

    width, height = calculate_dimensions(lines, settings)
    background = to_hex(resolve_color(background_color) or (0, 0, 0))

    primitives: List[TextPrimitive] = []
    y = settings.padding_top
    for line in lines:
        primitives.extend(_layout_line(line, y, settings))
        y += settings.line_height
    return VectorDocument(width=width, height=height, background=background, primitives=tuple(primitives), settings=settings)


def render_to_svg(
    lines: Optional[Sequence[Line]],
    background_color: str = DEFAULT_BACKGROUND_COLOR,
    settings: RenderSettings = DEFAULT_RENDER_SETTINGS,
    limits: Limits = DEFAULT_LIMITS,
    pool: ScratchBufferPool = DEFAULT_POOL,
) -> str:
    """Lay out lines and serialize them to SVG, enforcing the output ceiling."""
    document = layout_document(lines, background_color, settings)
    svg_text = document.to_svg(pool)
    size = len(svg_text.encode("utf-8"))
    if size > limits.max_output_bytes:
        raise OutputTooLarge(size, limits.max_output_bytes)
    return svg_text
