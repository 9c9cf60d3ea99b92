"""Run extraction from a color-coded (ANSI SGR) character stream.

``parse_ansi`` is a small two-state scanner (plain text / inside an escape
sequence). Every SGR sequence closes the pending text block, so adjacent
blocks are never merged even when their attributes are equal.
``split_lines`` then breaks blocks at literal newlines into ``Line`` lists.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field, replace
from typing import FrozenSet, Iterable, List, Optional

from asciisvg.ascii.palette import SYSTEM_COLORS, xterm256_to_rgb
from asciisvg.config import DEFAULT_LIMITS, Limits
from asciisvg.errors import EmptyInput, ParseError, TooManyElements
from asciisvg.options import to_hex

log = logging.getLogger(__name__)

ESC = "\x1b"

_STYLE_CODES = {
    1: "bold",
    2: "faint",
    3: "italic",
    4: "underline",
    5: "blink",
    7: "invert",
    8: "conceal",
    9: "strikethrough",
}
_STYLE_RESETS = {
    22: {"bold", "faint"},
    23: {"italic"},
    24: {"underline"},
    25: {"blink"},
    27: {"invert"},
    28: {"conceal"},
    29: {"strikethrough"},
}


@dataclass(frozen=True)
class StyledRun:
    text: str
    fg: Optional[str] = None
    bg: Optional[str] = None
    styles: FrozenSet[str] = field(default_factory=frozenset)


Line = List[StyledRun]


class _State(enum.Enum):
    SCANNING = "scanning"
    IN_ESCAPE = "in_escape"


@dataclass
class _Attributes:
    fg: Optional[str] = None
    bg: Optional[str] = None
    styles: FrozenSet[str] = frozenset()


def _color_arg(params: List[int], i: int, position: int) -> int:
    if i >= len(params):
        raise ParseError("truncated extended color sequence", position)
    value = params[i]
    if not 0 <= value <= 255:
        raise ParseError(f"color component out of range: {value}", position)
    return value


def _apply_sgr(attrs: _Attributes, raw: str, position: int) -> _Attributes:
    """Return the attributes after applying one SGR parameter string."""
    if raw == "":
        return _Attributes()
    try:
        params = [int(p) if p else 0 for p in raw.split(";")]
    except ValueError:
        raise ParseError(f"invalid SGR parameters: {raw!r}", position) from None

    fg, bg, styles = attrs.fg, attrs.bg, set(attrs.styles)
    i = 0
    while i < len(params):
        code = params[i]
        if code == 0:
            fg, bg, styles = None, None, set()
        elif code in _STYLE_CODES:
            styles.add(_STYLE_CODES[code])
        elif code in _STYLE_RESETS:
            styles -= _STYLE_RESETS[code]
        elif 30 <= code <= 37:
            fg = to_hex(SYSTEM_COLORS[code - 30])
        elif 90 <= code <= 97:
            fg = to_hex(SYSTEM_COLORS[code - 90 + 8])
        elif 40 <= code <= 47:
            bg = to_hex(SYSTEM_COLORS[code - 40])
        elif 100 <= code <= 107:
            bg = to_hex(SYSTEM_COLORS[code - 100 + 8])
        elif code == 39:
            fg = None
        elif code == 49:
            bg = None
        elif code in (38, 48):
            mode = _color_arg(params, i + 1, position)
            if mode == 5:
                color = to_hex(xterm256_to_rgb(_color_arg(params, i + 2, position)))
                i += 2
            elif mode == 2:
                color = to_hex((
                    _color_arg(params, i + 2, position),
                    _color_arg(params, i + 3, position),
                    _color_arg(params, i + 4, position),
                ))
                i += 4
            else:
                raise ParseError(f"unsupported extended color mode: {mode}", position)
            if code == 38:
                fg = color
            else:
                bg = color
        # Other codes (fonts, frames, ...) carry no rendering attributes here.
        i += 1
    return _Attributes(fg=fg, bg=bg, styles=frozenset(styles))


def parse_ansi(stream: str) -> List[StyledRun]:
    """Split a color-coded stream into attribute blocks (newlines kept inline).

    Doxygen:
    - @param stream: Text interleaved with ``ESC[...m`` sequences.
    - @return: Blocks in stream order; empty text between two escapes yields no block.
    - @throws ParseError: On an unterminated or malformed escape sequence.
    """
    blocks: List[StyledRun] = []
    attrs = _Attributes()
    state = _State.SCANNING
    text: List[str] = []
    params: List[str] = []
    seq_start = 0

    def flush() -> None:
        if text:
            blocks.append(StyledRun("".join(text), attrs.fg, attrs.bg, attrs.styles))
            text.clear()

    i, n = 0, len(stream)
    while i < n:
        ch = stream[i]
        if state is _State.SCANNING:
            if ch == ESC:
                if i + 1 >= n or stream[i + 1] != "[":
                    raise ParseError("escape character not followed by '['", i)
                flush()
                state = _State.IN_ESCAPE
                seq_start = i
                params = []
                i += 2
                continue
            if ch < " " and ch != "\n":
                raise ParseError(f"control character {ch!r} in glyph text", i)
            text.append(ch)
        else:
            if "\x40" <= ch <= "\x7e":
                if ch == "m":
                    attrs = _apply_sgr(attrs, "".join(params), seq_start)
                state = _State.SCANNING
            elif "\x20" <= ch <= "\x3f":
                params.append(ch)
            else:
                raise ParseError(f"invalid character {ch!r} inside escape sequence", i)
        i += 1

    if state is _State.IN_ESCAPE:
        raise ParseError("unterminated escape sequence", seq_start)
    flush()
    return blocks


def split_lines(blocks: Optional[Iterable[Optional[StyledRun]]]) -> List[Line]:
    """Break blocks at newlines into lines of runs.

    Zero-length fragments are dropped, consecutive newlines keep their blank
    line, and a trailing line without a newline is kept when non-empty.
    """
    lines: List[Line] = []
    current: Line = []
    for block in blocks or ():
        if block is None:
            continue
        parts = block.text.split("\n")
        for index, part in enumerate(parts):
            if part:
                current.append(replace(block, text=part))
            if index < len(parts) - 1:
                lines.append(current)
                current = []
    if current:
        lines.append(current)
    return lines


def extract_runs(stream: str, limits: Limits = DEFAULT_LIMITS) -> List[Line]:
    """Parse a glyph stream into lines of styled runs.

    Doxygen:
    - @param stream: Output of the glyph sampler.
    - @param limits: ``max_styled_elements`` and the warning threshold.
    - @return: One ``Line`` per newline-terminated row.
    - @throws EmptyInput: If ``stream`` is empty.
    - @throws ParseError: If the stream encoding is malformed.
    - @throws TooManyElements: If the block count exceeds the ceiling.
    """
    if not stream:
        raise EmptyInput("ASCII string is empty")
    blocks = parse_ansi(stream)

    count = len(blocks)
    if count > limits.max_styled_elements:
        raise TooManyElements(count, limits.max_styled_elements)
    if count > limits.styled_warn_elements:
        log.warning("Large number of styled text elements: %d. Processing may be slower.", count)
    return split_lines(blocks)
