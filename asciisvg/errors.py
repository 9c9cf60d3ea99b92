"""Error taxonomy for the conversion pipeline.

Every failure is terminal for the current conversion. Size-related errors
carry the measured ``size`` and the ``limit`` they exceeded.
"""

from __future__ import annotations

from typing import Optional


def format_number(n: int) -> str:
    """Format an integer with thousands separators (``5000000`` → ``5,000,000``)."""
    return f"{n:,}"


class AsciiSvgError(Exception):
    """Base class for all conversion failures."""


class InvalidOption(AsciiSvgError, ValueError):
    """A processing option is outside its accepted domain."""


class EmptyInput(AsciiSvgError):
    """The input buffer or intermediate stream is empty."""


class NilInput(AsciiSvgError):
    """A required input was ``None``."""


class DecodeError(AsciiSvgError):
    """The image bytes could not be decoded."""


class InvalidDimensions(AsciiSvgError):
    """The decoded image has a zero width or height."""

    def __init__(self, width: int, height: int) -> None:
        super().__init__(f"invalid image dimensions: {width}x{height}")
        self.width = width
        self.height = height


class ConversionFailed(AsciiSvgError):
    """Glyph sampling produced no output."""


class ParseError(AsciiSvgError):
    """The color-coded glyph stream is malformed."""

    def __init__(self, message: str, position: Optional[int] = None) -> None:
        if position is not None:
            message = f"{message} (at offset {position})"
        super().__init__(message)
        self.position = position


class _SizeLimitError(AsciiSvgError):
    what = "input"
    unit = "bytes"

    def __init__(self, size: int, limit: int, what: Optional[str] = None, unit: Optional[str] = None) -> None:
        self.size = size
        self.limit = limit
        what = what or self.what
        unit = unit or self.unit
        super().__init__(f"{what} is too large: {format_number(size)} {unit} (max: {format_number(limit)})")


class InputTooLarge(_SizeLimitError):
    what = "image data"


class OutputTooLarge(_SizeLimitError):
    what = "output SVG"


class TooManyElements(_SizeLimitError):
    what = "styled text"
    unit = "elements"
