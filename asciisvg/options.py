"""Processing options: normalization and color resolution.

Color strings are stored raw in ``ProcessingOptions`` and resolved with
``resolve_color`` at the point of use; an unparseable color falls back to
the default chosen by the caller.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Optional, Tuple

from asciisvg.errors import InvalidOption

DEFAULT_BACKGROUND_COLOR = "#000000"
DEFAULT_TRANSPARENCY_COLOR = "#FFFFFF"

RGB = Tuple[int, int, int]

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


@dataclass(frozen=True)
class ProcessingOptions:
    target_width: int
    brightness: float = 0.0
    contrast: float = 0.0
    sharpen: float = 0.0
    background_color: str = DEFAULT_BACKGROUND_COLOR
    transparency_color: str = DEFAULT_TRANSPARENCY_COLOR
    transparency_threshold: float = 0.0


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def normalize_options(
    target_width: int,
    brightness: float = 0.0,
    contrast: float = 0.0,
    sharpen: float = 0.0,
    background_color: Optional[str] = "",
    transparency_color: Optional[str] = "",
    transparency_threshold: float = 0.0,
) -> ProcessingOptions:
    """Validate and default raw conversion parameters.

    Doxygen:
    - @param target_width: Glyph columns before aspect/cap adjustment; positive int.
    - @param brightness: Brightness shift in percent, 0 = no-op.
    - @param contrast: Contrast change in percent, 0 = no-op.
    - @param sharpen: Unsharp-mask sigma, 0 = no-op.
    - @param background_color: Canvas fill; empty means ``#000000``.
    - @param transparency_color: Substitute for transparent pixels; empty means ``#FFFFFF``.
    - @param transparency_threshold: Alpha cutoff, clamped into [0, 1].
    - @return: Immutable ``ProcessingOptions``.
    - @throws InvalidOption: If ``target_width`` is not a positive integer.
    """
    if isinstance(target_width, bool) or not isinstance(target_width, numbers.Integral):
        raise InvalidOption(f"target width must be a positive integer, got {target_width!r}")
    if target_width <= 0:
        raise InvalidOption(f"target width must be positive, got {target_width}")

    return ProcessingOptions(
        target_width=int(target_width),
        brightness=float(brightness or 0.0),
        contrast=float(contrast or 0.0),
        sharpen=float(sharpen or 0.0),
        background_color=background_color or DEFAULT_BACKGROUND_COLOR,
        transparency_color=transparency_color or DEFAULT_TRANSPARENCY_COLOR,
        transparency_threshold=_clamp(float(transparency_threshold or 0.0), 0.0, 1.0),
    )


def resolve_color(value: Optional[str]) -> Optional[RGB]:
    """Parse ``#rgb`` / ``#rrggbb`` (``#`` optional) into an RGB triple.

    Returns ``None`` for anything else.
    """
    if not value:
        return None
    digits = value.strip()
    if digits.startswith("#"):
        digits = digits[1:]
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) != 6 or not set(digits) <= _HEX_DIGITS:
        return None
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def to_hex(rgb: RGB) -> str:
    r, g, b = rgb
    return f"#{r:02x}{g:02x}{b:02x}"


def suggest_target_width(width: int, height: int) -> int:
    """Initial glyph width for an image: ``100 * aspect`` bounded to [50, 200]."""
    if width <= 0 or height <= 0:
        raise InvalidOption(f"invalid image dimensions: {width}x{height}")
    return min(max(round(100 * (width / height)), 50), 200)
