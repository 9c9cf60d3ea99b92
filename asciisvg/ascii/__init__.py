"""Glyph sampling and colored-run extraction."""

from .palette import quantize_xterm256, rgb_to_xterm256, xterm256_to_rgb
from .runs import Line, StyledRun, extract_runs, parse_ansi, split_lines
from .sampler import (
    GLYPH_RAMP,
    GlyphCell,
    GlyphGrid,
    convert_to_ascii,
    grid_dimensions,
    sample_glyphs,
)

__all__ = [
    "GLYPH_RAMP",
    "GlyphCell",
    "GlyphGrid",
    "Line",
    "StyledRun",
    "convert_to_ascii",
    "extract_runs",
    "grid_dimensions",
    "parse_ansi",
    "quantize_xterm256",
    "rgb_to_xterm256",
    "sample_glyphs",
    "split_lines",
    "xterm256_to_rgb",
]
