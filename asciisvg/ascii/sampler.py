"""Glyph sampling: image regions to colored characters.

The sampled grid is serialized as a color-coded character stream (ANSI SGR
256-color escapes), which is what the run extractor consumes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List, Tuple

import cv2
import numpy as np

from asciisvg.ascii.palette import quantize_xterm256, xterm256_to_rgb
from asciisvg.config import DEFAULT_LIMITS, Limits
from asciisvg.errors import ConversionFailed, OutputTooLarge, format_number
from asciisvg.image.model import PixelImage
from asciisvg.options import to_hex

log = logging.getLogger(__name__)

# Ordered from lightest to densest ink.
GLYPH_RAMP = " .,:;i1tfLCG08@"

ESC = "\x1b"
RESET = f"{ESC}[0m"


@dataclass(frozen=True)
class GlyphCell:
    label: str
    palette_index: int

    @property
    def color(self) -> str:
        return to_hex(xterm256_to_rgb(self.palette_index))


@dataclass(frozen=True)
class GlyphGrid:
    """Row-major glyph grid: ramp indices and xterm-256 color indices, shape ``(rows, columns)``."""

    glyphs: np.ndarray
    colors: np.ndarray

    @property
    def rows(self) -> int:
        return int(self.glyphs.shape[0])

    @property
    def columns(self) -> int:
        return int(self.glyphs.shape[1])

    def cell_rows(self) -> Iterator[List[GlyphCell]]:
        for glyph_row, color_row in zip(self.glyphs.tolist(), self.colors.tolist()):
            yield [GlyphCell(GLYPH_RAMP[glyph], color) for glyph, color in zip(glyph_row, color_row)]

    def cells(self) -> Iterator[GlyphCell]:
        for row in self.cell_rows():
            yield from row

    def to_ansi(self) -> str:
        """Serialize to the SGR stream; a color escape is emitted only when the color changes."""
        parts: List[str] = []
        for row in self.cell_rows():
            current = None
            for cell in row:
                if cell.palette_index != current:
                    parts.append(f"{ESC}[38;5;{cell.palette_index}m")
                    current = cell.palette_index
                parts.append(cell.label)
            parts.append(RESET + "\n")
        return "".join(parts)


def grid_dimensions(width: int, height: int, target_width: int, cap: int = DEFAULT_LIMITS.max_ascii_dimension) -> Tuple[int, int]:
    """Glyph grid size for an image, preserving its aspect ratio.

    Doxygen:
    - @param width: Image width in pixels.
    - @param height: Image height in pixels.
    - @param target_width: Requested glyph columns.
    - @param cap: Maximum glyphs per axis; when exceeded both axes shrink by
      the factor that brings the larger one to ``cap``.
    - @return: ``(columns, rows)``, each at least 1.
    """
    columns = target_width
    rows = max(1, round(target_width * height / width))
    larger = max(columns, rows)
    if larger > cap:
        scale = cap / larger
        if columns >= rows:
            columns, rows = cap, max(1, int(rows * scale))
        else:
            columns, rows = max(1, int(columns * scale)), cap
    return columns, rows


def sample_glyphs(image: PixelImage, target_width: int, cap: int = DEFAULT_LIMITS.max_ascii_dimension) -> GlyphGrid:
    """Average each cell's region, pick a glyph by luma and a palette color."""
    columns, rows = grid_dimensions(image.width, image.height, target_width, cap)
    log.info(
        "Original: %dx%d, ASCII: %dx%d, Ratio: %.2f",
        image.width, image.height, columns, rows, image.height / image.width,
    )

    cells = cv2.resize(image.to_rgb8(), (columns, rows), interpolation=cv2.INTER_AREA)
    if cells.ndim == 2:
        cells = cells.reshape(rows, columns, 3)
    luma = cv2.cvtColor(cells, cv2.COLOR_RGB2GRAY)
    glyphs = np.rint(luma.astype(np.float64) / 255.0 * (len(GLYPH_RAMP) - 1)).astype(np.int64)
    return GlyphGrid(glyphs=glyphs, colors=quantize_xterm256(cells))


def convert_to_ascii(image: PixelImage, target_width: int, limits: Limits = DEFAULT_LIMITS) -> str:
    """Sample the image and serialize the grid to a color-coded stream.

    Doxygen:
    - @param image: Opaque image from the transformer.
    - @param target_width: Requested glyph columns.
    - @param limits: Dimension cap and stream-length ceilings.
    - @return: SGR-coded character stream, one line per glyph row.
    - @throws ConversionFailed: If the stream is empty.
    - @throws OutputTooLarge: If the stream exceeds ``limits.max_ascii_chars``.
    """
    grid = sample_glyphs(image, target_width, limits.max_ascii_dimension)
    stream = grid.to_ansi()
    if not stream:
        raise ConversionFailed("failed to convert image to ASCII")

    length = len(stream)
    if length > limits.max_ascii_chars:
        raise OutputTooLarge(length, limits.max_ascii_chars, what="ASCII output", unit="characters")
    if length > limits.ascii_warn_chars:
        log.warning("Very large ASCII output: %s characters. Processing may take time.", format_number(length))
    elif length > limits.ascii_info_chars:
        log.info("Large ASCII output: %s characters.", format_number(length))
    return stream
