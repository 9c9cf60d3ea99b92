import logging

import numpy as np
import pytest

from asciisvg.ascii.palette import quantize_xterm256, rgb_to_xterm256, xterm256_to_rgb
from asciisvg.ascii.sampler import (
    GLYPH_RAMP,
    convert_to_ascii,
    grid_dimensions,
    sample_glyphs,
)
from asciisvg.config import Limits
from asciisvg.errors import OutputTooLarge
from asciisvg.image.model import PixelImage


def _solid(width, height, rgb):
    rgba = np.empty((height, width, 4), dtype=np.uint8)
    rgba[...] = (*rgb, 255)
    return PixelImage.from_rgba8(rgba)


def test_grid_dimensions_preserve_aspect_ratio():
    assert grid_dimensions(200, 100, 100) == (100, 50)
    assert grid_dimensions(100, 100, 10) == (10, 10)


def test_grid_dimensions_cap_wide():
    # 1000 x 500 before the cap; both sides scale by 500 / 1000.
    assert grid_dimensions(200, 100, 1000) == (500, 250)


def test_grid_dimensions_cap_tall():
    assert grid_dimensions(100, 1000, 100) == (50, 500)


def test_grid_dimensions_floor_at_one():
    assert grid_dimensions(1000, 1, 10) == (10, 1)
    assert grid_dimensions(1, 100000, 1) == (1, 500)


def test_red_image_samples_red_glyphs():
    grid = sample_glyphs(_solid(64, 64, (255, 0, 0)), 10)
    assert (grid.columns, grid.rows) == (10, 10)
    cells = list(grid.cells())
    assert len(cells) == 100
    assert {c.color for c in cells} == {"#ff0000"}
    assert {c.label for c in cells} == {";"}


def test_black_and_white_map_to_ramp_ends():
    black = list(sample_glyphs(_solid(8, 8, (0, 0, 0)), 4).cells())
    white = list(sample_glyphs(_solid(8, 8, (255, 255, 255)), 4).cells())
    assert {c.label for c in black} == {GLYPH_RAMP[0]}
    assert {c.label for c in white} == {GLYPH_RAMP[-1]}
    assert {c.color for c in white} == {"#ffffff"}


def test_ansi_stream_follows_cell_rows():
    pixels = np.zeros((2, 2, 3), dtype=np.uint8)
    pixels[:, 0] = (255, 0, 0)
    pixels[:, 1] = (0, 0, 255)
    grid = sample_glyphs(PixelImage.from_rgba8(np.dstack([pixels, np.full((2, 2), 255, dtype=np.uint8)])), 2)
    rows = list(grid.cell_rows())
    assert [c.palette_index for c in rows[0]] == [196, 21]
    expected = "".join(
        "".join(f"\x1b[38;5;{c.palette_index}m{c.label}" for c in row) + "\x1b[0m\n" for row in rows
    )
    assert grid.to_ansi() == expected


def test_ansi_stream_emits_color_only_on_change():
    stream = sample_glyphs(_solid(64, 64, (255, 0, 0)), 3).to_ansi()
    assert stream == "\x1b[38;5;196m;;;\x1b[0m\n" * 3


def test_ansi_stream_two_colors_per_row():
    rgba = np.zeros((2, 4, 4), dtype=np.uint8)
    rgba[..., 3] = 255
    rgba[:, :2, 0] = 255
    rgba[:, 2:, 2] = 255
    stream = sample_glyphs(PixelImage.from_rgba8(rgba), 4).to_ansi()
    rows = stream.split("\n")
    assert rows[-1] == ""
    assert len(rows) == 3
    assert rows[0].count("\x1b[38;5;") == 2
    assert "\x1b[38;5;196m" in rows[0]
    assert "\x1b[38;5;21m" in rows[0]


def test_convert_to_ascii_rejects_oversized_stream():
    with pytest.raises(OutputTooLarge) as exc_info:
        convert_to_ascii(_solid(16, 16, (255, 0, 0)), 10, Limits(max_ascii_chars=10))
    assert exc_info.value.limit == 10
    assert "characters" in str(exc_info.value)


def test_convert_to_ascii_logs_large_output(caplog):
    caplog.set_level(logging.INFO)
    convert_to_ascii(_solid(16, 16, (255, 0, 0)), 10, Limits(ascii_warn_chars=5))
    assert "Very large ASCII output" in caplog.text

    caplog.clear()
    convert_to_ascii(_solid(16, 16, (255, 0, 0)), 10, Limits(ascii_info_chars=5))
    assert "Large ASCII output" in caplog.text
    assert "Very large" not in caplog.text


def test_palette_quantization():
    assert rgb_to_xterm256(255, 0, 0) == 196
    assert rgb_to_xterm256(0, 0, 255) == 21
    assert rgb_to_xterm256(0, 0, 0) == 16
    assert rgb_to_xterm256(255, 255, 255) == 231
    assert rgb_to_xterm256(128, 128, 128) == 244
    assert xterm256_to_rgb(244) == (128, 128, 128)
    assert xterm256_to_rgb(196) == (255, 0, 0)


def test_palette_vectorized_matches_scalar():
    rgb = np.array([[[255, 0, 0], [10, 200, 30]], [[128, 128, 128], [1, 2, 3]]], dtype=np.uint8)
    indices = quantize_xterm256(rgb)
    assert indices.shape == (2, 2)
    assert indices[0, 0] == 196
    assert indices[1, 1] == rgb_to_xterm256(1, 2, 3)


def test_palette_index_out_of_range():
    with pytest.raises(ValueError):
        xterm256_to_rgb(256)
