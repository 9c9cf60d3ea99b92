"""xterm 256-color palette: RGB quantization and index lookup.

Indices 0-15 are the system colors, 16-231 a 6x6x6 color cube and 232-255 a
24-step gray ramp. Quantization only ever returns cube or gray indices; the
system colors are kept for decoding streams produced elsewhere.
"""

from __future__ import annotations

from typing import List, Tuple

import numpy as np

RGB = Tuple[int, int, int]

SYSTEM_COLORS: List[RGB] = [
    (0, 0, 0),
    (205, 0, 0),
    (0, 205, 0),
    (205, 205, 0),
    (0, 0, 238),
    (205, 0, 205),
    (0, 205, 205),
    (229, 229, 229),
    (127, 127, 127),
    (255, 0, 0),
    (0, 255, 0),
    (255, 255, 0),
    (92, 92, 255),
    (255, 0, 255),
    (0, 255, 255),
    (255, 255, 255),
]

CUBE_LEVELS = (0, 95, 135, 175, 215, 255)


def _build_palette() -> np.ndarray:
    colors = list(SYSTEM_COLORS)
    for r in CUBE_LEVELS:
        for g in CUBE_LEVELS:
            for b in CUBE_LEVELS:
                colors.append((r, g, b))
    for i in range(24):
        level = 8 + 10 * i
        colors.append((level, level, level))
    return np.array(colors, dtype=np.int64)


PALETTE = _build_palette()


def xterm256_to_rgb(index: int) -> RGB:
    if not 0 <= index <= 255:
        raise ValueError(f"xterm color index out of range: {index}")
    r, g, b = PALETTE[index]
    return int(r), int(g), int(b)


def _cube_level(values: np.ndarray) -> np.ndarray:
    # Midpoints between cube levels: 48, 115, 155, 195, 235.
    return np.where(values < 48, 0, np.where(values < 115, 1, (values - 35) // 40))


def quantize_xterm256(rgb: np.ndarray) -> np.ndarray:
    """Map an ``(..., 3)`` uint8 array to the nearest cube or gray index."""
    values = rgb.astype(np.int64)
    levels = _cube_level(values)
    cube_index = 16 + 36 * levels[..., 0] + 6 * levels[..., 1] + levels[..., 2]

    mean = values.sum(axis=-1) // 3
    gray_step = np.clip((mean - 3) // 10, 0, 23)
    gray_index = 232 + gray_step

    cube_dist = ((PALETTE[cube_index] - values) ** 2).sum(axis=-1)
    gray_dist = ((PALETTE[gray_index] - values) ** 2).sum(axis=-1)
    return np.where(gray_dist < cube_dist, gray_index, cube_index)


def rgb_to_xterm256(r: int, g: int, b: int) -> int:
    return int(quantize_xterm256(np.array([r, g, b], dtype=np.uint8)))
