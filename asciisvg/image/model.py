from __future__ import annotations

from dataclasses import dataclass

import numpy as np

# 16-bit channel range used between the codec and the sampler.
CHANNEL_MAX = 0xFFFF
_8_TO_16 = 257


@dataclass(frozen=True)
class PixelImage:
    """RGBA pixel grid, shape ``(height, width, 4)``, dtype ``uint16``."""

    pixels: np.ndarray

    def __post_init__(self) -> None:
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise ValueError(f"expected an (H, W, 4) array, got shape {self.pixels.shape}")
        if self.pixels.dtype != np.uint16:
            raise ValueError(f"expected uint16 pixels, got {self.pixels.dtype}")

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def alpha(self) -> np.ndarray:
        return self.pixels[:, :, 3]

    @classmethod
    def from_rgba8(cls, rgba: np.ndarray) -> "PixelImage":
        """Widen an 8-bit RGBA array to the 16-bit range (exact: ``v * 257``)."""
        return cls(rgba.astype(np.uint16) * _8_TO_16)

    def to_rgba8(self) -> np.ndarray:
        return (self.pixels // _8_TO_16).astype(np.uint8)

    def to_rgb8(self) -> np.ndarray:
        return np.ascontiguousarray(self.to_rgba8()[:, :, :3])
