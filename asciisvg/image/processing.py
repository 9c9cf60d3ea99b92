"""Photometric and geometric adjustments applied before glyph sampling.

These utilities operate on ``PixelImage`` grids (16-bit RGBA) using OpenCV
and numpy. Each function returns a new image and leaves its input intact.
"""

from __future__ import annotations

import logging
import math

import cv2
import numpy as np

from asciisvg.config import DEFAULT_LIMITS
from asciisvg.image.model import CHANNEL_MAX, PixelImage
from asciisvg.options import ProcessingOptions, resolve_color

log = logging.getLogger(__name__)

_WHITE = (255, 255, 255)


def _rgb_unit(image: PixelImage) -> np.ndarray:
    return image.pixels[:, :, :3].astype(np.float64) / CHANNEL_MAX


def _with_rgb_unit(image: PixelImage, rgb: np.ndarray) -> PixelImage:
    out = image.pixels.copy()
    out[:, :, :3] = np.rint(np.clip(rgb, 0.0, 1.0) * CHANNEL_MAX).astype(np.uint16)
    return PixelImage(out)


def downsample(image: PixelImage, ceiling: int = DEFAULT_LIMITS.max_process_dimension) -> PixelImage:
    """Shrink the image so that neither side exceeds ``ceiling``.

    Doxygen:
    - @param image: Input image.
    - @param ceiling: Maximum side length in pixels.
    - @return: Lanczos-resampled copy, or an unchanged copy when already small enough.
    """
    width, height = image.width, image.height
    log.info("Original image dimensions: %dx%d", width, height)
    if width <= ceiling and height <= ceiling:
        return PixelImage(image.pixels.copy())

    scale = ceiling / max(width, height)
    new_width = max(1, int(width * scale))
    new_height = max(1, int(height * scale))
    log.info("Resizing to: %dx%d (scale: %.2f)", new_width, new_height, scale)
    resized = cv2.resize(image.pixels, (new_width, new_height), interpolation=cv2.INTER_LANCZOS4)
    return PixelImage(np.ascontiguousarray(resized, dtype=np.uint16))


def adjust_brightness(image: PixelImage, percentage: float) -> PixelImage:
    """Shift RGB by ``percentage`` of full scale; range [-100, 100]."""
    percentage = min(max(percentage, -100.0), 100.0)
    if percentage == 0:
        return PixelImage(image.pixels.copy())
    return _with_rgb_unit(image, _rgb_unit(image) + percentage / 100.0)


def adjust_contrast(image: PixelImage, percentage: float) -> PixelImage:
    """Scale RGB around the 0.5 midpoint; range [-100, 100].

    Negative values compress towards gray (-100 gives flat gray), positive
    values stretch, and 100 turns every channel into a hard 0/1 threshold.
    """
    percentage = min(max(percentage, -100.0), 100.0)
    if percentage == 0:
        return PixelImage(image.pixels.copy())

    rgb = _rgb_unit(image)
    v = (100.0 + percentage) / 100.0
    if v <= 1.0:
        out = 0.5 + (rgb - 0.5) * v
    elif v < 2.0:
        out = 0.5 + (rgb - 0.5) * (1.0 / (2.0 - v))
    else:
        out = (rgb >= 0.5).astype(np.float64)
    return _with_rgb_unit(image, out)


def sharpen(image: PixelImage, sigma: float) -> PixelImage:
    """Unsharp mask: ``2 * orig - GaussianBlur(orig, sigma)`` on RGB."""
    if sigma <= 0:
        return PixelImage(image.pixels.copy())
    rgb = _rgb_unit(image)
    blurred = cv2.GaussianBlur(rgb, (0, 0), sigmaX=sigma, sigmaY=sigma, borderType=cv2.BORDER_REPLICATE)
    return _with_rgb_unit(image, 2.0 * rgb - blurred)


def composite_transparency(image: PixelImage, color: str, threshold: float) -> PixelImage:
    """Flatten alpha against a substitute color.

    Doxygen:
    - @param image: Input RGBA image.
    - @param color: Substitute hex color; white when unparseable.
    - @param threshold: Alpha cutoff in [0, 1] (scaled to 16 bits and floored).
    - @return: Fully opaque image. Pixels with alpha below the cutoff become the
      substitute, partially transparent pixels are blended linearly by alpha,
      opaque pixels pass through unchanged.
    """
    substitute_rgb = resolve_color(color) or _WHITE
    substitute = np.array([c * 257 for c in substitute_rgb], dtype=np.float64)
    alpha_threshold = math.floor(threshold * CHANNEL_MAX)

    pixels = image.pixels
    alpha = pixels[:, :, 3].astype(np.int64)
    below = alpha < alpha_threshold
    partial = (~below) & (alpha < CHANNEL_MAX)

    out = pixels.copy()
    if partial.any():
        factor = (alpha[partial] / CHANNEL_MAX)[:, None]
        blended = pixels[partial][:, :3].astype(np.float64) * factor + substitute * (1.0 - factor)
        out[partial, :3] = np.rint(np.clip(blended, 0, CHANNEL_MAX)).astype(np.uint16)
    if below.any():
        out[below, :3] = substitute.astype(np.uint16)
    out[:, :, 3] = CHANNEL_MAX
    return PixelImage(out)


def process_image(image: PixelImage, options: ProcessingOptions, ceiling: int = DEFAULT_LIMITS.max_process_dimension) -> PixelImage:
    """Downsample, apply brightness → contrast → sharpen, then flatten alpha."""
    img = downsample(image, ceiling)
    if options.brightness != 0:
        img = adjust_brightness(img, options.brightness)
    if options.contrast != 0:
        img = adjust_contrast(img, options.contrast)
    if options.sharpen != 0:
        img = sharpen(img, options.sharpen)
    return composite_transparency(img, options.transparency_color, options.transparency_threshold)
