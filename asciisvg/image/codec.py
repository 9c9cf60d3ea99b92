"""Decoding of raw image bytes into a ``PixelImage``."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from PIL import Image, UnidentifiedImageError

from asciisvg.config import DEFAULT_LIMITS, Limits
from asciisvg.errors import DecodeError, EmptyInput, InputTooLarge, InvalidDimensions
from asciisvg.image.model import PixelImage

log = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("PNG", "JPEG")


@dataclass(frozen=True)
class DecodedImage:
    image: PixelImage
    format: str


def validate_image_data(data: bytes, limits: Limits = DEFAULT_LIMITS) -> None:
    """Reject empty or oversized input without touching the decoder."""
    if data is None or len(data) == 0:
        raise EmptyInput("image data is empty")
    if len(data) > limits.max_input_bytes:
        raise InputTooLarge(len(data), limits.max_input_bytes)


def read_image_size(data: bytes, limits: Limits = DEFAULT_LIMITS) -> Tuple[int, int]:
    """Image ``(width, height)`` from the file header, without decoding pixels."""
    validate_image_data(data, limits)
    try:
        with Image.open(io.BytesIO(data)) as pil_image:
            return pil_image.size
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as exc:
        raise DecodeError(f"failed to read image header: {exc}") from exc


def decode_image(data: bytes, limits: Limits = DEFAULT_LIMITS) -> DecodedImage:
    """Decode PNG or JPEG bytes into a 16-bit RGBA ``PixelImage``.

    Doxygen:
    - @param data: Raw file contents.
    - @param limits: Size ceilings; only ``max_input_bytes`` is used here.
    - @return: ``DecodedImage`` with the pixel grid and the detected format name.
    - @throws EmptyInput: If ``data`` is empty.
    - @throws InputTooLarge: If ``data`` exceeds the input ceiling.
    - @throws DecodeError: If Pillow cannot decode the data or the format is unsupported.
    - @throws InvalidDimensions: If the decoded image has a zero side.
    """
    validate_image_data(data, limits)

    try:
        with Image.open(io.BytesIO(data)) as pil_image:
            image_format = pil_image.format or ""
            if image_format not in SUPPORTED_FORMATS:
                raise DecodeError(f"unsupported image format: {image_format or 'unknown'}")
            width, height = pil_image.size
            if width <= 0 or height <= 0:
                raise InvalidDimensions(width, height)
            # Multi-frame files keep their first frame only.
            if pil_image.mode.startswith("I"):
                image = _gray16_to_image(pil_image)
            else:
                image = PixelImage.from_rgba8(np.asarray(pil_image.convert("RGBA"), dtype=np.uint8))
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as exc:
        raise DecodeError(f"failed to decode image: {exc}") from exc

    log.info("Image decoded successfully. Format: %s, size: %dx%d", image_format, width, height)
    return DecodedImage(image=image, format=image_format)


def _gray16_to_image(pil_image: Image.Image) -> PixelImage:
    """Widen a 16-bit grayscale frame (modes ``I;16*`` and ``I``) to opaque RGBA without losing depth."""
    gray = np.asarray(pil_image)
    if gray.ndim != 2 or gray.shape[0] == 0 or gray.shape[1] == 0:
        raise InvalidDimensions(int(gray.shape[1]) if gray.ndim > 1 else 0, int(gray.shape[0]))
    gray = np.clip(gray.astype(np.int64), 0, 0xFFFF).astype(np.uint16)
    pixels = np.empty(gray.shape + (4,), dtype=np.uint16)
    pixels[..., :3] = gray[..., None]
    pixels[..., 3] = 0xFFFF
    return PixelImage(pixels)
