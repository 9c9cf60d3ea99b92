"""Image-level processing: decoding, resampling, photometric adjustment."""

from .codec import DecodedImage, decode_image, read_image_size, validate_image_data
from .model import PixelImage
from .processing import (
    adjust_brightness,
    adjust_contrast,
    composite_transparency,
    downsample,
    process_image,
    sharpen,
)

__all__ = [
    "DecodedImage",
    "PixelImage",
    "adjust_brightness",
    "adjust_contrast",
    "composite_transparency",
    "decode_image",
    "downsample",
    "process_image",
    "read_image_size",
    "sharpen",
    "validate_image_data",
]
