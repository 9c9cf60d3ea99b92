"""High-level orchestration: image bytes → SVG."""

from .process import convert_file, process_image_to_svg

__all__ = [
    "convert_file",
    "process_image_to_svg",
]
