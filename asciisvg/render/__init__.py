"""SVG rendering of styled text runs."""

from .buffer import DEFAULT_POOL, ScratchBufferPool
from .document import (
    TextPrimitive,
    VectorDocument,
    calculate_dimensions,
    layout_document,
    render_to_svg,
)

__all__ = [
    "DEFAULT_POOL",
    "ScratchBufferPool",
    "TextPrimitive",
    "VectorDocument",
    "calculate_dimensions",
    "layout_document",
    "render_to_svg",
]
