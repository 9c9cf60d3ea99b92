"""High-level pipeline: decode → adjust → glyphs → runs → SVG.

``process_image_to_svg`` is the single entry point for host integrations;
``convert_file`` wraps it for scripts and the CLI.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from asciisvg.ascii import convert_to_ascii, extract_runs
from asciisvg.config import DEFAULT_LIMITS, DEFAULT_RENDER_SETTINGS, Limits, RenderSettings
from asciisvg.errors import InvalidOption
from asciisvg.image import decode_image, process_image
from asciisvg.options import ProcessingOptions
from asciisvg.render import DEFAULT_POOL, ScratchBufferPool, render_to_svg

log = logging.getLogger(__name__)


def process_image_to_svg(
    image_data: bytes,
    options: ProcessingOptions,
    settings: RenderSettings = DEFAULT_RENDER_SETTINGS,
    limits: Limits = DEFAULT_LIMITS,
    pool: ScratchBufferPool = DEFAULT_POOL,
) -> str:
    """Convert raw image bytes into a colored ASCII-art SVG document.

    Doxygen:
    - @param image_data: PNG or JPEG file contents.
    - @param options: Normalized options (see ``asciisvg.options.normalize_options``).
    - @param settings: SVG cell geometry and font.
    - @param limits: Size ceilings for every stage.
    - @param pool: Scratch buffer pool used for serialization.
    - @return: SVG document text.
    - @throws AsciiSvgError: The first failure of any stage; nothing partial is returned.
    """
    if not isinstance(options, ProcessingOptions):
        raise InvalidOption("options must be normalized ProcessingOptions")

    decoded = decode_image(image_data, limits)
    processed = process_image(decoded.image, options, limits.max_process_dimension)
    ascii_stream = convert_to_ascii(processed, options.target_width, limits)
    lines = extract_runs(ascii_stream, limits)
    return render_to_svg(lines, options.background_color, settings, limits, pool)


def default_output_path(image_path: str) -> str:
    base, _ = os.path.splitext(image_path)
    return base + ".svg"


def convert_file(
    image_path: str,
    options: ProcessingOptions,
    output_path: Optional[str] = None,
    settings: RenderSettings = DEFAULT_RENDER_SETTINGS,
    limits: Limits = DEFAULT_LIMITS,
) -> str:
    """Convert an image file and write the SVG next to it (or to ``output_path``).

    Doxygen:
    - @param image_path: Path to a PNG or JPEG file.
    - @param options: Normalized options.
    - @param output_path: Destination SVG path; defaults to the input path with ``.svg``.
    - @return: Path of the written SVG file.
    - @throws FileNotFoundError: If ``image_path`` does not exist.
    """
    if not os.path.isfile(image_path):
        raise FileNotFoundError(f"Image file not found: {image_path}")

    with open(image_path, "rb") as image_file:
        data = image_file.read()

    svg_text = process_image_to_svg(data, options, settings, limits)

    out_path = output_path or default_output_path(image_path)
    out_dir = os.path.dirname(out_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as out_file:
        out_file.write(svg_text)
    log.info("Saved SVG to %s (%d bytes)", out_path, len(svg_text.encode("utf-8")))
    return out_path
