"""
Entry point and facade for the image → ASCII art → SVG pipeline.

This module exposes a stable API and a CLI.

Packages:
- asciisvg.image: Decoding, resampling, brightness/contrast/sharpen, alpha flattening
- asciisvg.ascii: Glyph sampling and colored-run extraction
- asciisvg.render: SVG layout and serialization
- asciisvg.pipeline: High-level orchestration (`process_image_to_svg`)
"""

from __future__ import annotations

import logging
import sys

from asciisvg.config import Limits, RenderSettings, load_settings
from asciisvg.errors import (
    AsciiSvgError,
    ConversionFailed,
    DecodeError,
    EmptyInput,
    InputTooLarge,
    InvalidDimensions,
    InvalidOption,
    NilInput,
    OutputTooLarge,
    ParseError,
    TooManyElements,
)
from asciisvg.options import (
    ProcessingOptions,
    normalize_options,
    resolve_color,
    suggest_target_width,
)
from asciisvg.image import read_image_size
from asciisvg.pipeline import convert_file, process_image_to_svg

__all__ = [
    # configuration
    "Limits",
    "RenderSettings",
    "load_settings",
    # options
    "ProcessingOptions",
    "normalize_options",
    "resolve_color",
    "suggest_target_width",
    # pipeline
    "process_image_to_svg",
    "convert_file",
    # errors
    "AsciiSvgError",
    "ConversionFailed",
    "DecodeError",
    "EmptyInput",
    "InputTooLarge",
    "InvalidDimensions",
    "InvalidOption",
    "NilInput",
    "OutputTooLarge",
    "ParseError",
    "TooManyElements",
]


def _cli(argv: list[str] | None = None) -> int:
    """CLI for converting one image into an ASCII-art SVG.

    --image / -i: Path to input image (PNG or JPEG)
    --out / -o: Output SVG path (default: input path with .svg suffix)
    --width / -w: Glyph columns (default: derived from the image aspect ratio, 50..200)
    --brightness / --contrast: Percent adjustments in [-100, 100] (default: 0)
    --sharpen: Unsharp-mask sigma (default: 0)
    --bg: Canvas background color (default: #000000)
    --transparency-color: Substitute for transparent pixels (default: #FFFFFF)
    --threshold: Alpha cutoff in [0, 1] (default: 0)
    --config: JSON file overriding render metrics and limits
    --verbose / -v: Log pipeline progress
    """
    import argparse

    parser = argparse.ArgumentParser(description="Convert an image into colored ASCII art rendered as SVG.")
    parser.add_argument("--image", "-i", type=str, required=True, help="Path to input image (PNG or JPEG)")
    parser.add_argument("--out", "-o", type=str, default=None, help="Output SVG path (default: <image>.svg)")
    parser.add_argument("--width", "-w", type=int, default=None, help="Glyph columns (default: derived from aspect ratio)")
    parser.add_argument("--brightness", type=float, default=0.0, help="Brightness shift in percent (default: 0)")
    parser.add_argument("--contrast", type=float, default=0.0, help="Contrast change in percent (default: 0)")
    parser.add_argument("--sharpen", type=float, default=0.0, help="Sharpen sigma (default: 0)")
    parser.add_argument("--bg", type=str, default="#000000", help="Background color (default: #000000)")
    parser.add_argument("--transparency-color", type=str, default="#FFFFFF", help="Color substituted for transparent pixels (default: #FFFFFF)")
    parser.add_argument("--threshold", type=float, default=0.0, help="Transparency alpha threshold in [0, 1] (default: 0)")
    parser.add_argument("--config", type=str, default=None, help="Settings JSON with 'render' and 'limits' overrides")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log pipeline progress")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        settings, limits = load_settings(args.config)
    except (OSError, ValueError) as e:
        print(f"Could not load settings: {e}")
        return 2

    try:
        width = args.width
        if width is None:
            with open(args.image, "rb") as image_file:
                img_w, img_h = read_image_size(image_file.read(), limits)
            width = suggest_target_width(img_w, img_h)
            print(f"Using suggested width: {width}")

        options = normalize_options(
            target_width=width,
            brightness=args.brightness,
            contrast=args.contrast,
            sharpen=args.sharpen,
            background_color=args.bg,
            transparency_color=args.transparency_color,
            transparency_threshold=args.threshold,
        )
        out_path = convert_file(args.image, options, output_path=args.out, settings=settings, limits=limits)
    except OSError as e:
        print(f"Could not read image: {e}")
        return 2
    except AsciiSvgError as e:
        print(f"Error processing image: {e}")
        return 2

    print(f"Saved SVG to: {out_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(_cli())
