"""Conversion limits and SVG render metrics.

Defaults are baked into the dataclasses below. An optional JSON file
(``config/settings.json`` under the project root) can override individual
keys::

    {"render": {"char_width": 12}, "limits": {"max_ascii_dimension": 300}}
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional, Tuple

log = logging.getLogger(__name__)

MIB = 1024 * 1024

_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
DEFAULT_SETTINGS_PATH = os.path.join(_PROJECT_ROOT, "config", "settings.json")


@dataclass(frozen=True)
class Limits:
    """Hard ceilings and advisory thresholds for a single conversion."""

    max_input_bytes: int = 50 * MIB
    max_output_bytes: int = 10 * MIB
    max_ascii_chars: int = 5_000_000
    max_ascii_dimension: int = 500
    max_styled_elements: int = 100_000
    max_process_dimension: int = 1024
    ascii_info_chars: int = 1_000_000
    ascii_warn_chars: int = 3_000_000
    styled_warn_elements: int = 30_000


@dataclass(frozen=True)
class RenderSettings:
    """Glyph cell geometry and font used by the SVG renderer.

    Negative paddings trim the ascent above the first row and the trailing
    cell gap of the monospace font.
    """

    line_height: int = 16
    char_width: int = 16
    font_size: int = 16
    font_family: str = "monospace"
    padding_top: int = -2
    padding_bottom: int = 2
    padding_left: int = 1
    padding_right: int = -6


DEFAULT_LIMITS = Limits()
DEFAULT_RENDER_SETTINGS = RenderSettings()


def _apply_overrides(base: Any, overrides: Dict[str, Any], section: str) -> Any:
    known = {f.name for f in fields(base)}
    accepted: Dict[str, Any] = {}
    for key, value in overrides.items():
        if key not in known:
            log.warning("Ignoring unknown %s setting: %s", section, key)
            continue
        current = getattr(base, key)
        if isinstance(current, int) and (not isinstance(value, int) or isinstance(value, bool)):
            log.warning("Ignoring non-integer %s setting %s=%r", section, key, value)
            continue
        if isinstance(current, str) and not isinstance(value, str):
            log.warning("Ignoring non-string %s setting %s=%r", section, key, value)
            continue
        accepted[key] = value
    return replace(base, **accepted)


def load_settings(path: Optional[str] = None) -> Tuple[RenderSettings, Limits]:
    """Load render settings and limits, applying JSON overrides when present.

    Doxygen:
    - @param path: Explicit settings file. When omitted, ``config/settings.json``
      under the project root is used if it exists.
    - @return: Tuple ``(RenderSettings, Limits)``.
    - @throws FileNotFoundError: If an explicit ``path`` does not exist.
    """
    render, limits = DEFAULT_RENDER_SETTINGS, DEFAULT_LIMITS

    if path is not None:
        if not os.path.isfile(path):
            raise FileNotFoundError(f"Settings file not found: {path}")
        settings_path = path
    elif os.path.isfile(DEFAULT_SETTINGS_PATH):
        settings_path = DEFAULT_SETTINGS_PATH
    else:
        return render, limits

    try:
        with open(settings_path, "r", encoding="utf-8") as settings_file:
            data = json.load(settings_file) or {}
    except (OSError, ValueError) as exc:
        if path is not None:
            raise
        log.warning("Could not load settings from %s: %s", settings_path, exc)
        return render, limits

    if not isinstance(data, dict):
        log.warning("Settings file %s must contain a JSON object", settings_path)
        return render, limits

    render_overrides = data.get("render") or {}
    limit_overrides = data.get("limits") or {}
    if isinstance(render_overrides, dict):
        render = _apply_overrides(render, render_overrides, "render")
    if isinstance(limit_overrides, dict):
        limits = _apply_overrides(limits, limit_overrides, "limits")
    log.info("Loaded settings from %s", settings_path)
    return render, limits
