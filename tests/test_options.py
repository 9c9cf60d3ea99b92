import dataclasses

import pytest

from asciisvg.errors import InvalidOption
from asciisvg.options import (
    normalize_options,
    resolve_color,
    suggest_target_width,
    to_hex,
)


@pytest.mark.parametrize("raw, expected", [(-1, 0.0), (1.5, 1.0), (0.5, 0.5), (0, 0.0), (1, 1.0)])
def test_threshold_is_clamped(raw, expected):
    opts = normalize_options(10, transparency_threshold=raw)
    assert opts.transparency_threshold == expected


def test_empty_colors_get_defaults():
    opts = normalize_options(10, background_color="", transparency_color="")
    assert opts.background_color == "#000000"
    assert opts.transparency_color == "#FFFFFF"

    opts = normalize_options(10, background_color=None, transparency_color=None)
    assert opts.background_color == "#000000"
    assert opts.transparency_color == "#FFFFFF"


@pytest.mark.parametrize("width", [0, -5, 2.5, True, "10", None])
def test_invalid_target_width_is_rejected(width):
    with pytest.raises(InvalidOption):
        normalize_options(width)


def test_invalid_option_is_a_value_error():
    with pytest.raises(ValueError):
        normalize_options(0)


def test_malformed_color_is_kept_until_use():
    opts = normalize_options(10, background_color="zzz", transparency_color="#12")
    assert opts.background_color == "zzz"
    assert opts.transparency_color == "#12"
    assert resolve_color(opts.background_color) is None
    assert resolve_color(opts.transparency_color) is None


def test_options_are_immutable():
    opts = normalize_options(10)
    with pytest.raises(dataclasses.FrozenInstanceError):
        opts.target_width = 20


def test_resolve_color_short_and_long_forms():
    assert resolve_color("#abc") == (0xAA, 0xBB, 0xCC)
    assert to_hex(resolve_color("#abc")) == "#aabbcc"
    assert resolve_color("abc") == (0xAA, 0xBB, 0xCC)
    assert resolve_color("#FF8000") == (255, 128, 0)
    assert resolve_color("102030") == (0x10, 0x20, 0x30)


@pytest.mark.parametrize("value", ["", None, "#12345", "#GGGGGG", "#abcd", "red", "#"])
def test_resolve_color_rejects_malformed(value):
    assert resolve_color(value) is None


def test_suggest_target_width_bounds():
    assert suggest_target_width(100, 100) == 100
    assert suggest_target_width(150, 100) == 150
    assert suggest_target_width(400, 100) == 200
    assert suggest_target_width(100, 1000) == 50


def test_suggest_target_width_rejects_empty_image():
    with pytest.raises(InvalidOption):
        suggest_target_width(0, 10)
