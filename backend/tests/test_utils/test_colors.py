"""Tests for swatch color extraction."""

from swatchlink.tree.snapshot import load_html
from swatchlink.utils.colors import (
    extract_swatch_color,
    hex_to_rgb,
    is_neutral_color,
    parse_color_string,
    rgb_to_hex,
)


def _element(html: str, element_id: str = "s"):
    return load_html(html).find_by_id(element_id)


def test_parse_rgb_and_rgba():
    assert parse_color_string("rgb(255, 0, 10)") == (255, 0, 10)
    assert parse_color_string("rgba(1,2,3,0.5)") == (1, 2, 3)
    assert parse_color_string("rgba(0, 0, 0, 0)") is None


def test_parse_malformed_alpha_is_not_a_color():
    assert parse_color_string("rgba(10, 20, 30, 0.5.5)") is None
    assert parse_color_string("rgba(10, 20, 30, .)") is None
    assert parse_color_string("rgba(10, 20, 30, .5)") == (10, 20, 30)


def test_parse_hex_and_named():
    assert parse_color_string("#ff8800") == (255, 136, 0)
    assert parse_color_string("#f80") == (255, 136, 0)
    assert parse_color_string("Red") == (255, 0, 0)
    assert parse_color_string("transparent") is None
    assert parse_color_string("not a color") is None
    assert parse_color_string("") is None


def test_hex_roundtrip_uppercase():
    assert rgb_to_hex((255, 136, 0)) == "#FF8800"
    assert hex_to_rgb("#FF8800") == (255, 136, 0)
    assert hex_to_rgb("zzz") == (0, 0, 0)


def test_neutral_colors():
    assert is_neutral_color((255, 255, 255))
    assert is_neutral_color((0, 0, 0))
    assert is_neutral_color((128, 128, 130))
    assert not is_neutral_color((200, 30, 30))


def test_inline_background_wins():
    el = _element('<div id="s" style="background-color: rgb(200, 30, 30)" data-color="#00ff00"></div>')
    color = extract_swatch_color(el)
    assert color.hex == "#C81E1E"
    assert color.source == "inline-background"
    assert color.confidence == 0.95


def test_computed_background_skips_neutral():
    el = _element('<div id="s" data-style="background-color: rgb(250, 250, 250)" data-hex="1e90ff"></div>')
    color = extract_swatch_color(el)
    assert color.source == "data-attribute"
    assert color.rgb == (30, 144, 255)


def test_computed_background():
    el = _element('<div id="s" data-style="background-color: rgb(20, 120, 60)"></div>')
    color = extract_swatch_color(el)
    assert color.source == "computed-background"
    assert color.rgb == (20, 120, 60)


def test_child_element_reduces_confidence():
    el = _element('<button id="s"><span class="swatch-fill" style="background: #123456"></span></button>')
    color = extract_swatch_color(el)
    assert color.source == "child-element"
    assert color.hex == "#123456"
    assert color.confidence == 0.95 * 0.9


def test_border_color_fallback():
    el = _element('<div id="s" data-style="border-color: rgb(10, 60, 200)"></div>')
    color = extract_swatch_color(el)
    assert color.source == "border-color"


def test_radio_value():
    el = _element('<input id="s" type="radio" value="#aa3300">')
    color = extract_swatch_color(el)
    assert color.source == "radio-value"
    assert color.rgb == (170, 51, 0)


def test_nothing_found():
    assert extract_swatch_color(_element('<div id="s" class="plain"></div>')) is None
