"""Swatch color extraction from markup and styles (no pixel analysis).

Sources are tried from most to least trustworthy: inline background,
computed background, a colored child element, color data attributes, border
color, and finally a radio input's hex value.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from swatchlink.tree.element import ElementRef

logger = logging.getLogger(__name__)

RGB = tuple[int, int, int]

_RGB_RE = re.compile(r"rgba?\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*(?:,\s*(\d+(?:\.\d+)?|\.\d+)\s*)?\)", re.IGNORECASE)
_HEX_RE = re.compile(r"^#?([0-9a-f]{6}|[0-9a-f]{3})$", re.IGNORECASE)

_NAMED_COLORS: dict[str, RGB | None] = {
    "black": (0, 0, 0),
    "white": (255, 255, 255),
    "red": (255, 0, 0),
    "green": (0, 128, 0),
    "blue": (0, 0, 255),
    "yellow": (255, 255, 0),
    "transparent": None,
    "none": None,
}

# Channels above/below these read as white/black
_NEUTRAL_LIGHT = 250
_NEUTRAL_DARK = 5
# HSV saturation below this is grayscale
_NEUTRAL_SATURATION = 0.1

_DATA_COLOR_ATTRS = ("data-color", "data-hex", "data-color-value", "data-value")
_COLOR_CHILD = '[class*="color"], [class*="swatch"], [style*="background"]'
_CHILD_CONFIDENCE_FACTOR = 0.9


@dataclass(frozen=True)
class SwatchColor:
    hex: str
    rgb: RGB
    source: str
    confidence: float


def parse_color_string(value: str | None) -> RGB | None:
    """Parse ``rgb()``/``rgba()``, hex or a few named colors. Transparent gives None."""
    if not value:
        return None
    value = value.strip()

    match = _RGB_RE.search(value)
    if match:
        alpha = match.group(4)
        if alpha is not None and float(alpha) == 0:
            return None
        r, g, b = (min(255, int(match.group(i))) for i in (1, 2, 3))
        return (r, g, b)

    if _HEX_RE.match(value):
        return hex_to_rgb(value)

    return _NAMED_COLORS.get(value.lower())


def rgb_to_hex(rgb: RGB) -> str:
    return "#" + "".join(f"{c:02X}" for c in rgb)


def hex_to_rgb(value: str) -> RGB:
    """``#RRGGBB`` or ``#RGB`` to a tuple. Unparseable input gives black."""
    match = _HEX_RE.match(value.strip())
    if not match:
        return (0, 0, 0)
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(d * 2 for d in digits)
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def is_neutral_color(rgb: RGB) -> bool:
    """White, black or low-saturation gray."""
    r, g, b = rgb
    if r > _NEUTRAL_LIGHT and g > _NEUTRAL_LIGHT and b > _NEUTRAL_LIGHT:
        return True
    if r < _NEUTRAL_DARK and g < _NEUTRAL_DARK and b < _NEUTRAL_DARK:
        return True
    high, low = max(rgb), min(rgb)
    saturation = 0.0 if high == 0 else (high - low) / high
    return saturation < _NEUTRAL_SATURATION


def _make(rgb: RGB, source: str, confidence: float) -> SwatchColor:
    return SwatchColor(hex=rgb_to_hex(rgb), rgb=rgb, source=source, confidence=confidence)


def extract_swatch_color(element: ElementRef, _depth: int = 0) -> SwatchColor | None:
    """Best-effort color of a swatch element, or None."""
    inline = parse_color_string(element.inline_style("background-color") or element.inline_style("background"))
    if inline is not None:
        return _make(inline, "inline-background", 0.95)

    computed = parse_color_string(element.style("background-color"))
    if computed is not None and not is_neutral_color(computed):
        return _make(computed, "computed-background", 0.85)

    if _depth == 0:
        for child in element.select(_COLOR_CHILD):
            found = extract_swatch_color(child, _depth + 1)
            if found is not None:
                return SwatchColor(
                    hex=found.hex,
                    rgb=found.rgb,
                    source="child-element",
                    confidence=found.confidence * _CHILD_CONFIDENCE_FACTOR,
                )

    for attr in _DATA_COLOR_ATTRS:
        raw = element.get(attr)
        if not raw:
            continue
        rgb = parse_color_string(raw)
        if rgb is not None:
            return _make(rgb, "data-attribute", 0.8)
        # First non-empty data attribute decides
        break

    border = parse_color_string(element.style("border-color"))
    if border is not None and not is_neutral_color(border):
        return _make(border, "border-color", 0.6)

    if element.tag == "input" and (element.get("type") or "").lower() == "radio":
        value = element.get("value") or ""
        if _HEX_RE.match(value) and len(value.lstrip("#")) == 6:
            return _make(hex_to_rgb(value), "radio-value", 0.7)

    logger.debug("No color found on %r", element)
    return None
