"""Swatch enumeration: every swatch in a resolved container, with metadata.

The detector answers which swatch is selected. This module lists the whole
swatch row around it so a host can present the alternatives, each with its
color, label, image and availability.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace

from swatchlink.engine.clustering import band
from swatchlink.engine.container import Container
from swatchlink.engine.context import AssociationContext
from swatchlink.engine.spatial_constants import GRID_BAND_TOLERANCE, SWATCH_MAX_SIZE, SWATCH_MIN_SIZE
from swatchlink.engine.swatch_rules import is_disabled, is_ignored, is_valid_swatch_element, select_all
from swatchlink.tree.element import ElementRef
from swatchlink.utils.colors import SwatchColor, extract_swatch_color, parse_color_string

logger = logging.getLogger(__name__)

# Small colored blocks count as swatches even without swatch-like markup.
VISUAL_CANDIDATES = "div, span, button, li, a, img"

MAX_SWATCHES = 50
MAX_LABEL_LENGTH = 50
DISABLED_OPACITY = 0.5

_PATTERN_KEYWORDS = ("stripe", "polka", "dot", "floral", "checkered", "plaid", "pattern", "print")
_UNAVAILABLE_HINTS = ("disabled", "sold-out", "unavailable", "out-of-stock")
_URL_RE = re.compile(r"""url\(\s*['"]?([^'")]+?)['"]?\s*\)""")
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?|-?\.\d+")


@dataclass(frozen=True)
class SwatchInfo:
    element: ElementRef
    index: int
    color: SwatchColor | None = None
    label: str | None = None
    image_url: str | None = None
    is_pattern: bool = False
    disabled: bool = False
    selected: bool = False

    @property
    def hex(self) -> str | None:
        return self.color.hex if self.color is not None else None


@dataclass(frozen=True)
class SwatchListing:
    swatches: list[SwatchInfo] = field(default_factory=list)
    selected_index: int = -1

    @property
    def selected(self) -> SwatchInfo | None:
        if self.selected_index < 0:
            return None
        return self.swatches[self.selected_index]

    def __len__(self) -> int:
        return len(self.swatches)


def _background_image(element: ElementRef) -> str | None:
    value = element.style("background-image")
    if value is None or value.strip().lower() in ("", "none"):
        return None
    return value


def _has_fill(element: ElementRef) -> bool:
    if _background_image(element) is not None:
        return True
    return parse_color_string(element.style("background-color")) is not None


def swatch_label(element: ElementRef) -> str | None:
    """Human-readable swatch name from accessible names, text or image alt."""
    for attr in ("aria-label", "title"):
        value = (element.get(attr) or "").strip()
        if value:
            return value

    text = element.text
    if text and len(text) < MAX_LABEL_LENGTH:
        return text

    if element.tag == "img" and (element.get("alt") or "").strip():
        return element.get("alt").strip()
    for img in element.select("img[alt]"):
        alt = (img.get("alt") or "").strip()
        if alt:
            return alt

    for attr in ("data-color-name", "data-variant-name"):
        value = (element.get(attr) or "").strip()
        if value:
            return value
    return None


def swatch_image_url(element: ElementRef) -> str | None:
    if element.tag == "img":
        return element.get("src")
    background = _background_image(element)
    if background is not None:
        match = _URL_RE.search(background)
        if match:
            return match.group(1)
    child = element.select("img[src]")
    return child[0].get("src") if child else None


def is_pattern(element: ElementRef, label: str | None = None) -> bool:
    """Textured swatch: any background image, or a pattern word in its label."""
    if _background_image(element) is not None:
        return True
    if label is None:
        label = swatch_label(element)
    if not label:
        return False
    lowered = label.lower()
    return any(word in lowered for word in _PATTERN_KEYWORDS)


def _opacity(element: ElementRef) -> float:
    match = _NUMBER.search(element.style("opacity") or "")
    return float(match.group()) if match else 1.0


def _has_unavailable_class(element: ElementRef | None) -> bool:
    if element is None:
        return False
    names = " ".join(element.classes).lower()
    return any(hint in names for hint in _UNAVAILABLE_HINTS)


def is_unavailable(element: ElementRef) -> bool:
    """Disabled, sold out, faded out, or inside a disabled wrapper."""
    if is_disabled(element) or _has_unavailable_class(element):
        return True
    if _opacity(element) < DISABLED_OPACITY:
        return True
    return _has_unavailable_class(element.parent())


def _is_visual_swatch(ctx: AssociationContext, element: ElementRef) -> bool:
    box = ctx.box(element)
    if not (SWATCH_MIN_SIZE <= box.width <= SWATCH_MAX_SIZE and SWATCH_MIN_SIZE <= box.height <= SWATCH_MAX_SIZE):
        return False
    return _has_fill(element)


def _reading_order(ctx: AssociationContext, elements: list[ElementRef]) -> list[ElementRef]:
    """Top to bottom in rows, then left to right."""
    by_top = sorted(elements, key=lambda e: (ctx.box(e).top, e.order))
    rows = band([ctx.box(e).top for e in by_top], GRID_BAND_TOLERANCE)
    keyed = zip(rows, by_top)
    return [e for _, e in sorted(keyed, key=lambda pair: (pair[0], ctx.box(pair[1]).left, pair[1].order))]


def discover_swatches(ctx: AssociationContext, container: Container) -> list[ElementRef]:
    """Swatch elements in ``container`` in reading order.

    Swatch-like markup is matched first, then small filled blocks.
    Disabled swatches are kept here; list_swatches() decides on them.
    """
    root = container.element
    found: dict[ElementRef, None] = {}
    for el in select_all(root, ctx.config.swatch_hint_selectors):
        if not is_ignored(ctx, el) and is_valid_swatch_element(ctx, el):
            found.setdefault(el, None)

    for el in root.select(VISUAL_CANDIDATES):
        if el in found or el == ctx.image:
            continue
        if any(other.contains(el) for other in found):
            continue
        if not is_ignored(ctx, el) and el.is_visible() and _is_visual_swatch(ctx, el):
            found.setdefault(el, None)

    elements = sorted(found, key=lambda e: e.order)[:MAX_SWATCHES]
    return _reading_order(ctx, elements)


def describe_swatch(element: ElementRef, index: int = 0) -> SwatchInfo:
    label = swatch_label(element)
    return SwatchInfo(
        element=element,
        index=index,
        color=extract_swatch_color(element),
        label=label,
        image_url=swatch_image_url(element),
        is_pattern=is_pattern(element, label),
        disabled=is_unavailable(element),
    )


def _selected_position(swatches: list[SwatchInfo], selected: ElementRef | None) -> int:
    if selected is None:
        return -1
    for info in swatches:
        if info.element == selected:
            return info.index
    # A detected label or inner chip stands for the swatch around or inside it
    for info in swatches:
        if info.element.contains(selected) or selected.contains(info.element):
            return info.index
    return -1


def list_swatches(
    ctx: AssociationContext,
    container: Container,
    selected: ElementRef | None = None,
    include_disabled: bool = False,
    include_patterns: bool = True,
) -> SwatchListing:
    """Every swatch in ``container`` with metadata, marking ``selected``."""
    swatches: list[SwatchInfo] = []
    for element in discover_swatches(ctx, container):
        info = describe_swatch(element, index=len(swatches))
        if info.disabled and not include_disabled:
            continue
        if info.is_pattern and not include_patterns:
            continue
        swatches.append(info)

    position = _selected_position(swatches, selected)
    if position >= 0:
        swatches[position] = replace(swatches[position], selected=True)

    logger.debug(
        "Listed %d swatches in %r (selected index %d)",
        len(swatches),
        container.element,
        position,
    )
    return SwatchListing(swatches=swatches, selected_index=position)
