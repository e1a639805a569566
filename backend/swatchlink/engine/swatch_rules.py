"""Swatch element rules shared by the resolver phases and detection tiers."""

from __future__ import annotations

from collections.abc import Iterable

from swatchlink.engine.context import AssociationContext
from swatchlink.engine.spatial_constants import SWATCH_MAX_SIZE, SWATCH_MIN_SIZE
from swatchlink.tree.element import ElementRef

_DISABLED_CLASSES = frozenset({"disabled", "is-disabled", "is-disabled-option", "sold-out", "unavailable"})


def is_radio(element: ElementRef) -> bool:
    return element.tag == "input" and (element.get("type") or "").lower() == "radio"


def is_disabled(element: ElementRef) -> bool:
    """Sold-out or disabled variants are never the selection."""
    if element.has_attr("disabled"):
        return True
    if (element.get("aria-disabled") or "").lower() == "true":
        return True
    return any(c.lower() in _DISABLED_CLASSES for c in element.classes)


def is_ignored(ctx: AssociationContext, element: ElementRef) -> bool:
    """Host overlay markup (and anything inside it)."""
    return any(element.closest(sel) is not None for sel in ctx.config.ignore_selectors)


def is_valid_swatch_element(ctx: AssociationContext, element: ElementRef) -> bool:
    """Visible and swatch-sized. Radio inputs are exempt from the size check."""
    if not element.is_visible():
        return False
    if is_radio(element):
        return True
    box = ctx.box(element)
    if box.width < SWATCH_MIN_SIZE or box.height < SWATCH_MIN_SIZE:
        return False
    if box.width > SWATCH_MAX_SIZE or box.height > SWATCH_MAX_SIZE:
        return False
    return True


def usable(ctx: AssociationContext, element: ElementRef) -> bool:
    return (
        not is_ignored(ctx, element)
        and not is_disabled(element)
        and is_valid_swatch_element(ctx, element)
    )


def select_all(root: ElementRef, selectors: Iterable[str]) -> list[ElementRef]:
    """Union of selector matches under ``root``, deduped, in document order."""
    found: dict[ElementRef, None] = {}
    for selector in selectors:
        for el in root.select(selector):
            found.setdefault(el, None)
    return sorted(found, key=lambda e: e.order)


def has_swatches(ctx: AssociationContext, element: ElementRef) -> bool:
    return any(
        not is_ignored(ctx, el)
        for selector in ctx.config.swatch_hint_selectors
        for el in element.select(selector)
    )
