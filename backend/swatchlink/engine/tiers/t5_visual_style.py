"""T5: Visual selection styles.

Thick borders, outlines, inset box-shadows and scale transforms on
swatch-like elements. Computed styles come from the snapshot.
"""

from __future__ import annotations

import re

from swatchlink.engine.container import Container
from swatchlink.engine.context import AssociationContext
from swatchlink.engine.registry import tier
from swatchlink.engine.spatial_constants import SELECTED_BORDER_MIN_WIDTH
from swatchlink.tree.element import ElementRef

POTENTIAL_SWATCHES = '[class*="swatch"], [class*="color"], [class*="variant"]'

_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")
_MATRIX = re.compile(r"matrix\(\s*(-?\d+(?:\.\d+)?)\s*,")


def _first_number(value: str | None) -> float:
    if not value:
        return 0.0
    match = _NUMBER.search(value)
    return float(match.group()) if match else 0.0


def _is_none(value: str | None) -> bool:
    return value is None or value.strip().lower() in ("", "none")


def has_selection_style(element: ElementRef) -> bool:
    border = element.style("border-width") or element.style("border")
    if _first_number(border) > SELECTED_BORDER_MIN_WIDTH:
        return True

    outline = element.style("outline")
    if not _is_none(outline) and _first_number(outline) > 0 and "none" not in outline.lower():
        return True

    shadow = element.style("box-shadow")
    if not _is_none(shadow) and "inset" in shadow.lower():
        return True

    transform = element.style("transform")
    if not _is_none(transform):
        lowered = transform.lower()
        if "scale" in lowered:
            return True
        # Computed transforms serialize as matrix(a, b, c, d, tx, ty)
        match = _MATRIX.search(lowered)
        if match and float(match.group(1)) > 1.0:
            return True
    return False


@tier(id="visual_style", rank=5, description="Border/outline/shadow/scale selection styling")
def visual_style(ctx: AssociationContext, container: Container) -> list[ElementRef]:
    return [el for el in container.element.select(POTENTIAL_SWATCHES) if has_selection_style(el)]
