"""T7: First relative swatch (listing-page fallback).

On listing pages an unselected product still shows its default swatch first.
Any swatch-shaped element in the container qualifies; the detector keeps the
one closest to the image.
"""

from __future__ import annotations

from swatchlink.engine.container import Container
from swatchlink.engine.context import AssociationContext
from swatchlink.engine.registry import tier
from swatchlink.engine.swatch_rules import select_all
from swatchlink.tree.element import ElementRef

SWATCH_SELECTORS = (
    '[class*="swatch"] img',
    '[class*="color-option"] img',
    '[class*="variant"] img',
    '[class*="swatch"]',
    '[class*="color-option"]',
    '[class*="color-swatch"]',
    '[class*="variant-option"]',
    'button[class*="swatch"]',
    'a[class*="swatch"]',
    'button[class*="color"]',
    'a[class*="color"]',
)


@tier(id="structural", rank=7, listing_only=True, description="First swatch-like element in the container")
def structural(ctx: AssociationContext, container: Container) -> list[ElementRef]:
    return [
        el
        for el in select_all(container.element, SWATCH_SELECTORS)
        if el != ctx.image and not el.contains(ctx.image)
    ]
