"""T3: ARIA selection state (radio, option and tab patterns)."""

from __future__ import annotations

from swatchlink.engine.container import Container
from swatchlink.engine.context import AssociationContext
from swatchlink.engine.registry import tier
from swatchlink.engine.swatch_rules import select_all
from swatchlink.tree.element import ElementRef

ARIA_SELECTORS = (
    '[role="radio"][aria-checked="true"]',
    '[role="option"][aria-selected="true"]',
    '[aria-checked="true"][class*="swatch"]',
    '[aria-checked="true"][class*="color"]',
    '[role="tab"][aria-selected="true"][class*="color"]',
)


@tier(id="aria_state", rank=3, description="aria-checked / aria-selected swatches")
def aria_state(ctx: AssociationContext, container: Container) -> list[ElementRef]:
    return select_all(container.element, ARIA_SELECTORS)
