"""T2: Selected/active class markers on swatch, color and variant elements."""

from __future__ import annotations

from swatchlink.engine.container import Container
from swatchlink.engine.context import AssociationContext
from swatchlink.engine.registry import tier
from swatchlink.engine.swatch_rules import select_all
from swatchlink.tree.element import ElementRef

CLASS_SELECTORS = (
    # Exact
    ".swatch.selected",
    ".swatch.active",
    ".swatch-option.active",
    ".color-swatch.selected",
    ".color-option.selected",
    ".form-option.is-selected",
    ".swatch.is-active",
    # Partial
    '[class*="swatch"][class*="selected"]',
    '[class*="swatch"][class*="active"]',
    '[class*="color"][class*="selected"]',
    '[class*="color"][class*="active"]',
    '[class*="variant"][class*="selected"]',
    # BEM
    '[class*="swatch--selected"]',
    '[class*="swatch--active"]',
    '[class*="color--selected"]',
)


@tier(id="css_class", rank=2, description="Selected/active class markers")
def css_class(ctx: AssociationContext, container: Container) -> list[ElementRef]:
    return select_all(container.element, CLASS_SELECTORS)
