"""T4: data-selected / data-active / data-state on swatch-related elements."""

from __future__ import annotations

import re

from swatchlink.engine.container import Container
from swatchlink.engine.context import AssociationContext
from swatchlink.engine.registry import tier
from swatchlink.engine.swatch_rules import select_all
from swatchlink.tree.element import ElementRef

DATA_SELECTORS = (
    '[data-selected="true"]',
    '[data-selected="1"]',
    '[data-active="true"]',
    '[data-active="1"]',
    '[data-state="selected"]',
    '[data-state="active"]',
)

_SWATCH_CLASS = re.compile(r"swatch|color|variant", re.IGNORECASE)


def is_swatch_related(element: ElementRef) -> bool:
    if _SWATCH_CLASS.search(" ".join(element.classes)):
        return True
    return bool(element.select('[class*="swatch"], [class*="color"]'))


@tier(id="data_attribute", rank=4, description="Selection data attributes")
def data_attribute(ctx: AssociationContext, container: Container) -> list[ElementRef]:
    return [el for el in select_all(container.element, DATA_SELECTORS) if is_swatch_related(el)]
