"""T1: Checked radio inputs.

Native form controls are the most reliable selection signal. A checked
color/variant radio is mapped to the element the shopper actually sees: its
label, the label wrapping it, its next sibling, then its parent. A radio with
no visible counterpart stands for itself when it carries a color value.
"""

from __future__ import annotations

from swatchlink.engine.container import Container
from swatchlink.engine.context import AssociationContext
from swatchlink.engine.registry import tier
from swatchlink.engine.swatch_rules import is_disabled, is_valid_swatch_element, select_all
from swatchlink.tree.element import ElementRef

RADIO_SELECTORS = (
    'input[type="radio"][name*="color" i]:checked',
    'input[type="radio"][name*="colour" i]:checked',
    'input[type="radio"][name*="variant" i]:checked',
    'input[type="radio"][class*="color"]:checked',
    'input[type="radio"][class*="swatch"]:checked',
)


def _visible_counterpart(ctx: AssociationContext, container: ElementRef, radio: ElementRef) -> ElementRef | None:
    options: list[ElementRef | None] = []
    radio_id = radio.get("id")
    if radio_id:
        labels = [el for el in container.select("label") if el.get("for") == radio_id]
        options.append(labels[0] if labels else None)
    parent = radio.parent()
    options.append(parent.closest("label") if parent is not None else None)
    options.append(radio.next_sibling())
    options.append(parent)

    for option in options:
        if option is not None and not is_disabled(option) and is_valid_swatch_element(ctx, option):
            return option
    if radio.get("data-color") or radio.get("value"):
        return radio
    return None


@tier(id="radio_input", rank=1, description="Checked color/variant radio inputs")
def radio_input(ctx: AssociationContext, container: Container) -> list[ElementRef]:
    found = []
    for radio in select_all(container.element, RADIO_SELECTORS):
        if is_disabled(radio):
            continue
        swatch = _visible_counterpart(ctx, container.element, radio)
        if swatch is not None:
            found.append(swatch)
    return found
