"""R1: Semantic boundary phase.

Walk the configured structural hint selectors, most specific first. The nearest
ancestor of the image matching a hint is accepted only if its size is
plausible for a single product.
"""

from __future__ import annotations

from swatchlink.engine.container import (
    Container,
    ContainerPhase,
    accept,
    container_size_rejection,
    reject,
)
from swatchlink.engine.context import AssociationContext
from swatchlink.engine.registry import phase
from swatchlink.tree.element import ElementRef


@phase(id="semantic", rank=1, description="Validate structural-hint product boundaries")
def semantic_boundary(ctx: AssociationContext) -> Container | None:
    parent = ctx.image.parent()
    if parent is None:
        return None

    checked: set[ElementRef] = set()
    for selector in ctx.config.structural_hint_selectors:
        candidate = parent.closest(selector)
        if candidate is None or candidate in checked:
            continue
        checked.add(candidate)

        reason = container_size_rejection(ctx, candidate)
        if reason is None:
            return accept(ctx, candidate, ContainerPhase.SEMANTIC)
        reject(ctx, candidate, ContainerPhase.SEMANTIC, f"{selector}: {reason}")

    return None
