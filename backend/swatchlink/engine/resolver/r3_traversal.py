"""R3: Cautious ancestor traversal (last resort).

Climb at most ``max_traversal_depth`` ancestors. A level qualifies once it
holds swatch markup and every other product image inside it sits farther
than ``min_separation`` from the source image.
"""

from __future__ import annotations

from swatchlink.engine.container import (
    Container,
    ContainerPhase,
    accept,
    exceeds_viewport_bound,
    reject,
)
from swatchlink.engine.context import AssociationContext
from swatchlink.engine.registry import phase
from swatchlink.engine.swatch_rules import has_swatches

_DOCUMENT_TAGS = frozenset({"html", "body"})


@phase(id="traversal", rank=3, description="Walk ancestors with separation checks")
def ancestor_traversal(ctx: AssociationContext) -> Container | None:
    cfg = ctx.config

    for depth, ancestor in enumerate(ctx.image.ancestors(), start=1):
        if depth > cfg.max_traversal_depth:
            break
        if ancestor.tag in _DOCUMENT_TAGS or ancestor.parent() is None:
            break
        if not has_swatches(ctx, ancestor):
            continue

        if exceeds_viewport_bound(ctx, ancestor):
            reject(ctx, ancestor, ContainerPhase.TRAVERSED, f"level {depth}: wider than viewport bound")
            continue

        crowding = [
            img
            for img in ctx.other_large_images(ancestor)
            if ctx.distance_to_image(img) <= cfg.min_separation
        ]
        if crowding:
            reject(
                ctx,
                ancestor,
                ContainerPhase.TRAVERSED,
                f"level {depth}: {len(crowding)} product image(s) within {cfg.min_separation:.0f}",
            )
            continue

        return accept(ctx, ancestor, ContainerPhase.TRAVERSED)

    return None
