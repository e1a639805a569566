"""R2: Spatial clustering phase.

Gather product-ish elements around the image, group them by proximity and
take the minimal container of the image's cluster. When the page shows a
grid tighter than the cluster radius, a second pass uses a radius derived
from the grid spacing.
"""

from __future__ import annotations

import logging

from swatchlink.engine.clustering import (
    build_clusters,
    check_cluster,
    detect_grid_pattern,
    find_closest_cluster,
    minimal_container,
    nearest_first,
)
from swatchlink.engine.container import (
    Container,
    ContainerPhase,
    accept,
    exceeds_viewport_bound,
    reject,
)
from swatchlink.engine.context import AssociationContext
from swatchlink.engine.events import EventKind
from swatchlink.engine.registry import phase
from swatchlink.engine.spatial_constants import GRID_SPACING_RADIUS_FRACTION, MIN_CANDIDATE_SIZE
from swatchlink.engine.swatch_rules import is_ignored
from swatchlink.errors import AmbiguousCluster
from swatchlink.tree.element import ElementRef, is_image_like
from swatchlink.utils.geometry import gap_distance

logger = logging.getLogger(__name__)

_RELEVANT_TAGS = frozenset({"img", "button", "a", "input", "label"})
_RELEVANT_CLASS_HINTS = ("swatch", "color", "colour", "price", "title", "name")


def _is_relevant(element: ElementRef) -> bool:
    if element.tag in _RELEVANT_TAGS or is_image_like(element):
        return True
    classes = " ".join(element.classes).lower()
    return any(hint in classes for hint in _RELEVANT_CLASS_HINTS)


def gather_candidates(ctx: AssociationContext) -> list[ElementRef]:
    """Relevant, visible elements within the search radius, capped to the nearest few."""
    cfg = ctx.config
    image_box = ctx.image_box
    found: list[ElementRef] = []

    for el in ctx.document.elements():
        if el == ctx.image:
            found.append(el)
            continue
        if not _is_relevant(el) or el.contains(ctx.image):
            continue
        box = ctx.box(el)
        if box.width < MIN_CANDIDATE_SIZE or box.height < MIN_CANDIDATE_SIZE:
            continue
        if gap_distance(image_box, box) > cfg.search_radius:
            continue
        if not el.is_visible() or is_ignored(ctx, el):
            continue
        found.append(el)

    capped = nearest_first(image_box, found, cfg.max_cluster_candidates, ctx.box)
    if len(capped) < len(found):
        logger.debug("Capped clustering candidates %d -> %d", len(found), len(capped))
    return capped


def _radii(ctx: AssociationContext, candidates: list[ElementRef]) -> list[float]:
    radii = [ctx.config.cluster_radius]
    images = [c for c in candidates if ctx.is_large_image(c)]
    grid = detect_grid_pattern(images, ctx.box)
    if grid is not None:
        tighter = grid.spacing * GRID_SPACING_RADIUS_FRACTION
        if 0 < tighter < ctx.config.cluster_radius:
            radii.append(tighter)
    return radii


@phase(id="clustering", rank=2, description="Proximity-cluster the image's neighbourhood")
def spatial_cluster(ctx: AssociationContext) -> Container | None:
    candidates = gather_candidates(ctx)
    if len(candidates) < 2:
        reject(ctx, None, ContainerPhase.CLUSTERED, "no supporting elements nearby")
        return None

    for radius in _radii(ctx, candidates):
        clusters = build_clusters(candidates, radius, ctx.box)
        cluster = find_closest_cluster(
            ctx.image, clusters, ctx.config.cluster_acceptance_radius, ctx.box
        )
        if cluster is None:
            reject(ctx, None, ContainerPhase.CLUSTERED, f"no cluster within acceptance radius (r={radius:.0f})")
            continue
        ctx.emit(
            EventKind.CLUSTER_FORMED,
            box=cluster.box,
            size=cluster.size,
            distance=radius,
            phase=ContainerPhase.CLUSTERED.value,
        )

        try:
            reason = check_cluster(cluster, ctx.viewport_width, ctx.config.max_container_viewport_ratio)
        except AmbiguousCluster as e:
            reason = str(e)
        if reason is not None:
            reject(ctx, None, ContainerPhase.CLUSTERED, f"cluster r={radius:.0f}: {reason}")
            continue

        element = minimal_container(cluster.members)
        if exceeds_viewport_bound(ctx, element):
            reject(ctx, element, ContainerPhase.CLUSTERED, "minimal container wider than viewport bound")
            continue
        return accept(ctx, element, ContainerPhase.CLUSTERED)

    return None
