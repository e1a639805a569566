"""Tier detector: runs detection tiers in priority order against a resolved container.

The first tier with at least one spatially validated candidate wins; lower
tiers are never consulted after that. Within a tier the candidate closest to
the image wins, with degenerate boxes after real ones and document order as
the last tiebreak.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from swatchlink.engine.container import Container
from swatchlink.engine.context import AssociationContext
from swatchlink.engine.events import EventKind
from swatchlink.engine.registry import Stage, StrategyRegistry, StrategySpec, get_registry
from swatchlink.engine.swatch_rules import usable
from swatchlink.engine.validator import rejection_reason
from swatchlink.errors import NoValidCandidate
from swatchlink.tree.element import ElementRef

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SwatchCandidate:
    element: ElementRef
    tier: int
    distance: float | None
    tier_id: str = ""


def active_tiers(ctx: AssociationContext, registry: StrategyRegistry | None = None) -> list[StrategySpec]:
    """Detection tiers in rank order, minus listing-only ones on detail pages."""
    registry = registry or get_registry()
    specs = registry.get_stage(Stage.DETECTION)
    if ctx.is_detail_page:
        specs = [s for s in specs if not s.listing_only]
    return specs


def _rank_key(ctx: AssociationContext, candidate: SwatchCandidate) -> tuple[float, bool, int]:
    return (
        candidate.distance if candidate.distance is not None else float("inf"),
        ctx.box(candidate.element).is_degenerate,
        candidate.element.order,
    )


def run_tier(ctx: AssociationContext, spec: StrategySpec, container: Container) -> list[SwatchCandidate]:
    """Validated candidates from one tier, closest first.

    Raises NoValidCandidate when the tier matched something but nothing
    survived validation.
    """
    cfg = ctx.config
    raw: list[ElementRef] = list(dict.fromkeys(spec.fn(ctx, container)))
    if not raw:
        return []

    container_box = ctx.box(container.element)
    image_box = ctx.image_box
    accepted: list[SwatchCandidate] = []
    for el in raw:
        reason = None if usable(ctx, el) else "not a usable swatch element"
        box = ctx.box(el)
        if reason is None:
            reason = rejection_reason(
                box,
                container_box,
                image_box,
                tolerance=cfg.container_tolerance,
                max_distance=cfg.max_swatch_distance,
            )
        distance = ctx.distance_to_image(el)
        if reason is not None:
            ctx.emit(
                EventKind.CANDIDATE_REJECTED,
                element=el,
                box=box,
                distance=distance,
                tier=spec.id,
                reason=reason,
            )
            continue
        accepted.append(SwatchCandidate(element=el, tier=spec.rank, distance=distance, tier_id=spec.id))

    if not accepted:
        raise NoValidCandidate(spec.id, len(raw))
    return sorted(accepted, key=lambda c: _rank_key(ctx, c))


def detect_swatch(
    ctx: AssociationContext,
    container: Container,
    registry: StrategyRegistry | None = None,
) -> SwatchCandidate | None:
    """Best candidate from the highest-priority tier that yields one, else None."""
    for spec in active_tiers(ctx, registry):
        t0 = time.perf_counter()
        try:
            candidates = run_tier(ctx, spec, container)
        except NoValidCandidate as e:
            ctx.errors[spec.id] = str(e)
            logger.debug("  %s: %s", spec.id, e)
            continue
        elapsed = (time.perf_counter() - t0) * 1000
        if candidates:
            best = candidates[0]
            logger.debug(
                "  %s matched %d candidate(s) in %.1fms, best %r at %.1f",
                spec.id,
                len(candidates),
                elapsed,
                best.element,
                best.distance,
            )
            return best
    return None
