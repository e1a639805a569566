"""Association orchestrator: image in, (container, swatch, tier) out.

resolve_association() never raises for page content: every engine error is
turned into a null association plus an AssociationFailed event. Only an
invalid AssociationConfig is reported to the caller, before any work starts.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass

from swatchlink.engine.config import AssociationConfig
from swatchlink.engine.container import Container, resolve_container
from swatchlink.engine.context import AssociationContext
from swatchlink.engine.detector import detect_swatch
from swatchlink.engine.events import EventKind
from swatchlink.engine.registry import StrategyRegistry, get_registry, register_strategies
from swatchlink.engine.swatches import SwatchListing, list_swatches
from swatchlink.errors import AssociationError, ContainerNotFound
from swatchlink.tree.element import ElementRef

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssociationResult:
    image: ElementRef
    swatch: ElementRef | None = None
    tier: int | None = None
    distance: float | None = None
    container: Container | None = None
    tier_name: str | None = None

    @property
    def found(self) -> bool:
        return self.swatch is not None


def _prepare(config: AssociationConfig | None) -> tuple[AssociationConfig, StrategyRegistry]:
    config = (config or AssociationConfig()).validate()
    register_strategies()
    return config, get_registry()


def _resolve(image: ElementRef, config: AssociationConfig, registry: StrategyRegistry) -> AssociationResult:
    t0 = time.perf_counter()
    ctx = AssociationContext(image=image, config=config)

    try:
        container = resolve_container(ctx, registry)
    except ContainerNotFound as e:
        ctx.emit(EventKind.ASSOCIATION_FAILED, reason=str(e))
        logger.info("No container for %r: %s", image, e)
        return AssociationResult(image=image)

    candidate = detect_swatch(ctx, container, registry)
    elapsed = (time.perf_counter() - t0) * 1000

    if candidate is None:
        ctx.emit(
            EventKind.ASSOCIATION_FAILED,
            element=container.element,
            phase=container.phase.value,
            reason="no tier produced a validated swatch",
        )
        logger.info("No swatch for %r (%s container, %.1fms)", image, container.phase.value, elapsed)
        return AssociationResult(image=image, container=container)

    ctx.emit(
        EventKind.ASSOCIATION_SUCCEEDED,
        element=candidate.element,
        box=ctx.box(candidate.element),
        distance=candidate.distance,
        phase=container.phase.value,
        tier=candidate.tier_id,
    )
    logger.info(
        "Associated %r -> %r via %s/%s at %.1f (%.1fms)",
        image,
        candidate.element,
        container.phase.value,
        candidate.tier_id,
        candidate.distance,
        elapsed,
    )
    return AssociationResult(
        image=image,
        swatch=candidate.element,
        tier=candidate.tier,
        distance=candidate.distance,
        container=container,
        tier_name=candidate.tier_id,
    )


def _safe_resolve(image: ElementRef, config: AssociationConfig, registry: StrategyRegistry) -> AssociationResult:
    try:
        return _resolve(image, config, registry)
    except AssociationError as e:
        logger.warning("Association for %r failed: %s", image, e)
        return AssociationResult(image=image)
    except Exception:
        logger.exception("Unexpected error while associating %r", image)
        return AssociationResult(image=image)


def resolve_association(image: ElementRef, config: AssociationConfig | None = None) -> AssociationResult:
    """Find the selected swatch that belongs to ``image``.

    Raises ConfigError if ``config`` is invalid. Any other failure yields a
    result with ``swatch=None`` and ``tier=None``.
    """
    config, registry = _prepare(config)
    return _safe_resolve(image, config, registry)


def resolve_associations(
    images: Iterable[ElementRef],
    config: AssociationConfig | None = None,
) -> list[AssociationResult]:
    """Resolve every image independently; one image's failure never stops the rest."""
    config, registry = _prepare(config)
    results = [_safe_resolve(image, config, registry) for image in images]
    found = sum(1 for r in results if r.found)
    logger.info("Resolved %d/%d associations", found, len(results))
    return results


def list_image_swatches(
    image: ElementRef,
    config: AssociationConfig | None = None,
    include_disabled: bool = False,
) -> SwatchListing:
    """All swatches belonging to ``image``, with the associated one marked selected.

    Empty when no container can be resolved for the image.
    """
    config, registry = _prepare(config)
    result = _safe_resolve(image, config, registry)
    if result.container is None:
        return SwatchListing()
    ctx = AssociationContext(image=image, config=config)
    listing = list_swatches(ctx, result.container, selected=result.swatch, include_disabled=include_disabled)
    logger.info("Listed %d swatches for %r", len(listing), image)
    return listing
