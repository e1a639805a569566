"""Container resolver: runs the registered phases in order until one yields a product boundary."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from swatchlink.engine.context import AssociationContext
from swatchlink.engine.events import EventKind
from swatchlink.engine.registry import Stage, StrategyRegistry, get_registry
from swatchlink.errors import AmbiguousCluster, ContainerNotFound, EmptyInput
from swatchlink.tree.element import ElementRef

logger = logging.getLogger(__name__)


class ContainerPhase(str, enum.Enum):
    SEMANTIC = "semantic"
    CLUSTERED = "clustered"
    TRAVERSED = "traversed"


@dataclass(frozen=True)
class ContainerMetrics:
    viewport_ratio: float
    image_area_ratio: float
    other_large_images: int


@dataclass(frozen=True)
class Container:
    element: ElementRef
    phase: ContainerPhase
    metrics: ContainerMetrics


def measure_container(ctx: AssociationContext, element: ElementRef) -> ContainerMetrics:
    box = ctx.box(element)
    image_area = ctx.image_box.area
    return ContainerMetrics(
        viewport_ratio=box.width / ctx.viewport_width,
        image_area_ratio=box.area / image_area if image_area > 0 else float("inf"),
        other_large_images=len(ctx.other_large_images(element)),
    )


def exceeds_viewport_bound(ctx: AssociationContext, element: ElementRef) -> bool:
    return ctx.box(element).width > ctx.viewport_width * ctx.config.max_container_viewport_ratio


def container_size_rejection(ctx: AssociationContext, element: ElementRef) -> str | None:
    """Why ``element`` cannot be a single-product container, or None if it can."""
    cfg = ctx.config
    box = ctx.box(element)
    image_box = ctx.image_box

    if exceeds_viewport_bound(ctx, element):
        return "wider than viewport bound"
    if box.width < image_box.width or box.height < image_box.height:
        return "smaller than image"
    if image_box.area > 0 and box.area > image_box.area * cfg.max_container_area_ratio:
        return "area too large relative to image"
    if len(ctx.other_large_images(element)) > cfg.max_other_large_images:
        return "too many other product images"
    return None


def validate_container_size(ctx: AssociationContext, element: ElementRef) -> bool:
    return container_size_rejection(ctx, element) is None


def accept(ctx: AssociationContext, element: ElementRef, phase: ContainerPhase) -> Container:
    container = Container(element=element, phase=phase, metrics=measure_container(ctx, element))
    ctx.emit(
        EventKind.CONTAINER_RESOLVED,
        element=element,
        box=ctx.box(element),
        phase=phase.value,
    )
    logger.debug("Container %r accepted via %s phase", element, phase.value)
    return container


def reject(ctx: AssociationContext, element: ElementRef | None, phase: ContainerPhase, reason: str) -> None:
    ctx.emit(
        EventKind.CONTAINER_REJECTED,
        element=element,
        box=ctx.box(element) if element is not None else None,
        phase=phase.value,
        reason=reason,
    )
    logger.debug("Container %r rejected in %s phase: %s", element, phase.value, reason)


def resolve_container(
    ctx: AssociationContext,
    registry: StrategyRegistry | None = None,
) -> Container:
    """Run phases in rank order; the first validated container wins."""
    registry = registry or get_registry()
    for spec in registry.get_stage(Stage.CONTAINER):
        try:
            container = spec.fn(ctx)
        except (EmptyInput, AmbiguousCluster) as e:
            ctx.errors[spec.id] = str(e)
            logger.debug("Phase %s produced nothing: %s", spec.id, e)
            continue
        if container is not None:
            return container

    raise ContainerNotFound(f"no container for {ctx.image!r}")
