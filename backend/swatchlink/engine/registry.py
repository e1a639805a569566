"""Strategy registry: every resolver phase and detection tier is a standalone function.

Usage:
    @tier(id="css_class", rank=2, description="Selected/active class markers")
    def css_class(ctx: AssociationContext, container: Container) -> list[ElementRef]:
        return container.element.select(".swatch.selected")

Adding a new tier = creating one file with the decorator. Nothing else changes.
"""

from __future__ import annotations

import enum
import importlib
import logging
import pkgutil
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from swatchlink.engine.context import AssociationContext

logger = logging.getLogger(__name__)


class Stage(enum.IntEnum):
    CONTAINER = 0
    DETECTION = 1


@dataclass
class StrategySpec:
    id: str
    stage: Stage
    rank: int
    fn: Callable[..., Any]
    listing_only: bool = False
    description: str = ""


class StrategyRegistry:
    """Priority-ordered registry of phases and tiers."""

    def __init__(self) -> None:
        self._strategies: dict[str, StrategySpec] = {}

    def register(self, spec: StrategySpec) -> None:
        if spec.id in self._strategies:
            raise ValueError(f"Duplicate strategy ID: {spec.id}")
        for other in self._strategies.values():
            if other.stage == spec.stage and other.rank == spec.rank:
                raise ValueError(
                    f"Strategy {spec.id} reuses rank {spec.rank} of {other.id} in {spec.stage.name}"
                )
        self._strategies[spec.id] = spec
        logger.debug("Registered strategy %s (%s #%d)", spec.id, spec.stage.name, spec.rank)

    def get(self, strategy_id: str) -> StrategySpec:
        return self._strategies[strategy_id]

    def get_stage(self, stage: Stage) -> list[StrategySpec]:
        specs = [s for s in self._strategies.values() if s.stage == stage]
        return sorted(specs, key=lambda s: s.rank)

    def all(self) -> list[StrategySpec]:
        return sorted(self._strategies.values(), key=lambda s: (s.stage, s.rank))

    @property
    def count(self) -> int:
        return len(self._strategies)


# Module-level singleton
_registry = StrategyRegistry()


def get_registry() -> StrategyRegistry:
    return _registry


def phase(*, id: str, rank: int, description: str = ""):
    """Decorator to register a container-resolution phase."""

    def decorator(fn: Callable[["AssociationContext"], Any]):
        _registry.register(
            StrategySpec(id=id, stage=Stage.CONTAINER, rank=rank, fn=fn, description=description)
        )
        return fn

    return decorator


def tier(*, id: str, rank: int, listing_only: bool = False, description: str = ""):
    """Decorator to register a swatch-detection tier."""

    def decorator(fn: Callable[..., Any]):
        _registry.register(
            StrategySpec(
                id=id,
                stage=Stage.DETECTION,
                rank=rank,
                fn=fn,
                listing_only=listing_only,
                description=description,
            )
        )
        return fn

    return decorator


def register_strategies() -> None:
    """Import all phase and tier modules so their decorators fire."""
    for package_name in ("swatchlink.engine.resolver", "swatchlink.engine.tiers"):
        package = importlib.import_module(package_name)
        for _, module_name, _ in pkgutil.iter_modules(package.__path__):
            importlib.import_module(f"{package_name}.{module_name}")
