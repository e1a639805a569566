"""Association configuration: thresholds and structural hints for one engine call."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from swatchlink.config import Settings
from swatchlink.engine.events import EventSink
from swatchlink.errors import ConfigError


class PageType(str, enum.Enum):
    DETAIL = "detail"
    LISTING = "listing"


# Product-boundary hints, most specific first.
DEFAULT_STRUCTURAL_HINTS: tuple[str, ...] = (
    "[data-product-id]",
    "[data-product]",
    '[itemtype*="schema.org/Product"]',
    '[data-testid*="product"]',
    ".product-card",
    ".product-tile",
    ".product-item",
    ".product-grid-item",
    ".productcard",
    ".producttile",
    "article",
)

# Markup that suggests swatches live inside an element.
DEFAULT_SWATCH_HINTS: tuple[str, ...] = (
    '[class*="swatch"]',
    '[class*="color-option"]',
    '[class*="variant-option"]',
    '[class*="color-selector"]',
    "[data-color]",
    '[data-testid*="swatch"]',
    '[data-testid*="color"]',
    'button[class*="color"]',
    'a[class*="color"]',
    'input[type="radio"][name*="color"]',
)

# Host overlays that must never be mistaken for page swatches.
DEFAULT_IGNORE_SELECTORS: tuple[str, ...] = ("[data-swatchlink-overlay]",)


@dataclass
class AssociationConfig:
    """Controls container resolution, clustering and swatch validation."""

    structural_hint_selectors: tuple[str, ...] = DEFAULT_STRUCTURAL_HINTS

    # Clustering phase
    cluster_radius: float = 150.0
    search_radius: float = 400.0
    cluster_acceptance_radius: float = 400.0
    max_cluster_candidates: int = 200

    # Traversal phase
    min_separation: float = 200.0
    max_traversal_depth: int = 8

    # Container validation
    max_container_viewport_ratio: float = 0.6
    max_container_area_ratio: float = 5.0
    max_other_large_images: int = 3

    # Spatial validation
    max_swatch_distance: float = 300.0
    container_tolerance: float = 50.0

    swatch_hint_selectors: tuple[str, ...] = DEFAULT_SWATCH_HINTS
    ignore_selectors: tuple[str, ...] = DEFAULT_IGNORE_SELECTORS

    # None = unknown; DETAIL disables listing-only tiers
    page_type: PageType | None = None

    on_event: EventSink | None = field(default=None, repr=False, compare=False)

    def validate(self) -> AssociationConfig:
        """Raise ConfigError for out-of-range values. Returns self for chaining."""
        positive = {
            "cluster_radius": self.cluster_radius,
            "search_radius": self.search_radius,
            "cluster_acceptance_radius": self.cluster_acceptance_radius,
            "min_separation": self.min_separation,
            "max_swatch_distance": self.max_swatch_distance,
            "max_container_area_ratio": self.max_container_area_ratio,
        }
        for name, value in positive.items():
            if value <= 0:
                raise ConfigError(f"{name} must be > 0, got {value}")
        if not 0 < self.max_container_viewport_ratio <= 1:
            raise ConfigError(
                f"max_container_viewport_ratio must be in (0, 1], got {self.max_container_viewport_ratio}"
            )
        if self.container_tolerance < 0:
            raise ConfigError(f"container_tolerance must be >= 0, got {self.container_tolerance}")
        if self.max_traversal_depth < 1:
            raise ConfigError(f"max_traversal_depth must be >= 1, got {self.max_traversal_depth}")
        if self.max_cluster_candidates < 2:
            raise ConfigError(f"max_cluster_candidates must be >= 2, got {self.max_cluster_candidates}")
        if self.max_other_large_images < 0:
            raise ConfigError(f"max_other_large_images must be >= 0, got {self.max_other_large_images}")
        return self

    @classmethod
    def from_settings(cls, settings: Settings, **overrides) -> AssociationConfig:
        """Build a config from environment-driven settings."""
        values = {
            "cluster_radius": settings.cluster_radius,
            "search_radius": settings.search_radius,
            "min_separation": settings.min_separation,
            "max_swatch_distance": settings.max_swatch_distance,
            "max_container_viewport_ratio": settings.max_container_viewport_ratio,
        }
        values.update(overrides)
        return cls(**values)
