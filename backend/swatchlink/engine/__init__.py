"""SwatchLink spatial association engine."""

from swatchlink.engine.config import AssociationConfig, PageType
from swatchlink.engine.discovery import detect_page_type, find_product_images
from swatchlink.engine.events import DiagnosticEvent, EventKind
from swatchlink.engine.orchestrator import (
    AssociationResult,
    list_image_swatches,
    resolve_association,
    resolve_associations,
)
from swatchlink.engine.registry import get_registry, phase, register_strategies, tier
from swatchlink.engine.swatches import SwatchInfo, SwatchListing, list_swatches

__all__ = [
    "AssociationConfig",
    "PageType",
    "DiagnosticEvent",
    "EventKind",
    "AssociationResult",
    "resolve_association",
    "resolve_associations",
    "list_image_swatches",
    "list_swatches",
    "SwatchInfo",
    "SwatchListing",
    "find_product_images",
    "detect_page_type",
    "get_registry",
    "phase",
    "tier",
    "register_strategies",
]
