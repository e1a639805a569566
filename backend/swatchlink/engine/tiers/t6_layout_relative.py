"""T6: Layout-relative swatches.

Looks for swatches by where they sit rather than how they are marked up:
rows of three or more similar, square-ish small images, and individual
swatch-like elements, positioned below, above or beside the product image.
The vertical window is ``min(150, image height * 0.5)`` and the horizontal
tolerance is 50 units either side of the image.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from swatchlink.engine.clustering import band
from swatchlink.engine.container import Container
from swatchlink.engine.context import AssociationContext
from swatchlink.engine.registry import tier
from swatchlink.engine.spatial_constants import (
    LAYOUT_HORIZONTAL_TOLERANCE,
    LAYOUT_MAX_VERTICAL_GAP,
    LAYOUT_SAME_LEVEL_TOLERANCE,
    LAYOUT_VERTICAL_HEIGHT_FRACTION,
    ROW_BAND_TOLERANCE,
    ROW_IMAGE_MAX_SIZE,
    ROW_IMAGE_MIN_SIZE,
    ROW_MAX_ASPECT,
    ROW_MIN_ASPECT,
    ROW_MIN_SWATCHES,
    ROW_SIZE_TOLERANCE,
)
from swatchlink.engine.swatch_rules import select_all
from swatchlink.tree.element import ElementRef
from swatchlink.utils.geometry import BoundingBox, bounding_box_of

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Placement:
    direction: str
    distance: float


def placement(box: BoundingBox, image: BoundingBox) -> Placement | None:
    """Where ``box`` sits relative to ``image``, or None if it is not in the window."""
    if box.top >= image.bottom:
        placed = Placement("below", box.top - image.bottom)
    elif box.bottom <= image.top:
        placed = Placement("above", image.top - box.bottom)
    elif abs(box.top - image.top) < LAYOUT_SAME_LEVEL_TOLERANCE:
        placed = Placement("beside", max(0.0, box.left - image.right, image.left - box.right))
    else:
        return None

    max_gap = min(LAYOUT_MAX_VERTICAL_GAP, image.height * LAYOUT_VERTICAL_HEIGHT_FRACTION)
    if placed.distance >= max_gap:
        return None
    if not _overlaps_horizontally(box, image):
        return None
    return placed


def _overlaps_horizontally(box: BoundingBox, image: BoundingBox) -> bool:
    tol = LAYOUT_HORIZONTAL_TOLERANCE
    low, high = image.left - tol, image.right + tol
    return (
        low <= box.left <= high
        or low <= box.right <= high
        or (box.left <= image.left and box.right >= image.right)
    )


def _is_row_image(box: BoundingBox) -> bool:
    return (
        ROW_IMAGE_MIN_SIZE <= box.width <= ROW_IMAGE_MAX_SIZE
        and ROW_IMAGE_MIN_SIZE <= box.height <= ROW_IMAGE_MAX_SIZE
    )


def _is_uniform_row(boxes: list[BoundingBox]) -> bool:
    widths = np.array([b.width for b in boxes])
    heights = np.array([b.height for b in boxes])
    if np.any(np.abs(widths - widths.mean()) > ROW_SIZE_TOLERANCE):
        return False
    if np.any(np.abs(heights - heights.mean()) > ROW_SIZE_TOLERANCE):
        return False
    aspect = widths / heights
    return bool(np.all((aspect >= ROW_MIN_ASPECT) & (aspect <= ROW_MAX_ASPECT)))


def find_swatch_rows(ctx: AssociationContext, root: ElementRef) -> list[list[ElementRef]]:
    """Rows of similar small square-ish images under ``root``, each sorted left to right."""
    small = [
        img
        for img in root.select("img")
        if img != ctx.image and _is_row_image(ctx.box(img))
    ]
    if len(small) < ROW_MIN_SWATCHES:
        return []

    labels = band([ctx.box(img).top for img in small], ROW_BAND_TOLERANCE)
    rows = []
    for label in sorted(set(labels)):
        members = sorted(
            (img for img, lb in zip(small, labels) if lb == label),
            key=lambda img: ctx.box(img).left,
        )
        if len(members) >= ROW_MIN_SWATCHES and _is_uniform_row([ctx.box(m) for m in members]):
            rows.append(members)
    return rows


@tier(id="layout_relative", rank=6, description="Swatch rows and swatch-like elements around the image")
def layout_relative(ctx: AssociationContext, container: Container) -> list[ElementRef]:
    image_box = ctx.image_box
    found: dict[ElementRef, None] = {}

    for row in find_swatch_rows(ctx, container.element):
        row_box = bounding_box_of([ctx.box(m) for m in row])
        placed = placement(row_box, image_box)
        if placed is None:
            continue
        logger.debug("Swatch row of %d %s the image at %.0f", len(row), placed.direction, placed.distance)
        for member in row:
            found.setdefault(member, None)

    for el in select_all(container.element, ctx.config.swatch_hint_selectors):
        if el in found or el.contains(ctx.image):
            continue
        if placement(ctx.box(el), image_box) is not None:
            found.setdefault(el, None)

    return list(found)
