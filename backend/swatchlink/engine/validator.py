"""Spatial validator: containment and proximity checks for swatch candidates."""

from __future__ import annotations

from swatchlink.utils.geometry import BoundingBox, contains_box, gap_distance

CONTAINER_TOLERANCE = 50.0
MAX_SWATCH_DISTANCE = 300.0


def rejection_reason(
    candidate: BoundingBox,
    container: BoundingBox,
    image: BoundingBox | None = None,
    tolerance: float = CONTAINER_TOLERANCE,
    max_distance: float = MAX_SWATCH_DISTANCE,
) -> str | None:
    """Name of the first failing check, or None when the candidate is usable.

    The candidate must sit inside ``container`` grown by ``tolerance`` on every
    side, and when an image box is given, its gap distance to the image must not
    exceed ``max_distance``.
    """
    if not contains_box(container, candidate, tolerance):
        return "outside container"
    if image is not None and gap_distance(candidate, image) > max_distance:
        return "too far from image"
    return None


def validate(
    candidate: BoundingBox,
    container: BoundingBox,
    image: BoundingBox | None = None,
    tolerance: float = CONTAINER_TOLERANCE,
    max_distance: float = MAX_SWATCH_DISTANCE,
) -> bool:
    return rejection_reason(candidate, container, image, tolerance, max_distance) is None
