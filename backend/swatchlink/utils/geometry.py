"""Leaf-node geometry helpers. No engine imports."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from swatchlink.errors import EmptyInput


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned layout rectangle, viewport-relative."""

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"negative box size: {self.width}x{self.height}")

    @classmethod
    def from_edges(cls, left: float, top: float, right: float, bottom: float) -> BoundingBox:
        return cls(left, top, right - left, bottom - top)

    @property
    def left(self) -> float:
        return self.x

    @property
    def top(self) -> float:
        return self.y

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def is_degenerate(self) -> bool:
        return self.width == 0 or self.height == 0

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def expanded(self, tolerance: float) -> BoundingBox:
        """Grow every edge outward by ``tolerance``."""
        return BoundingBox.from_edges(
            self.left - tolerance,
            self.top - tolerance,
            self.right + tolerance,
            self.bottom + tolerance,
        )

    def as_edges(self) -> tuple[float, float, float, float]:
        """(left, top, right, bottom)."""
        return (self.left, self.top, self.right, self.bottom)


def bounding_box_of(boxes: Iterable[BoundingBox]) -> BoundingBox:
    """Smallest box enclosing every input box. Raises EmptyInput if there are none."""
    edges = [b.as_edges() for b in boxes]
    if not edges:
        raise EmptyInput("bounding_box_of() needs at least one box")
    arr = np.asarray(edges, dtype=np.float64)
    return BoundingBox.from_edges(
        float(arr[:, 0].min()),
        float(arr[:, 1].min()),
        float(arr[:, 2].max()),
        float(arr[:, 3].max()),
    )


def gap_distance(a: BoundingBox, b: BoundingBox) -> float:
    """Euclidean distance between the nearest edges; 0 when boxes overlap or touch."""
    dx = max(0.0, b.left - a.right, a.left - b.right)
    dy = max(0.0, b.top - a.bottom, a.top - b.bottom)
    if dx == 0.0 and dy == 0.0:
        return 0.0
    return math.hypot(dx, dy)


def gap_distance_matrix(boxes: Sequence[BoundingBox]) -> NDArray[np.float64]:
    """Pairwise gap distances as an NxN matrix (zero diagonal)."""
    n = len(boxes)
    if n == 0:
        return np.zeros((0, 0))
    edges = np.asarray([b.as_edges() for b in boxes], dtype=np.float64)
    left, top, right, bottom = edges[:, 0], edges[:, 1], edges[:, 2], edges[:, 3]

    # gap[i, j] along each axis, clipped at zero where projections overlap
    dx = np.maximum(left[None, :] - right[:, None], left[:, None] - right[None, :])
    dy = np.maximum(top[None, :] - bottom[:, None], top[:, None] - bottom[None, :])
    dx = np.clip(dx, 0.0, None)
    dy = np.clip(dy, 0.0, None)
    matrix = np.sqrt(dx**2 + dy**2)
    np.fill_diagonal(matrix, 0.0)
    return matrix


def distances_to(box: BoundingBox, boxes: Sequence[BoundingBox]) -> NDArray[np.float64]:
    """Gap distance from ``box`` to each of ``boxes``."""
    if not boxes:
        return np.zeros(0)
    edges = np.asarray([b.as_edges() for b in boxes], dtype=np.float64)
    dx = np.maximum(edges[:, 0] - box.right, box.left - edges[:, 2])
    dy = np.maximum(edges[:, 1] - box.bottom, box.top - edges[:, 3])
    return np.hypot(np.clip(dx, 0.0, None), np.clip(dy, 0.0, None))


def contains_box(outer: BoundingBox, inner: BoundingBox, tolerance: float = 0.0) -> bool:
    """True if ``inner`` lies within ``outer`` grown by ``tolerance`` on every side."""
    return (
        inner.left >= outer.left - tolerance
        and inner.right <= outer.right + tolerance
        and inner.top >= outer.top - tolerance
        and inner.bottom <= outer.bottom + tolerance
    )


def median(values: Sequence[float]) -> float:
    """Median of a non-empty sequence."""
    if not values:
        raise EmptyInput("median() needs at least one value")
    return float(np.median(np.asarray(values, dtype=np.float64)))
