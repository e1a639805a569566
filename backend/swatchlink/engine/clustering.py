"""Cluster builder: proximity grouping, grid detection, minimal containers.

Clusters are connected components of the proximity graph whose edges join
elements with gap distance <= max_distance. DBSCAN with min_samples=1 on a
precomputed gap-distance matrix computes exactly those components.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Callable

import numpy as np
from sklearn.cluster import DBSCAN

from swatchlink.engine.spatial_constants import GRID_BAND_TOLERANCE, LARGE_IMAGE_MIN_SIZE
from swatchlink.errors import AmbiguousCluster, EmptyInput
from swatchlink.tree.element import ElementRef, is_image_like
from swatchlink.utils.geometry import (
    BoundingBox,
    bounding_box_of,
    distances_to,
    gap_distance,
    gap_distance_matrix,
    median,
)

logger = logging.getLogger(__name__)

BoxOf = Callable[[ElementRef], BoundingBox]


def _default_box_of(element: ElementRef) -> BoundingBox:
    return element.box()


@dataclass(frozen=True)
class Cluster:
    """Spatially co-located elements plus their enclosing box."""

    members: tuple[ElementRef, ...]
    box: BoundingBox
    member_boxes: tuple[BoundingBox, ...] = field(repr=False, default=())

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def image_count(self) -> int:
        """Number of product-sized image-like members."""
        boxes = self.member_boxes or tuple(m.box() for m in self.members)
        return sum(
            1
            for m, b in zip(self.members, boxes)
            if is_image_like(m) and b.width >= LARGE_IMAGE_MIN_SIZE and b.height >= LARGE_IMAGE_MIN_SIZE
        )

    def __contains__(self, element: object) -> bool:
        return element in self.members


@dataclass(frozen=True)
class GridPattern:
    columns: int
    rows: int
    spacing: float


def build_clusters(
    candidates: Sequence[ElementRef],
    max_distance: float,
    box_of: BoxOf | None = None,
) -> list[Cluster]:
    """Group candidates into proximity clusters (transitive merging)."""
    if max_distance <= 0:
        raise ValueError(f"max_distance must be > 0, got {max_distance}")
    box_of = box_of or _default_box_of

    # Dedupe, then fix document order so labels are deterministic
    unique = sorted(dict.fromkeys(candidates), key=lambda e: e.order)
    n = len(unique)
    if n == 0:
        return []

    boxes = [box_of(e) for e in unique]
    if n == 1:
        return [Cluster(members=(unique[0],), box=boxes[0], member_boxes=(boxes[0],))]

    matrix = gap_distance_matrix(boxes)
    labels = DBSCAN(eps=max_distance, min_samples=1, metric="precomputed").fit(matrix).labels_

    groups: dict[int, list[int]] = {}
    for i, label in enumerate(labels):
        groups.setdefault(int(label), []).append(i)

    clusters = []
    for indices in sorted(groups.values(), key=lambda idx: idx[0]):
        member_boxes = tuple(boxes[i] for i in indices)
        clusters.append(
            Cluster(
                members=tuple(unique[i] for i in indices),
                box=bounding_box_of(member_boxes),
                member_boxes=member_boxes,
            )
        )

    logger.debug("Clustered %d elements into %d clusters (max_distance=%.0f)", n, len(clusters), max_distance)
    return clusters


def band(values: Sequence[float], tolerance: float) -> list[int]:
    """Assign each value to a band whose anchor lies within ``tolerance``."""
    anchors: list[float] = []
    labels: list[int] = []
    for v in values:
        for idx, anchor in enumerate(anchors):
            if abs(v - anchor) <= tolerance:
                labels.append(idx)
                break
        else:
            anchors.append(v)
            labels.append(len(anchors) - 1)
    return labels


def detect_grid_pattern(
    images: Sequence[ElementRef],
    box_of: BoxOf | None = None,
    tolerance: float = GRID_BAND_TOLERANCE,
) -> GridPattern | None:
    """Infer a product grid from image boxes sharing top (rows) and left (columns) edges."""
    if len(images) < 2:
        return None
    box_of = box_of or _default_box_of
    boxes = [box_of(img) for img in images]

    row_labels = band([b.top for b in boxes], tolerance)
    col_labels = band([b.left for b in boxes], tolerance)
    columns = len(set(col_labels))
    rows = len(set(row_labels))
    if columns < 2:
        return None

    gaps: list[float] = []
    for row in set(row_labels):
        in_row = sorted((b for b, r in zip(boxes, row_labels) if r == row), key=lambda b: b.left)
        for prev, nxt in zip(in_row, in_row[1:]):
            gaps.append(max(0.0, nxt.left - prev.right))
    if not gaps:
        return None

    pattern = GridPattern(columns=columns, rows=rows, spacing=median(gaps))
    logger.debug("Grid pattern: %d columns x %d rows, spacing %.1f", columns, rows, pattern.spacing)
    return pattern


def minimal_container(elements: Iterable[ElementRef]) -> ElementRef:
    """Lowest common ancestor of all elements (a lone element's parent)."""
    unique = list(dict.fromkeys(elements))
    if not unique:
        raise EmptyInput("minimal_container() needs at least one element")

    first = unique[0]
    if len(unique) == 1:
        return first.parent() or first

    chain = [first, *first.ancestors()]
    position = {el: i for i, el in enumerate(chain)}
    highest = 0
    for el in unique[1:]:
        for ancestor in (el, *el.ancestors()):
            idx = position.get(ancestor)
            if idx is not None:
                highest = max(highest, idx)
                break
        else:
            raise ValueError(f"{el!r} does not share a tree with {first!r}")
    return chain[highest]


def find_closest_cluster(
    image: ElementRef,
    clusters: Sequence[Cluster],
    max_radius: float = 400.0,
    box_of: BoxOf | None = None,
) -> Cluster | None:
    """The cluster holding the image, else the nearest one within ``max_radius``."""
    for cluster in clusters:
        if image in cluster:
            return cluster

    box_of = box_of or _default_box_of
    image_box = box_of(image)
    ranked = []
    for idx, cluster in enumerate(clusters):
        dist = gap_distance(cluster.box, image_box)
        if dist <= max_radius:
            # Ties prefer single-product clusters, then document order
            ranked.append((dist, cluster.image_count, idx))
    if not ranked:
        return None
    return clusters[min(ranked)[2]]


def check_cluster(
    cluster: Cluster,
    viewport_width: float,
    max_viewport_ratio: float = 0.6,
) -> str | None:
    """Return why a cluster is unusable, or None when it is a single product.

    Raises AmbiguousCluster when it holds more than one product image.
    """
    images = cluster.image_count
    if images > 1:
        raise AmbiguousCluster(images)
    if images == 0:
        return "no product image"
    if cluster.size < 2:
        return "no supporting elements"
    if cluster.box.width > viewport_width * max_viewport_ratio:
        return "wider than viewport bound"
    return None


def validate_cluster(
    cluster: Cluster,
    viewport_width: float,
    max_viewport_ratio: float = 0.6,
) -> bool:
    """Exactly one product image, some support, and narrow enough to be one product."""
    try:
        return check_cluster(cluster, viewport_width, max_viewport_ratio) is None
    except AmbiguousCluster:
        return False


def nearest_first(
    anchor: BoundingBox,
    elements: Sequence[ElementRef],
    limit: int,
    box_of: BoxOf | None = None,
) -> list[ElementRef]:
    """Cap a candidate set to the ``limit`` elements nearest to ``anchor``."""
    if len(elements) <= limit:
        return list(elements)
    box_of = box_of or _default_box_of
    dist = distances_to(anchor, [box_of(e) for e in elements])
    # Stable sort keeps document order among equals
    keep = np.argsort(dist, kind="stable")[:limit]
    return [elements[i] for i in sorted(keep.tolist())]
