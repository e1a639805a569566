"""Diagnostic events: observational records routed to AssociationConfig.on_event."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from swatchlink.tree.element import ElementRef
    from swatchlink.utils.geometry import BoundingBox


class EventKind(str, enum.Enum):
    CONTAINER_RESOLVED = "ContainerResolved"
    CONTAINER_REJECTED = "ContainerRejected"
    CLUSTER_FORMED = "ClusterFormed"
    CANDIDATE_REJECTED = "CandidateRejected"
    ASSOCIATION_SUCCEEDED = "AssociationSucceeded"
    ASSOCIATION_FAILED = "AssociationFailed"


@dataclass(frozen=True)
class DiagnosticEvent:
    kind: EventKind
    image: ElementRef | None = None
    element: ElementRef | None = None
    box: BoundingBox | None = None
    distance: float | None = None
    phase: str | None = None
    tier: str | None = None
    reason: str = ""
    size: int | None = None


EventSink = Callable[[DiagnosticEvent], None]
