"""AssociationContext: the call-scoped state shared by phases and tiers.

One context per resolve_association() call. It borrows the image and its page
tree, caches every box it reads (a box is read from the host at most once per
call), and forwards diagnostics to the configured sink.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from swatchlink.engine.config import AssociationConfig, PageType
from swatchlink.engine.events import DiagnosticEvent, EventKind
from swatchlink.engine.spatial_constants import LARGE_IMAGE_MIN_SIZE
from swatchlink.tree.element import ElementRef, PageTree, is_image_like
from swatchlink.utils.geometry import BoundingBox, gap_distance

logger = logging.getLogger(__name__)


@dataclass
class AssociationContext:
    image: ElementRef
    config: AssociationConfig
    # Per-call box cache keyed by element
    _boxes: dict[ElementRef, BoundingBox] = field(default_factory=dict, repr=False)
    # Phase/tier ids that raised and were skipped, with the error text
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def document(self) -> PageTree:
        return self.image.document

    @property
    def viewport_width(self) -> float:
        return self.document.viewport_width

    @property
    def image_box(self) -> BoundingBox:
        return self.box(self.image)

    @property
    def is_detail_page(self) -> bool:
        return self.config.page_type == PageType.DETAIL

    def box(self, element: ElementRef) -> BoundingBox:
        cached = self._boxes.get(element)
        if cached is None:
            cached = element.box()
            self._boxes[element] = cached
        return cached

    def distance(self, a: ElementRef, b: ElementRef) -> float:
        return gap_distance(self.box(a), self.box(b))

    def distance_to_image(self, element: ElementRef) -> float:
        return gap_distance(self.box(element), self.image_box)

    def is_large_image(self, element: ElementRef) -> bool:
        if not is_image_like(element):
            return False
        b = self.box(element)
        return b.width >= LARGE_IMAGE_MIN_SIZE and b.height >= LARGE_IMAGE_MIN_SIZE

    def other_large_images(self, within: ElementRef) -> list[ElementRef]:
        """Large image-like descendants of ``within``, excluding the source image."""
        return [
            el
            for el in within.select("img, [role=img]")
            if el != self.image and self.is_large_image(el)
        ]

    def emit(self, kind: EventKind, **fields: Any) -> None:
        """Send a diagnostic event. The sink can never change the outcome."""
        sink = self.config.on_event
        if sink is None:
            return
        event = DiagnosticEvent(kind=kind, image=self.image, **fields)
        try:
            sink(event)
        except Exception as e:
            logger.warning("on_event sink raised on %s: %s", kind.value, e)
