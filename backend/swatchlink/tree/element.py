"""Read-only element tree capability.

The engine only ever talks to ``ElementRef``; ``SoupElement`` is the adapter
over a BeautifulSoup document built by ``swatchlink.tree.snapshot``. Boxes are
read from the ``data-rect="x,y,width,height"`` attribute a host serializer
stamps on every laid-out element, and computed styles from ``data-style``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Protocol, runtime_checkable

import soupsieve
from bs4 import BeautifulSoup, Tag

from swatchlink.errors import SnapshotError
from swatchlink.utils.geometry import BoundingBox, bounding_box_of

logger = logging.getLogger(__name__)

_ZERO_BOX = BoundingBox(0.0, 0.0, 0.0, 0.0)


@runtime_checkable
class ElementRef(Protocol):
    """Borrowed handle to a positioned element. Never outlives one engine call."""

    @property
    def tag(self) -> str: ...

    @property
    def classes(self) -> tuple[str, ...]: ...

    @property
    def order(self) -> int: ...

    @property
    def document(self) -> PageTree: ...

    @property
    def text(self) -> str: ...

    def get(self, name: str, default: str | None = None) -> str | None: ...

    def has_attr(self, name: str) -> bool: ...

    def box(self) -> BoundingBox: ...

    def style(self, prop: str) -> str | None: ...

    def inline_style(self, prop: str) -> str | None: ...

    def parent(self) -> ElementRef | None: ...

    def children(self) -> list[ElementRef]: ...

    def next_sibling(self) -> ElementRef | None: ...

    def ancestors(self) -> Iterator[ElementRef]: ...

    def matches(self, selector: str) -> bool: ...

    def select(self, selector: str) -> list[ElementRef]: ...

    def closest(self, selector: str) -> ElementRef | None: ...

    def contains(self, other: ElementRef) -> bool: ...

    def is_visible(self) -> bool: ...


def parse_declarations(text: str | None) -> dict[str, str]:
    """Parse ``"a: b; c: d"`` CSS declarations into a lowercase-keyed dict."""
    result: dict[str, str] = {}
    if not text:
        return result
    for chunk in text.split(";"):
        if ":" not in chunk:
            continue
        prop, value = chunk.split(":", 1)
        prop = prop.strip().lower()
        if prop:
            result[prop] = value.strip()
    return result


def parse_rect(value: str | None) -> BoundingBox | None:
    """Parse a ``data-rect`` attribute. Returns None when absent."""
    if value is None:
        return None
    parts = value.replace(" ", ",").split(",")
    parts = [p for p in parts if p]
    if len(parts) != 4:
        raise SnapshotError(f"data-rect needs 4 numbers, got {value!r}")
    try:
        x, y, w, h = (float(p) for p in parts)
        return BoundingBox(x, y, w, h)
    except ValueError as e:
        raise SnapshotError(f"invalid data-rect {value!r}: {e}") from e


def is_image_like(element: ElementRef) -> bool:
    return element.tag == "img" or element.get("role") == "img"


class SoupElement:
    """ElementRef over a bs4 Tag. Equality is identity of the underlying node."""

    __slots__ = ("_tag", "_doc")

    def __init__(self, tag: Tag, doc: PageTree) -> None:
        self._tag = tag
        self._doc = doc

    @property
    def tag(self) -> str:
        return (self._tag.name or "").lower()

    @property
    def classes(self) -> tuple[str, ...]:
        value = self._tag.get("class")
        if value is None:
            return ()
        if isinstance(value, str):
            return tuple(value.split())
        return tuple(value)

    @property
    def order(self) -> int:
        return self._doc.order_of(self._tag)

    @property
    def document(self) -> PageTree:
        return self._doc

    @property
    def text(self) -> str:
        return self._tag.get_text(" ", strip=True)

    def get(self, name: str, default: str | None = None) -> str | None:
        value = self._tag.get(name)
        if value is None:
            return default
        if isinstance(value, list):
            return " ".join(value)
        return value

    def has_attr(self, name: str) -> bool:
        return self._tag.has_attr(name)

    def box(self) -> BoundingBox:
        return self._doc.box_of(self._tag)

    def style(self, prop: str) -> str | None:
        """Computed style value, falling back to the inline declaration."""
        prop = prop.lower()
        computed = self._doc.computed_style_of(self._tag)
        if prop in computed:
            return computed[prop]
        return self.inline_style(prop)

    def inline_style(self, prop: str) -> str | None:
        return parse_declarations(self.get("style")).get(prop.lower())

    def parent(self) -> SoupElement | None:
        parent = self._tag.parent
        if parent is None or isinstance(parent, BeautifulSoup):
            return None
        return self._doc.wrap(parent)

    def children(self) -> list[SoupElement]:
        return [self._doc.wrap(c) for c in self._tag.children if isinstance(c, Tag)]

    def next_sibling(self) -> SoupElement | None:
        sibling = self._tag.find_next_sibling(True)
        return self._doc.wrap(sibling) if sibling is not None else None

    def ancestors(self) -> Iterator[SoupElement]:
        current = self.parent()
        while current is not None:
            yield current
            current = current.parent()

    def matches(self, selector: str) -> bool:
        try:
            return soupsieve.match(selector, self._tag)
        except soupsieve.SelectorSyntaxError as e:
            logger.warning("Invalid selector %r: %s", selector, e)
            return False

    def select(self, selector: str) -> list[SoupElement]:
        """Descendants matching ``selector``, in document order."""
        try:
            found = soupsieve.select(selector, self._tag)
        except soupsieve.SelectorSyntaxError as e:
            logger.warning("Invalid selector %r: %s", selector, e)
            return []
        return [self._doc.wrap(t) for t in found]

    def closest(self, selector: str) -> SoupElement | None:
        """Nearest inclusive ancestor matching ``selector``."""
        try:
            found = soupsieve.closest(selector, self._tag)
        except soupsieve.SelectorSyntaxError as e:
            logger.warning("Invalid selector %r: %s", selector, e)
            return None
        if found is None or isinstance(found, BeautifulSoup):
            return None
        return self._doc.wrap(found)

    def contains(self, other: ElementRef) -> bool:
        """DOM-style inclusive containment."""
        if other == self:
            return True
        return any(a == self for a in other.ancestors())

    def is_visible(self) -> bool:
        if self._tag.has_attr("hidden"):
            return False
        if (self.style("display") or "").lower() == "none":
            return False
        if (self.style("visibility") or "").lower() == "hidden":
            return False
        return True

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SoupElement) and other._tag is self._tag

    def __hash__(self) -> int:
        return id(self._tag)

    def __repr__(self) -> str:
        cls = ".".join(self.classes)
        return f"<{self.tag}{'.' + cls if cls else ''} #{self.order}>"


class PageTree:
    """One immutable layout snapshot of a page."""

    def __init__(
        self,
        soup: BeautifulSoup,
        viewport_width: float = 1280.0,
        viewport_height: float = 800.0,
        url: str = "",
    ) -> None:
        if viewport_width <= 0 or viewport_height <= 0:
            raise SnapshotError(f"invalid viewport {viewport_width}x{viewport_height}")
        self.soup = soup
        self.viewport_width = float(viewport_width)
        self.viewport_height = float(viewport_height)
        self.url = url

        self._wrappers: dict[int, SoupElement] = {}
        self._order: dict[int, int] = {}
        self._rects: dict[int, BoundingBox | None] = {}
        self._styles: dict[int, dict[str, str]] = {}
        self._derived: dict[int, BoundingBox] = {}

        self._tags: list[Tag] = list(soup.find_all(True))
        for i, tag in enumerate(self._tags):
            key = id(tag)
            self._order[key] = i
            self._rects[key] = parse_rect(tag.get("data-rect"))
            self._styles[key] = parse_declarations(tag.get("data-style"))

        # Children follow their parent in document order, so a reverse sweep
        # sees every child box before the wrapper that unions them.
        for tag in reversed(self._tags):
            key = id(tag)
            if self._rects[key] is None:
                self._derived[key] = self._union_of_children(tag)

        logger.debug(
            "PageTree: %d elements, viewport %.0fx%.0f",
            len(self._tags),
            self.viewport_width,
            self.viewport_height,
        )

    @property
    def root(self) -> SoupElement | None:
        first = self.soup.find(True)
        return self.wrap(first) if first is not None else None

    @property
    def num_elements(self) -> int:
        return len(self._tags)

    def wrap(self, tag: Tag) -> SoupElement:
        key = id(tag)
        wrapper = self._wrappers.get(key)
        if wrapper is None:
            wrapper = SoupElement(tag, self)
            self._wrappers[key] = wrapper
        return wrapper

    def order_of(self, tag: Tag) -> int:
        return self._order.get(id(tag), -1)

    def computed_style_of(self, tag: Tag) -> dict[str, str]:
        return self._styles.get(id(tag), {})

    def box_of(self, tag: Tag) -> BoundingBox:
        """Stamped rect, or the union of laid-out descendants for wrapper nodes."""
        key = id(tag)
        rect = self._rects.get(key)
        if rect is not None:
            return rect
        derived = self._derived.get(key)
        if derived is not None:
            return derived
        # Tag from outside this tree
        return self._union_of_children(tag)

    def _union_of_children(self, tag: Tag) -> BoundingBox:
        boxes = []
        for child in tag.children:
            if not isinstance(child, Tag):
                continue
            key = id(child)
            box = self._rects.get(key) or self._derived.get(key) or _ZERO_BOX
            if not box.is_degenerate:
                boxes.append(box)
        return bounding_box_of(boxes) if boxes else _ZERO_BOX

    def elements(self) -> list[SoupElement]:
        """Every element in document order."""
        return [self.wrap(t) for t in self._tags]

    def images(self) -> list[SoupElement]:
        return [e for e in self.elements() if is_image_like(e)]

    def select(self, selector: str) -> list[SoupElement]:
        try:
            found = soupsieve.select(selector, self.soup)
        except soupsieve.SelectorSyntaxError as e:
            logger.warning("Invalid selector %r: %s", selector, e)
            return []
        return [self.wrap(t) for t in found]

    def find_by_id(self, element_id: str) -> SoupElement | None:
        tag = self.soup.find(id=element_id)
        return self.wrap(tag) if isinstance(tag, Tag) else None
