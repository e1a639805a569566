"""Snapshot loaders: facade over pydantic + BeautifulSoup.

Converts a serialized page (JSON element tree or rect-stamped HTML) → PageTree.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from bs4 import BeautifulSoup, Tag
from pydantic import ValidationError

from swatchlink.errors import SnapshotError
from swatchlink.models.snapshot import ElementSnapshot, PageSnapshot, Rect
from swatchlink.tree.element import PageTree

logger = logging.getLogger(__name__)

# HTML attributes bs4 treats as whitespace-separated lists
_MULTI_VALUED = {"class", "rel", "rev", "accept-charset", "headers", "accesskey"}


def load_snapshot(data: str | bytes | dict[str, Any] | PageSnapshot) -> PageTree:
    """Build a PageTree from a JSON snapshot (string, dict or model)."""
    if isinstance(data, PageSnapshot):
        snapshot = data
    else:
        try:
            if isinstance(data, (str, bytes)):
                snapshot = PageSnapshot.model_validate_json(data)
            else:
                snapshot = PageSnapshot.model_validate(data)
        except (ValidationError, json.JSONDecodeError) as e:
            raise SnapshotError(f"invalid page snapshot: {e}") from e

    soup = BeautifulSoup("", "html.parser")
    soup.append(_build_tag(soup, snapshot.root))

    tree = PageTree(
        soup,
        viewport_width=snapshot.viewport.width,
        viewport_height=snapshot.viewport.height,
        url=snapshot.url,
    )
    logger.info("Loaded snapshot %s: %d elements", snapshot.url or "<anonymous>", tree.num_elements)
    return tree


def load_html(
    html: str,
    viewport: tuple[float, float] = (1280.0, 800.0),
    url: str = "",
) -> PageTree:
    """Build a PageTree from HTML whose laid-out elements carry ``data-rect``."""
    soup = BeautifulSoup(html, "html.parser")
    tree = PageTree(soup, viewport_width=viewport[0], viewport_height=viewport[1], url=url)
    logger.info("Loaded HTML snapshot %s: %d elements", url or "<anonymous>", tree.num_elements)
    return tree


def _format_rect(rect: Rect) -> str:
    # repr() round-trips through float() exactly
    return ",".join(repr(float(v)) for v in (rect.x, rect.y, rect.width, rect.height))


def _build_tag(soup: BeautifulSoup, node: ElementSnapshot) -> Tag:
    attrs: dict[str, Any] = {}
    for name, value in node.attrs.items():
        key = name.lower()
        attrs[key] = value.split() if key in _MULTI_VALUED else value
    if node.rect is not None:
        attrs["data-rect"] = _format_rect(node.rect)
    if node.style:
        attrs["data-style"] = "; ".join(f"{k}: {v}" for k, v in node.style.items())

    tag = soup.new_tag(node.tag.lower(), attrs=attrs)
    if node.text:
        tag.append(node.text)
    for child in node.children:
        tag.append(_build_tag(soup, child))
    return tag
