"""Product image discovery and page-type detection."""

from __future__ import annotations

import logging

from swatchlink.engine.clustering import detect_grid_pattern
from swatchlink.engine.config import PageType
from swatchlink.engine.spatial_constants import LARGE_IMAGE_MIN_SIZE
from swatchlink.tree.element import ElementRef, PageTree

logger = logging.getLogger(__name__)

# Substrings marking UI chrome rather than products
_UI_HINTS = ("logo", "icon", "sprite")
_SOCIAL_HINTS = ("facebook", "twitter", "instagram", "pinterest", "social")


def _is_ui_image(img: ElementRef) -> bool:
    src = (img.get("src") or "").lower()
    alt = (img.get("alt") or "").lower()
    cls = " ".join(img.classes).lower()
    if any(h in src or h in alt or h in cls for h in _UI_HINTS):
        return True
    return any(h in src for h in _SOCIAL_HINTS) or "social" in cls


def find_product_images(tree: PageTree) -> list[ElementRef]:
    """Image-like elements that look like product photos, in document order."""
    found = []
    for img in tree.images():
        src = img.get("src")
        if img.tag == "img" and (not src or src == tree.url):
            continue
        if _is_ui_image(img):
            continue
        box = img.box()
        if box.width < LARGE_IMAGE_MIN_SIZE or box.height < LARGE_IMAGE_MIN_SIZE:
            continue
        if not img.is_visible():
            continue
        found.append(img)
    logger.info("Found %d product images among %d images", len(found), len(tree.images()))
    return found


def detect_page_type(tree: PageTree, images: list[ElementRef] | None = None) -> PageType:
    """A grid of two or more product columns means a listing page."""
    if images is None:
        images = find_product_images(tree)
    grid = detect_grid_pattern(images)
    page_type = PageType.LISTING if grid is not None else PageType.DETAIL
    logger.debug("Page type %s (%d product images)", page_type.value, len(images))
    return page_type
