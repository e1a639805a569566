"""Shared test fixtures: rect-stamped page snapshots."""

from __future__ import annotations

import pytest

from swatchlink.tree.snapshot import load_html


# Four products in a row, 320 apart, each with one swatch 40 below its image.
ROW_HTML = """
<html data-rect="0,0,1920,1000"><body data-rect="0,0,1920,1000">
<div class="grid" data-rect="0,0,1920,400">
  <div class="cell" data-rect="0,0,100,180">
    <img id="img-0" src="/p0.jpg" data-rect="0,0,100,100">
    <div id="sw-0" class="swatch" data-rect="35,140,30,30"></div>
  </div>
  <div class="cell" data-rect="420,0,100,180">
    <img id="img-1" src="/p1.jpg" data-rect="420,0,100,100">
    <div id="sw-1" class="swatch" data-rect="455,140,30,30"></div>
  </div>
  <div class="cell" data-rect="840,0,100,180">
    <img id="img-2" src="/p2.jpg" data-rect="840,0,100,100">
    <div id="sw-2" class="swatch" data-rect="875,140,30,30"></div>
  </div>
  <div class="cell" data-rect="1260,0,100,180">
    <img id="img-3" src="/p3.jpg" data-rect="1260,0,100,100">
    <div id="sw-3" class="swatch" data-rect="1295,140,30,30"></div>
  </div>
</div>
</body></html>
"""

# Product detail page with a semantic product boundary and one selected swatch.
DETAIL_HTML = """
<html data-rect="0,0,1280,2000"><body data-rect="0,0,1280,2000">
<header data-rect="0,0,1280,80"><img class="site-logo" src="/logo.png" data-rect="20,10,160,60"></header>
<div class="page" data-rect="0,80,1280,1900">
  <div data-product-id="42" class="product" data-rect="100,100,600,500">
    <img id="main" src="/main.jpg" data-rect="100,100,400,400">
    <ul class="swatches" data-rect="100,520,300,40">
      <li id="red" class="swatch" data-rect="100,520,40,40"></li>
      <li id="blue" class="swatch selected" data-rect="150,520,40,40"></li>
      <li id="green" class="swatch" data-rect="200,520,40,40"></li>
    </ul>
  </div>
</div>
</body></html>
"""

# Markup defect: one product boundary wraps two products and is wider than the viewport bound.
DEFECT_HTML = """
<html data-rect="0,0,1280,1200"><body data-rect="0,0,1280,1200">
<div data-product-id="1" class="product-card" data-rect="0,0,1000,400">
  <div class="media" data-rect="0,0,1000,300">
    <img id="a" src="/a.jpg" data-rect="0,0,300,300">
    <img id="b" src="/b.jpg" data-rect="700,0,300,300">
  </div>
  <div id="sa" class="swatch selected" data-rect="100,320,30,30"></div>
  <div id="sb" class="swatch selected" data-rect="800,320,30,30"></div>
</div>
</body></html>
"""

# A hero image with nothing around it.
LONELY_HTML = """
<html data-rect="0,0,1280,800"><body data-rect="0,0,1280,800">
<div class="hero" data-rect="0,0,1280,600"><img id="hero" src="/hero.jpg" data-rect="0,0,1280,600"></div>
</body></html>
"""


@pytest.fixture
def row_page():
    return load_html(ROW_HTML, viewport=(1920, 1000))


@pytest.fixture
def detail_page():
    return load_html(DETAIL_HTML, viewport=(1280, 800))


@pytest.fixture
def defect_page():
    return load_html(DEFECT_HTML, viewport=(1280, 800))


@pytest.fixture
def lonely_page():
    return load_html(LONELY_HTML, viewport=(1280, 800))


@pytest.fixture
def events():
    """Collects diagnostic events; pass ``events.append`` as ``on_event``."""
    return []
