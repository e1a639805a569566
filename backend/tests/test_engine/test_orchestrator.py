"""End-to-end association scenarios."""

import logging

import pytest

from swatchlink.engine import (
    AssociationConfig,
    EventKind,
    PageType,
    resolve_association,
    resolve_associations,
)
from swatchlink.engine.container import ContainerPhase
from swatchlink.errors import ConfigError
from swatchlink.tree.snapshot import load_html


def test_row_of_four_each_gets_own_swatch(row_page):
    images = [row_page.find_by_id(f"img-{i}") for i in range(4)]
    results = resolve_associations(images)
    for i, result in enumerate(results):
        assert result.swatch.get("id") == f"sw-{i}"
        assert result.tier_name == "layout_relative"
        assert result.tier == 6
        assert result.distance == pytest.approx(40)
        assert result.container.phase is ContainerPhase.CLUSTERED


def test_neighbour_swatch_beyond_ceiling(row_page):
    result = resolve_association(row_page.find_by_id("img-1"))
    neighbour = row_page.find_by_id("sw-0")
    assert result.swatch != neighbour
    assert result.image.box().left - neighbour.box().right > 300


def test_detail_page_semantic_selected(detail_page, events):
    result = resolve_association(detail_page.find_by_id("main"), AssociationConfig(on_event=events.append))
    assert result.container.phase is ContainerPhase.SEMANTIC
    assert result.swatch.get("id") == "blue"
    assert result.tier == 2
    assert result.tier_name == "css_class"
    assert result.distance == pytest.approx(20)
    kinds = [e.kind for e in events]
    assert kinds[0] is EventKind.CONTAINER_RESOLVED
    assert kinds[-1] is EventKind.ASSOCIATION_SUCCEEDED
    assert events[-1].element is result.swatch


def test_detail_page_radio_outranks_class():
    html = """
    <body data-rect="0,0,1280,2000">
    <div data-product-id="42" data-rect="100,100,600,500">
      <img id="main" src="/main.jpg" data-rect="100,100,400,400">
      <div class="swatch selected" data-rect="100,520,40,40"></div>
      <input type="radio" name="color" id="c-red" checked data-rect="200,520,1,1">
      <label id="red" for="c-red" class="swatch-label" data-rect="200,520,40,40"></label>
    </div>
    </body>
    """
    tree = load_html(html)
    result = resolve_association(tree.find_by_id("main"), AssociationConfig(page_type=PageType.DETAIL))
    assert result.swatch.get("id") == "red"
    assert result.tier == 1


def test_wide_container_with_two_products_never_crosses(defect_page):
    a = resolve_association(defect_page.find_by_id("a"))
    b = resolve_association(defect_page.find_by_id("b"))
    assert a.swatch is None or a.swatch.get("id") == "sa"
    assert b.swatch is None or b.swatch.get("id") == "sb"
    if a.container is not None:
        assert a.container.element.box().width <= 1280 * 0.6


def test_shared_container_closest_wins():
    html = """
    <body data-rect="0,0,1280,1200">
    <div data-product-id="1" data-rect="0,0,700,400">
      <img id="a" src="/a.jpg" data-rect="0,0,300,300">
      <img id="b" src="/b.jpg" data-rect="400,0,300,300">
      <div id="sa" class="swatch selected" data-rect="100,320,30,30"></div>
      <div id="sb" class="swatch selected" data-rect="500,320,30,30"></div>
    </div>
    </body>
    """
    tree = load_html(html)
    a = resolve_association(tree.find_by_id("a"))
    b = resolve_association(tree.find_by_id("b"))
    assert a.swatch.get("id") == "sa"
    assert b.swatch.get("id") == "sb"
    assert a.distance == pytest.approx(20)


def test_no_supporting_elements(lonely_page, events):
    result = resolve_association(lonely_page.find_by_id("hero"), AssociationConfig(on_event=events.append))
    assert result.swatch is None
    assert result.tier is None
    assert result.distance is None
    assert result.container is None
    assert not result.found
    assert events[-1].kind is EventKind.ASSOCIATION_FAILED


def test_idempotent(row_page):
    image = row_page.find_by_id("img-2")
    first = resolve_association(image)
    second = resolve_association(image)
    assert (first.swatch, first.tier, first.distance) == (second.swatch, second.tier, second.distance)


def test_invalid_config_raises_before_work(row_page):
    with pytest.raises(ConfigError):
        resolve_association(row_page.find_by_id("img-0"), AssociationConfig(cluster_radius=-1))


def test_listener_errors_do_not_change_outcome(row_page, caplog):
    def broken(event):
        raise RuntimeError("listener down")

    image = row_page.find_by_id("img-0")
    quiet = resolve_association(image)
    with caplog.at_level(logging.WARNING):
        noisy = resolve_association(image, AssociationConfig(on_event=broken))
    assert noisy.swatch == quiet.swatch
    assert noisy.distance == quiet.distance
    assert "listener down" in caplog.text


def test_batch_keeps_going(row_page, lonely_page):
    images = [lonely_page.find_by_id("hero"), row_page.find_by_id("img-3")]
    results = resolve_associations(images)
    assert [r.found for r in results] == [False, True]


MALFORMED_STYLE_HTML = """
<body data-rect="0,0,1280,1200">
<div data-product-id="1" data-rect="0,0,400,400">
  <img id="a" src="/a.jpg" data-rect="0,0,300,300">
  <div id="sa" class="swatch" data-style="transform: matrix(1.2.3, 0, 0, 1, 0, 0)"
       data-rect="0,320,30,30"></div>
</div>
<div data-product-id="2" data-rect="700,0,400,400">
  <img id="b" src="/b.jpg" data-rect="700,0,300,300">
  <div id="sb" class="swatch selected" data-rect="700,320,30,30"></div>
</div>
</body>
"""


def test_malformed_style_does_not_break_batch():
    tree = load_html(MALFORMED_STYLE_HTML)
    a, b = resolve_associations([tree.find_by_id("a"), tree.find_by_id("b")])
    assert a.image.get("id") == "a"
    assert b.swatch.get("id") == "sb"


def test_unexpected_strategy_error_becomes_null_result(row_page, monkeypatch, caplog):
    from swatchlink.engine import orchestrator

    real_detect = orchestrator.detect_swatch

    def flaky(ctx, container, registry):
        if ctx.image.get("id") == "img-0":
            raise RuntimeError("tier blew up")
        return real_detect(ctx, container, registry)

    monkeypatch.setattr(orchestrator, "detect_swatch", flaky)
    images = [row_page.find_by_id("img-0"), row_page.find_by_id("img-1")]
    with caplog.at_level(logging.WARNING):
        first, second = resolve_associations(images)
    assert not first.found
    assert first.tier is None
    assert second.swatch.get("id") == "sw-1"
    assert "tier blew up" in caplog.text
