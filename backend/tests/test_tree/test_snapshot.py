"""Tests for the snapshot loaders and the element tree adapter."""

import json

import pytest

from swatchlink.errors import SnapshotError
from swatchlink.tree.element import ElementRef, parse_declarations, parse_rect
from swatchlink.tree.snapshot import load_html, load_snapshot
from swatchlink.utils.geometry import BoundingBox

SNAPSHOT = {
    "url": "https://shop.example/p/1",
    "viewport": {"width": 1440, "height": 900},
    "root": {
        "tag": "body",
        "rect": {"x": 0, "y": 0, "width": 1440, "height": 900},
        "children": [
            {
                "tag": "div",
                "attrs": {"class": "product-card", "data-product-id": "1"},
                "children": [
                    {"tag": "img", "attrs": {"id": "p", "src": "/p.jpg"},
                     "rect": {"x": 10, "y": 10, "width": 200, "height": 200}},
                    {"tag": "button", "attrs": {"id": "s", "class": "swatch"},
                     "rect": {"x": 10, "y": 230, "width": 24, "height": 24},
                     "style": {"border-width": "2px", "display": "block"}},
                ],
            }
        ],
    },
}


def test_load_snapshot_dict():
    tree = load_snapshot(SNAPSHOT)
    assert tree.viewport_width == 1440
    assert tree.url == "https://shop.example/p/1"
    assert [e.tag for e in tree.elements()] == ["body", "div", "img", "button"]


def test_load_snapshot_json_string():
    tree = load_snapshot(json.dumps(SNAPSHOT))
    swatch = tree.find_by_id("s")
    assert swatch.box() == BoundingBox(10, 230, 24, 24)
    assert swatch.style("border-width") == "2px"
    assert swatch.classes == ("swatch",)


def test_wrapper_box_is_union_of_children():
    tree = load_snapshot(SNAPSHOT)
    card = tree.select(".product-card")[0]
    assert card.box() == BoundingBox(10, 10, 200, 244)


def test_invalid_snapshot_wrapped():
    bad = {"root": {"tag": "div", "rect": {"x": 0, "y": 0, "width": -5, "height": 10}}}
    with pytest.raises(SnapshotError):
        load_snapshot(bad)
    with pytest.raises(SnapshotError):
        load_snapshot("{not json")


def test_snapshot_error_is_value_error():
    with pytest.raises(ValueError):
        load_snapshot({"viewport": {"width": 0}})


def test_parse_rect():
    assert parse_rect("1,2,3,4") == BoundingBox(1, 2, 3, 4)
    assert parse_rect(None) is None
    with pytest.raises(SnapshotError):
        parse_rect("1,2,3")
    with pytest.raises(SnapshotError):
        parse_rect("a,b,c,d")
    with pytest.raises(SnapshotError):
        parse_rect("0,0,-1,5")


def test_malformed_rect_in_html():
    with pytest.raises(SnapshotError):
        load_html('<div data-rect="0,0,ten,10"></div>')


def test_parse_declarations():
    assert parse_declarations("color: red; Border-Width : 2px;;junk") == {
        "color": "red",
        "border-width": "2px",
    }


def test_navigation(detail_page):
    main = detail_page.find_by_id("main")
    assert isinstance(main, ElementRef)
    assert main.parent().get("data-product-id") == "42"
    assert main.next_sibling().tag == "ul"
    assert [a.tag for a in main.ancestors()] == ["div", "div", "body", "html"]
    assert main.closest("[data-product-id]") is main.parent()
    assert main.parent().contains(main)
    assert not main.contains(main.parent())


def test_document_order_and_identity(detail_page):
    first = detail_page.select("li")
    again = detail_page.select("li.swatch")
    assert first == again
    assert [e.order for e in first] == sorted(e.order for e in first)
    assert len({*first, *again}) == 3


def test_invalid_selector_returns_empty(detail_page):
    assert detail_page.select("li[") == []
    assert detail_page.root.select(":nope") == []
    assert detail_page.root.closest("[[") is None


def test_visibility():
    tree = load_html(
        '<div id="a" style="display:none"></div>'
        '<div id="b" hidden></div>'
        '<div id="c" data-style="visibility: hidden"></div>'
        '<div id="d"></div>'
    )
    assert [tree.find_by_id(i).is_visible() for i in "abcd"] == [False, False, False, True]


def test_images_include_role_img():
    tree = load_html('<img id="i" src="/x.png"><div id="r" role="img"></div><div id="n"></div>')
    assert [e.get("id") for e in tree.images()] == ["i", "r"]


def test_invalid_viewport():
    with pytest.raises(SnapshotError):
        load_html("<div></div>", viewport=(0, 800))


def test_snapshot_rect_keeps_full_precision():
    data = {
        "root": {
            "tag": "div",
            "children": [
                {"tag": "span", "attrs": {"id": "s"},
                 "rect": {"x": 100.123456, "y": 1234567.0, "width": 300.0001, "height": 24}},
            ],
        }
    }
    box = load_snapshot(data).find_by_id("s").box()
    assert box == BoundingBox(100.123456, 1234567.0, 300.0001, 24)


def test_deeply_nested_wrapper_box():
    depth = 3000
    html = "<div>" * depth + '<span id="leaf" data-rect="5,6,7,8"></span>' + "</div>" * depth
    tree = load_html(html)
    assert tree.num_elements == depth + 1
    assert tree.root.box() == BoundingBox(5, 6, 7, 8)
