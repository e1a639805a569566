"""Tests for the strategy registry."""

import pytest

from swatchlink.engine.registry import (
    Stage,
    StrategyRegistry,
    StrategySpec,
    get_registry,
    register_strategies,
)


def _noop(*args):
    return []


def test_register_and_get():
    reg = StrategyRegistry()
    spec = StrategySpec(id="semantic", stage=Stage.CONTAINER, rank=1, fn=_noop)
    reg.register(spec)
    assert reg.get("semantic") is spec
    assert reg.count == 1


def test_get_stage_sorted_by_rank():
    reg = StrategyRegistry()
    reg.register(StrategySpec(id="late", stage=Stage.DETECTION, rank=5, fn=_noop))
    reg.register(StrategySpec(id="early", stage=Stage.DETECTION, rank=1, fn=_noop))
    reg.register(StrategySpec(id="phase", stage=Stage.CONTAINER, rank=1, fn=_noop))
    assert [s.id for s in reg.get_stage(Stage.DETECTION)] == ["early", "late"]
    assert [s.id for s in reg.all()] == ["phase", "early", "late"]


def test_duplicate_id_rejected():
    reg = StrategyRegistry()
    reg.register(StrategySpec(id="x", stage=Stage.DETECTION, rank=1, fn=_noop))
    with pytest.raises(ValueError):
        reg.register(StrategySpec(id="x", stage=Stage.DETECTION, rank=2, fn=_noop))


def test_duplicate_rank_rejected():
    reg = StrategyRegistry()
    reg.register(StrategySpec(id="x", stage=Stage.DETECTION, rank=1, fn=_noop))
    with pytest.raises(ValueError):
        reg.register(StrategySpec(id="y", stage=Stage.DETECTION, rank=1, fn=_noop))


def test_builtin_strategies_registered():
    register_strategies()
    reg = get_registry()
    phases = [s.id for s in reg.get_stage(Stage.CONTAINER)]
    tiers = [s.id for s in reg.get_stage(Stage.DETECTION)]
    assert phases == ["semantic", "clustering", "traversal"]
    assert tiers == [
        "radio_input",
        "css_class",
        "aria_state",
        "data_attribute",
        "visual_style",
        "layout_relative",
        "structural",
    ]
    assert reg.get("structural").listing_only
    assert not reg.get("layout_relative").listing_only


def test_register_strategies_is_idempotent():
    register_strategies()
    count = get_registry().count
    register_strategies()
    assert get_registry().count == count
