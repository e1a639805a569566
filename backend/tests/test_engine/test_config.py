"""Tests for AssociationConfig and environment settings."""

import logging

import pytest

from swatchlink import logging_setup
from swatchlink.config import Settings
from swatchlink.engine.config import AssociationConfig, PageType
from swatchlink.errors import ConfigError


def test_defaults():
    cfg = AssociationConfig()
    assert cfg.cluster_radius == 150
    assert cfg.min_separation == 200
    assert cfg.max_swatch_distance == 300
    assert cfg.max_container_viewport_ratio == 0.6
    assert cfg.container_tolerance == 50
    assert cfg.page_type is None
    assert cfg.validate() is cfg


@pytest.mark.parametrize(
    "overrides",
    [
        {"cluster_radius": 0},
        {"min_separation": -1},
        {"max_swatch_distance": 0},
        {"max_container_viewport_ratio": 0},
        {"max_container_viewport_ratio": 1.5},
        {"container_tolerance": -1},
        {"max_traversal_depth": 0},
        {"max_cluster_candidates": 1},
    ],
)
def test_invalid_values(overrides):
    with pytest.raises(ConfigError):
        AssociationConfig(**overrides).validate()


def test_config_error_is_value_error():
    with pytest.raises(ValueError):
        AssociationConfig(search_radius=-5).validate()


def test_from_settings(monkeypatch):
    monkeypatch.setenv("SWATCHLINK_CLUSTER_RADIUS", "120")
    monkeypatch.setenv("SWATCHLINK_MAX_SWATCH_DISTANCE", "250")
    cfg = AssociationConfig.from_settings(Settings(), page_type=PageType.LISTING)
    assert cfg.cluster_radius == 120
    assert cfg.max_swatch_distance == 250
    assert cfg.page_type is PageType.LISTING


def test_configure_logging_uses_settings_level(monkeypatch):
    calls = []
    monkeypatch.setattr(logging_setup, "load_dotenv", lambda: None)
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
    logging_setup.configure_logging(Settings(log_level="debug"))
    assert calls[0]["level"] == logging.DEBUG
