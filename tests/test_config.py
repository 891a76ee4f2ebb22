import dataclasses

import pytest

from borecad.config import DEFAULT_CONFIG, BuildConfig, resolve
from borecad.errors import BoreCADError, ConfigError


def test_defaults():
    config = BuildConfig()
    assert config.quality == 128
    assert config.engine == "trimesh"
    assert config.backend == "manifold"
    assert config == DEFAULT_CONFIG


def test_draft_and_with_quality():
    assert BuildConfig.draft().quality == 16
    assert BuildConfig.draft(backend=None).backend is None
    config = DEFAULT_CONFIG.with_quality(48)
    assert config.quality == 48
    assert DEFAULT_CONFIG.quality == 128


def test_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_CONFIG.quality = 3


@pytest.mark.parametrize("kwargs", [
    {"quality": 2},
    {"quality": 12.5},
    {"quality": True},
    {"segment_tolerance": -1.0},
    {"vertex_digits": 0},
])
def test_invalid(kwargs):
    with pytest.raises(ConfigError):
        BuildConfig(**kwargs)


def test_config_error_is_library_error():
    assert issubclass(ConfigError, BoreCADError)


def test_resolve():
    config = BuildConfig(quality=8)
    assert resolve(config) is config
    assert resolve(None) is DEFAULT_CONFIG
