import math
import random

import numpy as np
import pytest

from galaxia.generator import GalaxyParameters, InvalidGalaxyParameters
from galaxia.view.view_widget import ROTATION_SPEED, GalaxyEngine, rotate_y


def test_rotate_y_turns_x_axis_toward_negative_z():
    points = np.array([[1.0, 2.0, 0.0]], dtype=np.float32)
    rotated = rotate_y(points, math.pi / 2)
    np.testing.assert_allclose(rotated, [[0.0, 2.0, -1.0]], atol=1e-6)
    assert rotate_y(points, 0.0) is points


@pytest.fixture
def engine():
    params = GalaxyParameters(count=2000)
    engine = GalaxyEngine(params, rng=random.Random(1))
    engine.regenerate(params)
    return engine


def test_rotation_advances_only_while_enabled(engine):
    engine.step(1.0)
    assert engine.rotation == pytest.approx(ROTATION_SPEED)
    engine.set_rotating(False)
    engine.step(1.0)
    assert engine.rotation == pytest.approx(ROTATION_SPEED)
    engine.set_rotating(True)
    engine.step(0.5)
    assert engine.rotation == pytest.approx(ROTATION_SPEED * 1.5)


def test_render_returns_an_rgb_image(engine):
    frame = engine.render(64, 48)
    assert frame.shape == (48, 64, 3)
    assert frame.dtype == np.uint8
    assert frame.any()


def test_render_without_geometry_is_black():
    frame = GalaxyEngine().render(32, 16)
    assert frame.shape == (16, 32, 3)
    assert not frame.any()


def test_regenerate_replaces_and_releases(engine):
    previous = engine.geometry
    engine.regenerate(GalaxyParameters(count=100))
    assert previous.released
    assert len(engine.geometry) == 100
    assert engine.params.count == 100


def test_invalid_regeneration_keeps_current_geometry(engine):
    current = engine.geometry
    with pytest.raises(InvalidGalaxyParameters):
        engine.regenerate(GalaxyParameters(branches=0))
    assert engine.geometry is current
    assert not current.released


def test_dispose_releases_geometry(engine):
    geometry = engine.geometry
    engine.dispose()
    assert engine.geometry is None
    assert geometry.released
