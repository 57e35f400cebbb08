import math
import random

import numpy as np
import pytest

from galaxia.generator import (
    GalaxyGeometry,
    GalaxyParameters,
    InvalidGalaxyParameters,
    fields_from_dict,
    generate,
)

# One particle: r draw, then magnitude/sign for x, y and z.
STILL_PARTICLE = [0.5, 0.0, 0.9, 0.0, 0.9, 0.0, 0.9]


def test_arrays_have_one_row_per_particle():
    geometry = generate(GalaxyParameters(count=1000), random.Random(1))
    assert geometry.positions.shape == (1000, 3)
    assert geometry.colors.shape == (1000, 3)
    assert geometry.positions.dtype == np.float32
    assert geometry.colors.dtype == np.float32
    assert len(geometry) == 1000


def test_particles_stay_within_radius_plus_jitter():
    params = GalaxyParameters(count=5000, radius=3.0, randomness_power=1.0)
    geometry = generate(params, random.Random(7))
    x = geometry.positions[:, 0].astype(np.float64)
    y = geometry.positions[:, 1].astype(np.float64)
    z = geometry.positions[:, 2].astype(np.float64)
    assert np.all(np.hypot(x, z) <= params.radius + math.sqrt(2.0) + 1e-5)
    assert np.all(np.abs(y) <= 1.0 + 1e-6)


def test_colors_stay_between_endpoints():
    params = GalaxyParameters(count=2000, inside_color=0xFF6030, outside_color=0x1B3984)
    colors = generate(params, random.Random(3)).colors
    inside = np.array([0xFF, 0x60, 0x30]) / 255.0
    outside = np.array([0x1B, 0x39, 0x84]) / 255.0
    low = np.minimum(inside, outside) - 1e-6
    high = np.maximum(inside, outside) + 1e-6
    assert np.all(colors >= low)
    assert np.all(colors <= high)


def test_particles_are_dealt_to_branches_in_turn(sequence_random):
    params = GalaxyParameters(count=6, branches=3, radius=1.0, spin=0.7, randomness_power=1.0)
    geometry = generate(params, sequence_random(STILL_PARTICLE * 6))
    for i in range(3):
        np.testing.assert_allclose(geometry.positions[i], geometry.positions[i + 3], atol=1e-6)
    assert not np.allclose(geometry.positions[0], geometry.positions[1])


def test_four_branches_without_spin_point_along_the_axes(sequence_random):
    params = GalaxyParameters(count=4, branches=4, radius=1.0, spin=0.0, randomness_power=1.0)
    rng = sequence_random(STILL_PARTICLE * 4)
    geometry = generate(params, rng)

    assert rng.used == 28
    expected = np.array(
        [
            [0.5, 0.0, 0.0],
            [0.0, 0.0, 0.5],
            [-0.5, 0.0, 0.0],
            [0.0, 0.0, -0.5],
        ]
    )
    np.testing.assert_allclose(geometry.positions, expected, atol=1e-6)


def test_jitter_sign_follows_the_draw(sequence_random):
    params = GalaxyParameters(count=1, branches=1, radius=1.0, spin=0.0, randomness_power=2.0)
    rng = sequence_random([0.0, 0.5, 0.1, 0.5, 0.9, 1.0, 0.2])
    position = generate(params, rng).positions[0]
    np.testing.assert_allclose(position, [-0.25, 0.25, -1.0], atol=1e-6)


def test_color_is_interpolated_by_relative_radius(sequence_random):
    params = GalaxyParameters(
        count=1, branches=1, radius=4.0, inside_color=0x000000, outside_color=0xFFFFFF
    )
    geometry = generate(params, sequence_random(STILL_PARTICLE))
    np.testing.assert_allclose(geometry.colors[0], [0.5, 0.5, 0.5], atol=1e-6)


def test_same_seed_gives_same_galaxy():
    params = GalaxyParameters(count=500)
    a = generate(params, random.Random(42))
    b = generate(params, random.Random(42))
    np.testing.assert_array_equal(a.positions, b.positions)
    np.testing.assert_array_equal(a.colors, b.colors)


def test_randomness_does_not_change_the_output():
    a = generate(GalaxyParameters(count=300, randomness=0.0), random.Random(5))
    b = generate(GalaxyParameters(count=300, randomness=2.0), random.Random(5))
    np.testing.assert_array_equal(a.positions, b.positions)


def test_default_random_source_is_used_when_none_given():
    geometry = generate(GalaxyParameters(count=10))
    assert geometry.count == 10


@pytest.mark.parametrize(
    "changes, field_name",
    [
        ({"branches": 0}, "branches"),
        ({"count": 0}, "count"),
        ({"count": -5}, "count"),
        ({"radius": 0.0}, "radius"),
        ({"radius": -1.0}, "radius"),
        ({"randomness_power": 0.5}, "randomness_power"),
        ({"randomness": -0.1}, "randomness"),
        ({"particle_size": 0.0}, "particle_size"),
        ({"spin": float("nan")}, "spin"),
        ({"count": 2.5}, "count"),
        ({"inside_color": "not a color"}, "inside_color"),
    ],
)
def test_invalid_parameters_are_rejected(changes, field_name, sequence_random):
    params = GalaxyParameters().replace(**changes)
    rng = sequence_random([])
    with pytest.raises(InvalidGalaxyParameters) as info:
        generate(params, rng)
    assert info.value.field_name == field_name
    assert rng.used == 0


def test_invalid_parameters_are_value_errors():
    with pytest.raises(ValueError):
        GalaxyParameters(branches=0).validate()


def test_defaults():
    params = GalaxyParameters()
    assert params.count == 50000
    assert params.particle_size == pytest.approx(0.04)
    assert params.radius == pytest.approx(7.0)
    assert params.branches == 4
    assert params.spin == pytest.approx(1.0)
    assert params.randomness == pytest.approx(0.2)
    assert params.randomness_power == pytest.approx(3.0)
    assert params.inside_color == 0xFF6030
    assert params.outside_color == 0x1B3984
    assert params.rotate is True


def test_dict_form_uses_camel_case_keys_and_hex_colors():
    data = GalaxyParameters().to_dict()
    assert data["randomnessPower"] == pytest.approx(3.0)
    assert data["particleSize"] == pytest.approx(0.04)
    assert data["insideColor"] == "#ff6030"
    assert data["outsideColor"] == "#1b3984"
    assert GalaxyParameters.from_dict(data) == GalaxyParameters()


def test_from_dict_fills_missing_keys_and_ignores_unknown_ones():
    params = GalaxyParameters.from_dict({"branches": 6, "insideColor": "#00ff00", "bogus": 1})
    assert params.branches == 6
    assert params.inside_color == 0x00FF00
    assert params.radius == pytest.approx(7.0)


def test_fields_from_dict_coerces_values():
    fields = fields_from_dict({"count": 1200.0, "radius": "3.5", "outsideColor": 255, "rotate": 0})
    assert fields == {"count": 1200, "radius": 3.5, "outside_color": 255, "rotate": False}
    with pytest.raises(ValueError):
        fields_from_dict({"branches": 2.5})


@pytest.mark.parametrize(
    "payload",
    [
        {"radius": None},
        {"count": [1]},
        {"spin": {"turns": 2}},
        {"branches": "many"},
        {"radius": True},
        {"rotate": "false"},
        {"rotate": 2},
        {"rotate": None},
    ],
)
def test_fields_from_dict_rejects_unusable_values_with_value_error(payload):
    with pytest.raises(ValueError):
        fields_from_dict(payload)


def test_rotate_accepts_booleans_and_zero_or_one():
    assert fields_from_dict({"rotate": True}) == {"rotate": True}
    assert fields_from_dict({"rotate": False}) == {"rotate": False}
    assert fields_from_dict({"rotate": 1}) == {"rotate": True}


def test_geometry_release_drops_buffers():
    geometry = generate(GalaxyParameters(count=10), random.Random(0))
    assert geometry.nbytes == 10 * 3 * 4 * 2
    geometry.release()
    assert geometry.released
    assert len(geometry) == 0
    assert geometry.nbytes == 0


def test_geometry_arrays_must_match():
    with pytest.raises(ValueError):
        GalaxyGeometry(np.zeros((3, 3), np.float32), np.zeros((2, 3), np.float32))
