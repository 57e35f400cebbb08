import numpy as np
import pytest

from galaxia.view.rasterizer import (
    MAX_PIXEL_RATIO,
    effective_pixel_ratio,
    point_sizes,
    splat_points,
    to_rgb888,
)


def _splat(xs, ys, colors, sizes, width=16, height=12):
    return splat_points(
        np.asarray(xs, dtype=np.float64),
        np.asarray(ys, dtype=np.float64),
        np.asarray(colors, dtype=np.float32),
        np.asarray(sizes, dtype=np.float64),
        width,
        height,
    )


def test_overlapping_points_add_up():
    one = _splat([5.5], [5.5], [[0.4, 0.0, 0.0]], [1.0])
    two = _splat([5.5, 5.5], [5.5, 5.5], [[0.4, 0.0, 0.0]] * 2, [1.0, 1.0])
    assert one[5, 5, 0] == pytest.approx(0.1)
    assert two[5, 5, 0] == pytest.approx(0.2)
    assert two.shape == (12, 16, 3)


def test_accumulation_is_clipped_to_one():
    buffer = _splat([3.0] * 10, [3.0] * 10, [[1.0, 1.0, 1.0]] * 10, [2.0] * 10)
    assert buffer.max() == pytest.approx(1.0)


def test_off_screen_points_are_ignored():
    buffer = _splat([-10.0, 5.0, 40.0], [5.0, 100.0, -3.0], [[1.0, 1.0, 1.0]] * 3, [1.0] * 3)
    assert not buffer.any()


def test_discs_are_cut_at_the_border():
    buffer = _splat([0.0], [0.0], [[0.0, 1.0, 0.0]], [4.0])
    assert buffer[0, 0, 1] == pytest.approx(1.0)
    assert buffer[2, 0, 1] == pytest.approx(1.0)
    assert buffer[5, 5, 1] == 0.0


def test_empty_viewport():
    assert _splat([1.0], [1.0], [[1.0, 1.0, 1.0]], [1.0], 0, 0).shape == (0, 0, 3)


def test_point_sizes_shrink_with_depth():
    sizes = point_sizes(0.04, np.array([10.0, 20.0]), 600)
    np.testing.assert_allclose(sizes, [1.2, 0.6])


@pytest.mark.parametrize(
    "ratio, expected",
    [(1.0, 1.0), (1.5, 1.5), (2.0, 2.0), (3.0, MAX_PIXEL_RATIO), (0.0, 1.0), (float("nan"), 1.0), ("x", 1.0)],
)
def test_pixel_ratio_is_clamped(ratio, expected):
    assert effective_pixel_ratio(ratio) == expected


def test_to_rgb888_scales_to_bytes():
    image = to_rgb888(np.array([[[0.0, 0.5, 1.0]]], dtype=np.float32))
    assert image.dtype == np.uint8
    assert image.tolist() == [[[0, 128, 255]]]
