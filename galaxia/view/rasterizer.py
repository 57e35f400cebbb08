"""CPU point splatting for the galaxy view.

Particles are drawn as small discs whose colors add up (additive blending with
no depth test), so the drawing order does not matter and dense regions glow.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

__all__ = [
    "MAX_PIXEL_RATIO",
    "MAX_SPLAT_RADIUS",
    "effective_pixel_ratio",
    "point_sizes",
    "splat_points",
    "to_rgb888",
]

MAX_PIXEL_RATIO = 2.0
MAX_SPLAT_RADIUS = 3


def effective_pixel_ratio(ratio: float) -> float:
    try:
        ratio = float(ratio)
    except (TypeError, ValueError):
        return 1.0
    if not ratio > 0:
        return 1.0
    return min(ratio, MAX_PIXEL_RATIO)


def point_sizes(size: float, depth: np.ndarray, height: int) -> np.ndarray:
    """On-screen diameter in pixels of points of world ``size`` at ``depth``."""

    depth = np.maximum(np.asarray(depth, dtype=np.float64), 1e-6)
    return float(size) * (max(1, height) / 2.0) / depth


def _disc_offsets(radius: int) -> Tuple[np.ndarray, np.ndarray]:
    span = np.arange(-radius, radius + 1)
    dx, dy = np.meshgrid(span, span)
    inside = dx * dx + dy * dy <= radius * radius + radius
    return dx[inside], dy[inside]


def splat_points(
    sx: np.ndarray,
    sy: np.ndarray,
    colors: np.ndarray,
    sizes_px: np.ndarray,
    width: int,
    height: int,
) -> np.ndarray:
    """Accumulate ``colors`` at ``(sx, sy)`` into a ``(height, width, 3)`` buffer.

    Points smaller than two pixels cover a single pixel with an intensity
    scaled by their area; larger points cover a disc.  The result is clipped
    to ``[0, 1]``.
    """

    buffer = np.zeros((max(0, height), max(0, width), 3), dtype=np.float32)
    if width <= 0 or height <= 0 or len(sx) == 0:
        return buffer

    px = np.floor(np.asarray(sx)).astype(np.int64)
    py = np.floor(np.asarray(sy)).astype(np.int64)
    colors = np.asarray(colors, dtype=np.float32)
    sizes_px = np.asarray(sizes_px, dtype=np.float64)

    radii = np.clip(np.floor(sizes_px / 2.0), 0, MAX_SPLAT_RADIUS).astype(np.int64)
    weights = np.where(radii == 0, np.clip(sizes_px * sizes_px / 4.0, 0.05, 1.0), 1.0)
    weighted = colors * weights[:, None].astype(np.float32)

    for radius in range(MAX_SPLAT_RADIUS + 1):
        group = radii == radius
        if not group.any():
            continue
        gx, gy, gc = px[group], py[group], weighted[group]
        for dx, dy in zip(*_disc_offsets(radius)):
            x = gx + dx
            y = gy + dy
            keep = (x >= 0) & (x < width) & (y >= 0) & (y < height)
            if keep.any():
                np.add.at(buffer, (y[keep], x[keep]), gc[keep])

    np.clip(buffer, 0.0, 1.0, out=buffer)
    return buffer


def to_rgb888(buffer: np.ndarray) -> np.ndarray:
    """Convert a float RGB buffer in ``[0, 1]`` to contiguous ``uint8``."""

    return np.ascontiguousarray(np.rint(np.clip(buffer, 0.0, 1.0) * 255.0).astype(np.uint8))
