"""Damped orbit camera used by the galaxy view.

The camera orbits a target point on a sphere described by ``distance``,
``azimuth`` (around the vertical axis) and ``polar`` (angle from the vertical
axis).  Mouse input accumulates pending rotation/zoom which :meth:`update`
applies a share of every frame, giving the same inertial feel as a damped
orbit control.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np

__all__ = ["OrbitCamera"]

_EPS = 1e-6


class OrbitCamera:
    def __init__(
        self,
        position: Sequence[float] = (10.0, 2.0, 0.0),
        target: Sequence[float] = (0.0, 0.0, 0.0),
        *,
        fov_deg: float = 75.0,
        near: float = 0.1,
        far: float = 100.0,
        damping: float = 0.05,
        rotate_speed: float = 1.0,
        min_distance: float = 0.5,
        max_distance: float = 80.0,
    ) -> None:
        self.target = np.asarray(target, dtype=np.float64)
        self.fov_deg = float(fov_deg)
        self.near = float(near)
        self.far = float(far)
        self.damping = float(damping)
        self.rotate_speed = float(rotate_speed)
        self.min_distance = float(min_distance)
        self.max_distance = float(max_distance)

        offset = np.asarray(position, dtype=np.float64) - self.target
        self.distance = float(np.linalg.norm(offset)) or 1.0
        self.azimuth = math.atan2(offset[0], offset[2])
        self.polar = math.acos(max(-1.0, min(1.0, offset[1] / self.distance)))
        self.distance = min(self.max_distance, max(self.min_distance, self.distance))

        self._azimuth_delta = 0.0
        self._polar_delta = 0.0
        self._zoom_scale = 1.0

    # ------------------------------------------------------------------ input
    def rotate(self, dx_px: float, dy_px: float, height: int) -> None:
        """Queue an orbit from a mouse drag of ``(dx_px, dy_px)`` pixels."""

        height = max(1, int(height))
        self._azimuth_delta -= 2.0 * math.pi * dx_px / height * self.rotate_speed
        self._polar_delta -= 2.0 * math.pi * dy_px / height * self.rotate_speed

    def zoom(self, steps: float) -> None:
        """Queue a zoom; positive steps move closer."""

        self._zoom_scale *= 0.95 ** steps

    def update(self) -> None:
        self.azimuth += self._azimuth_delta * self.damping
        self.polar += self._polar_delta * self.damping
        self.polar = min(math.pi - _EPS, max(_EPS, self.polar))

        scale = self._zoom_scale ** self.damping
        self.distance = min(self.max_distance, max(self.min_distance, self.distance * scale))

        keep = 1.0 - self.damping
        self._azimuth_delta *= keep
        self._polar_delta *= keep
        self._zoom_scale **= keep

    # ------------------------------------------------------------------ geometry
    @property
    def position(self) -> np.ndarray:
        sin_polar = math.sin(self.polar)
        offset = np.array(
            [
                self.distance * sin_polar * math.sin(self.azimuth),
                self.distance * math.cos(self.polar),
                self.distance * sin_polar * math.cos(self.azimuth),
            ]
        )
        return self.target + offset

    def basis(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Return the ``(right, up, forward)`` unit vectors of the camera."""

        forward = self.target - self.position
        forward /= np.linalg.norm(forward)
        right = np.cross(forward, np.array([0.0, 1.0, 0.0]))
        norm = np.linalg.norm(right)
        if norm < _EPS:
            right = np.array([1.0, 0.0, 0.0])
        else:
            right /= norm
        up = np.cross(right, forward)
        return right, up, forward

    def focal_length(self, height: int) -> float:
        """Focal length in pixels for a viewport ``height`` pixels tall."""

        return (max(1, height) / 2.0) / math.tan(math.radians(self.fov_deg) / 2.0)

    def project(
        self, points: np.ndarray, width: int, height: int
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """Project world ``points`` ``(N, 3)`` onto a ``width`` x ``height`` viewport.

        Returns ``(sx, sy, depth, visible)`` where ``depth`` is the distance
        along the view axis and ``visible`` masks points between the near and
        far planes.
        """

        right, up, forward = self.basis()
        rel = np.asarray(points, dtype=np.float64) - self.position
        x_cam = rel @ right
        y_cam = rel @ up
        depth = rel @ forward
        visible = (depth > self.near) & (depth < self.far)
        safe_depth = np.where(visible, depth, 1.0)
        focal = self.focal_length(height)
        sx = width / 2.0 + x_cam * focal / safe_depth
        sy = height / 2.0 - y_cam * focal / safe_depth
        return sx, sy, depth, visible
