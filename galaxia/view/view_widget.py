"""Galaxy view: animation engine plus the Qt widgets displaying it.

:class:`GalaxyEngine` keeps everything the view needs between frames (the live
geometry, the camera, the rotation angle) and renders a frame to a numpy RGB
image.  It has no Qt dependency so it can be driven from tests.

:func:`GalaxyViewWidget` returns the widget shown in the view window.  Two
backends share the same behaviour through :class:`_ViewWidgetBase`: an
OpenGL-backed ``QOpenGLWidget`` and a plain raster ``QWidget``.  Both paint the
engine's image with ``QPainter``.
"""

from __future__ import annotations

import logging
import math
import os
import random
import time
from typing import Optional

import numpy as np
from PyQt5 import QtCore, QtGui, QtWidgets

from ..generator import GalaxyParameters, RandomSource, generate
from .camera import OrbitCamera
from .geometry_slot import GeometrySlot
from .rasterizer import effective_pixel_ratio, point_sizes, splat_points, to_rgb888

__all__ = ["GalaxyEngine", "GalaxyViewWidget", "ROTATION_SPEED", "rotate_y"]

logger = logging.getLogger(__name__)

# Radians per second around the vertical axis.
ROTATION_SPEED = 0.1
FRAME_INTERVAL_MS = 16


def rotate_y(points: np.ndarray, angle: float) -> np.ndarray:
    """Rotate ``(N, 3)`` points by ``angle`` radians around the y axis."""

    if angle == 0.0:
        return points
    c = math.cos(angle)
    s = math.sin(angle)
    out = np.empty_like(points)
    out[:, 0] = points[:, 0] * c + points[:, 2] * s
    out[:, 1] = points[:, 1]
    out[:, 2] = -points[:, 0] * s + points[:, 2] * c
    return out


class GalaxyEngine:
    """Owns the live geometry and renders frames of the rotating galaxy."""

    def __init__(
        self,
        params: Optional[GalaxyParameters] = None,
        *,
        rng: Optional[RandomSource] = None,
        camera: Optional[OrbitCamera] = None,
    ) -> None:
        self.params = params or GalaxyParameters()
        self.rng: RandomSource = rng if rng is not None else random.Random()
        self.camera = camera or OrbitCamera()
        self.slot = GeometrySlot()
        self.rotation = 0.0

    @property
    def geometry(self):
        return self.slot.current

    def regenerate(self, params: GalaxyParameters) -> None:
        """Generate a new galaxy and install it in place of the current one.

        Invalid parameters raise before anything is allocated and leave the
        current geometry untouched.
        """

        geometry = generate(params, self.rng)
        self.params = params
        self.slot.replace(geometry)

    def set_rotating(self, enabled: bool) -> None:
        self.params = self.params.replace(rotate=bool(enabled))

    def step(self, dt: float) -> None:
        if self.params.rotate:
            self.rotation = (self.rotation + max(0.0, dt) * ROTATION_SPEED) % math.tau
        self.camera.update()

    def render(self, width: int, height: int) -> np.ndarray:
        """Return a ``(height, width, 3)`` uint8 image of the current frame."""

        width = max(0, int(width))
        height = max(0, int(height))
        geometry = self.slot.current
        if geometry is None or len(geometry) == 0 or width == 0 or height == 0:
            return np.zeros((height, width, 3), dtype=np.uint8)

        positions = rotate_y(geometry.positions, self.rotation)
        sx, sy, depth, visible = self.camera.project(positions, width, height)
        sizes = point_sizes(self.params.particle_size, depth[visible], height)
        buffer = splat_points(
            sx[visible], sy[visible], geometry.colors[visible], sizes, width, height
        )
        return to_rgb888(buffer)

    def dispose(self) -> None:
        self.slot.release()


class _ViewWidgetBase:
    """Common behaviour shared by both the OpenGL and raster backends."""

    def _init_view_widget(self, engine: Optional[GalaxyEngine]) -> None:
        self.setAttribute(QtCore.Qt.WA_OpaquePaintEvent, True)
        self.setFocusPolicy(QtCore.Qt.StrongFocus)
        self.setMinimumSize(160, 120)
        self.engine = engine or GalaxyEngine()
        self._pending: Optional[GalaxyParameters] = None
        self._last_mouse: Optional[QtCore.QPoint] = None
        self._last_tick = time.perf_counter()
        self._timer = QtCore.QTimer(self)
        self._timer.timeout.connect(self._tick)
        self._timer.start(FRAME_INTERVAL_MS)

    # ------------------------------------------------------------------ API
    def regenerate(self, params: GalaxyParameters) -> None:
        """Regenerate immediately, dropping any queued request."""

        self._pending = None
        self.engine.regenerate(params)
        self.update()

    def request_regenerate(self, params: GalaxyParameters) -> None:
        """Queue a regeneration; requests made before it runs are coalesced."""

        scheduled = self._pending is not None
        self._pending = params
        if not scheduled:
            QtCore.QTimer.singleShot(0, self._flush_regenerate)

    def set_rotating(self, enabled: bool) -> None:
        self.engine.set_rotating(enabled)

    def dispose(self) -> None:
        self._timer.stop()
        self.engine.dispose()

    # ------------------------------------------------------------------ internals
    def _flush_regenerate(self) -> None:
        params, self._pending = self._pending, None
        if params is None:
            return
        try:
            self.engine.regenerate(params)
        except ValueError as exc:
            logger.warning("galaxy not regenerated: %s", exc)
            return
        self.update()

    def _tick(self) -> None:
        now = time.perf_counter()
        dt = min(0.1, now - self._last_tick)
        self._last_tick = now
        self.engine.step(dt)
        self.update()

    def _render_with_painter(self, painter: QtGui.QPainter) -> None:
        painter.fillRect(self.rect(), QtCore.Qt.black)
        ratio = effective_pixel_ratio(self.devicePixelRatioF())
        width = int(self.width() * ratio)
        height = int(self.height() * ratio)
        frame = self.engine.render(width, height)
        if frame.size == 0:
            return
        image = QtGui.QImage(
            frame.tobytes(), width, height, 3 * width, QtGui.QImage.Format_RGB888
        ).copy()
        image.setDevicePixelRatio(ratio)
        painter.drawImage(QtCore.QPointF(0.0, 0.0), image)

    # ------------------------------------------------------------------ camera input
    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:  # noqa: N802 (Qt override)
        if event.button() == QtCore.Qt.LeftButton:
            self._last_mouse = event.pos()
            event.accept()
            return
        super().mousePressEvent(event)  # type: ignore[misc]

    def mouseMoveEvent(self, event: QtGui.QMouseEvent) -> None:  # noqa: N802
        if self._last_mouse is not None and event.buttons() & QtCore.Qt.LeftButton:
            delta = event.pos() - self._last_mouse
            self._last_mouse = event.pos()
            self.engine.camera.rotate(delta.x(), delta.y(), self.height())
            event.accept()
            return
        super().mouseMoveEvent(event)  # type: ignore[misc]

    def mouseReleaseEvent(self, event: QtGui.QMouseEvent) -> None:  # noqa: N802
        if event.button() == QtCore.Qt.LeftButton:
            self._last_mouse = None
        super().mouseReleaseEvent(event)  # type: ignore[misc]

    def wheelEvent(self, event: QtGui.QWheelEvent) -> None:  # noqa: N802
        steps = event.angleDelta().y() / 120.0
        if steps:
            self.engine.camera.zoom(steps)
            event.accept()
            return
        super().wheelEvent(event)  # type: ignore[misc]


class _OpenGLViewWidget(_ViewWidgetBase, QtWidgets.QOpenGLWidget):
    """OpenGL-backed renderer when the system can create a GL context."""

    def __init__(
        self, parent: Optional[QtWidgets.QWidget] = None, engine: Optional[GalaxyEngine] = None
    ) -> None:
        QtWidgets.QOpenGLWidget.__init__(self, parent)
        self._init_view_widget(engine)

    def paintGL(self) -> None:  # pragma: no cover - requires GUI context
        painter = QtGui.QPainter(self)
        try:
            self._render_with_painter(painter)
        finally:
            painter.end()


class _RasterViewWidget(_ViewWidgetBase, QtWidgets.QWidget):
    """Fallback renderer using the traditional raster ``QWidget`` backend."""

    def __init__(
        self, parent: Optional[QtWidgets.QWidget] = None, engine: Optional[GalaxyEngine] = None
    ) -> None:
        QtWidgets.QWidget.__init__(self, parent)
        self._init_view_widget(engine)

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:  # type: ignore[override]
        del event
        painter = QtGui.QPainter(self)
        try:
            self._render_with_painter(painter)
        finally:
            painter.end()


def _should_use_opengl(force_backend: Optional[str]) -> bool:
    if force_backend == "raster":
        return False
    if force_backend == "opengl":
        return True

    env_backend = os.environ.get("GALAXIA_FORCE_BACKEND", "").strip().lower()
    if env_backend == "raster":
        return False
    if env_backend == "opengl":
        return True
    return hasattr(QtWidgets, "QOpenGLWidget")


def GalaxyViewWidget(
    parent: Optional[QtWidgets.QWidget] = None,
    *,
    engine: Optional[GalaxyEngine] = None,
    force_backend: Optional[str] = None,
) -> QtWidgets.QWidget:
    """Factory returning the best available renderer widget.

    Parameters
    ----------
    parent:
        Parent widget used by Qt for ownership.
    engine:
        Engine to display; a fresh :class:`GalaxyEngine` when omitted.
    force_backend:
        ``"opengl"`` forces the OpenGL widget while ``"raster"`` selects the
        pure QWidget implementation.  ``None`` or ``"auto"`` defers to the
        ``GALAXIA_FORCE_BACKEND`` environment variable, then to availability.
    """

    if force_backend == "auto":
        force_backend = None
    if _should_use_opengl(force_backend):
        try:
            widget = _OpenGLViewWidget(parent, engine)
            setattr(widget, "backend_name", "opengl")
            return widget
        except Exception as exc:
            logger.warning("Unable to initialise OpenGL backend (%r); using raster widget instead.", exc)
    widget = _RasterViewWidget(parent, engine)
    setattr(widget, "backend_name", "raster")
    return widget
