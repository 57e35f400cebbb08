"""Single owned slot holding the live galaxy geometry."""

from __future__ import annotations

import logging
from typing import Optional

from ..generator import GalaxyGeometry

__all__ = ["GeometrySlot"]

logger = logging.getLogger(__name__)


class GeometrySlot:
    """Own exactly one :class:`GalaxyGeometry` at a time.

    Installing a new geometry releases the previous one right away, so at most
    one set of particle buffers stays referenced by the view.
    """

    def __init__(self) -> None:
        self._current: Optional[GalaxyGeometry] = None
        self._generation = 0

    @property
    def current(self) -> Optional[GalaxyGeometry]:
        return self._current

    @property
    def generation(self) -> int:
        """Number of geometries installed so far."""

        return self._generation

    def __bool__(self) -> bool:
        return self._current is not None

    def replace(self, geometry: GalaxyGeometry) -> None:
        if geometry is self._current:
            return
        if geometry.released:
            raise ValueError("cannot install a released geometry")
        previous = self._current
        self._current = geometry
        self._generation += 1
        if previous is not None:
            freed = previous.nbytes
            previous.release()
            logger.debug(
                "installed geometry #%d (%d particles), released %d bytes",
                self._generation,
                len(geometry),
                freed,
            )

    def release(self) -> None:
        if self._current is None:
            return
        self._current.release()
        self._current = None
