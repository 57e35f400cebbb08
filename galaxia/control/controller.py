"""Qt-free owner of the live galaxy parameters."""

from __future__ import annotations

import logging
from typing import Callable, Mapping, Optional

from ..generator import GalaxyParameters
from .config import REGENERATE_FIELDS

__all__ = ["GalaxyController"]

logger = logging.getLogger(__name__)

RegenerateCallback = Callable[[GalaxyParameters], None]
RotationCallback = Callable[[bool], None]


class GalaxyController:
    """Apply parameter edits and decide when the galaxy must be rebuilt.

    ``on_regenerate`` receives the new parameter set each time the geometry
    must be rebuilt; ``on_rotation`` receives the rotation flag whenever it
    may have changed.  Parameters are validated before they are stored, so
    the controller never holds (nor forwards) an invalid set.
    """

    def __init__(
        self,
        on_regenerate: RegenerateCallback,
        on_rotation: Optional[RotationCallback] = None,
        params: Optional[GalaxyParameters] = None,
    ) -> None:
        self._on_regenerate = on_regenerate
        self._on_rotation = on_rotation
        self._params = (params or GalaxyParameters()).validate()

    @property
    def params(self) -> GalaxyParameters:
        return self._params

    def update(self, **changes: object) -> bool:
        """Apply finished edits; return ``True`` when a regeneration happened."""

        if not changes:
            return False
        candidate = self._params.replace(**changes)
        candidate.validate()
        changed = {
            name for name in changes if getattr(candidate, name) != getattr(self._params, name)
        }
        self._params = candidate
        if "rotate" in changed:
            self._notify_rotation()
        if changed & REGENERATE_FIELDS:
            self._regenerate()
            return True
        return False

    def toggle_rotation(self) -> bool:
        self._params = self._params.replace(rotate=not self._params.rotate)
        self._notify_rotation()
        return self._params.rotate

    def restore_defaults(self) -> None:
        self._params = GalaxyParameters()
        self._notify_rotation()
        self._regenerate()

    def load(self, payload: Mapping[str, object]) -> None:
        """Replace every parameter from a camelCase dict (e.g. a preset)."""

        self._params = GalaxyParameters.from_dict(payload).validate()
        self._notify_rotation()
        self._regenerate()

    # ------------------------------------------------------------------ internals
    def _regenerate(self) -> None:
        logger.debug("regenerating galaxy: %s", self._params)
        self._on_regenerate(self._params)

    def _notify_rotation(self) -> None:
        if callable(self._on_rotation):
            self._on_rotation(self._params.rotate)
