"""Spiral galaxy point-cloud generator.

:func:`generate` maps a :class:`GalaxyParameters` value to a
:class:`GalaxyGeometry`: two parallel ``(count, 3)`` float32 arrays holding the
particle positions and colors.  The function has no dependency on rendering
state; the only input besides the parameters is a random source exposing a
``random()`` method (``random.Random`` in production, a scripted sequence in
tests).

Each particle ``i`` is placed on the arm ``i % branches`` at a uniformly drawn
distance ``r`` from the center.  The arm angle is twisted by ``r * spin`` and
every axis receives a signed jitter ``±u ** randomness_power``.  Drawing ``r``
uniformly along the radius (rather than over the disc area) concentrates the
particles toward the core.  The color is interpolated between the inside and
outside colors by ``r / radius``.
"""

from __future__ import annotations

import dataclasses
import logging
import math
import random
import time
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Protocol

import numpy as np

from .color import lerp_rgb, parse_color, to_hex, to_rgb

__all__ = [
    "GalaxyParameters",
    "GalaxyGeometry",
    "InvalidGalaxyParameters",
    "RandomSource",
    "FIELD_KEYS",
    "fields_from_dict",
    "generate",
]

logger = logging.getLogger(__name__)

# Python attribute -> camelCase key used by the control panel and presets.
FIELD_KEYS: Dict[str, str] = {
    "count": "count",
    "particle_size": "particleSize",
    "radius": "radius",
    "branches": "branches",
    "spin": "spin",
    "randomness": "randomness",
    "randomness_power": "randomnessPower",
    "inside_color": "insideColor",
    "outside_color": "outsideColor",
    "rotate": "rotate",
}
_KEY_FIELDS = {key: name for name, key in FIELD_KEYS.items()}


class InvalidGalaxyParameters(ValueError):
    """Raised when a parameter set cannot produce a galaxy."""

    def __init__(self, field_name: str, message: str) -> None:
        super().__init__(f"{field_name}: {message}")
        self.field_name = field_name


class RandomSource(Protocol):
    def random(self) -> float: ...


@dataclass(frozen=True)
class GalaxyParameters:
    """Shape and appearance parameters of one galaxy."""

    count: int = 50000
    particle_size: float = 0.04
    radius: float = 7.0
    branches: int = 4
    spin: float = 1.0
    randomness: float = 0.2
    randomness_power: float = 3.0
    inside_color: int = 0xFF6030
    outside_color: int = 0x1B3984
    rotate: bool = True

    def replace(self, **changes: object) -> "GalaxyParameters":
        return dataclasses.replace(self, **changes)

    def validate(self) -> "GalaxyParameters":
        """Return ``self`` or raise :class:`InvalidGalaxyParameters`."""

        for name in ("count", "branches"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidGalaxyParameters(name, f"expected an integer, got {value!r}")
        for name in ("particle_size", "radius", "spin", "randomness", "randomness_power"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise InvalidGalaxyParameters(name, f"expected a finite number, got {value!r}")
        if self.count <= 0:
            raise InvalidGalaxyParameters("count", "must be greater than 0")
        if self.radius <= 0:
            raise InvalidGalaxyParameters("radius", "must be greater than 0")
        if self.branches < 1:
            raise InvalidGalaxyParameters("branches", "must be at least 1")
        if self.randomness < 0:
            raise InvalidGalaxyParameters("randomness", "must not be negative")
        if self.randomness_power < 1:
            raise InvalidGalaxyParameters("randomness_power", "must be at least 1")
        if self.particle_size <= 0:
            raise InvalidGalaxyParameters("particle_size", "must be greater than 0")
        for name in ("inside_color", "outside_color"):
            try:
                parse_color(getattr(self, name))
            except ValueError as exc:
                raise InvalidGalaxyParameters(name, str(exc)) from None
        return self

    # ------------------------------------------------------------------ dict form
    @classmethod
    def from_dict(cls, payload: Optional[Mapping[str, object]]) -> "GalaxyParameters":
        """Build parameters from camelCase keys; missing keys take defaults."""

        return cls(**fields_from_dict(payload))

    def to_dict(self) -> Dict[str, object]:
        out: Dict[str, object] = {}
        for name, key in FIELD_KEYS.items():
            value = getattr(self, name)
            if name in ("inside_color", "outside_color"):
                value = to_hex(value)
            out[key] = value
        return out


def fields_from_dict(payload: Optional[Mapping[str, object]]) -> Dict[str, object]:
    """Translate camelCase keys to field names, coercing the values.

    Unknown keys are ignored.  Colors may be given as integers or ``#rrggbb``
    strings.  Raises ``ValueError`` when a value cannot be coerced.
    """

    values: Dict[str, object] = {}
    for key, raw in (payload or {}).items():
        name = _KEY_FIELDS.get(key)
        if name is None:
            continue
        values[name] = _coerce_field(name, raw)
    return values


def _coerce_field(name: str, raw: object) -> object:
    if name in ("inside_color", "outside_color"):
        return parse_color(raw)  # type: ignore[arg-type]
    key = FIELD_KEYS[name]
    if name == "rotate":
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, int) and raw in (0, 1):
            return bool(raw)
        raise ValueError(f"{key} must be a boolean, got {raw!r}")
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be a number, got {raw!r}")
    try:
        if name in ("count", "branches"):
            if isinstance(raw, float) and not raw.is_integer():
                raise ValueError(f"{key} must be an integer, got {raw!r}")
            return int(raw)  # type: ignore[arg-type]
        return float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be a number, got {raw!r}") from None


@dataclass
class GalaxyGeometry:
    """Positions and colors of the generated particles.

    Both arrays have shape ``(count, 3)`` and dtype ``float32``.
    """

    positions: np.ndarray
    colors: np.ndarray
    released: bool = field(default=False, compare=False)

    def __post_init__(self) -> None:
        if self.positions.shape != self.colors.shape:
            raise ValueError(
                f"positions {self.positions.shape} and colors {self.colors.shape} differ in shape"
            )

    def __len__(self) -> int:
        return int(self.positions.shape[0])

    @property
    def count(self) -> int:
        return len(self)

    @property
    def nbytes(self) -> int:
        return int(self.positions.nbytes + self.colors.nbytes)

    def release(self) -> None:
        """Drop both buffers; the geometry is unusable afterwards."""

        self.positions = np.empty((0, 3), dtype=np.float32)
        self.colors = np.empty((0, 3), dtype=np.float32)
        self.released = True


def _jitter(rng: RandomSource, power: float) -> float:
    magnitude = rng.random() ** power
    sign = -1.0 if rng.random() < 0.5 else 1.0
    return sign * magnitude


def generate(params: GalaxyParameters, rng: Optional[RandomSource] = None) -> GalaxyGeometry:
    """Generate the particle cloud described by ``params``.

    Raises :class:`InvalidGalaxyParameters` before allocating anything when the
    parameters are invalid.  ``params.randomness`` is carried along but does
    not scale the jitter; only ``randomness_power`` shapes it.
    """

    params.validate()
    if rng is None:
        rng = random.Random()

    started = time.perf_counter()
    count = params.count
    radius = float(params.radius)
    branches = params.branches
    spin = float(params.spin)
    power = float(params.randomness_power)
    inside = to_rgb(params.inside_color)
    outside = to_rgb(params.outside_color)

    positions = np.empty((count, 3), dtype=np.float32)
    colors = np.empty((count, 3), dtype=np.float32)

    for i in range(count):
        r = rng.random() * radius
        spin_angle = r * spin
        branch_angle = (i % branches) / branches * math.tau
        offset_x = _jitter(rng, power)
        offset_y = _jitter(rng, power)
        offset_z = _jitter(rng, power)

        angle = branch_angle + spin_angle
        positions[i] = (math.cos(angle) * r + offset_x, offset_y, math.sin(angle) * r + offset_z)
        colors[i] = lerp_rgb(inside, outside, r / radius)

    logger.debug(
        "generated %d particles on %d branches in %.1f ms",
        count,
        branches,
        (time.perf_counter() - started) * 1000.0,
    )
    return GalaxyGeometry(positions=positions, colors=colors)
