"""Color helpers shared by the generator, the presets and the control panel.

Colors travel through the application as ``0xRRGGBB`` integers.  The control
panel and the preset files use ``#rrggbb`` strings, and the generator works on
``(r, g, b)`` float triples in ``[0, 1]``.
"""

from __future__ import annotations

from typing import Tuple, Union

ColorLike = Union[int, str]
RGB = Tuple[float, float, float]

__all__ = ["ColorLike", "RGB", "parse_color", "to_hex", "to_rgb", "lerp_rgb"]


def parse_color(value: ColorLike) -> int:
    """Return ``value`` as a ``0xRRGGBB`` integer.

    Accepts integers and ``#rrggbb`` / ``#rgb`` / ``0xrrggbb`` strings.
    Raises :class:`ValueError` for anything else.
    """

    if isinstance(value, bool):
        raise ValueError(f"invalid color: {value!r}")
    if isinstance(value, int):
        if not 0 <= value <= 0xFFFFFF:
            raise ValueError(f"color out of range: {value:#x}")
        return value
    if not isinstance(value, str):
        raise ValueError(f"invalid color: {value!r}")
    text = value.strip().lower()
    if text.startswith("#"):
        text = text[1:]
    elif text.startswith("0x"):
        text = text[2:]
    if len(text) == 3:
        text = "".join(ch * 2 for ch in text)
    if len(text) != 6:
        raise ValueError(f"invalid color: {value!r}")
    try:
        return int(text, 16)
    except ValueError:
        raise ValueError(f"invalid color: {value!r}") from None


def to_hex(value: ColorLike) -> str:
    return f"#{parse_color(value):06x}"


def to_rgb(value: ColorLike) -> RGB:
    number = parse_color(value)
    return (
        ((number >> 16) & 255) / 255.0,
        ((number >> 8) & 255) / 255.0,
        (number & 255) / 255.0,
    )


def lerp_rgb(a: RGB, b: RGB, t: float) -> RGB:
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t, a[2] + (b[2] - a[2]) * t)
