from .widgets import ParameterTab


class GalaxyTab(ParameterTab):
    """Shape of the galaxy: size, arms, twist, jitter and colors."""

    KEYS = (
        "radius",
        "branches",
        "spin",
        "randomness",
        "randomnessPower",
        "insideColor",
        "outsideColor",
    )
