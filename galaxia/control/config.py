from ..generator import GalaxyParameters

DEFAULTS = GalaxyParameters().to_dict()

# Fields whose "finished editing" event regenerates the galaxy.  ``rotate`` is
# the only field that does not.
REGENERATE_FIELDS = frozenset({
    "count", "particle_size", "radius", "branches", "spin",
    "randomness", "randomness_power", "inside_color", "outside_color",
})

PARAM_SPECS = {
    "radius": dict(type="double", label="Galaxy Radius", min=0.01, max=20.0, step=0.01, decimals=2),
    "branches": dict(type="int", label="Galaxy Branches", min=2, max=20, step=1),
    "spin": dict(type="int", label="Spin", min=1, max=20, step=1),
    "randomness": dict(type="double", label="Randomness", min=0.0, max=2.0, step=0.001, decimals=3),
    "randomnessPower": dict(type="double", label="Randomness Power", min=1.0, max=10.0, step=0.001, decimals=3),
    "insideColor": dict(type="color", label="Color (Inside)"),
    "outsideColor": dict(type="color", label="Color (Outside)"),
    "count": dict(type="count", label="Count", min=1, max=2_000_000),
    "particleSize": dict(type="double", label="Size", min=0.001, max=0.1, step=0.0001, decimals=4),
}

TOOLTIPS = {
    "radius": "Maximum distance of a star from the galactic center.",
    "branches": "Number of spiral arms; stars are dealt to the arms in turn.",
    "spin": "Angular twist applied per unit of radius.",
    "randomness": "Jitter scale setting; stored with the galaxy but the jitter shape comes from the power below.",
    "randomnessPower": "Exponent shaping the jitter: higher values keep stars close to their arm with rare outliers.",
    "insideColor": "Color of the stars at the center.",
    "outsideColor": "Color of the stars at the edge.",
    "count": "Number of stars.",
    "particleSize": "Rendered size of each star.",
}
