from .widgets import ParameterTab


class StarsTab(ParameterTab):
    KEYS = ("count", "particleSize")
