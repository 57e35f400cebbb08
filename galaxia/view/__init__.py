from .view_widget import GalaxyEngine, GalaxyViewWidget

__all__ = ["GalaxyEngine", "GalaxyViewWidget"]
