"""Procedural spiral galaxy viewer with live parameter tuning."""

from .generator import GalaxyGeometry, GalaxyParameters, InvalidGalaxyParameters, generate

__all__ = ["GalaxyGeometry", "GalaxyParameters", "InvalidGalaxyParameters", "generate"]
__version__ = "0.1.0"
