"""Tile-based 2D and 3D rasterization of implicit shapes."""

__version__ = "0.1.0"

__all__ = [
    "camera",
    "config",
    "modes",
    "pipeline",
    "render2d",
    "render3d",
    "tiles3d",
]