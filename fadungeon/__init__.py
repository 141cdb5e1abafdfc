"""Procedural dungeon level generation: flat layouts, tile sets and tiled levels."""

__version__ = "0.1.0"

__all__ = [
    "grid",
    "layout",
    "levelgen",
    "mst",
    "rng",
    "tileset",
]