"""
World Module - The tile-addressed world workers act on.

Provides:
- Tile, WorldObject, Tree, HoeDirt, Crop, Flooring: world entities
- WorldGrid: protocol for the host's world
- InMemoryWorldGrid, Inventory: dictionary-backed world for headless runs
- Economy, Farmer: the hiring player
"""

from .economy import Economy, Farmer
from .grid import InMemoryWorldGrid, Inventory, WorldGrid
from .models import (
    Candidate,
    Crop,
    Debris,
    Flooring,
    HoeDirt,
    ObjectKind,
    TerrainFeature,
    Tile,
    Tree,
    WorldObject,
)

__all__ = [
    # Entities
    "Candidate",
    "Crop",
    "Debris",
    "Flooring",
    "HoeDirt",
    "ObjectKind",
    "TerrainFeature",
    "Tile",
    "Tree",
    "WorldObject",
    # Collaborators
    "WorldGrid",
    "InMemoryWorldGrid",
    "Inventory",
    "Economy",
    "Farmer",
]
