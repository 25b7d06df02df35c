"""Data models for horse race simulation."""

from .horse import Horse, clamp_confidence
from .race import Race, RaceStatus, all_fallen
from .settings import SimulationSettings
from .track import (
    MAX_LANES,
    MIN_LANES,
    TERRAIN_PROFILES,
    HazardType,
    RaceConfig,
    Terrain,
    TerrainProfile,
)

__all__ = [
    "HazardType",
    "Horse",
    "MAX_LANES",
    "MIN_LANES",
    "Race",
    "RaceConfig",
    "RaceStatus",
    "SimulationSettings",
    "TERRAIN_PROFILES",
    "Terrain",
    "TerrainProfile",
    "all_fallen",
    "clamp_confidence",
]
