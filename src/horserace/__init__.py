"""Confidence-driven horse race simulation."""

from horserace.models import Horse, Race, RaceConfig, SimulationSettings, Terrain
from horserace.simulation import RaceOutcome, RaceResult, RaceSimulator

__version__ = "0.1.0"

__all__ = [
    "Horse",
    "Race",
    "RaceConfig",
    "RaceOutcome",
    "RaceResult",
    "RaceSimulator",
    "SimulationSettings",
    "Terrain",
]
