"""Simulation engine components."""

from .events import EventType, HazardManager, RaceEvent
from .race import RaceOutcome, RaceResult, RaceSimulator
from .snapshot import LaneSnapshot, RaceSnapshot

__all__ = [
    "EventType",
    "HazardManager",
    "LaneSnapshot",
    "RaceEvent",
    "RaceOutcome",
    "RaceResult",
    "RaceSimulator",
    "RaceSnapshot",
]
