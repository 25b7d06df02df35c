"""Race events: falls, terrain hazards and the finish."""

from dataclasses import dataclass
from enum import Enum

import numpy as np

from horserace.models import HazardType, Horse, TerrainProfile


class EventType(str, Enum):
    """Types of race events."""

    FALL = "fall"
    SLIP = "slip"
    TRIP = "trip"
    FINISH = "finish"


@dataclass
class RaceEvent:
    """Represents something that happened to a horse during a tick."""

    event_type: EventType
    tick: int
    lane: int
    horse_name: str
    description: str = ""


_HAZARD_EVENTS = {
    HazardType.SLIP: EventType.SLIP,
    HazardType.TRIP: EventType.TRIP,
}


class HazardManager:
    """Rolls terrain hazards and tracks the events of a race attempt."""

    def __init__(
        self,
        terrain: TerrainProfile,
        rng: np.random.Generator | None = None,
        confidence_floor: float = 0.01,
    ):
        """Initialize the hazard manager.

        Args:
            terrain: Surface the race is run on
            rng: Random number generator
            confidence_floor: Hazards never push confidence below this
        """
        self.terrain = terrain
        self.rng = rng if rng is not None else np.random.default_rng()
        self.confidence_floor = confidence_floor
        self.events: list[RaceEvent] = []

    def reset(self) -> None:
        """Reset event log for a new attempt."""
        self.events = []

    def record(self, event: RaceEvent) -> RaceEvent:
        self.events.append(event)
        return event

    def check_hazard(self, horse: Horse, lane: int, tick: int) -> RaceEvent | None:
        """Roll the terrain hazard for a standing horse.

        Returns:
            The hazard event if it struck, else None. The caller freezes the
            lane for ``terrain.frozen_ticks``.
        """
        if not self.terrain.has_hazard or horse.fallen:
            return None

        if self.rng.random() >= self.terrain.hazard_probability:
            return None

        # A horse already below the floor is never lifted up to it
        horse.confidence = max(
            min(self.confidence_floor, horse.confidence),
            horse.confidence - self.terrain.hazard_penalty,
        )

        return self.record(RaceEvent(
            event_type=_HAZARD_EVENTS[self.terrain.hazard],
            tick=tick,
            lane=lane,
            horse_name=horse.name,
            description=self.terrain.hazard_message.format(name=horse.name),
        ))
