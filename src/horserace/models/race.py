"""Race aggregate: lanes, horses and run state."""

import logging
from collections.abc import Iterable, Iterator
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator

from .horse import Horse
from .track import RaceConfig, Terrain

logger = logging.getLogger(__name__)


class RaceStatus(str, Enum):
    """Race lifecycle state."""

    RUNNING = "running"
    FINISHED = "finished"


def all_fallen(lanes: Iterable[Horse | None]) -> bool:
    """Check whether every occupied lane holds a fallen horse.

    Vacuously true when no lane is occupied; callers must guard against
    running a race without horses.
    """
    return all(horse.fallen for horse in lanes if horse is not None)


class Race(BaseModel):
    """A race over a fixed track with 2-6 lanes.

    The race owns the horses placed in its lanes. Lane numbers are 1-based at
    the public interface and 0-based in ``lanes``.
    """

    config: RaceConfig = Field(..., description="Track length, lane count and terrain")
    lanes: list[Horse | None] = Field(
        default_factory=list,
        description="One slot per lane, None when empty",
    )

    # Run state
    status: RaceStatus = Field(default=RaceStatus.RUNNING, description="Lifecycle state")
    tick: int = Field(default=0, ge=0, description="Ticks elapsed in the current attempt")
    frozen: list[int] = Field(
        default_factory=list,
        description="Ticks each lane still has to sit out after a hazard",
    )

    @model_validator(mode="after")
    def _fit_lanes(self) -> "Race":
        lane_count = self.config.lane_count
        if len(self.lanes) > lane_count:
            raise ValueError(
                f"{len(self.lanes)} lanes given for a {lane_count}-lane race"
            )
        self.lanes.extend([None] * (lane_count - len(self.lanes)))
        if len(self.frozen) != lane_count:
            self.frozen = [0] * lane_count
        return self

    @classmethod
    def create(
        cls,
        track_length: int,
        lane_count: int,
        terrain: Terrain | str = Terrain.NORMAL,
    ) -> "Race":
        """Create an empty race.

        Raises:
            pydantic.ValidationError: lane count outside 2-6 or non-positive length
        """
        return cls(
            config=RaceConfig(
                track_length=track_length,
                lane_count=lane_count,
                terrain=terrain,
            )
        )

    @property
    def track_length(self) -> int:
        return self.config.track_length

    @property
    def lane_count(self) -> int:
        return self.config.lane_count

    @property
    def is_finished(self) -> bool:
        return self.status == RaceStatus.FINISHED

    def add_horse(self, horse: Horse, lane_number: int) -> bool:
        """Put a horse in a lane (1-based).

        An out-of-range lane is reported and ignored.

        Returns:
            True if the horse was placed
        """
        if lane_number < 1 or lane_number > self.lane_count:
            logger.warning(
                "Can't add horse %s to lane %d, only %d lanes available",
                horse.name, lane_number, self.lane_count,
            )
            return False
        self.lanes[lane_number - 1] = horse
        return True

    def horse_in_lane(self, lane_number: int) -> Horse | None:
        if lane_number < 1 or lane_number > self.lane_count:
            return None
        return self.lanes[lane_number - 1]

    def occupied_lanes(self) -> Iterator[tuple[int, Horse]]:
        """Yield (lane number, horse) for occupied lanes in lane order."""
        for index, horse in enumerate(self.lanes, 1):
            if horse is not None:
                yield index, horse

    @property
    def horses(self) -> list[Horse]:
        return [horse for _, horse in self.occupied_lanes()]

    def is_race_won(self, horse: Horse) -> bool:
        """Has this horse reached or passed the finish?"""
        return horse.distance_travelled >= self.track_length

    def all_fallen(self) -> bool:
        return all_fallen(self.lanes)

    def leader(self) -> tuple[int, Horse] | None:
        """First horse in lane order that has crossed the finish, if any."""
        for lane_number, horse in self.occupied_lanes():
            if self.is_race_won(horse):
                return lane_number, horse
        return None

    def reset(self) -> None:
        """Send every horse back to the start and reopen the race.

        Confidence is kept, so a horse that fell carries its penalty into
        the next attempt.
        """
        for horse in self.horses:
            horse.go_back_to_start()
        self.frozen = [0] * self.lane_count
        self.tick = 0
        self.status = RaceStatus.RUNNING

    def configuration(self) -> dict[str, Any]:
        """Run-independent fields: config plus each lane's name, symbol and confidence."""
        return {
            "config": self.config.model_dump(mode="json"),
            "lanes": [
                horse.model_dump(include={"name", "symbol", "confidence"})
                if horse is not None else None
                for horse in self.lanes
            ],
        }
