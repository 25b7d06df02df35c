"""Read-only views of race state for renderers and results."""

from dataclasses import dataclass

from horserace.models import Race, RaceStatus, Terrain


@dataclass(frozen=True)
class LaneSnapshot:
    """State of one occupied lane at a point in time."""

    lane: int
    name: str
    symbol: str
    distance_travelled: int
    fallen: bool
    confidence: float
    frozen_ticks: int = 0


@dataclass(frozen=True)
class RaceSnapshot:
    """Frame of a race: everything a renderer needs, nothing it can mutate."""

    tick: int
    track_length: int
    terrain: Terrain
    status: RaceStatus
    lanes: tuple[LaneSnapshot, ...]

    @classmethod
    def from_race(cls, race: Race) -> "RaceSnapshot":
        return cls(
            tick=race.tick,
            track_length=race.track_length,
            terrain=race.config.terrain,
            status=race.status,
            lanes=tuple(
                LaneSnapshot(
                    lane=lane,
                    name=horse.name,
                    symbol=horse.symbol,
                    distance_travelled=horse.distance_travelled,
                    fallen=horse.fallen,
                    confidence=horse.confidence,
                    frozen_ticks=race.frozen[lane - 1],
                )
                for lane, horse in race.occupied_lanes()
            ),
        )
