"""Race simulation engine."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from horserace.models import Horse, Race, RaceStatus, SimulationSettings
from horserace.simulation.events import EventType, HazardManager, RaceEvent
from horserace.simulation.snapshot import LaneSnapshot, RaceSnapshot

logger = logging.getLogger(__name__)


class RaceOutcome(str, Enum):
    """How a race attempt ended."""

    WON = "won"
    ALL_FALLEN = "all_fallen"
    TICK_LIMIT = "tick_limit"


@dataclass
class RaceResult:
    """Final result of one race attempt."""

    outcome: RaceOutcome
    ticks: int
    winner_name: str | None = None
    winner_lane: int | None = None
    events: list[RaceEvent] = field(default_factory=list)
    standings: list[LaneSnapshot] = field(default_factory=list)  # Lane order

    @property
    def has_winner(self) -> bool:
        return self.outcome == RaceOutcome.WON

    @property
    def hazard_events(self) -> list[RaceEvent]:
        """Slips and trips, in the order they happened."""
        return [e for e in self.events if e.event_type in (EventType.SLIP, EventType.TRIP)]


class RaceSimulator:
    """Advances horses tick by tick and decides when a race is over.

    Simultaneous finishers are resolved in lane order: the lowest lane
    number that reached the finish on the deciding tick wins. This is a
    known limitation of the discrete tick model.
    """

    def __init__(
        self,
        settings: SimulationSettings | None = None,
        rng: np.random.Generator | None = None,
    ):
        """Initialize race simulator.

        Args:
            settings: Probability constants (console defaults if None)
            rng: Random number generator
        """
        self.settings = settings if settings is not None else SimulationSettings()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.hazard_manager: HazardManager | None = None

    def advance_tick(self, horse: Horse, speed_factor: float = 1.0) -> bool:
        """Apply one tick of the movement and fall rule to a horse.

        Both draws are made for every standing horse, advance first, so a
        seeded generator reproduces the same sequence.

        Args:
            horse: Horse to move (skipped entirely if fallen)
            speed_factor: Terrain scaling for the periodic confidence nudge

        Returns:
            True if the horse fell this tick
        """
        if horse.fallen:
            return False

        settings = self.settings

        if self.rng.random() < horse.confidence:
            horse.move_forward()
            if settings.advance_confidence_boost:
                horse.increase_confidence(settings.advance_confidence_boost)
            if (
                settings.confidence_nudge
                and horse.distance_travelled % settings.nudge_interval == 0
            ):
                horse.increase_confidence(settings.confidence_nudge * speed_factor)

        fall_probability = settings.fall_coefficient * horse.confidence ** 2
        if self.rng.random() < fall_probability:
            horse.fall(settings.fall_confidence_penalty)
            return True

        return False

    def step(self, race: Race) -> list[RaceEvent]:
        """Run one tick over every occupied lane, in lane order.

        Safe to drive from a timer: does nothing once the race is finished.

        Returns:
            Events that occurred this tick
        """
        if race.is_finished:
            return []

        hazards = self._hazards_for(race)
        profile = race.config.terrain_profile
        race.tick += 1
        tick_events: list[RaceEvent] = []

        for lane, horse in race.occupied_lanes():
            index = lane - 1

            # Frozen horses sit the tick out entirely
            if race.frozen[index] > 0:
                race.frozen[index] -= 1
                continue

            if horse.fallen:
                continue

            if self.advance_tick(horse, profile.speed_factor):
                tick_events.append(hazards.record(RaceEvent(
                    event_type=EventType.FALL,
                    tick=race.tick,
                    lane=lane,
                    horse_name=horse.name,
                    description=f"{horse.name} fell!",
                )))
                continue

            if self.settings.terrain_hazards:
                hazard = hazards.check_hazard(horse, lane, race.tick)
                if hazard is not None:
                    race.frozen[index] = profile.frozen_ticks
                    tick_events.append(hazard)

        finish = self._update_status(race)
        if finish is not None:
            tick_events.append(hazards.record(finish))

        for event in tick_events:
            logger.debug("Tick %d: %s", event.tick, event.description)

        return tick_events

    def run_to_completion(
        self,
        race: Race,
        on_tick: Callable[[RaceSnapshot], None] | None = None,
        from_start: bool = True,
    ) -> RaceResult:
        """Run the race until a horse wins, every horse falls, or the tick limit.

        Args:
            race: Race with at least one horse
            on_tick: Called with a snapshot after every tick (e.g. a renderer)
            from_start: Reset horses to the start first. Pass False to continue
                from the current state; the event log still starts empty.

        Returns:
            RaceResult for the attempt

        Raises:
            ValueError: if no lane is occupied
        """
        if not race.horses:
            raise ValueError("Cannot run a race with no horses")

        if from_start:
            self.reset(race)
        else:
            self._hazards_for(race).reset()
            self._update_status(race)

        while not race.is_finished:
            self.step(race)
            if on_tick is not None:
                on_tick(RaceSnapshot.from_race(race))

        result = self._build_result(race)
        if result.has_winner:
            logger.info(
                "%s won in lane %d after %d ticks",
                result.winner_name, result.winner_lane, result.ticks,
            )
        else:
            logger.info(
                "Race ended without a winner (%s) after %d ticks",
                result.outcome.value, result.ticks,
            )
        return result

    def reset(self, race: Race) -> None:
        """Return a race to the running state with every horse at the start."""
        race.reset()
        self._hazards_for(race).reset()

    def _hazards_for(self, race: Race) -> HazardManager:
        """Get the hazard manager for the race's terrain, creating it if needed."""
        profile = race.config.terrain_profile
        if self.hazard_manager is None or self.hazard_manager.terrain != profile:
            self.hazard_manager = HazardManager(
                terrain=profile,
                rng=self.rng,
                confidence_floor=self.settings.hazard_confidence_floor,
            )
        return self.hazard_manager

    def _update_status(self, race: Race) -> RaceEvent | None:
        """Finish the race if a termination condition holds.

        Returns:
            A finish event when a horse has won
        """
        leader = race.leader()
        if leader is not None:
            race.status = RaceStatus.FINISHED
            lane, horse = leader
            return RaceEvent(
                event_type=EventType.FINISH,
                tick=race.tick,
                lane=lane,
                horse_name=horse.name,
                description=f"{horse.name} crossed the finish",
            )

        if race.all_fallen():
            race.status = RaceStatus.FINISHED
        elif self.settings.max_ticks is not None and race.tick >= self.settings.max_ticks:
            race.status = RaceStatus.FINISHED

        return None

    def _build_result(self, race: Race) -> RaceResult:
        snapshot = RaceSnapshot.from_race(race)
        events = list(self.hazard_manager.events) if self.hazard_manager else []

        leader = race.leader()
        if leader is not None:
            lane, horse = leader
            return RaceResult(
                outcome=RaceOutcome.WON,
                ticks=race.tick,
                winner_name=horse.name,
                winner_lane=lane,
                events=events,
                standings=list(snapshot.lanes),
            )

        outcome = RaceOutcome.ALL_FALLEN if race.all_fallen() else RaceOutcome.TICK_LIMIT
        return RaceResult(
            outcome=outcome,
            ticks=race.tick,
            events=events,
            standings=list(snapshot.lanes),
        )
