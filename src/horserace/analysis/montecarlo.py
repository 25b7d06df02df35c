"""Monte Carlo simulation runner and statistics."""

from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from horserace.models import Race, SimulationSettings
from horserace.simulation.race import RaceOutcome, RaceResult, RaceSimulator


@dataclass
class LaneStatistics:
    """Aggregated statistics for one lane across simulations."""

    lane: int
    horse_name: str
    starting_confidence: float
    wins: int = 0
    falls: int = 0
    races: int = 0
    winning_ticks: list[int] = field(default_factory=list)

    @property
    def win_rate(self) -> float:
        """Win percentage."""
        return self.wins / self.races * 100 if self.races else 0

    @property
    def fall_rate(self) -> float:
        """Fall percentage."""
        return self.falls / self.races * 100 if self.races else 0

    @property
    def avg_winning_ticks(self) -> float:
        return float(np.mean(self.winning_ticks)) if self.winning_ticks else 0.0


@dataclass
class SimulationResults:
    """Results from Monte Carlo simulation."""

    num_simulations: int
    track_length: int
    terrain: str
    lane_stats: dict[int, LaneStatistics]
    outcomes: dict[RaceOutcome, int] = field(default_factory=dict)
    race_ticks: list[int] = field(default_factory=list)

    def get_win_probabilities(self) -> dict[int, float]:
        """Get win probability (percent) for each lane, best first."""
        return {
            lane: stats.win_rate
            for lane, stats in sorted(
                self.lane_stats.items(),
                key=lambda x: x[1].wins,
                reverse=True,
            )
        }

    def fair_odds(self) -> dict[int, float | None]:
        """Decimal odds implied by the simulated win rate (None if never won)."""
        return {
            lane: (100.0 / stats.win_rate if stats.wins else None)
            for lane, stats in self.lane_stats.items()
        }

    @property
    def no_winner_rate(self) -> float:
        if not self.num_simulations:
            return 0.0
        no_winner = self.num_simulations - self.outcomes.get(RaceOutcome.WON, 0)
        return no_winner / self.num_simulations * 100

    @property
    def avg_ticks(self) -> float:
        return float(np.mean(self.race_ticks)) if self.race_ticks else 0.0


def _run_single_simulation(args: tuple) -> RaceResult:
    """Run a single race simulation (for multiprocessing).

    Args:
        args: Tuple of (race_data, settings_data, seed)

    Returns:
        RaceResult of the attempt
    """
    race_data, settings_data, seed = args

    # Reconstruct objects from serializable data
    race = Race.model_validate(race_data)
    settings = SimulationSettings.model_validate(settings_data)

    simulator = RaceSimulator(settings=settings, rng=np.random.default_rng(seed))
    return simulator.run_to_completion(race)


class MonteCarloRunner:
    """Estimates win probabilities by running a race many times."""

    def __init__(
        self,
        race: Race,
        settings: SimulationSettings | None = None,
        seed: int | None = None,
    ):
        """Initialize Monte Carlo runner.

        Args:
            race: Race whose configuration and horses are simulated. It is
                not modified; every simulation starts from a copy.
            settings: Simulation constants
            seed: Random seed for reproducibility
        """
        if not race.horses:
            raise ValueError("Cannot simulate a race with no horses")
        self.race = race
        self.settings = settings if settings is not None else SimulationSettings()
        self.base_seed = seed if seed is not None else int(np.random.default_rng().integers(0, 2**31))

    def run(
        self,
        num_simulations: int = 1000,
        parallel: bool = True,
        max_workers: int | None = None,
    ) -> SimulationResults:
        """Run Monte Carlo simulations.

        Args:
            num_simulations: Number of simulations to run
            parallel: Whether to use parallel processing
            max_workers: Maximum parallel workers (None = CPU count)

        Returns:
            SimulationResults with aggregated statistics
        """
        # Prepare serializable data for multiprocessing
        race_data = self.race.model_dump(mode="json")
        settings_data = self.settings.model_dump()

        # Generate unique seeds for each simulation
        args_list = [
            (race_data, settings_data, self.base_seed + i)
            for i in range(num_simulations)
        ]

        if parallel and num_simulations > 1:
            with ProcessPoolExecutor(max_workers=max_workers) as executor:
                results = list(executor.map(_run_single_simulation, args_list))
        else:
            results = [_run_single_simulation(args) for args in args_list]

        return self._aggregate(results)

    def _aggregate(self, results: list[RaceResult]) -> SimulationResults:
        """Aggregate statistics from all simulations."""
        lane_stats = {
            lane: LaneStatistics(
                lane=lane,
                horse_name=horse.name,
                starting_confidence=horse.confidence,
            )
            for lane, horse in self.race.occupied_lanes()
        }
        outcomes: dict[RaceOutcome, int] = {outcome: 0 for outcome in RaceOutcome}
        race_ticks: list[int] = []

        for result in results:
            outcomes[result.outcome] += 1
            race_ticks.append(result.ticks)

            for standing in result.standings:
                stats = lane_stats[standing.lane]
                stats.races += 1
                if standing.fallen:
                    stats.falls += 1

            if result.has_winner:
                winner = lane_stats[result.winner_lane]
                winner.wins += 1
                winner.winning_ticks.append(result.ticks)

        return SimulationResults(
            num_simulations=len(results),
            track_length=self.race.track_length,
            terrain=self.race.config.terrain.value,
            lane_stats=lane_stats,
            outcomes=outcomes,
            race_ticks=race_ticks,
        )

    def run_quick(self, num_simulations: int = 100) -> SimulationResults:
        """Run a quick simulation without parallelization.

        Useful for testing or when running in environments
        where multiprocessing is problematic.
        """
        return self.run(num_simulations=num_simulations, parallel=False)


def summarize(results: SimulationResults) -> dict[str, Any]:
    """Plain-data summary of a Monte Carlo run, suitable for JSON."""
    return {
        "metadata": {
            "num_simulations": results.num_simulations,
            "track_length": results.track_length,
            "terrain": results.terrain,
        },
        "outcomes": {outcome.value: count for outcome, count in results.outcomes.items()},
        "avg_ticks": results.avg_ticks,
        "win_probabilities": results.get_win_probabilities(),
        "fair_odds": results.fair_odds(),
        "lane_statistics": {
            lane: {
                "horse_name": stats.horse_name,
                "starting_confidence": stats.starting_confidence,
                "wins": stats.wins,
                "win_rate": stats.win_rate,
                "falls": stats.falls,
                "fall_rate": stats.fall_rate,
                "avg_winning_ticks": stats.avg_winning_ticks,
            }
            for lane, stats in results.lane_stats.items()
        },
    }
