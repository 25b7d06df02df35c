"""Console output formatting."""

import sys
import time
from typing import Protocol, TextIO

from horserace.analysis.betting import BetOutcome
from horserace.analysis.montecarlo import SimulationResults
from horserace.simulation.race import RaceOutcome, RaceResult
from horserace.simulation.snapshot import LaneSnapshot, RaceSnapshot

CLEAR_SCREEN = "\033[H\033[2J"
FALLEN_GLYPH = "X"


class Renderer(Protocol):
    """Draws a frame of the race. Must not mutate simulation state."""

    def render(self, snapshot: RaceSnapshot) -> None:
        ...


def format_lane(lane: LaneSnapshot, track_length: int) -> str:
    """One lane: the horse (or X if fallen) on a blank track, then confidence."""
    position = min(lane.distance_travelled, track_length - 1)
    track = [" "] * track_length
    track[position] = FALLEN_GLYPH if lane.fallen else lane.symbol
    return f"|{''.join(track)}| {lane.confidence:.2f}"


def format_frame(snapshot: RaceSnapshot) -> str:
    """Whole track with top and bottom borders."""
    border = "=" * (snapshot.track_length + 2)
    lines = [border]
    lines.extend(format_lane(lane, snapshot.track_length) for lane in snapshot.lanes)
    lines.append(border)
    return "\n".join(lines)


class ConsoleRenderer:
    """Redraws the race in place on a terminal after every tick."""

    def __init__(
        self,
        delay: float = 0.1,
        clear: bool = True,
        stream: TextIO | None = None,
    ):
        """Initialize console renderer.

        Args:
            delay: Seconds to pause after each frame so the race can be watched
            clear: Clear the screen with ANSI codes before each frame
            stream: Output stream (stdout if None)
        """
        self.delay = delay
        self.clear = clear
        self.stream = stream

    def render(self, snapshot: RaceSnapshot) -> None:
        out = self.stream if self.stream is not None else sys.stdout
        if self.clear:
            out.write(CLEAR_SCREEN)
        out.write(format_frame(snapshot) + "\n")
        out.flush()
        if self.delay > 0:
            time.sleep(self.delay)


class ConsoleOutput:
    """Formats race results for console display."""

    @staticmethod
    def print_race_result(result: RaceResult) -> None:
        """Print the announcement for a finished race.

        Args:
            result: Result of the race attempt
        """
        print()
        if result.outcome == RaceOutcome.WON:
            print(f"And the winner is {result.winner_name}!")
        elif result.outcome == RaceOutcome.ALL_FALLEN:
            print("All horses fell!")
        else:
            print(f"Tick limit reached after {result.ticks} ticks, no winner.")

        for event in result.hazard_events:
            print(f"  tick {event.tick:>4}: {event.description}")

    @staticmethod
    def print_standings(result: RaceResult) -> None:
        """Print each lane's final state.

        Args:
            result: Result of the race attempt
        """
        print("\n" + "=" * 50)
        print(f"{'Lane':<5} {'Horse':<15} {'Distance':<9} {'Conf':<6} {'Status':<8}")
        print("-" * 50)
        for lane in result.standings:
            status = "FELL" if lane.fallen else ""
            if lane.lane == result.winner_lane:
                status = "WINNER"
            print(
                f"{lane.lane:<5} "
                f"{lane.name:<15} "
                f"{lane.distance_travelled:<9} "
                f"{lane.confidence:<6.2f} "
                f"{status:<8}"
            )
        print("=" * 50)

    @staticmethod
    def print_bet_outcome(outcome: BetOutcome) -> None:
        bet = outcome.bet
        if outcome.won:
            print(f"You won! Payout: {outcome.payout:.2f}")
        else:
            print(f"You lost your bet of {bet.amount:.2f} on {bet.horse_name or f'lane {bet.lane}'}")

    @staticmethod
    def print_odds_board(odds: dict[int, float], names: dict[int, str]) -> None:
        print("\nODDS:")
        print("-" * 30)
        for lane, price in odds.items():
            print(f"  {lane}. {names.get(lane, ''):<15} {price:5.2f}x")

    @staticmethod
    def print_monte_carlo_summary(results: SimulationResults) -> None:
        """Print Monte Carlo simulation summary.

        Args:
            results: Aggregated simulation results
        """
        print("\n" + "=" * 70)
        print(f"MONTE CARLO SIMULATION RESULTS - {results.track_length} units, {results.terrain}")
        print(f"({results.num_simulations} simulations)")
        print("=" * 70)

        print("\nWIN PROBABILITIES:")
        print("-" * 50)
        fair_odds = results.fair_odds()
        for lane, prob in results.get_win_probabilities().items():
            stats = results.lane_stats[lane]
            bar = "#" * int(prob / 2)
            odds = fair_odds[lane]
            odds_str = f"{odds:6.2f}x" if odds is not None else "     -"
            print(f"{lane}. {stats.horse_name:<15} {prob:5.1f}% {odds_str} {bar}")

        print("\nFALLS:")
        print("-" * 50)
        for lane, stats in results.lane_stats.items():
            print(
                f"{lane}. {stats.horse_name:<15} "
                f"Fell: {stats.fall_rate:5.1f}%  "
                f"Avg winning ticks: {stats.avg_winning_ticks:6.1f}"
            )

        print(f"\nNo winner: {results.no_winner_rate:.1f}% of races")
        print(f"Average race length: {results.avg_ticks:.1f} ticks")
        print("=" * 70)
