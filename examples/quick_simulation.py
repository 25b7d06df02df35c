#!/usr/bin/env python3
"""Quick simulation example.

Runs one race on a muddy track with a bet on the favourite, then
estimates each horse's win probability with a Monte Carlo run.

Usage:
    python examples/quick_simulation.py
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import numpy as np

from horserace.analysis import MonteCarloRunner, odds_board, place_bet, settle
from horserace.models import Horse, Race, SimulationSettings, Terrain
from horserace.output import ConsoleOutput, ConsoleRenderer, Exporter, save_race
from horserace.simulation import RaceSimulator


def create_field() -> Race:
    """Create a five-lane race with a mixed field."""
    field_data = [
        ("Thunder", 0.70),
        ("Lightning", 0.80),
        ("Storm", 0.60),
        ("Blaze", 0.75),
        ("Comet", 0.85),
    ]

    race = Race.create(track_length=30, lane_count=5, terrain=Terrain.MUDDY)
    for lane, (name, confidence) in enumerate(field_data, 1):
        race.add_horse(Horse(name=name, confidence=confidence), lane)
    return race


def main():
    print("Horse Race Simulation - Quick Example")
    print("=" * 50)

    race = create_field()
    # Gentler falls and a small confidence lift on good going
    settings = SimulationSettings(
        fall_coefficient=0.02,
        confidence_nudge=0.02,
        max_ticks=1000,
    )

    names = {lane: horse.name for lane, horse in race.occupied_lanes()}
    board = odds_board(race)
    ConsoleOutput.print_odds_board(board, names)

    favourite = min(board, key=board.get)
    bet = place_bet(race, favourite, 100)
    print(f"\nBacking {bet.horse_name} with {bet.amount:.0f} at {bet.odds:.2f}x")

    # Single race, frames printed one after another
    rng = np.random.default_rng(42)
    simulator = RaceSimulator(settings=settings, rng=rng)
    renderer = ConsoleRenderer(delay=0.0, clear=False)
    result = simulator.run_to_completion(race, on_tick=renderer.render)

    ConsoleOutput.print_race_result(result)
    ConsoleOutput.print_standings(result)
    ConsoleOutput.print_bet_outcome(settle(bet, result))

    # Now run Monte Carlo simulation from the post-race confidences
    print("\n" + "=" * 50)
    print("Running Monte Carlo simulation (500 races)...")
    print("=" * 50)

    runner = MonteCarloRunner(race, settings=settings, seed=123)
    results = runner.run_quick(num_simulations=500)
    ConsoleOutput.print_monte_carlo_summary(results)

    print("\nExporting results...")
    exporter = Exporter(output_dir="output")
    files = exporter.export_all(results, prefix="muddy_quick")
    files["race_json"] = save_race(race, Path("output") / "muddy_quick_race.json")
    for fmt, path in files.items():
        print(f"  {fmt}: {path}")

    print("\nDone!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
