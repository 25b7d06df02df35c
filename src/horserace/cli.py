"""Interactive console horse race.

Usage:
    horserace [--length N] [--lanes N] [--terrain TERRAIN] [--seed SEED]

Examples:
    horserace --length 30 --lanes 4
    horserace --length 20 --lanes 3 --terrain icy --bet 2 --stake 50
    horserace --length 25 --lanes 6 --simulations 1000
"""

import argparse
import logging
import sys

import numpy as np

from horserace.analysis import MonteCarloRunner, odds_board, place_bet, settle
from horserace.models import MAX_LANES, MIN_LANES, Horse, Race, SimulationSettings, Terrain
from horserace.output import ConsoleOutput, ConsoleRenderer, load_race, save_race
from horserace.simulation import RaceSimulator

logger = logging.getLogger(__name__)

DEFAULT_LANES = 4

# (name, confidence) for lanes 1-6
DEFAULT_ROSTER = [
    ("Thunder", 0.7),
    ("Lightning", 0.8),
    ("Storm", 0.6),
    ("Blaze", 0.75),
    ("Comet", 0.85),
    ("Rocket", 0.65),
]


def build_race(track_length: int, lane_count: int, terrain: Terrain = Terrain.NORMAL) -> Race:
    """Create a race with the default roster in every lane."""
    race = Race.create(track_length, lane_count, terrain)
    for lane in range(1, lane_count + 1):
        name, confidence = DEFAULT_ROSTER[(lane - 1) % len(DEFAULT_ROSTER)]
        race.add_horse(Horse(name=name, confidence=confidence), lane)
    return race


def prompt_int(prompt: str) -> int:
    """Ask until the user types a whole number."""
    while True:
        answer = input(prompt).strip()
        try:
            return int(answer)
        except ValueError:
            print(f"'{answer}' is not a whole number.")


def ask_again() -> bool:
    try:
        answer = input("Play again with the same horses? (y/n): ").strip()
    except EOFError:
        return False
    return answer[:1].lower() == "y"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulate a horse race in the terminal")
    parser.add_argument("--length", type=int, help="Track length (prompted if omitted)")
    parser.add_argument("--lanes", type=int, help="Number of lanes, 2-6 (prompted if omitted)")
    parser.add_argument(
        "--terrain",
        choices=[t.value for t in Terrain],
        default=Terrain.NORMAL.value,
        help="Track surface (default: normal)",
    )
    parser.add_argument("--seed", type=int, help="Random seed for a reproducible race")
    parser.add_argument(
        "--delay",
        type=float,
        default=0.1,
        help="Seconds between frames (default: 0.1)",
    )
    parser.add_argument(
        "--no-clear",
        action="store_false",
        dest="clear",
        help="Print frames one after another instead of redrawing",
    )
    parser.add_argument(
        "--fall-coefficient",
        type=float,
        default=0.1,
        help="Fall probability per tick is this times confidence squared (default: 0.1)",
    )
    parser.add_argument("--max-ticks", type=int, help="Stop a race after this many ticks")
    parser.add_argument("--bet", type=int, metavar="LANE", help="Bet on a lane before each race")
    parser.add_argument("--stake", type=float, default=100.0, help="Bet amount (default: 100)")
    parser.add_argument("--save", metavar="PATH", help="Save the race setup as JSON")
    parser.add_argument("--load", metavar="PATH", help="Load a race setup saved with --save")
    parser.add_argument(
        "--simulations",
        "-n",
        type=int,
        help="Run N silent races and print win probabilities instead",
    )
    parser.add_argument(
        "--no-parallel",
        action="store_false",
        dest="parallel",
        help="Run --simulations in a single process",
    )
    parser.add_argument("--once", action="store_true", help="Do not offer a replay")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log race events")
    args = parser.parse_args(argv)
    if args.simulations is not None:
        if args.simulations <= 0:
            parser.error("--simulations must be a positive number of races")
        if args.bet is not None:
            parser.error("--bet cannot be combined with --simulations")
    return args


def setup_race(args: argparse.Namespace) -> Race:
    if args.load:
        race = load_race(args.load)
        race.reset()
        print(f"Loaded {race.lane_count}-lane race over {race.track_length} from {args.load}")
        return race

    length = args.length if args.length is not None else prompt_int("Enter the length of the track: ")
    lanes = args.lanes if args.lanes is not None else prompt_int(f"Enter number of lanes ({MIN_LANES}-{MAX_LANES}): ")
    if lanes < MIN_LANES or lanes > MAX_LANES:
        print(f"Invalid number of lanes. Using default of {DEFAULT_LANES}.")
        lanes = DEFAULT_LANES

    return build_race(length, lanes, Terrain(args.terrain))


def run_races(race: Race, simulator: RaceSimulator, args: argparse.Namespace) -> None:
    renderer = ConsoleRenderer(delay=args.delay, clear=args.clear)
    names = {lane: horse.name for lane, horse in race.occupied_lanes()}

    while True:
        bet = None
        if args.bet is not None:
            ConsoleOutput.print_odds_board(odds_board(race), names)
            bet = place_bet(race, args.bet, args.stake)
            print(f"Bet {bet.amount:.2f} on {bet.horse_name} at {bet.odds:.2f}x")

        result = simulator.run_to_completion(race, on_tick=renderer.render)
        ConsoleOutput.print_race_result(result)
        ConsoleOutput.print_standings(result)
        if bet is not None:
            ConsoleOutput.print_bet_outcome(settle(bet, result))

        if args.once or not ask_again():
            return
        print("\n--- Restarting race! ---\n")


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        race = setup_race(args)
        if args.save:
            path = save_race(race, args.save)
            print(f"Saved race setup to {path}")

        settings = SimulationSettings(
            fall_coefficient=args.fall_coefficient,
            max_ticks=args.max_ticks,
        )

        if args.simulations is not None:
            runner = MonteCarloRunner(race, settings=settings, seed=args.seed)
            results = runner.run(num_simulations=args.simulations, parallel=args.parallel)
            ConsoleOutput.print_monte_carlo_summary(results)
            return 0

        simulator = RaceSimulator(settings=settings, rng=np.random.default_rng(args.seed))
        run_races(race, simulator, args)
    except (ValueError, OSError) as e:
        logger.debug("Race aborted", exc_info=True)
        print(f"Error: {e}")
        return 1
    except (EOFError, KeyboardInterrupt):
        print()
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
