"""Betting and Monte Carlo analysis."""

from .betting import Bet, BetOutcome, odds_board, odds_for, place_bet, settle
from .montecarlo import MonteCarloRunner, SimulationResults

__all__ = [
    "Bet",
    "BetOutcome",
    "MonteCarloRunner",
    "SimulationResults",
    "odds_board",
    "odds_for",
    "place_bet",
    "settle",
]
