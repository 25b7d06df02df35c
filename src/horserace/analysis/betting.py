"""Fixed-odds wagers settled against a race result."""

from dataclasses import dataclass

from pydantic import BaseModel, Field

from horserace.models import Horse, Race
from horserace.simulation.race import RaceResult

# Odds are taken from confidence, which is never allowed to price at zero
MIN_PRICING_CONFIDENCE = 0.01


def odds_for(horse: Horse) -> float:
    """Decimal odds offered on a horse: 1 / confidence at race start."""
    return 1.0 / max(MIN_PRICING_CONFIDENCE, horse.confidence)


class Bet(BaseModel):
    """A stake on one lane at fixed odds."""

    lane: int = Field(..., ge=1, description="Lane number backed (1-based)")
    horse_name: str = Field(default="", description="Horse in the lane when the bet was struck")
    amount: float = Field(..., gt=0, description="Stake")
    odds: float = Field(..., ge=1.0, description="Decimal odds locked in at placement")

    @property
    def potential_payout(self) -> float:
        return self.amount * self.odds


@dataclass
class BetOutcome:
    """Settled bet."""

    bet: Bet
    won: bool
    payout: float

    @property
    def net(self) -> float:
        """Profit (positive) or loss (negative) on the stake."""
        return self.payout - self.bet.amount


def odds_board(race: Race) -> dict[int, float]:
    """Current odds for every occupied lane."""
    return {lane: odds_for(horse) for lane, horse in race.occupied_lanes()}


def place_bet(race: Race, lane: int, amount: float) -> Bet:
    """Strike a bet on a lane at the horse's current odds.

    Raises:
        ValueError: if the lane is empty or out of range
        pydantic.ValidationError: if the amount is not positive
    """
    horse = race.horse_in_lane(lane)
    if horse is None:
        raise ValueError(f"No horse in lane {lane}")
    return Bet(lane=lane, horse_name=horse.name, amount=amount, odds=odds_for(horse))


def settle(bet: Bet, result: RaceResult) -> BetOutcome:
    """Pay out amount * odds if the backed lane won, otherwise nothing."""
    won = result.has_winner and result.winner_lane == bet.lane
    return BetOutcome(bet=bet, won=won, payout=bet.potential_payout if won else 0.0)
