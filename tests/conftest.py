"""Shared fixtures."""

import numpy as np
import pytest

from horserace.models import Horse, Race, SimulationSettings


class ScriptedRng:
    """Stands in for a numpy Generator, returning pre-set draws in order."""

    def __init__(self, draws):
        self.draws = list(draws)

    def random(self) -> float:
        if not self.draws:
            raise AssertionError("random() called more times than scripted")
        return self.draws.pop(0)


@pytest.fixture
def scripted_rng():
    return ScriptedRng


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def no_falls():
    """Settings under which no horse can ever fall."""
    return SimulationSettings(fall_coefficient=0.0)


@pytest.fixture
def two_lane_race():
    race = Race.create(track_length=5, lane_count=2)
    race.add_horse(Horse(name="Thunder", confidence=0.7), 1)
    race.add_horse(Horse(name="Lightning", confidence=0.8), 2)
    return race
