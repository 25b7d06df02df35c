"""Tests for the race simulation engine."""

import numpy as np
import pytest

from horserace.models import Horse, Race, RaceStatus, SimulationSettings, Terrain
from horserace.simulation import EventType, RaceOutcome, RaceSimulator, RaceSnapshot


def _race(track_length, *confidences, lane_count=None, terrain=Terrain.NORMAL):
    race = Race.create(
        track_length=track_length,
        lane_count=lane_count or max(2, len(confidences)),
        terrain=terrain,
    )
    for lane, confidence in enumerate(confidences, 1):
        race.add_horse(Horse(name=f"Horse{lane}", confidence=confidence), lane)
    return race


class TestAdvanceTick:
    def test_moves_when_draw_below_confidence(self, scripted_rng):
        horse = Horse(name="Storm", confidence=0.6)
        sim = RaceSimulator(rng=scripted_rng([0.5, 0.99]))

        fell = sim.advance_tick(horse)

        assert not fell
        assert horse.distance_travelled == 1
        assert horse.confidence == pytest.approx(0.6)

    def test_stays_when_draw_at_or_above_confidence(self, scripted_rng):
        horse = Horse(name="Storm", confidence=0.6)
        sim = RaceSimulator(rng=scripted_rng([0.6, 0.99]))

        sim.advance_tick(horse)

        assert horse.distance_travelled == 0

    def test_fall_uses_confidence_squared(self, scripted_rng):
        # 0.1 * 0.6**2 = 0.036
        just_under = Horse(name="A", confidence=0.6)
        just_over = Horse(name="B", confidence=0.6)
        sim = RaceSimulator(rng=scripted_rng([0.9, 0.0359, 0.9, 0.0361]))

        assert sim.advance_tick(just_under)
        assert not sim.advance_tick(just_over)
        assert just_under.fallen
        assert just_under.confidence == pytest.approx(0.5)
        assert not just_over.fallen

    def test_fall_draw_made_even_after_advancing(self, scripted_rng):
        horse = Horse(name="Storm", confidence=1.0)
        sim = RaceSimulator(rng=scripted_rng([0.0, 0.05]))

        assert sim.advance_tick(horse)
        assert horse.distance_travelled == 1
        assert horse.fallen
        assert horse.confidence == pytest.approx(0.9)

    def test_fallen_horse_skipped_without_drawing(self, scripted_rng):
        horse = Horse(name="Storm", confidence=0.6, fallen=True, distance_travelled=3)
        sim = RaceSimulator(rng=scripted_rng([]))

        assert not sim.advance_tick(horse)
        assert horse.distance_travelled == 3
        assert horse.confidence == pytest.approx(0.6)

    def test_zero_confidence_never_moves_or_falls(self, rng):
        horse = Horse(name="Statue", confidence=0.0)
        sim = RaceSimulator(rng=rng)

        for _ in range(2000):
            sim.advance_tick(horse)

        assert horse.distance_travelled == 0
        assert not horse.fallen

    def test_full_confidence_without_falls_always_moves(self, rng, no_falls):
        horse = Horse(name="Rocket", confidence=1.0)
        sim = RaceSimulator(settings=no_falls, rng=rng)

        for _ in range(500):
            sim.advance_tick(horse)

        assert horse.distance_travelled == 500
        assert not horse.fallen

    def test_advance_boost(self, scripted_rng):
        horse = Horse(name="Blaze", confidence=0.5)
        settings = SimulationSettings(fall_coefficient=0.0, advance_confidence_boost=0.01)
        sim = RaceSimulator(settings=settings, rng=scripted_rng([0.1, 0.9, 0.9, 0.9]))

        sim.advance_tick(horse)
        sim.advance_tick(horse)

        assert horse.distance_travelled == 1
        assert horse.confidence == pytest.approx(0.51)

    def test_nudge_every_interval_scaled_by_terrain(self, scripted_rng):
        horse = Horse(name="Blaze", confidence=0.5)
        settings = SimulationSettings(
            fall_coefficient=0.0,
            confidence_nudge=0.1,
            nudge_interval=2,
        )
        sim = RaceSimulator(settings=settings, rng=scripted_rng([0.0, 0.9, 0.0, 0.9]))

        sim.advance_tick(horse, speed_factor=0.5)
        assert horse.confidence == pytest.approx(0.5)
        sim.advance_tick(horse, speed_factor=0.5)
        assert horse.confidence == pytest.approx(0.55)


class TestRunToCompletion:
    def test_single_horse_finishes_in_track_length_ticks(self, rng, no_falls):
        # Lane 2 left empty: a race needs at least two lanes
        race = _race(5, 1.0)
        sim = RaceSimulator(settings=no_falls, rng=rng)

        result = sim.run_to_completion(race)

        assert result.outcome == RaceOutcome.WON
        assert result.ticks == 5
        assert result.winner_name == "Horse1"
        assert result.winner_lane == 1
        assert race.status == RaceStatus.FINISHED

    @pytest.mark.parametrize("track_length", [1, 7, 40])
    def test_perfect_horse_takes_exactly_track_length(self, rng, no_falls, track_length):
        race = _race(track_length, 1.0, 0.0)
        result = RaceSimulator(settings=no_falls, rng=rng).run_to_completion(race)
        assert result.ticks == track_length
        assert result.winner_lane == 1

    def test_tie_goes_to_lower_lane(self, rng, no_falls):
        race = _race(5, 1.0, 1.0)
        result = RaceSimulator(settings=no_falls, rng=rng).run_to_completion(race)

        assert result.ticks == 5
        assert result.winner_lane == 1
        assert all(s.distance_travelled == 5 for s in result.standings)

    def test_tie_in_later_lanes(self, rng, no_falls):
        race = _race(5, 0.0, 1.0, 1.0)
        result = RaceSimulator(settings=no_falls, rng=rng).run_to_completion(race)
        assert result.winner_lane == 2

    def test_prefallen_horses_end_race_immediately(self, two_lane_race, rng):
        for horse in two_lane_race.horses:
            horse.fallen = True

        result = RaceSimulator(rng=rng).run_to_completion(two_lane_race, from_start=False)

        assert result.outcome == RaceOutcome.ALL_FALLEN
        assert not result.has_winner
        assert result.winner_name is None
        assert result.ticks == 0

    def test_everyone_falls(self):
        race = _race(5, 1.0, 1.0)
        settings = SimulationSettings(fall_coefficient=1.0)
        result = RaceSimulator(settings=settings, rng=np.random.default_rng(3)).run_to_completion(race)

        assert result.outcome == RaceOutcome.ALL_FALLEN
        assert result.ticks == 1
        assert len([e for e in result.events if e.event_type == EventType.FALL]) == 2

    def test_no_horses_rejected(self, rng):
        race = Race.create(track_length=5, lane_count=2)
        with pytest.raises(ValueError):
            RaceSimulator(rng=rng).run_to_completion(race)

    def test_tick_limit_stops_stalled_race(self, rng):
        race = _race(5, 0.0, 0.0)
        settings = SimulationSettings(max_ticks=25)
        result = RaceSimulator(settings=settings, rng=rng).run_to_completion(race)

        assert result.outcome == RaceOutcome.TICK_LIMIT
        assert result.ticks == 25
        assert not result.has_winner

    def test_on_tick_receives_every_frame(self, rng, no_falls):
        race = _race(4, 1.0, 0.5)
        frames: list[RaceSnapshot] = []

        result = RaceSimulator(settings=no_falls, rng=rng).run_to_completion(race, on_tick=frames.append)

        assert len(frames) == result.ticks == 4
        assert [f.tick for f in frames] == [1, 2, 3, 4]
        assert [f.lanes[0].distance_travelled for f in frames] == [1, 2, 3, 4]
        assert frames[-1].status == RaceStatus.FINISHED

    def test_finish_event_recorded(self, rng, no_falls):
        race = _race(3, 1.0, 0.0)
        result = RaceSimulator(settings=no_falls, rng=rng).run_to_completion(race)
        finish = [e for e in result.events if e.event_type == EventType.FINISH]
        assert len(finish) == 1
        assert finish[0].lane == 1
        assert finish[0].tick == 3

    def test_confidence_persists_across_rerun(self):
        race = _race(5, 1.0, 1.0)
        settings = SimulationSettings(fall_coefficient=1.0)
        sim = RaceSimulator(settings=settings, rng=np.random.default_rng(0))

        sim.run_to_completion(race)
        assert [h.confidence for h in race.horses] == pytest.approx([0.9, 0.9])

        race.reset()
        assert all(h.distance_travelled == 0 and not h.fallen for h in race.horses)
        assert [h.confidence for h in race.horses] == pytest.approx([0.9, 0.9])

        sim.run_to_completion(race)
        for horse in race.horses:
            assert horse.confidence == pytest.approx(0.8 if horse.fallen else 0.9)

    def test_same_seed_same_race(self, two_lane_race):
        other = two_lane_race.model_copy(deep=True)

        first = RaceSimulator(rng=np.random.default_rng(99)).run_to_completion(two_lane_race)
        second = RaceSimulator(rng=np.random.default_rng(99)).run_to_completion(other)

        assert first.outcome == second.outcome
        assert first.ticks == second.ticks
        assert first.winner_lane == second.winner_lane
        assert first.standings == second.standings


class TestStep:
    def test_step_is_noop_once_finished(self, rng, no_falls):
        race = _race(2, 1.0, 0.0)
        sim = RaceSimulator(settings=no_falls, rng=rng)
        sim.run_to_completion(race)

        assert sim.step(race) == []
        assert race.tick == 2

    def test_reset_reopens_finished_race(self, rng, no_falls):
        race = _race(2, 1.0, 0.0)
        sim = RaceSimulator(settings=no_falls, rng=rng)
        sim.run_to_completion(race)

        sim.reset(race)

        assert race.status == RaceStatus.RUNNING
        assert race.tick == 0
        assert sim.hazard_manager.events == []

    def test_icy_slip_freezes_lane(self, scripted_rng, no_falls):
        race = _race(100, 1.0, lane_count=2, terrain=Terrain.ICY)
        # advance, fall check, hazard check (0.001 < 0.005 slips)
        sim = RaceSimulator(settings=no_falls, rng=scripted_rng([0.0, 0.5, 0.001]))

        events = sim.step(race)

        horse = race.horse_in_lane(1)
        assert [e.event_type for e in events] == [EventType.SLIP]
        assert events[0].description == "Horse1 slipped on the ice!"
        assert horse.confidence == pytest.approx(0.8)
        assert race.frozen[0] == 5

        # Frozen ticks consume no draws
        for _ in range(5):
            assert sim.step(race) == []
        assert race.frozen[0] == 0
        assert horse.distance_travelled == 1

    def test_hazard_respects_confidence_floor(self, scripted_rng, no_falls):
        race = _race(100, 0.1, lane_count=2, terrain=Terrain.MUDDY)
        sim = RaceSimulator(settings=no_falls, rng=scripted_rng([0.5, 0.5, 0.0]))

        events = sim.step(race)

        assert events[0].event_type == EventType.TRIP
        assert race.horse_in_lane(1).confidence == pytest.approx(0.01)

    def test_hazards_can_be_disabled(self, scripted_rng):
        race = _race(100, 1.0, lane_count=2, terrain=Terrain.ICY)
        settings = SimulationSettings(fall_coefficient=0.0, terrain_hazards=False)
        sim = RaceSimulator(settings=settings, rng=scripted_rng([0.0, 0.5]))

        assert sim.step(race) == []
        assert race.frozen == [0, 0]

    def test_normal_terrain_never_rolls_hazard(self, scripted_rng, no_falls):
        race = _race(100, 1.0, 1.0)
        sim = RaceSimulator(settings=no_falls, rng=scripted_rng([0.0, 0.5, 0.0, 0.5]))
        sim.step(race)
        assert [h.distance_travelled for h in race.horses] == [1, 1]

    @pytest.mark.parametrize("terrain", [Terrain.MUDDY, Terrain.ICY])
    def test_zero_confidence_field_never_moves_on_rough_terrain(self, terrain):
        race = _race(5, 0.0, 0.0, terrain=terrain)
        settings = SimulationSettings(max_ticks=5000)

        result = RaceSimulator(settings=settings, rng=np.random.default_rng(7)).run_to_completion(race)

        assert result.outcome == RaceOutcome.TICK_LIMIT
        assert result.hazard_events
        assert [h.confidence for h in race.horses] == [0.0, 0.0]
        assert [h.distance_travelled for h in race.horses] == [0, 0]

    def test_hazard_below_floor_keeps_confidence(self, scripted_rng, no_falls):
        race = _race(100, 0.005, lane_count=2, terrain=Terrain.ICY)
        sim = RaceSimulator(settings=no_falls, rng=scripted_rng([0.5, 0.5, 0.0]))

        events = sim.step(race)

        assert events[0].event_type == EventType.SLIP
        assert race.horse_in_lane(1).confidence == pytest.approx(0.005)

    def test_continued_run_reports_only_its_own_events(self, rng):
        race = _race(5, 1.0, 1.0)
        sim = RaceSimulator(settings=SimulationSettings(fall_coefficient=1.0), rng=rng)
        first = sim.run_to_completion(race)
        assert len(first.events) == 2

        result = sim.run_to_completion(race, from_start=False)

        assert result.outcome == RaceOutcome.ALL_FALLEN
        assert result.events == []
