"""
Tests for simulation engine, scenario and body components.
"""
import math
from dataclasses import fields

import pytest

from kepler_sim.core.constants import M_EARTH_KG, M_SUN_KG
from kepler_sim.core.fixed_point import FixedPoint
from kepler_sim.core.frames import ZERO_VECTOR, norm
from kepler_sim.objects.body import Body
from kepler_sim.physics.orbit import Orbit
from kepler_sim.simulation.engine import Engine, SimulationLog
from kepler_sim.simulation.scenario import Scenario
from kepler_sim.simulation.systems.state_recorder import StateRecorderSystem

EARTH_MASS = FixedPoint.from_int(M_EARTH_KG)
SOL = FixedPoint.from_int(M_SUN_KG)


@pytest.fixture
def sample_body():
    return Body(
        body_id="LUNA",
        name="Moon",
        orbit=Orbit.MOON,
        parent_mass_kg=EARTH_MASS,
    )


@pytest.fixture
def leo_body():
    return Body(
        body_id="LEO-1",
        name="Low orbit",
        orbit=Orbit.circular(FixedPoint.from_int(7_000), ZERO_VECTOR),
        parent_mass_kg=EARTH_MASS,
    )


class TestScenario:
    def test_scenario_creation(self):
        scenario = Scenario(name="Test Scenario")
        assert scenario.name == "Test Scenario"
        assert len(scenario.bodies) == 0

    def test_add_body(self, sample_body):
        scenario = Scenario(name="Test")
        scenario.add_body(sample_body)

        assert "LUNA" in scenario.bodies
        assert scenario.body_list() == [sample_body]

    def test_duplicate_body_rejected(self, sample_body):
        scenario = Scenario(name="Test")
        scenario.add_body(sample_body)
        with pytest.raises(ValueError, match="Duplicate body ID: LUNA"):
            scenario.add_body(sample_body)


class TestBody:
    def test_first_prediction_fills_continuation(self, sample_body):
        t = FixedPoint.from_int(86_400)
        angle = sample_body.angle_at(t)
        assert sample_body.last_t_s == t
        assert sample_body.last_angle_rad == angle

    def test_forward_steps_match_direct_prediction(self, sample_body):
        for day in range(1, 15):
            sample_body.angle_at(FixedPoint.from_int(day * 86_400))
        t = FixedPoint.from_int(15 * 86_400)
        stepped = sample_body.angle_at(t)
        direct = Orbit.MOON.predict(EARTH_MASS, t)
        d = (stepped - direct) % math.tau
        assert min(d, math.tau - d) < 1e-3

    def test_going_back_restarts_from_epoch(self, sample_body):
        sample_body.angle_at(FixedPoint.from_int(500_000))
        t = FixedPoint.from_int(100_000)
        assert sample_body.angle_at(t) == Orbit.MOON.predict(EARTH_MASS, t)

    def test_reset_clears_continuation(self, sample_body):
        sample_body.angle_at(FixedPoint.from_int(1_000))
        sample_body.reset()
        assert sample_body.last_t_s is None
        assert sample_body.last_angle_rad is None

    def test_state_queries(self, leo_body):
        t = FixedPoint.from_int(600)
        assert leo_body.distance_at(t) == FixedPoint.from_int(7_000)
        assert leo_body.speed_at(t).to_float() == pytest.approx(7.546, rel=1e-3)
        assert norm(leo_body.position_at(t)) == pytest.approx(7_000.0)


class TestSimulationLog:
    def test_log_holds_only_recorded_series(self):
        assert [f.name for f in fields(SimulationLog)] == ["angles_rad", "positions_km"]

    def test_record_angle(self):
        log = SimulationLog()
        log.record_angle("B1", FixedPoint.from_int(0), 0.5)
        log.record_angle("B1", FixedPoint.from_int(10), 0.6)
        assert log.angles_rad["B1"] == [(FixedPoint.from_int(0), 0.5), (FixedPoint.from_int(10), 0.6)]

    def test_record_position(self):
        log = SimulationLog()
        log.record_position("B1", FixedPoint.from_int(0), (1.0, 2.0, 3.0))
        assert log.positions_km["B1"] == [(FixedPoint.from_int(0), (1.0, 2.0, 3.0))]


class TestEngine:
    def test_engine_rejects_zero_dt(self):
        engine = Engine(dt_s=FixedPoint(0))
        with pytest.raises(ValueError, match="dt_s must be positive"):
            engine.run(Scenario(name="Test"), FixedPoint(0), FixedPoint.from_int(10))

    def test_engine_rejects_reversed_time(self):
        engine = Engine(dt_s=FixedPoint.from_int(1))
        with pytest.raises(ValueError, match="t_end_s must be >= t_start_s"):
            engine.run(Scenario(name="Test"), FixedPoint.from_int(10), FixedPoint.from_int(5))

    def test_engine_tick_count_inclusive_end(self, leo_body):
        scenario = Scenario(name="Test")
        scenario.add_body(leo_body)
        engine = Engine(dt_s=FixedPoint.from_int(60), systems=[StateRecorderSystem()])

        log = engine.run(scenario, FixedPoint(0), FixedPoint.from_int(600))

        assert len(log.angles_rad["LEO-1"]) == 11
        assert len(log.positions_km["LEO-1"]) == 11
        assert log.angles_rad["LEO-1"][0] == (FixedPoint(0), 0.0)
        assert leo_body.last_t_s == FixedPoint.from_int(600)

    def test_engine_fractional_dt_does_not_drift(self, leo_body):
        scenario = Scenario(name="Test")
        scenario.add_body(leo_body)
        engine = Engine(dt_s=FixedPoint.parse("0.1"), systems=[StateRecorderSystem()])

        log = engine.run(scenario, FixedPoint(0), FixedPoint.from_int(1))

        times = [t for t, _a in log.angles_rad["LEO-1"]]
        assert len(times) == 11
        assert times[-1] == FixedPoint.from_int(1)

    def test_engine_is_deterministic(self):
        def run_once():
            scenario = Scenario(name="Test")
            scenario.add_body(Body("EARTH", "Earth", Orbit.EARTH, SOL))
            scenario.add_body(Body("LUNA", "Moon", Orbit.MOON, EARTH_MASS))
            engine = Engine(dt_s=FixedPoint.from_int(86_400), systems=[StateRecorderSystem()])
            return engine.run(scenario, FixedPoint(0), FixedPoint.from_int(10 * 86_400))

        assert run_once().angles_rad == run_once().angles_rad

    def test_angles_advance_monotonically_over_a_month(self, sample_body):
        scenario = Scenario(name="Test")
        scenario.add_body(sample_body)
        engine = Engine(dt_s=FixedPoint.from_int(86_400), systems=[StateRecorderSystem()])

        log = engine.run(scenario, FixedPoint(0), FixedPoint.from_int(20 * 86_400))
        angles = [a for _t, a in log.angles_rad["LUNA"]]
        assert all(b > a for a, b in zip(angles, angles[1:]))
