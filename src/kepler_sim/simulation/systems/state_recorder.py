from __future__ import annotations

from dataclasses import dataclass

from kepler_sim.core.fixed_point import FixedPoint
from kepler_sim.simulation.scenario import Scenario
from kepler_sim.simulation.engine import SimulationLog


@dataclass
class StateRecorderSystem:
    name: str = "state_recorder"

    def on_step(self, t_s: FixedPoint, scenario: Scenario, log: SimulationLog) -> None:
        for body in scenario.body_list():
            angle = body.angle_at(t_s)
            log.record_angle(body.body_id, t_s, angle)
            log.record_position(body.body_id, t_s, body.orbit.position(angle, body.normal))
