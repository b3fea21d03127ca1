from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Protocol, Tuple

from kepler_sim.core.fixed_point import FixedPoint
from kepler_sim.core.frames import Vector3
from kepler_sim.simulation.scenario import Scenario

logger = logging.getLogger(__name__)


class System(Protocol):
    """
    Plugin interface for simulation systems.
    Each system runs per tick and can write to the log.
    """
    name: str

    def on_step(self, t_s: FixedPoint, scenario: Scenario, log: "SimulationLog") -> None:
        ...


@dataclass
class SimulationLog:
    """
    Stores outputs from a simulation run.
    """
    # Angles: body_id -> list of (t, true anomaly)
    angles_rad: Dict[str, List[Tuple[FixedPoint, float]]] = field(default_factory=dict)

    # Positions: body_id -> list of (t, r)
    positions_km: Dict[str, List[Tuple[FixedPoint, Vector3]]] = field(default_factory=dict)

    def record_angle(self, body_id: str, t_s: FixedPoint, angle_rad: float) -> None:
        self.angles_rad.setdefault(body_id, []).append((t_s, angle_rad))

    def record_position(self, body_id: str, t_s: FixedPoint, r_km: Vector3) -> None:
        self.positions_km.setdefault(body_id, []).append((t_s, r_km))


@dataclass
class Engine:
    """
    Fixed-step simulation engine.
    Deterministic replay: given same scenario + dt + start/end => same output.
    Time is kept in fixed point so ticks never drift.
    """
    dt_s: FixedPoint
    systems: List[System] = field(default_factory=list)

    def run(self, scenario: Scenario, t_start_s: FixedPoint, t_end_s: FixedPoint) -> SimulationLog:
        if not self.dt_s:
            raise ValueError("dt_s must be positive.")
        if t_end_s < t_start_s:
            raise ValueError("t_end_s must be >= t_start_s.")

        logger.info("Running scenario '%s' from %s s to %s s (dt=%s s)",
                    scenario.name, t_start_s, t_end_s, self.dt_s)

        log = SimulationLog()
        t = t_start_s

        # Inclusive end if it lands exactly; otherwise last tick < end
        while t <= t_end_s:
            for sys in self.systems:
                sys.on_step(t, scenario, log)
            t = t + self.dt_s

        return log
