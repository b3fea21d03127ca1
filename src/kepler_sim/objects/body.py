from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from kepler_sim.core.fixed_point import FixedPoint
from kepler_sim.core.frames import Z_AXIS, Vector3
from kepler_sim.physics.orbit import Orbit


@dataclass
class Body:
    """
    A host-side object following an orbit around a primary of parent_mass_kg.

    The body owns the continuation pair for its orbit: the last (time, angle)
    it predicted. Stepping forward in time reuses it; asking for an earlier
    time falls back to a prediction from epoch.
    """
    body_id: str
    name: str
    orbit: Orbit
    parent_mass_kg: FixedPoint
    normal: Vector3 = Z_AXIS

    # Continuation pair (optional; filled after the first prediction)
    last_t_s: Optional[FixedPoint] = None
    last_angle_rad: Optional[float] = None

    def angle_at(self, t_s: FixedPoint) -> float:
        """True anomaly (rad) at t_s seconds since scenario epoch."""
        last = None
        if self.last_t_s is not None and self.last_angle_rad is not None:
            last = (self.last_t_s, self.last_angle_rad)

        angle = self.orbit.predict(self.parent_mass_kg, t_s, last)

        self.last_t_s = t_s
        self.last_angle_rad = angle
        return angle

    def distance_at(self, t_s: FixedPoint) -> FixedPoint:
        return self.orbit.orbital_distance(self.angle_at(t_s))

    def speed_at(self, t_s: FixedPoint) -> FixedPoint:
        return self.orbit.orbital_speed(self.parent_mass_kg, self.angle_at(t_s))

    def position_at(self, t_s: FixedPoint) -> Vector3:
        """Host-frame position (km) relative to the primary."""
        return self.orbit.position(self.angle_at(t_s), self.normal)

    def reset(self) -> None:
        self.last_t_s = None
        self.last_angle_rad = None
