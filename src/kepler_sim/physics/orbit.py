# src/kepler_sim/physics/orbit.py

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar, List, Optional, Sequence, Tuple

from kepler_sim.core.constants import TAU_RAW
from kepler_sim.core.config import DEFAULT_SETTINGS, PredictorSettings
from kepler_sim.core.fixed_point import FixedPoint
from kepler_sim.core.frames import X_AXIS, Z_AXIS, Vector3, is_unit_or_zero, perifocal_to_host
from kepler_sim.physics import kepler
from kepler_sim.physics.gravity import gravitational_parameter

TAU = FixedPoint(TAU_RAW)


@dataclass(frozen=True)
class Orbit:
    """
    An elliptical orbit around a primary body sitting at one focus.

    Units:
        focus_direction: unit vector from the primary toward the second focus,
            or the zero vector for a centered (circular) orbit
        start_angle: true anomaly at epoch (t=0) in radians
        semimajor_axis: km
        eccentricity: 0 <= e < 1

    Queries assume the invariants hold and do not check them; call
    ``validate()`` on untrusted values first.
    """
    focus_direction: Vector3
    start_angle: float
    semimajor_axis: FixedPoint
    eccentricity: float

    EARTH: ClassVar[Orbit]
    MOON: ClassVar[Orbit]

    @classmethod
    def circular(cls, semimajor_axis: FixedPoint, focus_direction: Vector3,
                 start_angle: float = 0.0) -> Orbit:
        return cls(
            focus_direction=focus_direction,
            start_angle=start_angle,
            semimajor_axis=semimajor_axis,
            eccentricity=0.0,
        )

    def validate(self) -> None:
        if not math.isfinite(self.eccentricity):
            raise ValueError(f"Eccentricity must be finite. Got: {self.eccentricity}")
        if not (0.0 <= self.eccentricity < 1.0):
            raise ValueError(f"Only elliptic orbits are supported (0 <= e < 1). Got: {self.eccentricity}")
        if self.semimajor_axis.raw <= 0:
            raise ValueError("Semi-major axis must be positive.")
        if not math.isfinite(self.start_angle):
            raise ValueError(f"Start angle must be finite. Got: {self.start_angle}")
        if not is_unit_or_zero(self.focus_direction):
            raise ValueError(f"Focus direction must be a unit vector or zero. Got: {self.focus_direction}")

    def aphelion(self) -> FixedPoint:
        """Maximum distance from the focus, km."""
        return self.semimajor_axis.scale(1.0 + self.eccentricity)

    def perihelion(self) -> FixedPoint:
        """Minimum distance from the focus, km."""
        return self.semimajor_axis.scale(1.0 - self.eccentricity)

    def semiminor_axis(self) -> FixedPoint:
        return self.semimajor_axis.scale(math.sqrt(1.0 - self.eccentricity ** 2))

    def semi_latus_rectum(self) -> FixedPoint:
        """p = a(1 - e^2), km."""
        return self.semimajor_axis.scale(1.0 - self.eccentricity ** 2)

    def orbital_distance(self, theta_rad: float) -> FixedPoint:
        """Distance from the focus (km) at true anomaly theta, measured from perihelion."""
        e = self.eccentricity
        return self.semimajor_axis.scale((1.0 - e ** 2) / (1.0 + e * math.cos(theta_rad)))

    def orbital_period(self, mass_kg: FixedPoint) -> FixedPoint:
        """Kepler's third law, T = τ sqrt(a^3 / GM), in seconds. mass_kg is the combined mass at the focus."""
        a = self.semimajor_axis
        return TAU * (a * a * a / gravitational_parameter(mass_kg)).sqrt()

    def orbital_speed(self, mass_kg: FixedPoint, theta_rad: float) -> FixedPoint:
        """
        Vis-viva speed in km/s at true anomaly theta.

        v^2 = GM (2/r - 1/a) is evaluated as GM (2a - r) / r / a so the
        bracket never drops below the fixed-point resolution.
        """
        a = self.semimajor_axis
        r = self.orbital_distance(theta_rad)
        v_sq = gravitational_parameter(mass_kg) * (a * 2 - r) / r / a
        return v_sq.sqrt()

    def mean_motion(self, mass_kg: FixedPoint) -> float:
        """n = τ / T in rad/s."""
        return math.tau / self.orbital_period(mass_kg).to_float()

    def specific_angular_momentum(self, mass_kg: FixedPoint) -> float:
        """h = sqrt(GM p) in km^2/s."""
        mu = gravitational_parameter(mass_kg).to_float()
        return math.sqrt(mu * self.semi_latus_rectum().to_float())

    def position(self, theta_rad: float, normal: Vector3 = Z_AXIS) -> Vector3:
        """Host-frame position (km) relative to the primary; normal is the orbit plane normal."""
        r = self.orbital_distance(theta_rad).to_float()
        return perifocal_to_host(r, theta_rad, self.focus_direction, normal)

    def predict_from(self, mass_kg: FixedPoint, current_angle: float, elapsed_s: FixedPoint,
                     settings: PredictorSettings = DEFAULT_SETTINGS) -> float:
        """True anomaly (rad) after elapsed_s seconds from current_angle."""
        return kepler.predict_from(self, mass_kg, current_angle, elapsed_s, settings)

    def predict(self, mass_kg: FixedPoint, elapsed_s: FixedPoint,
                last: Optional[kepler.Continuation] = None,
                settings: PredictorSettings = DEFAULT_SETTINGS) -> float:
        """True anomaly (rad) at elapsed_s since epoch; ``last`` is an optional earlier (time, angle)."""
        return kepler.predict(self, mass_kg, elapsed_s, last, settings)


Orbit.EARTH = Orbit(
    focus_direction=X_AXIS,
    start_angle=0.0,
    semimajor_axis=FixedPoint.from_int(149_598_000),
    eccentricity=0.017,
)

Orbit.MOON = Orbit(
    focus_direction=X_AXIS,
    start_angle=0.0,
    semimajor_axis=FixedPoint.from_int(384_400),
    eccentricity=0.0549,
)


def propagate(orbit: Orbit, mass_kg: FixedPoint, times_s: Sequence[FixedPoint],
              settings: PredictorSettings = DEFAULT_SETTINGS) -> List[Tuple[FixedPoint, float]]:
    """
    Predict the true anomaly across a list of time stamps (seconds since epoch).
    Each result is fed back as the continuation for the next, so ascending
    times only integrate the gaps between them.
    Returns list of (t, angle).
    """
    out: List[Tuple[FixedPoint, float]] = []
    last: Optional[kepler.Continuation] = None
    for t in times_s:
        angle = orbit.predict(mass_kg, t, last, settings)
        last = (t, angle)
        out.append(last)
    return out
