"""
Two-body gravity helpers.

The classical Newton solver for Kepler's equation (mean anomaly to eccentric
anomaly) is kept as the reference inverse for the adaptive
predictor in ``kepler_sim.physics.kepler``: ``mean_to_true_anomaly`` gives the
angle the predictor must reach after a known fraction of the period.
"""

from __future__ import annotations

import math

from kepler_sim.core.constants import G_EXPONENT, G_RAW
from kepler_sim.core.fixed_point import FixedPoint


def wrap_to_2pi(angle_rad: float) -> float:
    """Wrap angle to [0, 2π)."""
    wrapped = angle_rad % math.tau
    # Tiny negative angles round up to exactly τ
    return 0.0 if wrapped == math.tau else wrapped


def gravitational_parameter(mass_kg: FixedPoint) -> FixedPoint:
    """
    Standard gravitational parameter mu = G * M in km^3/s^2.

    G is kept as an integer mantissa at a wider exponent than PRECISION, so
    the product is taken on raw integers and folded back to a single P scale
    in one truncating division.
    """
    return FixedPoint(mass_kg.raw * G_RAW // 10 ** G_EXPONENT)


def solve_keplers_equation(M_rad: float, e: float, tol: float = 1e-12, max_iter: int = 50) -> float:
    """
    Solve Kepler's equation for elliptic orbits:
        M = E - e sin(E)
    using Newton-Raphson.

    Args:
        M_rad: Mean anomaly (rad)
        e: eccentricity (0 <= e < 1)
        tol: convergence tolerance
        max_iter: iteration cap

    Returns:
        E_rad: Eccentric anomaly (rad)
    """
    if not (0.0 <= e < 1.0):
        raise ValueError("Elliptic Kepler solver requires 0 <= e < 1.")

    M = wrap_to_2pi(M_rad)

    # For higher e, start closer to pi to avoid slow convergence near M~0
    E = M if e < 0.8 else math.pi

    for _ in range(max_iter):
        f = E - e * math.sin(E) - M
        fp = 1.0 - e * math.cos(E)
        dE = -f / fp
        E += dE
        if abs(dE) < tol:
            return wrap_to_2pi(E)

    raise RuntimeError("Kepler solver did not converge within max_iter.")


def eccentric_to_true_anomaly(E_rad: float, e: float) -> float:
    sin_v = (math.sqrt(1.0 - e * e) * math.sin(E_rad)) / (1.0 - e * math.cos(E_rad))
    cos_v = (math.cos(E_rad) - e) / (1.0 - e * math.cos(E_rad))
    return wrap_to_2pi(math.atan2(sin_v, cos_v))


def true_to_mean_anomaly(theta_rad: float, e: float) -> float:
    """Mean anomaly (rad) for a given true anomaly, via the eccentric anomaly."""
    E = 2.0 * math.atan2(math.sqrt(1.0 - e) * math.sin(theta_rad / 2.0),
                         math.sqrt(1.0 + e) * math.cos(theta_rad / 2.0))
    return wrap_to_2pi(E - e * math.sin(E))


def mean_to_true_anomaly(M_rad: float, e: float) -> float:
    return eccentric_to_true_anomaly(solve_keplers_equation(M_rad, e), e)
