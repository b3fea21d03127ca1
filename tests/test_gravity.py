import math

import pytest

from kepler_sim.core.constants import M_EARTH_KG, M_SUN_KG
from kepler_sim.core.fixed_point import FixedPoint
from kepler_sim.physics.gravity import (
    gravitational_parameter,
    mean_to_true_anomaly,
    solve_keplers_equation,
    true_to_mean_anomaly,
    wrap_to_2pi,
)


def test_gravitational_parameter_earth():
    mu = gravitational_parameter(FixedPoint.from_int(M_EARTH_KG))
    assert mu.to_float() == pytest.approx(398600.4418, rel=1e-4)


def test_gravitational_parameter_sun():
    mu = gravitational_parameter(FixedPoint.from_int(M_SUN_KG))
    assert mu.to_float() == pytest.approx(1.32712440018e11, rel=1e-4)


def test_wrap_to_2pi():
    assert wrap_to_2pi(-0.5) == pytest.approx(2 * math.pi - 0.5)
    assert wrap_to_2pi(7.0) == pytest.approx(7.0 - 2 * math.pi)


def test_kepler_zero_eccentricity():
    # If e=0, E=M exactly
    for M in [0.0, 0.5, 1.0, 2.0, 5.0]:
        E = solve_keplers_equation(M, 0.0)
        assert math.isclose((E - (M % (2*math.pi))) % (2*math.pi), 0.0, abs_tol=1e-12)


def test_kepler_converges_typical():
    E = solve_keplers_equation(M_rad=1.0, e=0.4)
    res = E - 0.4 * math.sin(E) - 1.0
    assert abs(res) < 1e-10


def test_kepler_rejects_hyperbolic():
    with pytest.raises(ValueError, match="requires 0 <= e < 1"):
        solve_keplers_equation(1.0, 1.2)


@pytest.mark.parametrize("e", [0.0, 0.1, 0.5, 0.9])
def test_true_mean_anomaly_inverse(e):
    for theta in [0.3, 1.5, 3.0, 4.5, 6.0]:
        M = true_to_mean_anomaly(theta, e)
        assert mean_to_true_anomaly(M, e) == pytest.approx(theta, abs=1e-9)


def test_wrap_to_2pi_tiny_negative_stays_below_tau():
    assert wrap_to_2pi(-1e-17) == 0.0
    assert wrap_to_2pi(-1e-9) < 2 * math.pi
